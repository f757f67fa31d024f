# backend/database.py
import logging

from sqlalchemy import create_engine, inspect, text, func
from sqlalchemy.engine import Engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker

from config import settings

logger = logging.getLogger(__name__)

# 1. Database URL from settings (SQLite file by default)
SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

# 2. Hosted Postgres URLs use the legacy scheme, SQLAlchemy needs postgresql://
if SQLALCHEMY_DATABASE_URL.startswith("postgres://"):
    SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace("postgres://", "postgresql://", 1)

# 3. Dialect specific connect arguments
if "sqlite" in SQLALCHEMY_DATABASE_URL:
    connect_args = {"check_same_thread": False} # SQLite only
else:
    connect_args = {}

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args=connect_args
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def _ensure_cart_user_column(bind: Engine):
    # Older database files were created before carts were partitioned by user
    columns = {c["name"] for c in inspect(bind).get_columns("cart")}
    if "user_id" in columns:
        return
    with bind.begin() as conn:
        conn.execute(text("ALTER TABLE cart ADD COLUMN user_id INTEGER DEFAULT 1"))
    logger.info("Added user_id column to cart (default 1)")

def _merge_duplicate_cart_lines(bind: Engine):
    from models.cart import CartLine

    Session = sessionmaker(bind=bind)
    db = Session()
    try:
        dupes = (
            db.query(
                CartLine.user_id,
                CartLine.product_id,
                func.min(CartLine.id),
                func.sum(CartLine.qty),
            )
            .group_by(CartLine.user_id, CartLine.product_id)
            .having(func.count(CartLine.id) > 1)
            .all()
        )
        for user_id, product_id, keep_id, qty in dupes:
            db.query(CartLine).filter(CartLine.id == keep_id).update({"qty": qty})
            db.query(CartLine).filter(
                CartLine.user_id == user_id,
                CartLine.product_id == product_id,
                CartLine.id != keep_id,
            ).delete(synchronize_session=False)
        db.commit()
        if dupes:
            logger.info("Merged %d duplicate cart line group(s)", len(dupes))
    finally:
        db.close()

def init_db(bind: Engine = None):
    """Create missing tables and bring an older cart table up to date."""
    bind = bind or engine
    import models.product  # noqa: F401
    import models.cart  # noqa: F401

    Base.metadata.create_all(bind=bind)
    _ensure_cart_user_column(bind)
    _merge_duplicate_cart_lines(bind)
    # Required by the increment-or-insert in add-to-cart
    with bind.begin() as conn:
        conn.execute(text(
            "CREATE UNIQUE INDEX IF NOT EXISTS uq_cart_user_product ON cart (user_id, product_id)"
        ))
