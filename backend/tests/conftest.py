import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import get_db, init_db
from main import app
from models.product import Product


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def products(db_session):
    rows = [
        Product(id=1, name="Shoes", price=1200),
        Product(id=2, name="T-Shirt", price=700),
        Product(id=3, name="Backpack", price=109.95),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return {p.id: p.price for p in rows}


@pytest.fixture
def test_client(session_factory, products):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: startup seeding must not run against the real database
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
