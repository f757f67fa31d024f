# backend/utils/seed.py
import logging
from typing import List, Tuple

from sqlalchemy.orm import Session
from database import SessionLocal, init_db
from models.product import Product
from config import settings
from utils.catalog_client import CatalogClient, catalog_client

logger = logging.getLogger(__name__)

FALLBACK_PRODUCTS: List[Tuple[str, float]] = [
    ("Shoes", 1200),
    ("T-Shirt", 700),
    ("Jeans", 1800),
    ("Watch", 2500),
    ("Perfume", 900),
]

def _catalog_sample(client: CatalogClient, limit: int) -> List[Tuple[str, float]]:
    products = client.fetch_products(limit=limit)
    if not products:
        raise ValueError("Catalog returned no products")
    return [(p["name"], p["price"]) for p in products]

def seed_products(db: Session, client: CatalogClient = None, limit: int = None) -> int:
    """
    Fill an empty products table, preferring the public catalog and falling
    back to a fixed sample. Returns the number of inserted rows.
    """
    if db.query(Product).count() > 0:
        return 0

    client = client or catalog_client
    limit = limit if limit is not None else settings.SEED_LIMIT

    logger.info("No products found, attempting to seed from %s", client.url)
    try:
        sample = _catalog_sample(client, limit)
        source = "catalog"
    except Exception as e:
        # Any catalog problem is masked by the local sample
        logger.warning("Catalog seed failed: %s", e)
        sample = FALLBACK_PRODUCTS
        source = "fallback"

    for name, price in sample:
        db.add(Product(name=name, price=price))
    db.commit()

    logger.info("Seeded %d products from %s", len(sample), source)
    return len(sample)


def main():
    init_db()
    db = SessionLocal()
    try:
        seed_products(db)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    main()
