# backend/routes/products.py
import httpx
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from schemas.product import ProductOut
from utils.catalog_client import catalog_client

router = APIRouter(prefix="/api/products", tags=["Products"])
logger = logging.getLogger(__name__)

@router.get("", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    # Whole catalog, no filtering or pagination
    return db.query(Product).order_by(Product.id).all()

@router.get("/external", response_model=List[ProductOut])
def list_external_products():
    """Proxy the public catalog, simplified to {id, name, price}. Best effort."""
    try:
        return catalog_client.fetch_products()
    except httpx.HTTPStatusError:
        raise HTTPException(status_code=502, detail="External API error")
    except (httpx.HTTPError, ValueError) as e:
        logger.exception("Error fetching external products: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch external products")
