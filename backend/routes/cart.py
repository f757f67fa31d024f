# backend/routes/cart.py
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session
from sqlalchemy.dialects import postgresql, sqlite

from database import get_db
from models.product import Product
from models.cart import CartLine
from schemas.base import MessageOut
from schemas.cart import CartAddItem, CartUpdateItem, CartOut, CartLineOut
from utils.user_scope import get_query_user_id, resolve_user_id

router = APIRouter(prefix="/api", tags=["Cart"])
logger = logging.getLogger(__name__)

def cart_lines(db: Session, user_id: int):
    # Inner join: lines pointing at a missing product are left out
    return (
        db.query(CartLine.id, Product.id, Product.name, Product.price, CartLine.qty)
        .join(Product, CartLine.product_id == Product.id)
        .filter(CartLine.user_id == user_id)
        .order_by(CartLine.id)
        .all()
    )

def cart_total(lines) -> float:
    return round(sum(line.price * line.qty for line in lines), 2)

def _upsert_statement(db: Session, user_id: int, product_id: int, qty: int):
    # Single statement increment-or-insert on the (user_id, product_id) index
    dialect = db.get_bind().dialect.name
    insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
    stmt = insert(CartLine).values(user_id=user_id, product_id=product_id, qty=qty)
    return stmt.on_conflict_do_update(
        index_elements=[CartLine.user_id, CartLine.product_id],
        set_={"qty": CartLine.qty + stmt.excluded.qty},
    )

@router.get("/cart", response_model=CartOut)
def get_cart(
    db: Session = Depends(get_db),
    query_user_id: Optional[int] = Depends(get_query_user_id),
):
    user_id = resolve_user_id(query_user_id)
    rows = cart_lines(db, user_id)
    items = [
        CartLineOut(cart_id=cart_id, product_id=product_id, name=name, price=price, qty=qty)
        for cart_id, product_id, name, price, qty in rows
    ]
    return CartOut(cart=items, total=cart_total(items))

@router.post("/cart", response_model=MessageOut)
def add_to_cart(
    payload: CartAddItem,
    db: Session = Depends(get_db),
    query_user_id: Optional[int] = Depends(get_query_user_id),
):
    user_id = resolve_user_id(query_user_id, payload.user_id)

    product = db.query(Product).filter(Product.id == payload.product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    db.execute(_upsert_statement(db, user_id, product.id, payload.qty))
    db.commit()
    logger.info("Cart add user=%s product=%s qty=%s", user_id, product.id, payload.qty)
    return {"message": "Added to cart"}

@router.patch("/cart-update", response_model=MessageOut)
def update_cart_line(
    payload: CartUpdateItem,
    db: Session = Depends(get_db),
    query_user_id: Optional[int] = Depends(get_query_user_id),
):
    user_id = resolve_user_id(query_user_id, payload.user_id)
    query = db.query(CartLine).filter(CartLine.id == payload.cart_id, CartLine.user_id == user_id)

    if payload.qty <= 0:
        removed = query.delete(synchronize_session=False)
        db.commit()
        if not removed:
            raise HTTPException(status_code=404, detail="Cart item not found")
        return {"message": "Removed"}

    updated = query.update({CartLine.qty: payload.qty}, synchronize_session=False)
    db.commit()
    if not updated:
        raise HTTPException(status_code=404, detail="Cart item not found for this user")
    return {"message": "Updated"}

@router.delete("/cart/{id}", response_model=MessageOut)
def remove_cart_line(
    cart_id: int = Path(alias="id"),
    db: Session = Depends(get_db),
    query_user_id: Optional[int] = Depends(get_query_user_id),
):
    user_id = resolve_user_id(query_user_id)
    removed = (
        db.query(CartLine)
        .filter(CartLine.id == cart_id, CartLine.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if not removed:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return {"message": "Removed"}
