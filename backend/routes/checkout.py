# backend/routes/checkout.py
import logging
from datetime import datetime, timezone
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.cart import CartLine
from schemas.checkout import CheckoutItem, CheckoutRequest, CheckoutOut, Receipt, ReceiptItem
from routes.cart import cart_lines, cart_total
from utils.user_scope import get_query_user_id, resolve_user_id

router = APIRouter(prefix="/api", tags=["Checkout"])
logger = logging.getLogger(__name__)

def _price_client_items(db: Session, cart_items: List[CheckoutItem]) -> List[ReceiptItem]:
    # Prices always come from the products table, unknown ids get a placeholder
    ids = {ci.product_id for ci in cart_items}
    by_id = {p.id: p for p in db.query(Product).filter(Product.id.in_(ids)).all()}

    items = []
    for ci in cart_items:
        product = by_id.get(ci.product_id)
        if product:
            items.append(ReceiptItem(product_id=product.id, name=product.name, price=product.price, qty=ci.qty))
        else:
            items.append(ReceiptItem(product_id=ci.product_id, name="Unknown", price=0, qty=ci.qty))
    return items

def _drain_stored_cart(db: Session, user_id: int) -> List[ReceiptItem]:
    # Read and clear in one transaction
    items = [
        ReceiptItem(product_id=product_id, name=name, price=price, qty=qty)
        for _, product_id, name, price, qty in cart_lines(db, user_id)
    ]
    db.query(CartLine).filter(CartLine.user_id == user_id).delete(synchronize_session=False)
    db.commit()
    return items

@router.post("/checkout", response_model=CheckoutOut)
def checkout(
    payload: CheckoutRequest,
    db: Session = Depends(get_db),
    query_user_id: Optional[int] = Depends(get_query_user_id),
):
    user_id = resolve_user_id(query_user_id, payload.user_id)

    if payload.cart_items:
        items = _price_client_items(db, payload.cart_items)
        source = "client"
    else:
        items = _drain_stored_cart(db, user_id)
        source = "stored"

    receipt = Receipt(
        name=payload.name,
        email=payload.email,
        items=items,
        total=cart_total(items),
        timestamp=datetime.now(timezone.utc),
    )
    logger.info("Checkout user=%s source=%s items=%d total=%s", user_id, source, len(items), receipt.total)
    return CheckoutOut(receipt=receipt)
