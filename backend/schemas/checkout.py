from datetime import datetime
from pydantic import Field
from typing import List, Optional
from schemas.base import CamelModel

# Client supplied line, the price is always looked up server side
class CheckoutItem(CamelModel):
    product_id: int
    qty: int = Field(gt=0)

class CheckoutRequest(CamelModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    cart_items: Optional[List[CheckoutItem]] = None
    user_id: Optional[int] = None

class ReceiptItem(CamelModel):
    product_id: int
    name: str
    price: float
    qty: int

# Ephemeral summary returned by checkout, never stored
class Receipt(CamelModel):
    name: str
    email: str
    items: List[ReceiptItem]
    total: float
    timestamp: datetime

class CheckoutOut(CamelModel):
    receipt: Receipt
