from pydantic import Field
from typing import List, Optional
from schemas.base import CamelModel

# Request schema for adding an item to the cart
class CartAddItem(CamelModel):
    product_id: int
    qty: int = Field(gt=0)
    user_id: Optional[int] = None

# Request schema for setting a cart line quantity, qty <= 0 removes the line
class CartUpdateItem(CamelModel):
    cart_id: int
    qty: int
    user_id: Optional[int] = None

# Response schema for a single cart line joined with its product
class CartLineOut(CamelModel):
    cart_id: int
    product_id: int
    name: str
    price: float
    qty: int

# Response schema for the entire cart summary
class CartOut(CamelModel):
    cart: List[CartLineOut]
    total: float
