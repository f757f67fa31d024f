# backend/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, Index
from sqlalchemy.orm import relationship
from database import Base

# A single (user, product, quantity) line of a shopping cart
class CartLine(Base):
    __tablename__ = "cart"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False) # Foreign key to product
    qty = Column(Integer, nullable=False)
    user_id = Column(Integer, nullable=False, default=1, server_default="1") # Nominal owner, no auth

    product = relationship("Product")

    __table_args__ = (
        # One line per product per user, target of the add-to-cart upsert
        Index("uq_cart_user_product", "user_id", "product_id", unique=True),
    )
