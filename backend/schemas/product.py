from schemas.base import CamelModel

class ProductOut(CamelModel):
    id: int
    name: str
    price: float
