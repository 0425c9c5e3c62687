from pydantic import BaseModel, Field
from typing import List, Optional

# Request schema for adding an item to the cart
class CartAddItem(BaseModel):
    user_id: str = Field(min_length=1)
    product_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)

# Stored cart line returned after an add
class CartItemOut(BaseModel):
    id: str
    user_id: str
    product_id: str
    quantity: int
    price_at_add: Optional[float] = None

    class Config:
        from_attributes = True

# Cart line joined with current product name and price
class CartLineOut(BaseModel):
    product_id: str
    name: str
    quantity: int
    unit_price: float
    line_total: float

# Response schema for the entire cart summary
class CartOut(BaseModel):
    user_id: str
    items: List[CartLineOut]
    total: float
