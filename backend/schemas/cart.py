from pydantic import BaseModel, Field
from typing import List, Optional

# Request schema for adding an item to the cart
class CartAddItem(BaseModel):
    product_id: str
    qty: int = Field(default=1)

# Request schema for setting an absolute line quantity (0 removes the line)
class CartUpdateItem(BaseModel):
    qty: int

# Response schema for a single cart line item
class CartItemOut(BaseModel):
    product_id: str
    name: str
    qty: int
    unit_price: float
    line_total: float

# Response schema for the entire cart summary
class CartOut(BaseModel):
    items: List[CartItemOut]
    total_units: int
    subtotal: float
    message: Optional[str] = None
