from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional
from datetime import datetime

FulfilmentMode = Literal["PICKUP", "DELIVERY"]


# Output schema for an individual order line item
class OrderItemOut(BaseModel):
    product_id: str
    product_name: str
    qty: int
    unit_price: Optional[float] = None


# Input schema shared by preview and checkout
class CheckoutPayload(BaseModel):
    fulfilment: FulfilmentMode
    # Store id for pickup or free-text address for delivery
    location: Optional[str] = Field(default=None, max_length=200)
    promo_code: Optional[str] = None


# Priced breakdown of the current cart
class QuoteLineOut(BaseModel):
    product_id: str
    name: str
    quantity: int
    unit_price: float
    line_total: float


class OrderPreviewResponse(BaseModel):
    lines: List[QuoteLineOut]
    subtotal: float
    discount: float
    fee: float
    total: float
    summary: str


class CheckoutResponse(BaseModel):
    order_id: str
    total: float
    new_balance: float


# Output schema representing a placed order
class OrderResponse(BaseModel):
    id: str
    fulfilment: str
    location: Optional[str] = None
    promo_code: Optional[str] = None
    subtotal: float
    discount: float
    fee: float
    total: float
    created_at: Optional[datetime] = None
    items: List[OrderItemOut]

    model_config = ConfigDict(from_attributes=True)


# Schema for paginated order lists
class OrdersPage(BaseModel):
    items: List[OrderResponse]
    total: int
    page: int
    page_size: int
