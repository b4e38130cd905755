# backend/schemas/product.py
from pydantic import BaseModel, ConfigDict
from typing import Optional, List


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Catalog entry as shown in the shop
class ProductOut(ORMBase):
    id: str
    name: str
    category: Optional[str] = None
    subcategory: Optional[str] = None
    brand: Optional[str] = None
    description: Optional[str] = None
    price: float
    member_price: float
    stock: int
    expiry: Optional[str] = None
    ingredients: Optional[str] = None
    storage: Optional[str] = None
    allergens: Optional[str] = None


# Paginated response for product listings
class ProductListPage(ORMBase):
    items: List[ProductOut]
    total: int
    page: int
    page_size: int
