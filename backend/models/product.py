from sqlalchemy import Column, Integer, String, Float, CheckConstraint
from database import Base

# Model Product
# A single catalog entry offered by the campus store.
# Holds catalog text, regular and member pricing, on-hand stock and
# optional food metadata (expiry, ingredients, storage, allergens).
class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)

    category = Column(String, index=True)
    subcategory = Column(String)
    brand = Column(String)
    description = Column(String)

    # Prices are guarded by constraints, member price is only checked at admin-edit time.
    price = Column(Float, CheckConstraint("price >= 0"), nullable=False)
    member_price = Column(Float, CheckConstraint("member_price >= 0"), nullable=False)

    # Inventory.
    stock = Column(Integer, CheckConstraint("stock >= 0"), nullable=False, default=0)

    # Optional food metadata.
    expiry = Column(String, nullable=True)
    ingredients = Column(String, nullable=True)
    storage = Column(String, nullable=True)
    allergens = Column(String, nullable=True)
