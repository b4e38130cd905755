from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from database import Base

class Order(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, index=True, nullable=False)
    fulfilment = Column(String, nullable=False)  # PICKUP / DELIVERY
    location = Column(String, nullable=True)  # pickup store or delivery address
    promo_code = Column(String, nullable=True)

    subtotal = Column(Float, nullable=False)
    discount = Column(Float, nullable=False, default=0.0)
    fee = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    payment = relationship("Payment", back_populates="order", uselist=False, cascade="all, delete-orphan")

class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String, ForeignKey("products.id"), nullable=False)
    qty = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=True)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")
