from sqlalchemy import Column, String, Float, CheckConstraint
from database import Base

# Stored prepaid balance of a customer, keyed by email
class Account(Base):
    __tablename__ = "accounts"

    email = Column(String, primary_key=True, index=True)
    balance = Column(Float, CheckConstraint("balance >= 0"), nullable=False, default=0.0)
