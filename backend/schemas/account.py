from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


# Balance and membership of the current customer
class AccountOut(BaseModel):
    email: str
    balance: float
    membership: str
    member_active: bool


# Request schema for crediting the prepaid balance
class TopUpRequest(BaseModel):
    amount: float = Field(gt=0)


# Pickup location
class StoreOut(BaseModel):
    id: str
    name: str
    address: str
    hours: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
