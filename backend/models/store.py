from sqlalchemy import Column, String
from database import Base

# Campus store used as a pickup location
class Store(Base):
    __tablename__ = "stores"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=False)
    hours = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    @property
    def label(self):
        return f"{self.name} - {self.address}"
