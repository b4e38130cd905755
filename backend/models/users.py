# backend/models/users.py
from sqlalchemy import Column, Integer, String
from database import Base

# Represents a user account and its system role
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    role = Column(String, nullable=False, default="customer")
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)

    @property
    def display_name(self):
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or None
