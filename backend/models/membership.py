from datetime import date

from sqlalchemy import Column, String, Date
from database import Base

# Membership record of a customer. Duration arithmetic is handled elsewhere,
# the store only reads whether it is currently active.
class Membership(Base):
    __tablename__ = "memberships"

    email = Column(String, primary_key=True, index=True)
    tier = Column(String, nullable=False, default="VIP")
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    status = Column(String, nullable=False, default="ACTIVE")

    def is_active(self, today=None):
        today = today or date.today()
        if (self.status or "").upper() != "ACTIVE":
            return False
        return self.end_date is None or self.end_date >= today

    @property
    def summary(self):
        return f"{self.status} ({self.start_date} ~ {self.end_date})"
