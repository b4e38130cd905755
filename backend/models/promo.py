from datetime import date

from sqlalchemy import Column, Integer, String, Date, CheckConstraint
from database import Base

# Percent-based promotional code. Codes are stored upper-case.
class PromoCode(Base):
    __tablename__ = "promo_codes"

    code = Column(String, primary_key=True, index=True)
    percent = Column(Integer, CheckConstraint("percent >= 0 AND percent <= 100"), nullable=False)
    # Free-form scope tag (ALL, PICKUP), not used for filtering
    scope = Column(String, nullable=True)
    expiry = Column(Date, nullable=True)

    def is_expired(self, today=None):
        today = today or date.today()
        return self.expiry is not None and self.expiry < today
