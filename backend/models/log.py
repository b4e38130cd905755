from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base

# Audit trail of customer actions (cart edits, checkouts, top-ups)
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Who acted; email is kept even if the user row goes away
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    email = Column(String, index=True, nullable=True)

    action = Column(String(50), index=True)  # CART_ADD, ORDER_CHECKOUT, ...
    resource = Column(String(50), index=True)
    status = Column(String(20), index=True)  # SUCCESS / FAIL
    ip = Column(String(64), nullable=True)

    # Action-specific context (product, quantity, order id, decline reason)
    meta = Column(JSON, nullable=True)

    user = relationship("User", uselist=False)
