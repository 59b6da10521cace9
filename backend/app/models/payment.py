from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from app.models.base import Base, utcnow


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    payment_method = Column(String(20), nullable=False, default="cash")  # cash, vnpay
    payment_status = Column(String(20), nullable=False, default="pending")  # pending, success, failed
    payment_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    payment_description = Column(String(500), nullable=False, default="")
    payment_amount = Column(Numeric(12, 2), nullable=False)
    discount_amount = Column(Numeric(12, 2), nullable=True)

    order = relationship("Order", back_populates="payment")
