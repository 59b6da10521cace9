from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime

from app.models.base import Base, utcnow


class TodayMenuItem(Base):
    __tablename__ = "today_menu_items"

    id = Column(Integer, primary_key=True, index=True)
    # One entry per product for the day. No FK: closing the day skips products deleted meanwhile
    product_id = Column(Integer, unique=True, nullable=False, index=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)  # Remaining
    total_quantity = Column(Integer, nullable=False, default=0)  # Prepared for the day

    # Snapshot of the product when the item was added
    name = Column(String(255), nullable=True)
    category = Column(String(50), nullable=True, index=True)
    image = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    rating_average = Column(Numeric(3, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
