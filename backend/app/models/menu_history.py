from sqlalchemy import Column, Integer, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from app.models.base import Base, utcnow


class MenuHistory(Base):
    __tablename__ = "menu_histories"

    id = Column(Integer, primary_key=True, index=True)
    menu_date = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    items = relationship(
        "MenuHistoryItem",
        back_populates="menu_history",
        cascade="all, delete-orphan",
        order_by="MenuHistoryItem.id",
    )


class MenuHistoryItem(Base):
    __tablename__ = "menu_history_items"

    id = Column(Integer, primary_key=True, index=True)
    menu_history_id = Column(Integer, ForeignKey("menu_histories.id", ondelete="CASCADE"), nullable=False, index=True)
    # No FK: history outlives deleted products
    product_id = Column(Integer, nullable=False, index=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    total_quantity = Column(Integer, nullable=False, default=0)
    remain_quantity = Column(Integer, nullable=False, default=0)

    menu_history = relationship("MenuHistory", back_populates="items")
