from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text

from app.models.base import Base, utcnow


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    category = Column(String(50), nullable=False, default="other", index=True)  # food, beverage, other
    image = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    rating_average = Column(Numeric(3, 2), nullable=False, default=0)
    rating_quantity = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
