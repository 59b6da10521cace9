from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime

from app.models.base import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="customer")
    active = Column(Boolean, nullable=False, default=True)
    password_changed_at = Column(DateTime(timezone=True), nullable=True)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    phone = Column(String(20), nullable=True)
    image = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
