"""
Response models shared across routers.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, EmailStr


class UserOut(BaseModel):
    id: int
    name: str
    email: EmailStr
    role: str
    active: bool
    balance: Decimal
    phone: Optional[str] = None
    image: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ProductOut(BaseModel):
    id: int
    name: str
    price: Decimal
    quantity: int
    category: str
    image: Optional[str] = None
    description: Optional[str] = None
    rating_average: Decimal
    rating_quantity: int

    class Config:
        from_attributes = True


class TodayMenuItemOut(BaseModel):
    id: int
    product_id: int
    price: Decimal
    quantity: int
    total_quantity: int
    name: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    rating_average: Optional[Decimal] = None

    class Config:
        from_attributes = True


class MenuHistoryItemOut(BaseModel):
    product_id: int
    price: Decimal
    total_quantity: int
    remain_quantity: int

    class Config:
        from_attributes = True


class MenuHistoryOut(BaseModel):
    id: int
    menu_date: datetime
    items: List[MenuHistoryItemOut]

    class Config:
        from_attributes = True


class PaymentOut(BaseModel):
    id: int
    order_id: int
    payment_method: str
    payment_status: str
    payment_date: datetime
    payment_description: str
    payment_amount: Decimal
    discount_amount: Optional[Decimal] = None

    class Config:
        from_attributes = True


class OrderItemOut(BaseModel):
    id: int
    product_id: Optional[int] = None
    menu_item_id: Optional[int] = None
    name: str
    price: Decimal
    quantity: int
    total_price: Decimal

    class Config:
        from_attributes = True


class OrderOut(BaseModel):
    id: int
    customer_id: Optional[int] = None
    status: str
    total_price: Decimal
    note: Optional[str] = None
    created_at: datetime
    items: List[OrderItemOut]
    payment: Optional[PaymentOut] = None

    class Config:
        from_attributes = True
