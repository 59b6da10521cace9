from .base import Base
from .user import User
from .product import Product
from .today_menu_item import TodayMenuItem
from .menu_history import MenuHistory, MenuHistoryItem
from .order import Order, OrderItem
from .payment import Payment

__all__ = [
    "Base",
    "User",
    "Product",
    "TodayMenuItem",
    "MenuHistory",
    "MenuHistoryItem",
    "Order",
    "OrderItem",
    "Payment",
]
