from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.models.product import Product
from app.models.user import User


DEMO_PASSWORD = "secret123"

DEMO_USERS = [
    ("Admin", "admin@demo.com", "admin"),
    ("Kitchen", "staff@demo.com", "staff"),
    ("Cashier", "cashier@demo.com", "cashier"),
    ("Customer", "customer@demo.com", "customer"),
]

DEMO_PRODUCTS = [
    ("Com tam", Decimal("35000"), 40, "food", "Broken rice with grilled pork"),
    ("Pho bo", Decimal("45000"), 30, "food", "Beef noodle soup"),
    ("Banh mi", Decimal("20000"), 50, "food", "Baguette sandwich"),
    ("Tra da", Decimal("5000"), 100, "beverage", "Iced tea"),
    ("Ca phe sua da", Decimal("25000"), 60, "beverage", "Iced coffee with condensed milk"),
    ("Khan giay", Decimal("2000"), 200, "other", "Paper napkins"),
]


def seed_demo(db: Session):
    if db.query(User).filter(User.email == DEMO_USERS[0][1]).first():
        return
    for name, email, role in DEMO_USERS:
        db.add(User(name=name, email=email, hashed_password=hash_password(DEMO_PASSWORD), role=role))
    for name, price, quantity, category, description in DEMO_PRODUCTS:
        if not db.query(Product).filter(Product.name == name).first():
            db.add(Product(name=name, price=price, quantity=quantity, category=category, description=description))
    db.commit()
