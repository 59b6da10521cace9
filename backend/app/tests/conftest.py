"""
Pytest fixtures for the API tests.

Runs the app against an in-memory SQLite database that is rebuilt for
every test, and offers helpers to create users of each role.
"""
import os
import tempfile

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("PUBLIC_DIR", tempfile.mkdtemp(prefix="restaurant-public-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.core.security import create_access_token, hash_password
from app.main import app
from app.models import Base, Product, User


engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db_session):
    def _make(role="customer", email=None, name=None, active=True, password=PASSWORD):
        user = User(
            name=name or role.title(),
            email=email or f"{role}{db_session.query(User).count() + 1}@mail.com",
            hashed_password=hash_password(password),
            role=role,
            active=active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_product(db_session):
    def _make(name="Pho bo", price=45000, quantity=30, category="food", **extra):
        product = Product(name=name, price=price, quantity=quantity, category=category, **extra)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make


def _bearer(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def auth_headers():
    return _bearer


@pytest.fixture
def headers_for(make_user):
    def _headers(role="customer"):
        return _bearer(make_user(role))

    return _headers
