import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, EmailStr, Field, condecimal
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import require_admin, restrict_to
from app.core.errors import AppError, not_found
from app.core.query import PageParams, apply_sort, paginate, set_total_count
from app.core.roles import Role
from app.core.security import hash_password, password_change_timestamp
from app.models.user import User
from app.routes.schemas import UserOut

router = APIRouter()
logger = logging.getLogger(__name__)

SORTABLE = ("id", "name", "email", "role", "balance", "created_at")


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Role = Role.customer
    phone: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[Role] = None
    active: Optional[bool] = None
    phone: Optional[str] = None


class DepositRequest(BaseModel):
    amount: condecimal(gt=0, max_digits=12, decimal_places=2)


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise not_found("User", user_id)
    return user


@router.get("/", response_model=List[UserOut], dependencies=[Depends(require_admin)])
def list_users(
    response: Response,
    db: Session = Depends(get_db),
    params: PageParams = Depends(),
    role: Optional[Role] = Query(None),
    active: Optional[bool] = Query(None),
):
    query = db.query(User)
    if role is not None:
        query = query.filter(User.role == role.value)
    if active is not None:
        query = query.filter(User.active == active)
    query = apply_sort(query, User, params.sort, SORTABLE, default=User.id)
    items, count = paginate(query, params)
    set_total_count(response, count)
    return items


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    email = data.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise AppError(400, "DUPLICATE_KEYS", "Email already exists.", {"email": email})
    user = User(
        name=data.name,
        email=email,
        hashed_password=hash_password(data.password),
        role=data.role.value,
        phone=data.phone,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Admin created user_id=%s role=%s", user.id, user.role)
    return user


@router.get("/{user_id}", response_model=UserOut, dependencies=[Depends(require_admin)])
def get_user(user_id: int, db: Session = Depends(get_db)):
    return _get_user(db, user_id)


@router.patch("/{user_id}", response_model=UserOut, dependencies=[Depends(require_admin)])
def update_user(user_id: int, data: UserUpdate, db: Session = Depends(get_db)):
    user = _get_user(db, user_id)

    if data.name is not None:
        user.name = data.name
    if data.phone is not None:
        user.phone = data.phone
    if data.role is not None:
        user.role = data.role.value
    if data.active is not None:
        user.active = data.active
    if data.password:
        user.hashed_password = hash_password(data.password)
        user.password_changed_at = password_change_timestamp()

    db.commit()
    db.refresh(user)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user = _get_user(db, user_id)
    db.delete(user)
    db.commit()


@router.post("/{user_id}/deposit", response_model=UserOut)
def deposit(
    user_id: int,
    data: DepositRequest,
    db: Session = Depends(get_db),
    cashier: User = Depends(restrict_to(Role.cashier)),
):
    user = _get_user(db, user_id)
    user.balance = Decimal(str(user.balance or 0)) + data.amount
    db.commit()
    db.refresh(user)
    logger.info("Cashier user_id=%s deposited %s to user_id=%s", cashier.id, data.amount, user.id)
    return user
