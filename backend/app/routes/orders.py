from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field, condecimal
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user, restrict_to
from app.core.query import PageParams, apply_sort, paginate, set_total_count
from app.core.roles import Role
from app.models.order import Order
from app.models.user import User
from app.routes.schemas import OrderOut, PaymentOut
from app.services import order_service
from app.services.order_service import OrderStatus, PaymentMethod


router = APIRouter()

SORTABLE = ("id", "status", "total_price", "created_at")


class OrderItemIn(BaseModel):
    menu_item_id: int = Field(alias="menuItemId")
    quantity: int = Field(1, ge=1)

    class Config:
        populate_by_name = True


class OrderCreate(BaseModel):
    items: List[OrderItemIn] = Field(min_length=1)
    note: Optional[str] = Field(None, max_length=500)
    payment_method: PaymentMethod = Field("cash", alias="paymentMethod")

    class Config:
        populate_by_name = True


class StatusUpdate(BaseModel):
    status: OrderStatus


class PayRequest(BaseModel):
    payment_method: PaymentMethod = Field("cash", alias="paymentMethod")
    discount_amount: Optional[condecimal(ge=0, max_digits=12, decimal_places=2)] = Field(None, alias="discountAmount")
    description: Optional[str] = Field(None, max_length=500)

    class Config:
        populate_by_name = True


@router.post("/", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def create_order(data: OrderCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return order_service.create_order(
        db,
        user,
        [item.model_dump() for item in data.items],
        note=data.note,
        payment_method=data.payment_method,
    )


@router.get("/", response_model=List[OrderOut])
def list_orders(
    response: Response,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    params: PageParams = Depends(),
    order_status: Optional[OrderStatus] = Query(None, alias="status"),
):
    query = db.query(Order)
    if user.role == Role.customer.value:
        query = query.filter(Order.customer_id == user.id)
    if order_status:
        query = query.filter(Order.status == order_status)
    query = apply_sort(query, Order, params.sort, SORTABLE, default=Order.created_at.desc())
    items, count = paginate(query, params)
    set_total_count(response, count)
    return items


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return order_service.get_order(db, order_id, user)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    data: StatusUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    order = order_service.get_order(db, order_id, user)
    return order_service.change_status(db, order, data.status, user)


@router.post("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(order_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    order = order_service.get_order(db, order_id, user)
    return order_service.change_status(db, order, "cancelled", user)


@router.post("/{order_id}/pay", response_model=PaymentOut, dependencies=[Depends(restrict_to(Role.cashier))])
def pay_order(order_id: int, data: PayRequest, db: Session = Depends(get_db)):
    order = order_service.get_order(db, order_id)
    return order_service.pay_order(
        db,
        order,
        data.payment_method,
        discount_amount=data.discount_amount,
        description=data.description,
    )
