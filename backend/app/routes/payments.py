from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import restrict_to
from app.core.errors import not_found
from app.core.query import PageParams, apply_sort, paginate, set_total_count
from app.core.roles import Role
from app.models.payment import Payment
from app.routes.schemas import PaymentOut
from app.services.order_service import PaymentMethod, PaymentStatus


router = APIRouter(dependencies=[Depends(restrict_to(Role.cashier))])

SORTABLE = ("id", "payment_date", "payment_amount", "payment_status", "payment_method")


@router.get("/", response_model=List[PaymentOut])
def list_payments(
    response: Response,
    db: Session = Depends(get_db),
    params: PageParams = Depends(),
    payment_status: Optional[PaymentStatus] = Query(None, alias="status"),
    method: Optional[PaymentMethod] = Query(None),
):
    query = db.query(Payment)
    if payment_status:
        query = query.filter(Payment.payment_status == payment_status)
    if method:
        query = query.filter(Payment.payment_method == method)
    query = apply_sort(query, Payment, params.sort, SORTABLE, default=Payment.payment_date.desc())
    items, count = paginate(query, params)
    set_total_count(response, count)
    return items


@router.get("/{payment_id}", response_model=PaymentOut)
def get_payment(payment_id: int, db: Session = Depends(get_db)):
    payment = db.get(Payment, payment_id)
    if not payment:
        raise not_found("Payment", payment_id)
    return payment
