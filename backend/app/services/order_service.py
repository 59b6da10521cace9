"""
Business rules for orders and their payments.

Orders are placed against today's menu: the ordered quantities are taken
from the menu items and given back when the order is cancelled.

Status flow::

    pending -> preparing -> success -> completed
    pending | preparing -> cancelled
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from sqlalchemy.orm import Session

from app.core.errors import AppError, not_found
from app.core.roles import Role
from app.models.base import utcnow
from app.models.order import Order, OrderItem
from app.models.payment import Payment
from app.models.today_menu_item import TodayMenuItem
from app.models.user import User


logger = logging.getLogger(__name__)

OrderStatus = Literal["pending", "preparing", "success", "completed", "cancelled"]
PaymentMethod = Literal["cash", "vnpay"]
PaymentStatus = Literal["pending", "success", "failed"]

# target status -> (allowed source statuses, roles allowed to move there)
TRANSITIONS: Dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "preparing": (("pending",), (Role.staff.value,)),
    "success": (("preparing",), (Role.staff.value,)),
    "completed": (("success",), (Role.cashier.value,)),
    "cancelled": (("pending", "preparing"), (Role.staff.value, Role.cashier.value, Role.customer.value)),
}


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


def _invalid_status(order: Order, target: str) -> AppError:
    return AppError(
        409,
        "INVALID_STATUS",
        f"Order #{order.id} cannot go from '{order.status}' to '{target}'",
        {"status": order.status, "target": target},
    )


def create_order(
    db: Session,
    customer: User,
    items: List[Dict[str, Any]],
    note: Optional[str] = None,
    payment_method: str = "cash",
) -> Order:
    """
    Place an order against today's menu.

    Args:
        db: Database session
        customer: User placing the order
        items: List of dicts with 'menu_item_id' and 'quantity'
        note: Optional note for the kitchen
        payment_method: Method recorded on the pending payment

    Raises:
        AppError: 404 for an unknown menu item, 400 when the menu item does
            not have enough quantity left
    """
    if not items:
        raise AppError(400, "INVALID_ARGUMENTS", "An order needs at least one item")

    order = Order(customer_id=customer.id, status="pending", note=note)
    total = Decimal("0")

    for entry in items:
        menu_item_id = entry.get("menu_item_id")
        quantity = int(entry.get("quantity", 1))
        menu_item = db.get(TodayMenuItem, menu_item_id)
        if not menu_item:
            raise not_found("Today menu item", menu_item_id)
        if menu_item.quantity < quantity:
            raise AppError(
                400,
                "NOT_ENOUGH_QUANTITY",
                f"Only {menu_item.quantity} left of {menu_item.name}",
                {"menu_item_id": menu_item.id, "available": menu_item.quantity},
            )
        menu_item.quantity -= quantity

        line_total = _money(menu_item.price) * quantity
        total += line_total
        order.items.append(
            OrderItem(
                product_id=menu_item.product_id,
                menu_item_id=menu_item.id,
                name=menu_item.name or "",
                price=_money(menu_item.price),
                quantity=quantity,
                total_price=line_total,
            )
        )

    order.total_price = _money(total)
    order.payment = Payment(
        payment_method=payment_method,
        payment_status="pending",
        payment_amount=order.total_price,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("Order #%s placed by user_id=%s total=%s", order.id, customer.id, order.total_price)
    return order


def get_order(db: Session, order_id: int, user: Optional[User] = None) -> Order:
    order = db.get(Order, order_id)
    # Customers only ever see their own orders
    if not order or (user is not None and user.role == Role.customer.value and order.customer_id != user.id):
        raise not_found("Order", order_id)
    return order


def _restore_menu_quantities(db: Session, order: Order) -> None:
    for item in order.items:
        if item.menu_item_id is None:
            continue
        menu_item = db.get(TodayMenuItem, item.menu_item_id)
        # Ids can be reused once a menu is closed
        if menu_item and menu_item.product_id == item.product_id:
            menu_item.quantity += item.quantity


def change_status(db: Session, order: Order, target: str, user: User) -> Order:
    if target not in TRANSITIONS:
        raise AppError(400, "INVALID_ARGUMENTS", f"Unknown order status '{target}'", {"status": target})

    sources, roles = TRANSITIONS[target]
    if user.role != Role.admin.value and user.role not in roles:
        raise AppError(403, "ACCESS_DENIED", "You do not have permission to access this resource.")
    if order.status not in sources:
        raise _invalid_status(order, target)

    if target == "cancelled":
        if user.role == Role.customer.value and (order.customer_id != user.id or order.status != "pending"):
            raise _invalid_status(order, target)
        _restore_menu_quantities(db, order)
        if order.payment and order.payment.payment_status == "pending":
            order.payment.payment_status = "failed"

    if target == "completed" and (not order.payment or order.payment.payment_status != "success"):
        raise AppError(409, "PAYMENT_REQUIRED", f"Order #{order.id} has not been paid yet")

    old_status = order.status
    order.status = target
    db.commit()
    db.refresh(order)
    logger.info("Order #%s status %s -> %s by user_id=%s", order.id, old_status, target, user.id)
    return order


def pay_order(
    db: Session,
    order: Order,
    payment_method: str,
    discount_amount: Optional[Decimal] = None,
    description: Optional[str] = None,
) -> Payment:
    payment = order.payment
    if order.status == "cancelled" or not payment or payment.payment_status != "pending":
        raise AppError(409, "INVALID_STATUS", f"Order #{order.id} cannot be paid", {"status": order.status})

    discount = _money(discount_amount or 0)
    payment.payment_method = payment_method
    payment.discount_amount = discount if discount_amount is not None else None
    payment.payment_amount = max(Decimal("0"), _money(order.total_price) - discount)
    payment.payment_status = "success"
    payment.payment_date = utcnow()
    if description is not None:
        payment.payment_description = description

    db.commit()
    db.refresh(payment)
    logger.info("Order #%s paid amount=%s method=%s", order.id, payment.payment_amount, payment_method)
    return payment
