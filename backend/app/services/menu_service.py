"""
Business rules for today's menu.

The menu is a singleton: at most one set of items exists at a time. Items
are populated from the product catalog when added, and closing the day
writes the remaining quantities back to the products, archives a
``MenuHistory`` and empties the menu.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import AppError, not_found
from app.models.menu_history import MenuHistory, MenuHistoryItem
from app.models.product import Product
from app.models.today_menu_item import TodayMenuItem
from app.models.base import utcnow


logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("price", "quantity")


def menu_is_empty(db: Session) -> bool:
    return db.query(TodayMenuItem).count() == 0


def _no_menu() -> AppError:
    return AppError(400, "NOT_FOUND", "There is no menu for today yet, please create one.")


def populate_menu_item(db: Session, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fill a menu item with the data of its product.

    Args:
        db: Database session
        data: Dict with 'product_id' and optional 'price' and 'quantity'

    Returns:
        Dict ready to build a TodayMenuItem

    Raises:
        AppError: 404 if the product does not exist
    """
    product_id = data.get("product_id")
    product = db.get(Product, product_id) if product_id is not None else None
    if not product:
        raise not_found("Product", product_id)

    # Zero falls back to the product value as well
    quantity = data.get("quantity") or product.quantity
    return {
        "product_id": product.id,
        "price": data.get("price") or product.price,
        "quantity": quantity,
        "total_quantity": quantity,
        "name": product.name,
        "category": product.category,
        "image": product.image,
        "description": product.description,
        "rating_average": product.rating_average,
    }


def _check_duplicates(db: Session, populated: List[Dict[str, Any]]) -> None:
    seen: set[int] = set()
    existing = {
        pid for (pid,) in db.query(TodayMenuItem.product_id).filter(
            TodayMenuItem.product_id.in_([p["product_id"] for p in populated])
        )
    }
    for item in populated:
        pid = item["product_id"]
        if pid in existing or pid in seen:
            raise AppError(
                400,
                "DUPLICATE_KEY",
                f"Product {item['name']} is already on today's menu",
                {"name": item["name"]},
            )
        seen.add(pid)


def add_menu_items(db: Session, items: List[Dict[str, Any]]) -> List[TodayMenuItem]:
    populated = [populate_menu_item(db, item) for item in items]
    _check_duplicates(db, populated)

    menu_items = [TodayMenuItem(**data) for data in populated]
    db.add_all(menu_items)
    db.commit()
    for menu_item in menu_items:
        db.refresh(menu_item)
    logger.info("Added %s item(s) to today's menu", len(menu_items))
    return menu_items


def create_today_menu(db: Session, items: List[Dict[str, Any]]) -> List[TodayMenuItem]:
    if not menu_is_empty(db):
        raise AppError(400, "BAD_REQUEST", "Today's menu already exists, please update it instead.")
    return add_menu_items(db, items)


def get_menu_item(db: Session, item_id: int) -> TodayMenuItem:
    menu_item = db.get(TodayMenuItem, item_id)
    if not menu_item:
        raise not_found("Today menu item", item_id)
    return menu_item


def update_menu_item(db: Session, item_id: int, changes: Dict[str, Any]) -> TodayMenuItem:
    menu_item = get_menu_item(db, item_id)
    old_quantity = menu_item.quantity

    for field in UPDATABLE_FIELDS:
        if changes.get(field) is not None:
            setattr(menu_item, field, changes[field])

    # Keep the prepared total in step with the remaining quantity
    if changes.get("quantity") is not None:
        menu_item.total_quantity += changes["quantity"] - old_quantity

    db.commit()
    db.refresh(menu_item)
    return menu_item


def delete_menu_item(db: Session, item_id: int) -> None:
    menu_item = get_menu_item(db, item_id)
    db.delete(menu_item)
    db.commit()


def delete_today_menu(db: Session) -> int:
    if menu_is_empty(db):
        raise _no_menu()
    deleted = db.query(TodayMenuItem).delete()
    db.commit()
    logger.info("Deleted today's menu (%s items)", deleted)
    return deleted


def close_today_menu(db: Session) -> MenuHistory:
    """
    End the day: write remaining quantities back to the products, archive
    the menu and clear it.

    Products in a perishable category lose their leftovers. Items whose
    product has been deleted are skipped for the write-back but still
    archived. Not safe against concurrent invocation.
    """
    if menu_is_empty(db):
        raise _no_menu()

    perishable = settings.perishable_category_set
    menu_items = db.query(TodayMenuItem).order_by(TodayMenuItem.id).all()

    for item in menu_items:
        product = db.get(Product, item.product_id)
        if not product:
            continue
        product.quantity = item.quantity
        if (product.category or "").lower() in perishable:
            product.quantity = 0

    history = MenuHistory(
        menu_date=utcnow(),
        items=[
            MenuHistoryItem(
                product_id=item.product_id,
                price=item.price,
                total_quantity=item.total_quantity,
                remain_quantity=item.quantity,
            )
            for item in menu_items
        ],
    )
    db.add(history)

    for item in menu_items:
        db.delete(item)

    db.commit()
    db.refresh(history)
    logger.info("Closed today's menu: %s items archived in history_id=%s", len(menu_items), history.id)
    return history
