from typing import List, Optional, Union

from fastapi import APIRouter, Body, Depends, Query, Response, status
from pydantic import BaseModel, Field, condecimal
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user, restrict_to
from app.core.query import PageParams, apply_sort, paginate, set_total_count
from app.core.roles import Role
from app.models.today_menu_item import TodayMenuItem
from app.routes.schemas import MenuHistoryOut, TodayMenuItemOut
from app.services import menu_service


router = APIRouter()
kitchen_staff = restrict_to(Role.staff)

SORTABLE = ("id", "name", "price", "quantity", "total_quantity", "category", "rating_average")


class MenuItemIn(BaseModel):
    product_id: int = Field(alias="productId")
    price: Optional[condecimal(ge=0, max_digits=12, decimal_places=2)] = None
    quantity: Optional[int] = Field(None, ge=0)

    class Config:
        populate_by_name = True


class MenuItemUpdate(BaseModel):
    price: Optional[condecimal(ge=0, max_digits=12, decimal_places=2)] = None
    quantity: Optional[int] = Field(None, ge=0)


@router.get("/", response_model=List[TodayMenuItemOut], dependencies=[Depends(get_current_user)])
def get_today_menu(
    response: Response,
    db: Session = Depends(get_db),
    params: PageParams = Depends(),
    q: Optional[str] = Query(None, description="Search by name"),
    category: Optional[str] = Query(None),
):
    query = db.query(TodayMenuItem)
    if q and q.strip():
        query = query.filter(func.lower(TodayMenuItem.name).like(f"%{q.strip().lower()}%"))
    if category:
        query = query.filter(TodayMenuItem.category == category)
    query = apply_sort(query, TodayMenuItem, params.sort, SORTABLE, default=TodayMenuItem.id)
    items, count = paginate(query, params)
    set_total_count(response, count)
    return items


@router.post("/", response_model=List[TodayMenuItemOut], dependencies=[Depends(kitchen_staff)])
def create_today_menu(items: List[MenuItemIn], db: Session = Depends(get_db)):
    return menu_service.create_today_menu(db, [item.model_dump() for item in items])


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(kitchen_staff)])
def delete_today_menu(db: Session = Depends(get_db)):
    menu_service.delete_today_menu(db)


@router.post("/close", response_model=MenuHistoryOut, dependencies=[Depends(kitchen_staff)])
def close_today_menu(db: Session = Depends(get_db)):
    return menu_service.close_today_menu(db)


@router.post("/items", response_model=List[TodayMenuItemOut], dependencies=[Depends(kitchen_staff)])
def create_today_menu_items(
    items: Union[List[MenuItemIn], MenuItemIn] = Body(...),
    db: Session = Depends(get_db),
):
    if not isinstance(items, list):
        items = [items]
    return menu_service.add_menu_items(db, [item.model_dump() for item in items])


@router.get("/items/{item_id}", response_model=TodayMenuItemOut, dependencies=[Depends(get_current_user)])
def get_today_menu_item(item_id: int, db: Session = Depends(get_db)):
    return menu_service.get_menu_item(db, item_id)


@router.patch("/items/{item_id}", response_model=TodayMenuItemOut, dependencies=[Depends(kitchen_staff)])
def update_today_menu_item(item_id: int, data: MenuItemUpdate, db: Session = Depends(get_db)):
    return menu_service.update_menu_item(db, item_id, data.model_dump(exclude_unset=True))


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(kitchen_staff)])
def delete_today_menu_item(item_id: int, db: Session = Depends(get_db)):
    menu_service.delete_menu_item(db, item_id)
