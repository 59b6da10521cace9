from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import restrict_to
from app.core.errors import not_found
from app.core.query import PageParams, paginate, set_total_count
from app.core.roles import Role
from app.models.menu_history import MenuHistory
from app.routes.schemas import MenuHistoryOut


router = APIRouter(dependencies=[Depends(restrict_to(Role.staff, Role.cashier))])


@router.get("/", response_model=List[MenuHistoryOut])
def list_menu_histories(response: Response, db: Session = Depends(get_db), params: PageParams = Depends()):
    query = db.query(MenuHistory).order_by(MenuHistory.menu_date.desc(), MenuHistory.id.desc())
    items, count = paginate(query, params)
    set_total_count(response, count)
    return items


@router.get("/{history_id}", response_model=MenuHistoryOut)
def get_menu_history(history_id: int, db: Session = Depends(get_db)):
    history = db.get(MenuHistory, history_id)
    if not history:
        raise not_found("Menu history", history_id)
    return history
