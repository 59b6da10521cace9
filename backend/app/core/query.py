"""
Helpers for list endpoints: sorting, pagination and the ``X-Total-Count`` header.
"""
from typing import Iterable, Optional

from fastapi import Query, Response
from sqlalchemy.orm import Query as SAQuery

from app.core.errors import AppError


PAGE_SIZE = 10


class PageParams:
    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(PAGE_SIZE, ge=1, le=1000),
        sort: Optional[str] = Query(None, description="Comma separated fields, '-' prefix for descending"),
    ):
        self.page = page
        self.limit = limit
        self.sort = sort

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def apply_sort(query: SAQuery, model, sort: Optional[str], allowed: Iterable[str], default=None) -> SAQuery:
    allowed = set(allowed)
    if not sort:
        return query.order_by(default) if default is not None else query
    clauses = []
    for raw in sort.split(","):
        field = raw.strip()
        if not field:
            continue
        desc = field.startswith("-")
        name = field.lstrip("-+")
        if name not in allowed:
            raise AppError(400, "INVALID_ARGUMENTS", f"Cannot sort by '{name}'", {"sort": sort})
        column = getattr(model, name)
        clauses.append(column.desc() if desc else column.asc())
    return query.order_by(*clauses) if clauses else query


def paginate(query: SAQuery, params: PageParams) -> tuple[list, int]:
    count = query.order_by(None).count()
    items = query.offset(params.skip).limit(params.limit).all()
    return items, count


def set_total_count(response: Response, count: int) -> None:
    response.headers["Access-Control-Expose-Headers"] = "X-Total-Count"
    response.headers["X-Total-Count"] = str(count)
