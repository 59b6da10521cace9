from typing import List, Literal, Optional
import logging

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field, condecimal
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user, restrict_to
from app.core.errors import AppError, not_found
from app.core.query import PageParams, apply_sort, paginate, set_total_count
from app.core.roles import Role
from app.models.product import Product
from app.routes.schemas import ProductOut


router = APIRouter()

Category = Literal["food", "beverage", "other"]
SORTABLE = ("id", "name", "price", "quantity", "category", "rating_average", "created_at")


class ProductBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: condecimal(ge=0, max_digits=12, decimal_places=2) = 0
    quantity: int = Field(0, ge=0)
    category: Category = "other"
    image: Optional[str] = None
    description: Optional[str] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[condecimal(ge=0, max_digits=12, decimal_places=2)] = None
    quantity: Optional[int] = Field(None, ge=0)
    category: Optional[Category] = None
    image: Optional[str] = None
    description: Optional[str] = None


def _get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if not product:
        raise not_found("Product", product_id)
    return product


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Product).filter(func.lower(Product.name) == name.strip().lower())
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    if query.first():
        raise AppError(400, "DUPLICATE_KEYS", f"Product {name} already exists.", {"name": name})


@router.get("/", response_model=List[ProductOut], dependencies=[Depends(get_current_user)])
def list_products(
    response: Response,
    db: Session = Depends(get_db),
    params: PageParams = Depends(),
    q: Optional[str] = Query(None, description="Search by name"),
    category: Optional[Category] = Query(None),
):
    logging.getLogger(__name__).info("list_products q=%s category=%s page=%s", q, category, params.page)
    query = db.query(Product)
    if q:
        qn = q.strip().lower()
        if qn:
            query = query.filter(func.lower(Product.name).like(f"%{qn}%"))
    if category:
        query = query.filter(Product.category == category)
    query = apply_sort(query, Product, params.sort, SORTABLE, default=Product.id)
    items, count = paginate(query, params)
    set_total_count(response, count)
    return items


@router.get("/{product_id}", response_model=ProductOut, dependencies=[Depends(get_current_user)])
def get_product(product_id: int, db: Session = Depends(get_db)):
    return _get_product(db, product_id)


@router.post(
    "/",
    response_model=ProductOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(restrict_to(Role.staff))],
)
def create_product(data: ProductBase, db: Session = Depends(get_db)):
    _ensure_unique_name(db, data.name)
    product = Product(
        name=data.name.strip(),
        price=data.price,
        quantity=data.quantity,
        category=data.category,
        image=data.image,
        description=data.description,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@router.patch("/{product_id}", response_model=ProductOut, dependencies=[Depends(restrict_to(Role.staff))])
def update_product(product_id: int, data: ProductUpdate, db: Session = Depends(get_db)):
    product = _get_product(db, product_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("name"):
        _ensure_unique_name(db, changes["name"], exclude_id=product.id)
        changes["name"] = changes["name"].strip()
    for field, value in changes.items():
        if value is not None:
            setattr(product, field, value)
    db.commit()
    db.refresh(product)
    return product


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(restrict_to(Role.staff))],
)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product = _get_product(db, product_id)
    db.delete(product)
    db.commit()
