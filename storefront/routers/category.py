# storefront/routers/category.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.core.errors import NotFoundError
from storefront.crud import category as crud
from storefront.database import get_db
from storefront.routers.deps import require_admin
from storefront.schemas.category import (
    CategoryCreate,
    CategoryData,
    CategoryEnvelope,
    CategoryListData,
    CategoryListEnvelope,
    CategoryRead,
    CategoryUpdate,
)
from storefront.schemas.product import MessageEnvelope

router = APIRouter(prefix="/categories", tags=["categories"])


def _get_or_404(db: Session, category_id: int):
    obj = crud.get(db, category_id)
    if obj is None:
        raise NotFoundError("Category not found")
    return obj


def _envelope(obj) -> CategoryEnvelope:
    return CategoryEnvelope(data=CategoryData(category=CategoryRead.model_validate(obj)))


@router.get("", response_model=CategoryListEnvelope, summary="List categories")
def list_categories(db: Session = Depends(get_db)):
    items = [CategoryRead.model_validate(c) for c in crud.list_categories(db)]
    return CategoryListEnvelope(results=len(items), data=CategoryListData(categories=items))


@router.get("/{category_id}", response_model=CategoryEnvelope, summary="Get category by id")
def get_category(category_id: int, db: Session = Depends(get_db)):
    return _envelope(_get_or_404(db, category_id))


@router.post(
    "",
    response_model=CategoryEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create category (admin)",
    dependencies=[Depends(require_admin)],
)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    return _envelope(crud.create(db, payload))


@router.patch(
    "/{category_id}",
    response_model=CategoryEnvelope,
    summary="Update category (admin)",
    dependencies=[Depends(require_admin)],
)
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    obj = _get_or_404(db, category_id)
    return _envelope(crud.update(db, obj, payload))


@router.delete(
    "/{category_id}",
    response_model=MessageEnvelope,
    summary="Delete category without products (admin)",
    dependencies=[Depends(require_admin)],
)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    obj = _get_or_404(db, category_id)
    crud.delete(db, obj)
    return MessageEnvelope(message="Category deleted successfully")
