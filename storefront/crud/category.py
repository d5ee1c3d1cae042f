# storefront/crud/category.py
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.errors import AppError, ConflictError
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.schemas.category import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


class DuplicateCategoryNameError(ConflictError):
    """The (case-insensitive) category name already exists."""

    def __init__(self, message: str = "Category name must be unique (case-insensitive)."):
        super().__init__(message)


class CategoryInUseError(AppError):
    pass


# -------------------------- Reads --------------------------

def list_categories(db: Session) -> List[Category]:
    stmt = select(Category).order_by(func.lower(Category.name).asc(), Category.id.asc())
    return list(db.execute(stmt).scalars().all())


def get(db: Session, category_id: int) -> Optional[Category]:
    return db.get(Category, category_id)


def get_by_name_ci(db: Session, name: str) -> Optional[Category]:
    """Lookup by name, case-insensitive (served by ix_categories_name_lower)."""
    if not name:
        return None
    stmt = select(Category).where(func.lower(Category.name) == name.lower())
    return db.execute(stmt).scalar_one_or_none()


def product_count(db: Session, category_id: int) -> int:
    return int(db.scalar(select(func.count(Product.id)).where(Product.category_id == category_id)) or 0)


# -------------------------- Mutations --------------------------

def create(db: Session, data: CategoryCreate) -> Category:
    if get_by_name_ci(db, data.name):
        raise DuplicateCategoryNameError()

    obj = Category(name=data.name, description=data.description)
    db.add(obj)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateCategoryNameError() from e
    db.refresh(obj)
    logger.info("Category created id=%s name=%r", obj.id, obj.name)
    return obj


def update(db: Session, obj: Category, data: CategoryUpdate) -> Category:
    payload = data.model_dump(exclude_unset=True)
    if not payload:
        raise AppError("No fields to update")

    if "name" in payload:
        other = get_by_name_ci(db, payload["name"])
        if other and other.id != obj.id:
            raise DuplicateCategoryNameError()
        obj.name = payload["name"]

    if "description" in payload:
        # None clears the description
        obj.description = payload["description"]

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateCategoryNameError() from e
    db.refresh(obj)
    return obj


def delete(db: Session, obj: Category) -> None:
    """Delete a category; refused while products still belong to it."""
    in_use = product_count(db, obj.id)
    if in_use:
        raise CategoryInUseError(f"Cannot delete category that has {in_use} product(s)")
    db.delete(obj)
    db.commit()
    logger.info("Category deleted id=%s", obj.id)
