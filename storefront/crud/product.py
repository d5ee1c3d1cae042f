# storefront/crud/product.py
from __future__ import annotations

import logging
import re
import time
from typing import List, Optional, Tuple, Union

from sqlalchemy import String, delete as sa_delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.errors import AppError, ConflictError
from storefront.core.settings import settings
from storefront.models.product import Product
from storefront.models.references import CartItem, OrderItem
from storefront.models.review import Review
from storefront.schemas.product import ProductCreate, ProductFilter, ProductPatch

logger = logging.getLogger(__name__)

_SLUG_RE = re.compile(r"[^a-z0-9]+")

# OFFSET is bound as a signed 64-bit integer
_MAX_OFFSET = 2**63 - 1


class DuplicateSKUError(ConflictError):
    """Raised when a SKU is already taken by another product."""

    def __init__(self, message: str = "SKU already exists"):
        super().__init__(message)


class EmptyPatchError(AppError):
    def __init__(self, message: str = "No fields to update"):
        super().__init__(message)


class ProductInUseError(AppError):
    """Delete refused: cart or order lines still point at the product."""
    pass


def normalize_window(limit: int, offset: int, *, max_size: Optional[int] = None) -> tuple[int, int]:
    max_size = max_size or settings.MAX_PAGE_SIZE
    limit = max(1, min(int(limit), max_size))
    offset = max(0, min(int(offset), _MAX_OFFSET))
    return limit, offset


def page_to_offset(page: int, limit: int) -> int:
    """Rows to skip for a 1-based page."""
    return (max(1, int(page)) - 1) * int(limit)


def slugify(name: str) -> str:
    slug = _SLUG_RE.sub("-", name.lower()).strip("-")
    return slug or "product"


def _window(stmt, limit: int, offset: int):
    limit, offset = normalize_window(limit, offset)
    # newest first; LIMIT/OFFSET are bound parameters
    return stmt.order_by(Product.id.desc()).limit(limit).offset(offset)


def _as_category_id(category_id: Union[int, str, None]) -> Optional[int]:
    if category_id is None:
        return None
    try:
        return int(category_id)
    except (TypeError, ValueError):
        return None


# -------------------------- Reads --------------------------

def find_all(db: Session, limit: int = 20, offset: int = 0) -> List[Product]:
    stmt = _window(select(Product), limit, offset)
    return list(db.execute(stmt).unique().scalars().all())


def count(db: Session) -> int:
    return int(db.scalar(select(func.count(Product.id))) or 0)


def find_by_id(db: Session, product_id: int) -> Optional[Product]:
    """Product by id (or None)."""
    return db.get(Product, product_id)


def find_by_sku(db: Session, sku: Optional[str]) -> Optional[Product]:
    if not sku:
        return None
    stmt = select(Product).where(Product.sku == sku)
    return db.execute(stmt).unique().scalar_one_or_none()


def find_by_slug(db: Session, slug: Optional[str]) -> Optional[Product]:
    if not slug:
        return None
    # slugs are not unique; the oldest product owns the slug
    stmt = select(Product).where(Product.slug == slug).order_by(Product.id.asc()).limit(1)
    return db.execute(stmt).unique().scalars().first()


def find_by_category(
    db: Session, category_id: Union[int, str, None], limit: int = 20, offset: int = 0
) -> List[Product]:
    """
    Products of one category, newest first.
    An id that is not an integer (or matches no category) yields an empty list.
    """
    cat_id = _as_category_id(category_id)
    if cat_id is None:
        logger.debug("find_by_category: invalid category id %r", category_id)
        return []
    stmt = _window(select(Product).where(Product.category_id == cat_id), limit, offset)
    rows = list(db.execute(stmt).unique().scalars().all())
    logger.debug("find_by_category(%s, limit=%s, offset=%s) -> %d rows", cat_id, limit, offset, len(rows))
    return rows


def _text_condition(query: str):
    # autoescape: % and _ typed by the user match literally
    needle = query.lower()
    return or_(
        func.lower(Product.name, type_=String).contains(needle, autoescape=True),
        func.lower(Product.description, type_=String).contains(needle, autoescape=True),
    )


def search(db: Session, query: str, limit: int = 20, offset: int = 0) -> List[Product]:
    """Case-insensitive substring match on name or description."""
    stmt = _window(select(Product).where(_text_condition(query)), limit, offset)
    return list(db.execute(stmt).unique().scalars().all())


def list_products(
    db: Session,
    filters: Optional[ProductFilter] = None,
    limit: int = 20,
    offset: int = 0,
) -> List[Product]:
    """
    One page of products matching every filter that is set:
      - category_id: exact match
      - min_price/max_price: inclusive bounds
      - q: substring in name or description (case-insensitive)
    """
    filters = filters or ProductFilter()
    conditions = []
    if filters.category_id is not None:
        conditions.append(Product.category_id == filters.category_id)
    if filters.min_price is not None:
        conditions.append(Product.price >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(Product.price <= filters.max_price)
    if filters.q:
        conditions.append(_text_condition(filters.q))

    stmt = select(Product)
    if conditions:
        stmt = stmt.where(*conditions)
    return list(db.execute(_window(stmt, limit, offset)).unique().scalars().all())


def related(db: Session, product: Product, limit: Optional[int] = None, pool: Optional[int] = None) -> List[Product]:
    """Same-category products, excluding `product`, taken from the newest `pool` rows."""
    limit = settings.RELATED_LIMIT if limit is None else limit
    pool = settings.RELATED_POOL if pool is None else pool
    if product.category_id is None:
        return []
    candidates = find_by_category(db, product.category_id, pool, 0)
    return [p for p in candidates if p.id != product.id][: max(0, limit)]


def reference_counts(db: Session, product_id: int) -> Tuple[int, int]:
    """(cart lines, order lines) that reference the product."""
    cart_refs = db.scalar(select(func.count(CartItem.id)).where(CartItem.product_id == product_id)) or 0
    order_refs = db.scalar(select(func.count(OrderItem.id)).where(OrderItem.product_id == product_id)) or 0
    return int(cart_refs), int(order_refs)


# -------------------------- Mutations --------------------------

def generate_sku(db: Session) -> str:
    stamp = int(time.time() * 1000)
    sku = f"{settings.SKU_PREFIX}-{stamp}"
    while find_by_sku(db, sku) is not None:
        stamp += 1
        sku = f"{settings.SKU_PREFIX}-{stamp}"
    return sku


def _creation_values(db: Session, data: ProductCreate) -> dict:
    values = data.model_dump()
    short = values["short_description"]
    if short is None and values["description"]:
        short = values["description"][: settings.SHORT_DESCRIPTION_LENGTH]

    defaults = {
        "slug": slugify(values["name"]),
        "short_description": short,
        "regular_price": values["price"],
        "quantity": 0,
        "min_stock_alert": settings.DEFAULT_STOCK_ALERT,
        "brand": settings.DEFAULT_BRAND,
        "tags": "",
        "meta_title": values["name"],
        "meta_description": short,
        "free_shipping": False,
        "shipping_time": settings.DEFAULT_SHIPPING_TIME,
        "delivery_time_estimate": settings.DEFAULT_SHIPPING_TIME,
        "is_returnable": True,
        "is_cod_available": True,
        "eco_friendly": True,
        "eco_friendly_details": settings.DEFAULT_ECO_DETAILS,
        "is_featured": False,
        "is_best_seller": False,
        "is_new_arrival": False,
        "status": "active",
    }
    for key, default in defaults.items():
        if values.get(key) is None:
            values[key] = default
    if not values.get("sku"):
        values["sku"] = generate_sku(db)
    return values


def create(db: Session, data: ProductCreate, *, created_by: Optional[int] = None) -> Product:
    """
    Insert a product, filling the derived defaults (slug, short description,
    regular price, brand, generated SKU...). Raises DuplicateSKUError on a taken SKU.
    """
    if data.sku and find_by_sku(db, data.sku) is not None:
        raise DuplicateSKUError()

    obj = Product(**_creation_values(db, data), created_by=created_by)
    db.add(obj)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if find_by_sku(db, obj.sku) is not None:
            raise DuplicateSKUError()
        raise
    db.refresh(obj)
    logger.info("Product created id=%s sku=%s", obj.id, obj.sku)
    return obj


def update(db: Session, obj: Product, patch: ProductPatch) -> Product:
    """
    Apply only the fields present in the patch.
    An empty patch is an error, never a silent no-op.
    """
    changes = patch.changes()
    if not changes:
        raise EmptyPatchError()

    new_sku = changes.get("sku")
    if new_sku and new_sku != obj.sku:
        other = find_by_sku(db, new_sku)
        if other is not None and other.id != obj.id:
            raise DuplicateSKUError()

    for k, v in changes.items():
        setattr(obj, k, v)
    if "category_id" in changes:
        # reload the joined category after the move
        db.expire(obj, ["category"])

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if new_sku:
            other = find_by_sku(db, new_sku)
            if other is not None and other.id != obj.id:
                raise DuplicateSKUError()
        raise
    db.refresh(obj)
    logger.info("Product updated id=%s fields=%s", obj.id, sorted(changes))
    return obj


def delete(db: Session, product_id: int) -> bool:
    """
    Delete a product unless cart or order lines reference it.
    Returns False when there was no such product.
    """
    cart_refs, order_refs = reference_counts(db, product_id)
    if cart_refs:
        raise ProductInUseError("Cannot delete product that is in customers carts")
    if order_refs:
        raise ProductInUseError("Cannot delete product that has been ordered")

    obj = find_by_id(db, product_id)
    if obj is None:
        return False
    # reviews belong to the product; remove them in the same transaction
    db.execute(sa_delete(Review).where(Review.product_id == product_id))
    db.delete(obj)
    db.commit()
    logger.info("Product deleted id=%s", product_id)
    return True
