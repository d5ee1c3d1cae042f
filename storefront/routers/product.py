# storefront/routers/product.py
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from storefront.core.errors import AppError, NotFoundError
from storefront.core.settings import settings
from storefront.crud import category as category_crud
from storefront.crud import product as crud
from storefront.database import get_db
from storefront.models.product import Product
from storefront.routers.deps import acting_user_id, require_admin
from storefront.schemas.category import CategoryRead
from storefront.schemas.product import (
    CategoryProductsData,
    CategoryProductsEnvelope,
    MessageEnvelope,
    Pagination,
    ProductCreate,
    ProductData,
    ProductEnvelope,
    ProductFilter,
    ProductListData,
    ProductListEnvelope,
    ProductPatch,
    ProductRead,
    RelatedProductsEnvelope,
)

router = APIRouter(prefix="/products", tags=["products"])

PageQuery = Query(default=1, ge=1, le=settings.MAX_PAGE, description="1-based page number")
LimitQuery = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size")


def _read_all(rows: Iterable[Product]) -> list[ProductRead]:
    return [ProductRead.model_validate(p) for p in rows]


def _pagination(page: int, limit: int, returned: int) -> Pagination:
    # A full page means another page probably exists
    return Pagination(page=page, limit=limit, has_more=returned == limit)


def _list_envelope(rows: list[Product], page: int, limit: int) -> ProductListEnvelope:
    products = _read_all(rows)
    return ProductListEnvelope(
        results=len(products),
        pagination=_pagination(page, limit, len(products)),
        data=ProductListData(products=products),
    )


def _get_or_404(db: Session, product_id: int) -> Product:
    obj = crud.find_by_id(db, product_id)
    if obj is None:
        raise NotFoundError("Product not found")
    return obj


def _require_category(db: Session, category_id: int):
    cat = category_crud.get(db, category_id)
    if cat is None:
        raise NotFoundError("Category not found")
    return cat


@router.get(
    "",
    response_model=ProductListEnvelope,
    summary="List products (category, price range, text filter; newest first)",
)
def list_products(
    category: Optional[int] = Query(default=None, description="Category id"),
    min_price: Optional[Decimal] = Query(default=None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(default=None, alias="maxPrice", ge=0),
    q: Optional[str] = Query(default=None, description="Substring of name or description"),
    page: int = PageQuery,
    limit: int = LimitQuery,
    db: Session = Depends(get_db),
):
    """
    - `category`: 404 when the category does not exist
    - `minPrice`, `maxPrice`: inclusive price range
    - `pagination.hasMore` is true when the page came back full
    """
    if min_price is not None and max_price is not None and min_price > max_price:
        raise AppError("minPrice cannot be greater than maxPrice")
    if category is not None:
        _require_category(db, category)

    filters = ProductFilter(category_id=category, min_price=min_price, max_price=max_price, q=q)
    rows = crud.list_products(db, filters, limit=limit, offset=crud.page_to_offset(page, limit))
    return _list_envelope(rows, page, limit)


@router.get(
    "/search",
    response_model=ProductListEnvelope,
    summary="Search products by name or description",
)
def search_products(
    q: Optional[str] = Query(default=None, description="Search text"),
    page: int = PageQuery,
    limit: int = LimitQuery,
    db: Session = Depends(get_db),
):
    if not q or not q.strip():
        raise AppError("Search query is required")
    rows = crud.search(db, q.strip(), limit=limit, offset=crud.page_to_offset(page, limit))
    return _list_envelope(rows, page, limit)


@router.get(
    "/category/{category_id}",
    response_model=CategoryProductsEnvelope,
    summary="Products of one category",
)
def products_by_category(
    category_id: int,
    page: int = PageQuery,
    limit: int = LimitQuery,
    db: Session = Depends(get_db),
):
    cat = _require_category(db, category_id)
    products = _read_all(crud.find_by_category(db, category_id, limit, crud.page_to_offset(page, limit)))
    return CategoryProductsEnvelope(
        results=len(products),
        pagination=_pagination(page, limit, len(products)),
        data=CategoryProductsData(category=CategoryRead.model_validate(cat), products=products),
    )


@router.get("/slug/{slug}", response_model=ProductEnvelope, summary="Get a product by slug")
def get_product_by_slug(slug: str, db: Session = Depends(get_db)):
    obj = crud.find_by_slug(db, slug)
    if obj is None:
        raise NotFoundError("Product not found")
    return ProductEnvelope(data=ProductData(product=ProductRead.model_validate(obj)))


@router.get("/sku/{sku}", response_model=ProductEnvelope, summary="Get a product by SKU")
def get_product_by_sku(sku: str, db: Session = Depends(get_db)):
    obj = crud.find_by_sku(db, sku)
    if obj is None:
        raise NotFoundError("Product not found")
    return ProductEnvelope(data=ProductData(product=ProductRead.model_validate(obj)))


@router.get(
    "/{product_id}/related",
    response_model=RelatedProductsEnvelope,
    summary="Products from the same category",
)
def related_products(
    product_id: int,
    limit: int = Query(default=settings.RELATED_LIMIT, ge=1, le=settings.RELATED_POOL),
    db: Session = Depends(get_db),
):
    obj = _get_or_404(db, product_id)
    if obj.category_id is None:
        raise AppError("Product has no category")
    products = _read_all(crud.related(db, obj, limit=limit))
    return RelatedProductsEnvelope(results=len(products), data=ProductListData(products=products))


@router.get("/{product_id}", response_model=ProductEnvelope, summary="Get a product by id")
def get_product(product_id: int, db: Session = Depends(get_db)):
    obj = _get_or_404(db, product_id)
    return ProductEnvelope(data=ProductData(product=ProductRead.model_validate(obj)))


@router.post(
    "",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product (admin)",
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    created_by: Optional[int] = Depends(acting_user_id),
    db: Session = Depends(get_db),
):
    _require_category(db, payload.category_id)
    obj = crud.create(db, payload, created_by=created_by)
    return ProductEnvelope(data=ProductData(product=ProductRead.model_validate(obj)))


@router.patch(
    "/{product_id}",
    response_model=ProductEnvelope,
    summary="Update the given fields of a product (admin)",
    dependencies=[Depends(require_admin)],
)
def update_product(product_id: int, payload: ProductPatch, db: Session = Depends(get_db)):
    obj = _get_or_404(db, product_id)
    if payload.category_id is not None:
        _require_category(db, payload.category_id)
    obj = crud.update(db, obj, payload)
    return ProductEnvelope(data=ProductData(product=ProductRead.model_validate(obj)))


@router.delete(
    "/{product_id}",
    response_model=MessageEnvelope,
    summary="Delete a product not referenced by carts or orders (admin)",
    dependencies=[Depends(require_admin)],
)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    if not crud.delete(db, product_id):
        raise NotFoundError("Product not found")
    return MessageEnvelope(message="Product deleted successfully")
