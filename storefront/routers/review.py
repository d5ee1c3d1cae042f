# storefront/routers/review.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.core.errors import NotFoundError
from storefront.crud import product as product_crud
from storefront.crud import review as crud
from storefront.database import get_db
from storefront.routers.deps import require_admin
from storefront.schemas.product import MessageEnvelope
from storefront.schemas.review import (
    ReviewCreate,
    ReviewData,
    ReviewEnvelope,
    ReviewListData,
    ReviewListEnvelope,
    ReviewRead,
)

router = APIRouter(prefix="/reviews", tags=["reviews"])


def _require_product(db: Session, product_id: int) -> None:
    if product_crud.find_by_id(db, product_id) is None:
        raise NotFoundError("Product not found")


@router.get(
    "/product/{product_id}",
    response_model=ReviewListEnvelope,
    summary="Reviews of a product, newest first",
)
def list_reviews(product_id: int, db: Session = Depends(get_db)):
    _require_product(db, product_id)
    reviews = [ReviewRead.model_validate(r) for r in crud.list_for_product(db, product_id)]
    return ReviewListEnvelope(results=len(reviews), data=ReviewListData(reviews=reviews))


@router.post(
    "/product/{product_id}",
    response_model=ReviewEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Add a review to a product",
)
def create_review(product_id: int, payload: ReviewCreate, db: Session = Depends(get_db)):
    _require_product(db, product_id)
    obj = crud.create(db, product_id, payload)
    return ReviewEnvelope(data=ReviewData(review=ReviewRead.model_validate(obj)))


@router.delete(
    "/{review_id}",
    response_model=MessageEnvelope,
    summary="Delete a review (admin)",
    dependencies=[Depends(require_admin)],
)
def delete_review(review_id: int, db: Session = Depends(get_db)):
    obj = crud.get(db, review_id)
    if obj is None:
        raise NotFoundError("Review not found")
    crud.delete(db, obj)
    return MessageEnvelope(message="Review deleted successfully")
