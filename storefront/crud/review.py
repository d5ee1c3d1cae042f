# storefront/crud/review.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.models.review import Review
from storefront.schemas.review import ReviewCreate


def list_for_product(db: Session, product_id: int) -> List[Review]:
    """Reviews of a product, newest first."""
    stmt = (
        select(Review)
        .where(Review.product_id == product_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


def get(db: Session, review_id: int) -> Optional[Review]:
    return db.get(Review, review_id)


def create(db: Session, product_id: int, data: ReviewCreate) -> Review:
    obj = Review(
        product_id=product_id,
        user_id=data.user_id,
        rating=data.rating,
        title=data.title or "Review",
        content=data.content,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def delete(db: Session, obj: Review) -> None:
    db.delete(obj)
    db.commit()
