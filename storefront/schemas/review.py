# storefront/schemas/review.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReviewCreate(BaseModel):
    """Review payload; rating is 1..5 stars, title falls back to "Review"."""

    user_id: int = Field(..., ge=1)
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5 stars")
    title: Optional[str] = Field(None, max_length=255)
    content: str = Field(..., min_length=1, max_length=5000)

    @field_validator("title")
    @classmethod
    def _title_default(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("content")
    @classmethod
    def _content_strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content must not be empty")
        return v


class ReviewRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    user_id: int
    rating: int
    title: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReviewListData(BaseModel):
    reviews: List[ReviewRead]


class ReviewListEnvelope(BaseModel):
    status: Literal["success"] = "success"
    results: int
    data: ReviewListData


class ReviewData(BaseModel):
    review: ReviewRead


class ReviewEnvelope(BaseModel):
    status: Literal["success"] = "success"
    data: ReviewData
