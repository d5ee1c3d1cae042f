# storefront/schemas/category.py
from __future__ import annotations

import re
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_WS_RE = re.compile(r"\s+")


def _norm_spaces(v: str) -> str:
    # collapse inner whitespace and strip the ends
    return _WS_RE.sub(" ", v).strip()


class CategoryBase(BaseModel):
    """Common category fields (create/read)."""
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def _name_normalize(cls, v: str) -> str:
        v = _norm_spaces(v)
        if not v:
            raise ValueError("name must not be empty")
        return v

    # "" -> None; runs of spaces -> one space
    @field_validator("description")
    @classmethod
    def _description_normalize(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = _norm_spaces(v)
        return v or None

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Herbal Soaps",
                    "description": "Handmade soaps with natural oils.",
                }
            ]
        },
    )


class CategoryCreate(CategoryBase):
    """Payload for creating a category."""
    pass


class CategoryUpdate(BaseModel):
    """Update payload; all fields optional."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def _name_normalize(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("name cannot be null")
        v = _norm_spaces(v)
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("description")
    @classmethod
    def _description_normalize(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = _norm_spaces(v)
        return v or None


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class CategoryData(BaseModel):
    category: CategoryRead


class CategoryEnvelope(BaseModel):
    status: Literal["success"] = "success"
    data: CategoryData


class CategoryListData(BaseModel):
    categories: List[CategoryRead]


class CategoryListEnvelope(BaseModel):
    status: Literal["success"] = "success"
    results: int
    data: CategoryListData
