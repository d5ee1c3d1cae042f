# storefront/models/category.py
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, Index, Integer, String, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.database import Base

if TYPE_CHECKING:  # pragma: no cover
    from storefront.models.product import Product


class Category(Base):
    """
    Table 'categories'.
    - Names are unique case-insensitively (functional unique index on lower(name)).
    - Products point here through products.category_id (many-to-one).
    """
    __tablename__ = "categories"
    __table_args__ = (
        Index("ix_categories_name_lower", func.lower(text("name")), unique=True),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    products: Mapped[List["Product"]] = relationship(back_populates="category", passive_deletes=True)

    def __repr__(self) -> str:  # pragma: no cover
        name_preview = (self.name[:32] + "…") if self.name and len(self.name) > 33 else self.name
        return f"<Category id={self.id!r} name={name_preview!r}>"
