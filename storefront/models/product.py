# storefront/models/product.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.database import Base

if TYPE_CHECKING:  # pragma: no cover
    from storefront.models.category import Category

PRODUCT_STATUSES = ("active", "inactive", "draft", "out_of_stock")


class Product(Base):
    """
    Catalog product.

    Note:
    - `sku` is unique; the API also checks it before insert/update to answer 409.
    - Listing order is `id DESC` (newest first), so the PK index serves it.
    - `price` must be >= 0 (CHECK at DB level).
    - Deleting is refused at the application level while cart/order items
      reference the row; the FKs on those tables are not cascading.
    """
    __tablename__ = "products"
    __table_args__ = (
        Index("ix_products_sku", "sku", unique=True),
        Index("ix_products_slug", "slug"),
        Index("ix_products_price", "price"),
        Index("ix_products_name_lower", func.lower(text("name"))),
        CheckConstraint("price >= 0", name="price_nonnegative"),
        CheckConstraint(
            "status IN ('active', 'inactive', 'draft', 'out_of_stock')",
            name="status_valid",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    short_description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # pricing
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    regular_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    cost_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    # inventory
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    min_stock_alert: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    unit_of_measurement: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    package_size: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # classification
    category_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    subcategory_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    brand: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    sku: Mapped[str] = mapped_column(String(64), nullable=False)
    barcode: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    tags: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    # media
    image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    gallery_images: Mapped[Optional[list[Any]]] = mapped_column(JSON, nullable=True)
    video_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    meta_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # shipping / warranty
    free_shipping: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    shipping_time: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    warranty_period: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    weight_for_shipping: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 3), nullable=True)
    dimensions: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    delivery_time_estimate: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_returnable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_cod_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # flags
    eco_friendly: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    eco_friendly_details: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_best_seller: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_new_arrival: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    # audit
    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # LEFT OUTER JOIN on every load: listings always carry category_name
    category: Mapped[Optional["Category"]] = relationship(back_populates="products", lazy="joined")

    @property
    def category_name(self) -> Optional[str]:
        return self.category.name if self.category is not None else None

    def __repr__(self) -> str:
        # shorten the name in repr for cleaner logs
        name_preview = (self.name[:32] + "…") if self.name and len(self.name) > 33 else self.name
        return f"<Product id={self.id!r} name={name_preview!r} sku={self.sku!r}>"
