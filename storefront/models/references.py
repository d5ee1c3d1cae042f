# storefront/models/references.py
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from storefront.database import Base


class CartItem(Base):
    """
    Server-side cart line ('cart_items').
    Only read by the product delete guard; the shop cart itself is client-held.
    """
    __tablename__ = "cart_items"
    __table_args__ = (Index("ix_cart_items_product_id", "product_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<CartItem id={self.id} product_id={self.product_id} quantity={self.quantity}>"


class OrderItem(Base):
    """Order line ('order_items'); keeps ordered products from being deleted."""
    __tablename__ = "order_items"
    __table_args__ = (Index("ix_order_items_product_id", "product_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<OrderItem id={self.id} order_id={self.order_id} product_id={self.product_id}>"
