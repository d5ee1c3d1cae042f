# storefront/shop/cart.py
from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from storefront.core.settings import settings


def _to_price(value: Any) -> Decimal:
    # API prices arrive as strings ("4.99")
    try:
        price = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"invalid product price: {value!r}") from None
    if not price.is_finite() or price < 0:
        raise ValueError(f"invalid product price: {value!r}")
    return price


@dataclass(frozen=True)
class CartLine:
    """One product in the cart, with name/price/image copied for display."""
    product_id: int
    name: str
    price: Decimal
    quantity: int
    image_url: Optional[str] = None

    @property
    def total(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_product(cls, product: Mapping[str, Any], quantity: int = 1) -> "CartLine":
        return cls(
            product_id=int(product["id"]),
            name=str(product.get("name") or ""),
            price=_to_price(product.get("price")),
            quantity=quantity,
            image_url=product.get("image_url"),
        )


Listener = Callable[["CartStore"], None]


class CartStore:
    """
    The one owner of the client-side cart.
    All reads and writes go through these methods; subscribers are told after each change.
    """

    def __init__(self, lines: Optional[List[CartLine]] = None, *, shipping_fee: Optional[Decimal] = None):
        self.shipping_fee = settings.CART_SHIPPING_FEE if shipping_fee is None else Decimal(str(shipping_fee))
        self._lines: Dict[int, CartLine] = {}
        for line in lines or []:
            self._lines[line.product_id] = line
        self._listeners: List[Listener] = []

    # --- reads ---

    def items(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines.values())

    def get(self, product_id: int) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def subtotal(self) -> Decimal:
        return sum((line.total for line in self._lines.values()), Decimal("0"))

    @property
    def shipping(self) -> Decimal:
        return self.shipping_fee if self.subtotal > 0 else Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.shipping

    @property
    def is_empty(self) -> bool:
        return not self._lines

    # --- writes ---

    def add(self, product: Mapping[str, Any], quantity: int = 1) -> CartLine:
        """Add a product; adding one that is already in the cart increases its quantity."""
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        incoming = CartLine.from_product(product, quantity)
        current = self._lines.get(incoming.product_id)
        line = incoming if current is None else replace(incoming, quantity=current.quantity + quantity)
        self._lines[line.product_id] = line
        self._notify()
        return line

    def update_quantity(self, product_id: int, quantity: int) -> Optional[CartLine]:
        """Set a line's quantity; anything below 1 removes the line."""
        current = self._lines.get(product_id)
        if current is None:
            raise KeyError(product_id)
        if quantity < 1:
            self.remove(product_id)
            return None
        line = replace(current, quantity=int(quantity))
        self._lines[product_id] = line
        self._notify()
        return line

    def remove(self, product_id: int) -> bool:
        if self._lines.pop(product_id, None) is None:
            return False
        self._notify()
        return True

    def clear(self) -> None:
        if not self._lines:
            return
        self._lines.clear()
        self._notify()

    # --- change notification ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [
                {
                    "product_id": line.product_id,
                    "name": line.name,
                    "price": str(line.price),
                    "quantity": line.quantity,
                    "image_url": line.image_url,
                }
                for line in self._lines.values()
            ],
            "item_count": self.item_count,
            "subtotal": str(self.subtotal),
            "shipping": str(self.shipping),
            "total": str(self.total),
        }
