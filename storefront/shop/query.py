# storefront/shop/query.py
"""
Shop listing state that lives entirely in the URL query string.

The listing page never keeps filter state of its own: every interaction
produces a new `ShopQuery`, which is rendered back into the query string and
is the only input used to fetch products.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlencode

# URL keys, in canonical order
CATEGORY_KEY = "category"
MIN_PRICE_KEY = "minPrice"
MAX_PRICE_KEY = "maxPrice"
SEARCH_KEY = "q"
PAGE_KEY = "page"


@dataclass(frozen=True)
class PriceBounds:
    """Range of the price slider; values at a bound mean "no limit"."""
    floor: Decimal = Decimal("0")
    ceiling: Decimal = Decimal("1000")

    def __post_init__(self):
        if self.floor > self.ceiling:
            raise ValueError("floor must not exceed ceiling")

    def clamp(self, value: Decimal) -> Decimal:
        return min(max(value, self.floor), self.ceiling)


DEFAULT_BOUNDS = PriceBounds()


def _first(params: Dict[str, list], key: str) -> Optional[str]:
    values = params.get(key)
    if not values:
        return None
    value = values[0].strip()
    return value or None


def _parse_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _parse_price(raw: Optional[str]) -> Optional[Decimal]:
    if raw is None:
        return None
    try:
        value = Decimal(raw)
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0:
        return None
    return value


def _fmt_price(value: Decimal) -> str:
    # 25.00 -> "25", 12.50 -> "12.5"
    return format(value.normalize(), "f")


@dataclass(frozen=True)
class ShopQuery:
    category: Optional[int] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    q: Optional[str] = None
    page: int = 1

    # --- parsing / rendering ---

    @classmethod
    def from_query_string(cls, qs: str) -> "ShopQuery":
        """
        Tolerant parse: unknown keys are ignored, malformed numbers are dropped,
        pages below 1 become 1.
        """
        params = parse_qs(qs.lstrip("?"), keep_blank_values=False)
        category = _parse_int(_first(params, CATEGORY_KEY))
        if category is not None and category < 1:
            category = None
        min_price = _parse_price(_first(params, MIN_PRICE_KEY))
        max_price = _parse_price(_first(params, MAX_PRICE_KEY))
        if min_price is not None and max_price is not None and min_price > max_price:
            min_price, max_price = max_price, min_price
        page = _parse_int(_first(params, PAGE_KEY)) or 1
        return cls(
            category=category,
            min_price=min_price,
            max_price=max_price,
            q=_first(params, SEARCH_KEY),
            page=max(1, page),
        )

    def to_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if self.category is not None:
            params[CATEGORY_KEY] = str(self.category)
        if self.min_price is not None:
            params[MIN_PRICE_KEY] = _fmt_price(self.min_price)
        if self.max_price is not None:
            params[MAX_PRICE_KEY] = _fmt_price(self.max_price)
        if self.q:
            params[SEARCH_KEY] = self.q
        if self.page > 1:
            params[PAGE_KEY] = str(self.page)
        return params

    def to_query_string(self) -> str:
        return urlencode(self.to_params())

    def to_api_params(self, limit: int) -> Dict[str, Any]:
        """Parameters for GET /products."""
        params: Dict[str, Any] = dict(self.to_params())
        params[PAGE_KEY] = self.page
        params["limit"] = limit
        return params

    # --- transitions (filters reset to page 1) ---

    def with_category(self, category: Optional[int]) -> "ShopQuery":
        return replace(self, category=category, page=1)

    def with_price_range(
        self,
        low: Optional[Decimal],
        high: Optional[Decimal],
        bounds: PriceBounds = DEFAULT_BOUNDS,
    ) -> "ShopQuery":
        lo = bounds.clamp(Decimal(str(low))) if low is not None else bounds.floor
        hi = bounds.clamp(Decimal(str(high))) if high is not None else bounds.ceiling
        if lo > hi:
            lo, hi = hi, lo
        return replace(
            self,
            min_price=None if lo <= bounds.floor else lo,
            max_price=None if hi >= bounds.ceiling else hi,
            page=1,
        )

    def with_search(self, text: Optional[str]) -> "ShopQuery":
        text = (text or "").strip() or None
        return replace(self, q=text, page=1)

    def with_page(self, page: int) -> "ShopQuery":
        return replace(self, page=max(1, int(page)))

    def cleared(self) -> "ShopQuery":
        return ShopQuery()
