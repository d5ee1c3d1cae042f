# storefront/shop/listing.py
from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Protocol

import httpx

from storefront.client import StorefrontAPIError
from storefront.shop.query import DEFAULT_BOUNDS, PriceBounds, ShopQuery

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 9
UNREACHABLE_MESSAGE = "Could not reach the store, please try again"


class ProductSource(Protocol):
    def list_products(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]: ...


class StaleResponse(Exception):
    """A response arrived for a load that a newer load has superseded."""

    def __init__(self, ticket: int, latest: int):
        super().__init__(f"response for load #{ticket} superseded by load #{latest}")
        self.ticket = ticket
        self.latest = latest


@dataclass(frozen=True)
class ListingView:
    """What the shop page renders; derived only from the query string and the API answer."""
    query: ShopQuery
    products: List[Dict[str, Any]] = field(default_factory=list)
    has_more: bool = False
    error: Optional[str] = None

    @property
    def query_string(self) -> str:
        return self.query.to_query_string()

    @property
    def page(self) -> int:
        return self.query.page

    @property
    def has_previous(self) -> bool:
        return self.query.page > 1

    @property
    def next_page(self) -> Optional[int]:
        return self.query.page + 1 if self.has_more else None

    @property
    def previous_page(self) -> Optional[int]:
        return self.query.page - 1 if self.has_previous else None


@dataclass(frozen=True)
class PendingLoad:
    ticket: int
    query: ShopQuery


class ShopListing:
    """
    Shop page controller.

    Filter interactions rewrite the query string and reload. Loads are
    numbered; `complete()` drops any response whose load was superseded so a
    slow response can never overwrite the state of a newer one.
    """

    def __init__(self, source: ProductSource, *, page_size: int = DEFAULT_PAGE_SIZE, bounds: PriceBounds = DEFAULT_BOUNDS):
        self.source = source
        self.page_size = page_size
        self.bounds = bounds
        self._tickets = itertools.count(1)
        self._latest = 0
        self._lock = threading.Lock()
        self.view = ListingView(query=ShopQuery())

    @property
    def query_string(self) -> str:
        return self.view.query_string

    # --- load cycle ---

    def begin(self, query_string: str) -> PendingLoad:
        query = ShopQuery.from_query_string(query_string)
        with self._lock:
            ticket = next(self._tickets)
            self._latest = ticket
        return PendingLoad(ticket=ticket, query=query)

    def fetch(self, pending: PendingLoad) -> Dict[str, Any]:
        return self.source.list_products(pending.query.to_api_params(self.page_size))

    def complete(
        self,
        pending: PendingLoad,
        body: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ) -> ListingView:
        with self._lock:
            if pending.ticket != self._latest:
                logger.debug("Dropping stale listing response #%s (latest #%s)", pending.ticket, self._latest)
                raise StaleResponse(pending.ticket, self._latest)
            if error is not None:
                view = ListingView(query=pending.query, error=error)
            else:
                body = body or {}
                products = list((body.get("data") or {}).get("products") or [])
                has_more = bool((body.get("pagination") or {}).get("hasMore", len(products) == self.page_size))
                view = ListingView(query=pending.query, products=products, has_more=has_more)
            self.view = view
            return view

    def load(self, query_string: str) -> ListingView:
        pending = self.begin(query_string)
        try:
            body = self.fetch(pending)
        except StorefrontAPIError as exc:
            logger.warning("Listing load failed for %r: %s", query_string, exc)
            return self.complete(pending, error=exc.message)
        except httpx.TransportError as exc:
            logger.warning("Listing load for %r could not reach the API: %s", query_string, exc)
            return self.complete(pending, error=UNREACHABLE_MESSAGE)
        return self.complete(pending, body)

    # --- interactions ---

    def _navigate(self, query: ShopQuery) -> ListingView:
        return self.load(query.to_query_string())

    def select_category(self, category_id: Optional[int]) -> ListingView:
        return self._navigate(self.view.query.with_category(category_id))

    def set_price_range(self, low: Optional[Decimal], high: Optional[Decimal]) -> ListingView:
        return self._navigate(self.view.query.with_price_range(low, high, self.bounds))

    def submit_search(self, text: Optional[str]) -> ListingView:
        return self._navigate(self.view.query.with_search(text))

    def go_to_page(self, page: int) -> ListingView:
        return self._navigate(self.view.query.with_page(page))

    def clear_filters(self) -> ListingView:
        return self._navigate(self.view.query.cleared())
