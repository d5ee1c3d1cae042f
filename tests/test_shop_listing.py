# tests/test_shop_listing.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from helpers import create_category, create_product
from storefront.client import StorefrontAPIError
from storefront.shop import ShopListing, StaleResponse
from storefront.shop.listing import UNREACHABLE_MESSAGE


class ApiSource:
    """Feeds the listing from the in-process API."""

    def __init__(self, client: TestClient):
        self.client = client
        self.calls: List[Dict[str, Any]] = []

    def list_products(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        self.calls.append(dict(params or {}))
        r = self.client.get("/products", params=params)
        body = r.json()
        if r.status_code >= 400:
            raise StorefrontAPIError(body["message"], r.status_code, body)
        return body


class FixedSource:
    def __init__(self, body: Dict[str, Any]):
        self.body = body

    def list_products(self, params=None):
        return self.body


def _page(n: int, has_more: bool) -> Dict[str, Any]:
    return {
        "status": "success",
        "results": n,
        "pagination": {"page": 1, "limit": 9, "hasMore": has_more},
        "data": {"products": [{"id": i} for i in range(n)]},
    }


@pytest.mark.timeout(10)
def test_load_reads_state_from_query_string(client: TestClient):
    cat = create_category(client)
    for i in range(3):
        create_product(client, cat["id"], name=f"Soap {i}", price="5")
    create_product(client, cat["id"], name="Pricey Soap", price="80")

    source = ApiSource(client)
    listing = ShopListing(source, page_size=2)

    view = listing.load(f"category={cat['id']}&maxPrice=10")
    assert [p["name"] for p in view.products] == ["Soap 2", "Soap 1"]
    assert view.has_more is True
    assert view.next_page == 2
    assert view.previous_page is None
    assert source.calls[-1] == {"category": str(cat["id"]), "maxPrice": "10", "page": 1, "limit": 2}

    view = listing.go_to_page(2)
    assert [p["name"] for p in view.products] == ["Soap 0"]
    assert view.has_more is False
    assert view.query_string == f"category={cat['id']}&maxPrice=10&page=2"
    assert view.previous_page == 1


@pytest.mark.timeout(10)
def test_interactions_rewrite_query_string(client: TestClient):
    cat = create_category(client)
    create_product(client, cat["id"], name="Aloe Gel", price="15")

    listing = ShopListing(ApiSource(client))
    listing.load("page=3")

    view = listing.select_category(cat["id"])
    assert view.query_string == f"category={cat['id']}"

    view = listing.set_price_range(Decimal("10"), Decimal("1000"))
    assert view.query_string == f"category={cat['id']}&minPrice=10"

    view = listing.submit_search("aloe")
    assert view.query_string == f"category={cat['id']}&minPrice=10&q=aloe"
    assert [p["name"] for p in view.products] == ["Aloe Gel"]

    view = listing.clear_filters()
    assert view.query_string == ""
    assert len(view.products) == 1


@pytest.mark.timeout(10)
def test_api_error_is_shown_not_raised(client: TestClient):
    listing = ShopListing(ApiSource(client))
    view = listing.load("category=4242")
    assert view.error == "Category not found"
    assert view.products == []
    assert view.has_more is False


def test_stale_response_is_dropped():
    listing = ShopListing(FixedSource(_page(9, True)), page_size=9)

    slow = listing.begin("q=soap")
    fast = listing.begin("q=soap+bar")

    current = listing.complete(fast, _page(3, False))
    assert current.query.q == "soap bar"

    with pytest.raises(StaleResponse):
        listing.complete(slow, _page(9, True))
    # the newer view survives
    assert listing.view is current
    assert listing.query_string == "q=soap+bar"


def test_has_more_falls_back_to_full_page():
    listing = ShopListing(FixedSource({"data": {"products": [{"id": 1}, {"id": 2}]}}), page_size=2)
    assert listing.load("").has_more is True


class DownSource:
    def list_products(self, params=None):
        raise httpx.ConnectError("connection refused")


def test_unreachable_api_becomes_error_view():
    listing = ShopListing(DownSource())
    view = listing.load("category=3")
    assert view.error == UNREACHABLE_MESSAGE
    assert view.products == []
    assert view.query.category == 3
    assert listing.view is view

    # interactions go through the same path
    assert listing.submit_search("soap").error == UNREACHABLE_MESSAGE
    assert listing.query_string == "category=3&q=soap"
