# tests/test_shop_query.py
from __future__ import annotations

from decimal import Decimal

import pytest

from storefront.shop import PriceBounds, ShopQuery


def test_empty_query_string_is_default_state():
    q = ShopQuery.from_query_string("")
    assert q == ShopQuery()
    assert q.to_query_string() == ""


def test_parse_all_keys():
    q = ShopQuery.from_query_string("?category=3&minPrice=5&maxPrice=25.5&q=neem+soap&page=2")
    assert q.category == 3
    assert q.min_price == Decimal("5")
    assert q.max_price == Decimal("25.5")
    assert q.q == "neem soap"
    assert q.page == 2
    assert q.to_query_string() == "category=3&minPrice=5&maxPrice=25.5&q=neem+soap&page=2"


@pytest.mark.parametrize(
    "qs, expected",
    [
        ("category=abc", ShopQuery()),
        ("category=0", ShopQuery()),
        ("page=-4", ShopQuery()),
        ("page=zz", ShopQuery()),
        ("minPrice=-1", ShopQuery()),
        ("maxPrice=NaN", ShopQuery()),
        ("q=+++", ShopQuery()),
        ("utm_source=x", ShopQuery()),
        ("minPrice=30&maxPrice=10", ShopQuery(min_price=Decimal("10"), max_price=Decimal("30"))),
    ],
)
def test_tolerant_parsing(qs, expected):
    assert ShopQuery.from_query_string(qs) == expected


def test_filter_changes_reset_page():
    q = ShopQuery(category=1, page=4)
    assert q.with_category(2) == ShopQuery(category=2)
    assert q.with_search("  aloe ").q == "aloe"
    assert q.with_search("   ").q is None
    assert q.with_search("aloe").page == 1
    assert q.with_page(5).category == 1
    assert q.with_page(0).page == 1
    assert q.cleared() == ShopQuery()


def test_price_range_at_bounds_is_omitted():
    bounds = PriceBounds(Decimal("0"), Decimal("100"))
    q = ShopQuery().with_price_range(Decimal("0"), Decimal("100"), bounds)
    assert q.min_price is None and q.max_price is None

    q = ShopQuery().with_price_range(Decimal("-5"), Decimal("500"), bounds)
    assert q.min_price is None and q.max_price is None

    q = ShopQuery().with_price_range(Decimal("80"), Decimal("20"), bounds)
    assert (q.min_price, q.max_price) == (Decimal("20"), Decimal("80"))
    assert q.to_params() == {"minPrice": "20", "maxPrice": "80"}


def test_api_params_always_carry_page_and_limit():
    params = ShopQuery(category=2, q="soap").to_api_params(9)
    assert params == {"category": "2", "q": "soap", "page": 1, "limit": 9}


def test_bounds_validation():
    with pytest.raises(ValueError):
        PriceBounds(Decimal("10"), Decimal("1"))
