# tests/test_cart.py
from __future__ import annotations

from decimal import Decimal

import pytest

from storefront.shop import CartLine, CartStore

SOAP = {"id": 1, "name": "Neem Soap", "price": "4.99", "image_url": "/img/neem.jpg"}
GEL = {"id": 2, "name": "Aloe Gel", "price": "12.50"}


@pytest.fixture
def cart() -> CartStore:
    return CartStore()


def test_add_merges_quantities(cart: CartStore):
    cart.add(SOAP)
    line = cart.add(SOAP, 2)
    assert line.quantity == 3
    assert len(cart) == 1
    assert 1 in cart
    assert cart.item_count == 3


def test_subtotal_is_exact(cart: CartStore):
    cart.add(SOAP, 3)
    cart.add(GEL)
    assert cart.subtotal == Decimal("27.47")
    assert cart.get(2).total == Decimal("12.50")


def test_update_quantity_and_remove(cart: CartStore):
    cart.add(SOAP)
    cart.add(GEL)
    assert cart.update_quantity(1, 5).quantity == 5
    assert cart.update_quantity(2, 0) is None
    assert 2 not in cart
    with pytest.raises(KeyError):
        cart.update_quantity(99, 1)
    assert cart.remove(1) is True
    assert cart.remove(1) is False
    assert cart.is_empty


def test_add_rejects_non_positive_quantity(cart: CartStore):
    with pytest.raises(ValueError):
        cart.add(SOAP, 0)
    assert cart.is_empty


def test_listeners_see_every_change(cart: CartStore):
    seen = []
    unsubscribe = cart.subscribe(lambda c: seen.append(c.item_count))

    cart.add(SOAP)
    cart.add(GEL, 2)
    cart.update_quantity(2, 1)
    cart.remove(1)
    cart.clear()
    cart.clear()  # already empty: no event
    assert seen == [1, 3, 2, 1, 0]

    unsubscribe()
    cart.add(SOAP)
    assert seen == [1, 3, 2, 1, 0]


def test_line_snapshot_from_product():
    line = CartLine.from_product({"id": "5", "name": "Odd", "price": "2.25"}, 2)
    assert line.product_id == 5
    assert line.total == Decimal("4.50")


@pytest.mark.parametrize("price", [None, "n/a", "-1", "Infinity", "NaN"])
def test_unusable_price_is_rejected(cart: CartStore, price):
    product = {"id": 9, "name": "Broken"}
    if price is not None:
        product["price"] = price
    with pytest.raises(ValueError):
        cart.add(product)
    assert cart.is_empty


def test_shipping_and_total(cart: CartStore):
    assert cart.shipping == Decimal("0")
    assert cart.total == Decimal("0")
    cart.add(GEL, 2)
    assert cart.shipping == Decimal("10.00")
    assert cart.total == Decimal("35.00")

    free = CartStore(shipping_fee=Decimal("0"))
    free.add(GEL)
    assert free.total == Decimal("12.50")


def test_to_dict(cart: CartStore):
    cart.add(SOAP, 2)
    assert cart.to_dict() == {
        "items": [
            {"product_id": 1, "name": "Neem Soap", "price": "4.99", "quantity": 2, "image_url": "/img/neem.jpg"}
        ],
        "item_count": 2,
        "subtotal": "9.98",
        "shipping": "10.00",
        "total": "19.98",
    }
