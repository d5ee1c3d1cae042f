# tests/test_reviews.py
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from helpers import _assert_error, _assert_status, create_category, create_product


@pytest.fixture
def product(client: TestClient):
    cat = create_category(client)
    return create_product(client, cat["id"])


@pytest.mark.timeout(10)
def test_create_and_list_newest_first(client: TestClient, product):
    url = f"/reviews/product/{product['id']}"
    r = client.post(url, json={"user_id": 7, "rating": 4, "content": "  Nice lather  "})
    _assert_status(r, 201)
    first = r.json()["data"]["review"]
    assert first["title"] == "Review"
    assert first["content"] == "Nice lather"
    assert first["product_id"] == product["id"]

    second = client.post(url, json={"user_id": 8, "rating": 5, "title": "Love it", "content": "Buying again"}).json()

    j = client.get(url).json()
    assert j["status"] == "success"
    assert j["results"] == 2
    assert [rv["id"] for rv in j["data"]["reviews"]] == [second["data"]["review"]["id"], first["id"]]


@pytest.mark.timeout(10)
@pytest.mark.parametrize("rating", [0, 6])
def test_rating_out_of_range(client: TestClient, product, rating):
    r = client.post(f"/reviews/product/{product['id']}", json={"user_id": 1, "rating": rating, "content": "x"})
    j = _assert_error(r, 400)
    assert "rating" in j["message"], j


@pytest.mark.timeout(10)
def test_reviews_of_missing_product(client: TestClient):
    _assert_error(client.get("/reviews/product/999"), 404, "Product not found")
    _assert_error(
        client.post("/reviews/product/999", json={"user_id": 1, "rating": 3, "content": "x"}),
        404,
        "Product not found",
    )


@pytest.mark.timeout(10)
def test_delete_review(client: TestClient, product):
    rv = client.post(f"/reviews/product/{product['id']}", json={"user_id": 1, "rating": 2, "content": "meh"}).json()
    rid = rv["data"]["review"]["id"]

    _assert_status(client.delete(f"/reviews/{rid}"), 200)
    assert client.get(f"/reviews/product/{product['id']}").json()["results"] == 0
    _assert_error(client.delete(f"/reviews/{rid}"), 404, "Review not found")
