# tests/test_categories.py
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from helpers import _assert_error, _assert_status, create_category, create_product


@pytest.mark.timeout(10)
def test_create_and_list_sorted_by_name(client: TestClient):
    create_category(client, name="zeolite")
    create_category(client, name="  Aloe   Care ", description="  gels  ")
    create_category(client, name="Bamboo")

    r = client.get("/categories")
    _assert_status(r, 200)
    j = r.json()
    assert j["results"] == 3
    cats = j["data"]["categories"]
    assert [c["name"] for c in cats] == ["Aloe Care", "Bamboo", "zeolite"]
    assert cats[0]["description"] == "gels"


@pytest.mark.timeout(10)
def test_name_unique_case_insensitive(client: TestClient):
    create_category(client, name="Soaps")
    r = client.post("/categories", json={"name": "sOaPs"})
    _assert_error(r, 409, "Category name must be unique (case-insensitive).")


@pytest.mark.timeout(10)
def test_get_update_delete(client: TestClient):
    cat = create_category(client, name="Old", description="d")

    r = client.get(f"/categories/{cat['id']}")
    _assert_status(r, 200)
    assert r.json()["data"]["category"]["name"] == "Old"

    r = client.patch(f"/categories/{cat['id']}", json={"name": "New", "description": None})
    _assert_status(r, 200)
    u = r.json()["data"]["category"]
    assert u["name"] == "New"
    assert u["description"] is None

    _assert_error(client.patch(f"/categories/{cat['id']}", json={}), 400, "No fields to update")
    _assert_status(client.patch(f"/categories/{cat['id']}", json={"name": None}), 400)

    r = client.delete(f"/categories/{cat['id']}")
    _assert_status(r, 200)
    assert r.json()["message"] == "Category deleted successfully"
    _assert_error(client.get(f"/categories/{cat['id']}"), 404, "Category not found")


@pytest.mark.timeout(10)
def test_rename_onto_existing_name_conflicts(client: TestClient):
    create_category(client, name="Taken")
    other = create_category(client, name="Free")
    _assert_status(client.patch(f"/categories/{other['id']}", json={"name": "TAKEN"}), 409)
    # renaming to itself with another case is allowed
    _assert_status(client.patch(f"/categories/{other['id']}", json={"name": "FREE"}), 200)


@pytest.mark.timeout(10)
def test_delete_refused_while_products_exist(client: TestClient):
    cat = create_category(client)
    create_product(client, cat["id"])
    j = _assert_error(client.delete(f"/categories/{cat['id']}"), 400)
    assert "1 product" in j["message"], j
    _assert_status(client.get(f"/categories/{cat['id']}"), 200)
