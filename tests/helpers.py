# tests/helpers.py
from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

import httpx


# --- Utilitare ----------------------------------------------------------------
def _dump_response(r: httpx.Response) -> str:
    """Short diagnostic for assertion messages."""
    try:
        j = r.json()
    except ValueError:
        j = None
    snippet = (r.text or "")[:400].replace("\n", "\\n")
    return f"status={r.status_code} {r.request.method} {r.request.url} json={j!r} text='{snippet}...'"


def _assert_status(r: httpx.Response, expected: int | tuple[int, ...]):
    if isinstance(expected, int):
        ok = r.status_code == expected
        exp_str = str(expected)
    else:
        ok = r.status_code in expected
        exp_str = "|".join(map(str, expected))
    assert ok, f"expected {exp_str} but got: {_dump_response(r)}"


def _assert_error(r: httpx.Response, expected: int, message: Optional[str] = None) -> Dict[str, Any]:
    _assert_status(r, expected)
    j = r.json()
    assert j["status"] == "error", j
    if message is not None:
        assert j["message"] == message, j
    return j


def create_category(c: httpx.Client, name: Optional[str] = None, description: Optional[str] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"name": name or f"Cat_{uuid.uuid4().hex[:8]}"}
    if description is not None:
        payload["description"] = description
    r = c.post("/categories", json=payload)
    _assert_status(r, 201)
    j = r.json()["data"]["category"]
    assert isinstance(j["id"], int), j
    return j


def create_product(
    c: httpx.Client,
    category_id: int,
    name: Optional[str] = None,
    price: str = "10.50",
    **extra: Any,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": name or f"Prod_{uuid.uuid4().hex[:8]}",
        "price": price,
        "category_id": category_id,
    }
    payload.update(extra)
    r = c.post("/products", json=payload)
    _assert_status(r, 201)
    j = r.json()["data"]["product"]
    assert isinstance(j["id"], int), j
    return j
