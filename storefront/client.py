# storefront/client.py
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

DEFAULT_BASE_URL = os.getenv("STOREFRONT_API_URL", "http://127.0.0.1:8000")
DEFAULT_TIMEOUT = float(os.getenv("STOREFRONT_API_TIMEOUT_S", "10"))
RETRY_ATTEMPTS = int(os.getenv("STOREFRONT_API_RETRIES", "3"))

logger = logging.getLogger("storefront.client")


class StorefrontAPIError(Exception):
    """Non-2xx answer from the API, carrying the envelope message."""

    def __init__(self, message: str, status_code: int = 0, payload: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"


def _raise_for_envelope(resp: httpx.Response) -> Dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if resp.is_success:
        return body
    message = body.get("message") if isinstance(body, dict) else None
    raise StorefrontAPIError(message or resp.reason_phrase or "Request failed", resp.status_code, body)


# Idempotent reads are retried on transport failures only; API errors are final.
_retry_reads = retry(
    reraise=True,
    stop=stop_after_attempt(RETRY_ATTEMPTS),
    wait=wait_exponential(multiplier=0.2, max=2.0) + wait_random(0, 0.3),
    retry=retry_if_exception_type(httpx.TransportError),
    before_sleep=before_sleep_log(logger, logging.WARNING),
)


class StorefrontClient:
    """
    Thin synchronous client for the storefront REST API.

    Every method returns the decoded success envelope
    (`{"status": "success", ..., "data": {...}}`).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        admin_key: Optional[str] = None,
        user_id: Optional[int] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        if admin_key:
            headers["X-Admin-Key"] = admin_key
        if user_id is not None:
            headers["X-User-ID"] = str(user_id)
        self._http = httpx.Client(base_url=base_url, headers=headers, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "StorefrontClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # --- transport ---

    @_retry_reads
    def _get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        clean = {k: v for k, v in (params or {}).items() if v is not None}
        return _raise_for_envelope(self._http.get(path, params=clean))

    def _send(self, method: str, path: str, json: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return _raise_for_envelope(self._http.request(method, path, json=json))

    # --- catalog ---

    def list_products(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return self._get("/products", params)

    def search_products(self, q: str, *, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        return self._get("/products/search", {"q": q, "page": page, "limit": limit})

    def products_by_category(self, category_id: int, *, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        return self._get(f"/products/category/{category_id}", {"page": page, "limit": limit})

    def get_product(self, product_id: int) -> Dict[str, Any]:
        return self._get(f"/products/{product_id}")

    def related_products(self, product_id: int, *, limit: int = 4) -> Dict[str, Any]:
        return self._get(f"/products/{product_id}/related", {"limit": limit})

    def list_categories(self) -> Dict[str, Any]:
        return self._get("/categories")

    def list_reviews(self, product_id: int) -> Dict[str, Any]:
        return self._get(f"/reviews/product/{product_id}")

    # --- writes ---

    def create_product(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._send("POST", "/products", payload)

    def update_product(self, product_id: int, patch: Mapping[str, Any]) -> Dict[str, Any]:
        return self._send("PATCH", f"/products/{product_id}", patch)

    def delete_product(self, product_id: int) -> Dict[str, Any]:
        return self._send("DELETE", f"/products/{product_id}")

    def create_review(self, product_id: int, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._send("POST", f"/reviews/product/{product_id}", payload)


__all__ = ["StorefrontClient", "StorefrontAPIError"]
