# storefront/routers/deps.py
from __future__ import annotations

import hmac
from typing import Annotated, Optional

from fastapi import Header, status

from storefront.core.errors import AppError
from storefront.core.settings import settings


def require_admin(
    x_admin_key: Annotated[Optional[str], Header(description="Admin key (required when ADMIN_KEY is set)")] = None,
) -> None:
    """
    Guard for mutating catalog routes.
    Open when ADMIN_KEY is not configured (dev/test), otherwise the header must match.
    """
    expected = settings.ADMIN_KEY
    if not expected:
        return
    if not x_admin_key or not hmac.compare_digest(x_admin_key, expected):
        raise AppError("Missing or invalid X-Admin-Key", status.HTTP_401_UNAUTHORIZED)


def acting_user_id(
    x_user_id: Annotated[Optional[int], Header(description="Id of the acting user, recorded as created_by")] = None,
) -> Optional[int]:
    return x_user_id


__all__ = ("require_admin", "acting_user_id")
