from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    APP_TITLE: str = Field("storefront-api")
    APP_VERSION: str = Field("0.1.0")
    APP_ENV: str = Field("dev")
    LOG_LEVEL: str = Field("INFO")
    CORS_ORIGINS: str = ""

    # Mutating catalog routes require X-Admin-Key when this is set
    ADMIN_KEY: Optional[str] = None

    # DB
    DATABASE_URL: str = Field("sqlite:///./storefront.db", description="postgresql+psycopg://user:<PASS>@db:5432/storefront")
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 1800
    DB_POOL_TIMEOUT: int = 30
    SQLALCHEMY_CREATE_ALL: bool = False

    # Catalog defaults
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    MAX_PAGE: int = 1_000_000
    RELATED_LIMIT: int = 4
    RELATED_POOL: int = 20
    DEFAULT_BRAND: str = "GreenMagic"
    SKU_PREFIX: str = "GM"
    SHORT_DESCRIPTION_LENGTH: int = 150
    DEFAULT_STOCK_ALERT: int = 5
    DEFAULT_SHIPPING_TIME: str = "3-5 business days"
    DEFAULT_ECO_DETAILS: str = "Eco-friendly packaging"

    # Shop cart: flat shipping charged on any non-empty cart
    CART_SHIPPING_FEE: Decimal = Decimal("10.00")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
