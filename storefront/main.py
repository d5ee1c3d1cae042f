# storefront/main.py
from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlalchemy.orm import Session

from storefront.core.errors import AppError, register_exception_handlers
from storefront.core.logging import setup_logging
from storefront.core.settings import Settings, settings
from storefront.database import SessionLocal, get_db, init_db_if_requested, ping
from storefront.routers.category import router as categories_router
from storefront.routers.product import router as products_router
from storefront.routers.review import router as reviews_router

logger = logging.getLogger("storefront")

APP_STARTED_MONO = time.monotonic()
APP_STARTED_TS = int(time.time())

tags_metadata = [
    {"name": "health", "description": "Liveness/Readiness checks"},
    {"name": "products", "description": "Catalog listing, search & admin CRUD"},
    {"name": "categories", "description": "Category CRUD"},
    {"name": "reviews", "description": "Product reviews"},
]


def _get_req_id_from_headers(request: Request) -> str:
    # Prefer X-Request-ID, then X-Correlation-ID; generate one when both are missing.
    return (
        request.headers.get("x-request-id")
        or request.headers.get("x-correlation-id")
        or uuid.uuid4().hex[:12]
    )


async def request_context_mw(request: Request, call_next):
    """
    - generate/propagate X-Request-ID
    - security headers
    - Server-Timing / X-Process-Time
    """
    req_id = _get_req_id_from_headers(request)
    request.state.request_id = req_id

    start = time.perf_counter()
    response: Response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000

    response.headers.setdefault("X-Request-ID", req_id)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    response.headers.setdefault("X-App-Version", settings.APP_VERSION)
    response.headers.setdefault("Server-Timing", f"app;dur={duration_ms:.1f}")
    response.headers.setdefault("X-Process-Time", f"{duration_ms:.1f}ms")
    logger.debug("%s %s -> %s (%.1fms) rid=%s", request.method, request.url.path, response.status_code, duration_ms, req_id)
    return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: optional create_all, then a DB sanity check
    try:
        init_db_if_requested()
        with SessionLocal() as db:
            ping(db)
        logger.info("DB startup check OK")
    except Exception:
        logger.exception("DB startup check FAILED")

    yield

    logger.info("Shutting down %s", settings.APP_TITLE)


def create_app(cfg: Settings = settings) -> FastAPI:
    setup_logging(cfg.LOG_LEVEL)

    app = FastAPI(
        title=cfg.APP_TITLE,
        version=cfg.APP_VERSION,
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )

    app.middleware("http")(request_context_mw)
    app.add_middleware(GZipMiddleware, minimum_size=1024)

    origins = cfg.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "Server-Timing", "X-Process-Time", "X-App-Version"],
        )

    register_exception_handlers(app)

    # --- Routes: health ---
    @app.get("/", tags=["health"])
    def root():
        return {"name": cfg.APP_TITLE, "version": cfg.APP_VERSION}

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok"}

    @app.get("/health/uptime", tags=["health"])
    def health_uptime():
        return {"uptime_seconds": round(time.monotonic() - APP_STARTED_MONO, 3), "started_at": APP_STARTED_TS}

    @app.get("/health/db", tags=["health"])
    def health_db(db: Session = Depends(get_db)):
        try:
            ping(db)
        except Exception:
            logger.exception("DB health check failed")
            raise AppError("DB not ready", status.HTTP_503_SERVICE_UNAVAILABLE)
        return {"status": "ok", "db": "up", "dialect": db.get_bind().dialect.name}

    app.include_router(products_router)
    app.include_router(categories_router)
    app.include_router(reviews_router)
    return app


app = create_app()
