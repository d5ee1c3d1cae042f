# storefront/database.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from dotenv import load_dotenv
from sqlalchemy import MetaData, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

# Load .env on the host; inside containers the values come from the environment.
load_dotenv()

from storefront.core.settings import settings  # noqa: E402

logger = logging.getLogger(__name__)


def _mask_url(url: str) -> str:
    if "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    if "@" not in rest or ":" not in rest.split("@", 1)[0]:
        return url
    creds, tail = rest.split("@", 1)
    user = creds.split(":", 1)[0]
    return f"{scheme}://{user}:***@{tail}"


DATABASE_URL = (settings.DATABASE_URL or "").strip()
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is empty. Set a valid value.")

_IN_MEMORY_SQLITE = {"sqlite://", "sqlite:///:memory:", "sqlite+pysqlite:///:memory:"}

# Naming convention so that alembic autogenerate produces stable names
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)
Base = declarative_base(metadata=metadata)


def _build_engine_kwargs(url: str) -> dict:
    kwargs: dict = {"echo": settings.DB_ECHO, "pool_pre_ping": True}

    if url.startswith("sqlite"):
        # The sqlite driver is single-threaded; FastAPI runs sync routes in a threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in _IN_MEMORY_SQLITE:
            # every connection must see the same in-memory database
            kwargs["poolclass"] = StaticPool
        else:
            kwargs["poolclass"] = NullPool
    else:
        kwargs.update(
            {
                "pool_size": settings.DB_POOL_SIZE,
                "max_overflow": settings.DB_MAX_OVERFLOW,
                "pool_recycle": settings.DB_POOL_RECYCLE,
                "pool_timeout": settings.DB_POOL_TIMEOUT,
                "pool_use_lifo": True,
            }
        )
    return kwargs


def build_engine(url: str = DATABASE_URL) -> Engine:
    logger.debug("Creating engine for %s", _mask_url(url))
    return create_engine(url, **_build_engine_kwargs(url))


engine: Engine = build_engine()

# expire_on_commit=False keeps objects usable after commit (no immediate reload)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency: one session per request, always closed.
    Rolls back if the request handler raises.
    """
    db: Session = SessionLocal()
    try:
        yield db
        # committing is the job of the crud layer
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Transactional scope for scripts and non-FastAPI callers.
        with session_scope() as db:
            db.add(obj)
    """
    db: Session = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def ping(db: Session) -> bool:
    return db.execute(text("SELECT 1")).scalar_one() == 1


def init_db_if_requested(force: bool = False) -> None:
    """
    Create the tables from the models when SQLALCHEMY_CREATE_ALL=1.
    Handy for demos and tests; production goes through alembic.
    """
    if force or settings.SQLALCHEMY_CREATE_ALL:
        from storefront import models  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info("Tables created from models (%s)", _mask_url(DATABASE_URL))


__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "build_engine",
    "get_db",
    "ping",
    "session_scope",
    "init_db_if_requested",
]
