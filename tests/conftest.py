# tests/conftest.py
from __future__ import annotations

import os

# In-memory database shared by every connection (StaticPool); must be set before
# the storefront package reads its settings.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SQLALCHEMY_CREATE_ALL"] = "0"
os.environ["ADMIN_KEY"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from storefront import models  # noqa: E402,F401
from storefront.database import Base, SessionLocal, engine  # noqa: E402
from storefront.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def _schema():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as c:
        yield c
