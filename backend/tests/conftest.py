"""
Product API — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures (function-scoped, created fresh for each test):
    ├── mock_db_session: AsyncMock session for service unit tests (no DB)
    ├── sample_product_data: field values matching the Product model
    ├── database: Database handle on a temporary SQLite file, connected
    └── test_client: HTTPX AsyncClient talking to an app bound to `database`
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_products.db"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from product_api.database import Database
from product_api.main import create_app


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.get.return_value = product
        result = await product_service.find_by_id(mock_db_session, str(product.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_product_data():
    now = datetime.now(timezone.utc)
    return {
        "id": uuid4(),
        "name": "Mechanical Keyboard",
        "price": 89.5,
        "description": "Brown switches",
        "created_at": now,
        "updated_at": now,
    }


@pytest_asyncio.fixture
async def database(tmp_path):
    """A connected Database on a throwaway SQLite file (tables created)."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'products.db'}")
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    ASGITransport does not run the lifespan, so the `database` fixture opens
    the connection itself. raise_app_exceptions=False lets the 500 fallback
    response reach the test instead of the re-raised exception.
    """
    app = create_app(database=database)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
