"""API test fixtures — FastAPI test client over the in-memory test storage.

Invariants:
    - get_storage is overridden, so the lifespan (and its real engine) never runs
"""

import pytest
from httpx import ASGITransport, AsyncClient

from storefront.infrastructure.database import get_storage
from storefront.main import app


@pytest.fixture
async def client(storage):
    """FastAPI test client with the storage dependency overridden."""
    app.dependency_overrides[get_storage] = lambda: storage

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
