"""Root conftest — shared test configuration and storage fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - storage wraps the test engine in the real DatabaseSessionManager, so error
      mapping and rollback behave as in production
    - make_product inserts catalog rows directly, bypassing the services under test
"""

import os
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

# Ensure tests never reach a real database through get_settings()
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("LOG_FORMAT", "text")

from storefront.db.base import Base  # noqa: E402
from storefront.infrastructure.database import DatabaseSessionManager  # noqa: E402
import storefront.models  # noqa: E402,F401
from storefront.models.product import Product  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def storage(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def make_product(test_session_factory):
    """Factory: insert a product and return its id."""
    counter = {"n": 0}

    async def _make(
        price: str = "10.00", stock: int = 5, name: str | None = None,
    ) -> int:
        counter["n"] += 1
        async with test_session_factory() as db:
            product = Product(
                name=name or f"Product {counter['n']}",
                price=Decimal(price), stock=stock,
            )
            db.add(product)
            await db.commit()
            return product.id

    return _make


@pytest.fixture
def read_stock(test_session_factory):
    """Read a product's current stock through a fresh session."""

    async def _read(product_id: int) -> int:
        async with test_session_factory() as db:
            product = await db.get(Product, product_id)
            return product.stock

    return _read
