"""Settings — environment parsing and database URL normalisation."""

from storefront.config import Settings


def test_plain_postgres_url_gets_asyncpg_driver(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@host:5432/shop")
    assert Settings().database_url == "postgresql+asyncpg://u:p@host:5432/shop"


def test_other_urls_untouched(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///local.db")
    assert Settings().database_url == "sqlite+aiosqlite:///local.db"


def test_order_cap_from_environment(monkeypatch):
    monkeypatch.setenv("ORDER_MAX_ITEMS", "5")
    assert Settings().order_max_items == 5
