"""Alembic environment — migrations for products, orders and order_items.

The database URL comes from storefront Settings (DATABASE_URL or .env), so
migrations always target the same database as the running service.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from storefront.config import get_settings
from storefront.db.base import Base
import storefront.models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _configure(**kwargs) -> None:
    context.configure(target_metadata=Base.metadata, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate(url: str) -> None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(lambda sync_conn: _configure(connection=sync_conn))
    await engine.dispose()


url = get_settings().database_url
if context.is_offline_mode():
    _configure(url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})
else:
    asyncio.run(_migrate(url))
