"""Product Catalog — product-management writes and listing over the Inventory Store.

Invariants:
    - Every write passes validate_product_fields (price > 0, stock >= 0) before storage
    - Product names are unique (DuplicateProductError)
    - Updates and deletes lock the product row so they serialize with concurrent placements
    - Deleting a product leaves existing order items untouched: they keep product_id
      and their snapshot price, and nothing references products by foreign key
    - Listing sorts only by the enumerated ProductSortField set; filters are bound
      parameters, never interpolated into SQL

Design Decisions:
    - Explicit dict from sort field to column: every sortable column visible in one place
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import (
    ProductId, ProductSortField, SortDirection, is_storable_id,
)
from storefront.core.errors import DuplicateProductError, ProductNotFoundError
from storefront.core.inventory import validate_product_fields
from storefront.core.repository_protocols import StorageHandle
from storefront.models.product import Product

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    ProductSortField.CREATED_AT: Product.created_at,
    ProductSortField.NAME: Product.name,
    ProductSortField.PRICE: Product.price,
    ProductSortField.STOCK: Product.stock,
}


@dataclass(frozen=True)
class ProductDraft:
    """Caller-supplied product fields for create/update."""
    name: str
    price: Decimal
    stock: int
    description: str | None = None


class ProductCatalog:
    """Product CRUD over the Inventory Store."""

    def __init__(self, storage: StorageHandle):
        self._storage = storage

    async def create(self, draft: ProductDraft) -> Product:
        validate_product_fields(draft.price, draft.stock)
        async with self._storage.session() as db:
            await self._ensure_name_free(db, draft.name)
            product = Product(
                name=draft.name, description=draft.description,
                price=draft.price, stock=draft.stock,
            )
            db.add(product)
            await db.commit()
            await db.refresh(product)

        logger.info(
            f"Product {product.id} created with stock {product.stock}",
            extra={"product_id": product.id},
        )
        return product

    async def update(self, product_id: ProductId, draft: ProductDraft) -> Product:
        validate_product_fields(draft.price, draft.stock)
        async with self._storage.session() as db:
            product = await self._lock_product(db, product_id)
            if draft.name != product.name:
                await self._ensure_name_free(db, draft.name)

            product.name = draft.name
            product.description = draft.description
            product.price = draft.price
            product.stock = draft.stock
            product.updated_at = datetime.now(timezone.utc)
            await db.commit()
            await db.refresh(product)

        logger.info(
            f"Product {product_id} updated",
            extra={"product_id": product_id},
        )
        return product

    async def delete(self, product_id: ProductId) -> None:
        """Remove a product. Orders that reference it keep their snapshots."""
        async with self._storage.session() as db:
            product = await self._lock_product(db, product_id)
            await db.delete(product)
            await db.commit()

        logger.info(
            f"Product {product_id} deleted",
            extra={"product_id": product_id},
        )

    async def get(self, product_id: ProductId) -> Product:
        if not is_storable_id(product_id):
            raise ProductNotFoundError(product_id)
        async with self._storage.session() as db:
            product = await db.get(Product, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def search(
        self,
        limit: int = 10,
        offset: int = 0,
        sort: ProductSortField = ProductSortField.CREATED_AT,
        direction: SortDirection = SortDirection.DESC,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> list[Product]:
        column = SORT_COLUMNS[sort]
        ordering = column.asc() if direction == SortDirection.ASC else column.desc()
        query = select(Product).order_by(ordering, Product.id.asc())
        if min_price is not None:
            query = query.where(Product.price >= min_price)
        if max_price is not None:
            query = query.where(Product.price <= max_price)
        query = query.limit(limit).offset(offset)

        async with self._storage.session() as db:
            result = await db.execute(query)
            return list(result.scalars().all())

    async def _ensure_name_free(self, db: AsyncSession, name: str) -> None:
        result = await db.execute(select(Product.id).where(Product.name == name))
        if result.scalar_one_or_none() is not None:
            raise DuplicateProductError(name)

    async def _lock_product(self, db: AsyncSession, product_id: ProductId) -> Product:
        if not is_storable_id(product_id):
            raise ProductNotFoundError(product_id)
        result = await db.execute(
            select(Product)
            .where(Product.id == product_id)
            .with_for_update()
        )
        product = result.scalar_one_or_none()
        if product is None:
            raise ProductNotFoundError(product_id)
        return product
