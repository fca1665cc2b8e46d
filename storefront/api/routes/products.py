"""Product Routes — public catalog reads and admin-only writes (create, update, delete).

Invariants:
    - sort/direction accepted only from the ProductSortField/SortDirection enums
    - min_price/max_price reach SQL as bound parameters
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Path, Query, status

from storefront.api.deps import get_product_catalog, require_admin
from storefront.core.domain_types import (
    MAX_INT32, Caller, ProductId, ProductSortField, SortDirection,
)
from storefront.schemas.product import (
    ProductDeleted, ProductIn, ProductList, ProductOut,
)
from storefront.services.product_catalog import ProductCatalog, ProductDraft

router = APIRouter(prefix="/api/v1/products", tags=["products"])


def _draft(body: ProductIn) -> ProductDraft:
    return ProductDraft(
        name=body.name, description=body.description,
        price=body.price, stock=body.stock,
    )


@router.get("", response_model=ProductList)
async def list_products(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0, le=MAX_INT32),
    sort: ProductSortField = Query(ProductSortField.CREATED_AT),
    direction: SortDirection = Query(SortDirection.DESC),
    min_price: Decimal | None = Query(None, ge=0),
    max_price: Decimal | None = Query(None, ge=0),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    products = await catalog.search(
        limit=limit, offset=offset, sort=sort, direction=direction,
        min_price=min_price, max_price=max_price,
    )
    return ProductList(
        products=[ProductOut.model_validate(p) for p in products],
        pagination={"limit": limit, "offset": offset},
    )


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(
    product_id: int = Path(ge=1, le=MAX_INT32),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    product = await catalog.get(ProductId(product_id))
    return ProductOut.model_validate(product)


@router.post(
    "", response_model=ProductOut, status_code=status.HTTP_201_CREATED,
)
async def create_product(
    body: ProductIn,
    _: Caller = Depends(require_admin),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    product = await catalog.create(_draft(body))
    return ProductOut.model_validate(product)


@router.put("/{product_id}", response_model=ProductOut)
async def update_product(
    body: ProductIn,
    product_id: int = Path(ge=1, le=MAX_INT32),
    _: Caller = Depends(require_admin),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    product = await catalog.update(ProductId(product_id), _draft(body))
    return ProductOut.model_validate(product)


@router.delete("/{product_id}", response_model=ProductDeleted)
async def delete_product(
    product_id: int = Path(ge=1, le=MAX_INT32),
    _: Caller = Depends(require_admin),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    """Remove a product; placed orders keep their item snapshots."""
    await catalog.delete(ProductId(product_id))
    return ProductDeleted(product_id=product_id)
