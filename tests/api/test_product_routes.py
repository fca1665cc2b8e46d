"""Product Routes — public catalog reads, admin-only writes, query validation."""

import pytest

from tests.api.callers import ADMIN, OWNER

WIDGET = {"name": "Widget", "description": "Blue", "price": "10.00", "stock": 5}


async def test_admin_creates_product(client):
    res = await client.post("/api/v1/products", json=WIDGET, headers=ADMIN)

    assert res.status_code == 201
    body = res.json()
    assert body["name"] == "Widget"
    assert body["price"] == "10.00"
    assert body["stock"] == 5


async def test_non_admin_cannot_create(client):
    res = await client.post("/api/v1/products", json=WIDGET, headers=OWNER)
    assert res.status_code == 403


async def test_anonymous_cannot_create(client):
    res = await client.post("/api/v1/products", json=WIDGET)
    assert res.status_code == 401


async def test_duplicate_name_is_409(client):
    await client.post("/api/v1/products", json=WIDGET, headers=ADMIN)
    res = await client.post("/api/v1/products", json=WIDGET, headers=ADMIN)
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_PRODUCT"


@pytest.mark.parametrize("patch", [
    {"price": "0"}, {"price": "-5"}, {"stock": -1}, {"name": "   "},
])
async def test_invalid_product_is_400(client, patch):
    res = await client.post(
        "/api/v1/products", json={**WIDGET, **patch}, headers=ADMIN,
    )
    assert res.status_code == 400


async def test_update_product(client, make_product):
    product_id = await make_product()

    res = await client.put(
        f"/api/v1/products/{product_id}",
        json={**WIDGET, "stock": 42}, headers=ADMIN,
    )

    assert res.status_code == 200
    assert res.json()["stock"] == 42
    assert res.json()["updated_at"] is not None


async def test_update_missing_product_is_404(client):
    res = await client.put("/api/v1/products/4242", json=WIDGET, headers=ADMIN)
    assert res.status_code == 404


async def test_get_product_is_public(client, make_product):
    product_id = await make_product(price="3.30")
    res = await client.get(f"/api/v1/products/{product_id}")
    assert res.status_code == 200
    assert res.json()["price"] == "3.30"


async def test_get_missing_product_is_404(client):
    res = await client.get("/api/v1/products/4242")
    assert res.status_code == 404


async def test_list_sorted_and_filtered(client, make_product):
    await make_product(price="1.00", name="cheap")
    await make_product(price="5.00", name="mid")
    await make_product(price="9.00", name="dear")

    res = await client.get(
        "/api/v1/products",
        params={"sort": "price", "direction": "desc", "min_price": "2"},
    )

    assert res.status_code == 200
    assert [p["name"] for p in res.json()["products"]] == ["dear", "mid"]


async def test_list_rejects_unknown_sort_field(client):
    res = await client.get("/api/v1/products", params={"sort": "password"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_admin_deletes_product(client, make_product):
    product_id = await make_product()

    res = await client.delete(f"/api/v1/products/{product_id}", headers=ADMIN)

    assert res.status_code == 200
    assert res.json() == {
        "message": "Product deleted successfully", "product_id": product_id,
    }
    gone = await client.get(f"/api/v1/products/{product_id}")
    assert gone.status_code == 404


async def test_non_admin_cannot_delete(client, make_product, read_stock):
    product_id = await make_product(stock=3)
    res = await client.delete(f"/api/v1/products/{product_id}", headers=OWNER)
    assert res.status_code == 403
    assert await read_stock(product_id) == 3


async def test_delete_missing_product_is_404(client):
    res = await client.delete("/api/v1/products/4242", headers=ADMIN)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "PRODUCT_NOT_FOUND"


async def test_orders_keep_snapshot_after_product_deleted(client, make_product):
    product_id = await make_product(price="4.20", stock=5)
    placed = await client.post(
        "/api/v1/orders",
        json={"items": [{"product_id": product_id, "quantity": 3}]},
        headers=OWNER,
    )
    order_id = placed.json()["order_id"]

    await client.delete(f"/api/v1/products/{product_id}", headers=ADMIN)
    res = await client.get(f"/api/v1/orders/{order_id}", headers=OWNER)

    assert res.status_code == 200
    assert res.json()["order"]["total_amount"] == "12.60"
    [item] = res.json()["items"]
    assert (item["product_id"], item["price"]) == (product_id, "4.20")


async def test_product_id_beyond_column_range_is_400(client):
    res = await client.get(f"/api/v1/products/{2**63}")
    assert res.status_code == 400


async def test_stock_beyond_column_range_is_400(client):
    res = await client.post(
        "/api/v1/products", json={**WIDGET, "stock": 2**31}, headers=ADMIN,
    )
    assert res.status_code == 400
