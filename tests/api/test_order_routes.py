"""Order Routes — HTTP status mapping and payload shapes for the order endpoints.

Invariants:
    - Placement -> 201 with order_id and total_amount as a 2-decimal string
    - Missing identity -> 401; wrong owner / non-admin approve -> 403
    - Empty items / bad quantities -> 400; insufficient stock or invalid transition -> 409
    - Canceled orders read back as 404
"""

import pytest

from tests.api.callers import ADMIN, OWNER, STRANGER


async def _place(client, product_id: int, quantity: int = 1, headers=OWNER):
    return await client.post(
        "/api/v1/orders",
        json={"items": [{"product_id": product_id, "quantity": quantity}]},
        headers=headers,
    )


async def test_place_order_returns_201(client, make_product, read_stock):
    a = await make_product(price="10.00", stock=5)

    res = await _place(client, a, 3)

    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Order placed successfully"
    assert body["total_amount"] == "30.00"
    assert isinstance(body["order_id"], int)
    assert await read_stock(a) == 2


async def test_place_order_requires_identity(client, make_product):
    a = await make_product()
    res = await client.post(
        "/api/v1/orders", json={"items": [{"product_id": a, "quantity": 1}]},
    )
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


@pytest.mark.parametrize("user_id", ["", "abc", "0", "-4"])
async def test_malformed_identity_is_401(client, make_product, user_id):
    a = await make_product()
    res = await _place(client, a, headers={"X-User-Id": user_id})
    assert res.status_code == 401


async def test_empty_items_is_400(client):
    res = await client.post("/api/v1/orders", json={"items": []}, headers=OWNER)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "EMPTY_ITEM_LIST"


async def test_zero_quantity_is_400(client, make_product):
    a = await make_product()
    res = await _place(client, a, 0)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_insufficient_stock_is_409(client, make_product, read_stock):
    a = await make_product(stock=5)

    res = await _place(client, a, 10)

    assert res.status_code == 409
    error = res.json()["error"]
    assert error["code"] == "INSUFFICIENT_STOCK"
    assert error["context"]["product_id"] == a
    assert error["retryable"] is False
    assert await read_stock(a) == 5


async def test_unknown_product_is_404(client):
    res = await _place(client, 4242)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "PRODUCT_NOT_FOUND"


async def test_get_order_with_items(client, make_product):
    a = await make_product(price="2.50", stock=5)
    order_id = (await _place(client, a, 2)).json()["order_id"]

    res = await client.get(f"/api/v1/orders/{order_id}", headers=OWNER)

    assert res.status_code == 200
    body = res.json()
    assert body["order"]["status"] == "pending"
    assert body["order"]["total_amount"] == "5.00"
    [item] = body["items"]
    assert (item["product_id"], item["quantity"], item["price"]) == (a, 2, "2.50")


async def test_get_foreign_order_is_403(client, make_product):
    a = await make_product()
    order_id = (await _place(client, a)).json()["order_id"]

    res = await client.get(f"/api/v1/orders/{order_id}", headers=STRANGER)

    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"


async def test_admin_reads_foreign_order(client, make_product):
    a = await make_product()
    order_id = (await _place(client, a)).json()["order_id"]
    res = await client.get(f"/api/v1/orders/{order_id}", headers=ADMIN)
    assert res.status_code == 200


async def test_list_orders_paginated(client, make_product):
    a = await make_product(stock=10)
    for _ in range(3):
        await _place(client, a)
    await _place(client, a, headers=STRANGER)

    res = await client.get("/api/v1/orders?limit=2&offset=0", headers=OWNER)

    assert res.status_code == 200
    body = res.json()
    assert len(body["orders"]) == 2
    assert body["pagination"] == {"limit": 2, "offset": 0}
    assert all(o["user_id"] == 1 for o in body["orders"])


async def test_list_orders_rejects_bad_limit(client):
    res = await client.get("/api/v1/orders?limit=0", headers=OWNER)
    assert res.status_code == 400


async def test_cancel_order_restores_stock(client, make_product, read_stock):
    a = await make_product(stock=5)
    order_id = (await _place(client, a, 3)).json()["order_id"]

    res = await client.delete(f"/api/v1/orders/{order_id}", headers=OWNER)

    assert res.status_code == 200
    assert res.json() == {
        "message": "Order canceled successfully",
        "order_id": order_id,
        "status": "canceled",
    }
    assert await read_stock(a) == 5

    gone = await client.get(f"/api/v1/orders/{order_id}", headers=OWNER)
    assert gone.status_code == 404


async def test_cancel_foreign_order_is_403(client, make_product):
    a = await make_product()
    order_id = (await _place(client, a)).json()["order_id"]
    res = await client.delete(f"/api/v1/orders/{order_id}", headers=STRANGER)
    assert res.status_code == 403


async def test_cancel_missing_order_is_404(client):
    res = await client.delete("/api/v1/orders/4242", headers=OWNER)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "ORDER_NOT_FOUND"


async def test_approve_order(client, make_product):
    a = await make_product()
    order_id = (await _place(client, a)).json()["order_id"]

    res = await client.patch(f"/api/v1/orders/{order_id}/approve", headers=ADMIN)

    assert res.status_code == 200
    assert res.json()["status"] == "approved"
    assert res.json()["message"] == "Order approved successfully"


async def test_approve_by_non_admin_is_403(client, make_product):
    a = await make_product()
    order_id = (await _place(client, a)).json()["order_id"]
    res = await client.patch(f"/api/v1/orders/{order_id}/approve", headers=OWNER)
    assert res.status_code == 403


async def test_approve_canceled_order_is_409(client, make_product):
    a = await make_product()
    order_id = (await _place(client, a)).json()["order_id"]
    await client.delete(f"/api/v1/orders/{order_id}", headers=OWNER)

    res = await client.patch(f"/api/v1/orders/{order_id}/approve", headers=ADMIN)

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "INVALID_TRANSITION"


async def test_product_id_beyond_column_range_is_400(client):
    res = await client.post(
        "/api/v1/orders",
        json={"items": [{"product_id": 2**63, "quantity": 1}]},
        headers=OWNER,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_quantity_above_line_cap_is_400(client, make_product):
    a = await make_product()
    res = await _place(client, a, 10**12)
    assert res.status_code == 400


@pytest.mark.parametrize("method,suffix", [
    ("GET", ""), ("DELETE", ""), ("PATCH", "/approve"),
])
async def test_order_id_beyond_column_range_is_400(client, method, suffix):
    res = await client.request(
        method, f"/api/v1/orders/{2**63}{suffix}", headers=ADMIN,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_offset_beyond_column_range_is_400(client):
    res = await client.get(f"/api/v1/orders?offset={2**63}", headers=OWNER)
    assert res.status_code == 400


@pytest.mark.parametrize("user_id", [
    b"\xb2", "2147483648", "99999999999999999999",
])
async def test_non_ascii_or_out_of_range_identity_is_401(client, make_product, user_id):
    a = await make_product()
    res = await _place(client, a, headers={"X-User-Id": user_id})
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"
