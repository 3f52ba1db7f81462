"""Order placement and order queries through the HTTP API."""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from services.order_service.models import Order, OrderItem
from shared.config.database import AsyncSessionLocal
from shared.persistence import new_id


async def _order_count() -> int:
    async with AsyncSessionLocal() as session:
        return (await session.execute(select(func.count()).select_from(Order))).scalar_one()


@pytest.fixture()
async def shop(seed):
    refs = await seed.catalog()
    shirt = await seed.product(refs, name="Oxford Shirt", quantity=10, final_price=100.0,
                               images=["https://media.example.test/shirt-1.jpg", "https://media.example.test/shirt-2.jpg"])
    jeans = await seed.product(refs, name="Slim Jeans", quantity=3, final_price=49.5, size="32", color="black")
    address = await seed.address()
    return {"refs": refs, "shirt": shirt, "jeans": jeans, "address": address}


async def _place(client, headers, address_id, products):
    return await client.post(
        "/orders/", json={"addressId": address_id, "products": products}, headers=headers
    )


async def test_create_order_prices_lines_and_decrements_stock(client, user_headers, shop, seed):
    resp = await _place(client, user_headers, shop["address"].id, [
        {"productId": shop["shirt"].id, "quantity": 2},
        {"productId": shop["jeans"].id, "quantity": 3},
    ])

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Order placed successfully"
    order = body["data"]
    assert order["totalPrice"] == pytest.approx(2 * 100.0 + 3 * 49.5)
    assert order["status"] == "pending"
    assert order["userId"] == "user-1"
    assert [item["quantity"] for item in order["orderItems"]] == [2, 3]

    assert (await seed.get_product(shop["shirt"].id)).quantity == 8
    assert (await seed.get_product(shop["jeans"].id)).quantity == 0


async def test_insufficient_stock_leaves_no_order_and_no_stock_change(client, user_headers, shop, seed):
    resp = await _place(client, user_headers, shop["address"].id, [
        {"productId": shop["shirt"].id, "quantity": 1},
        {"productId": shop["jeans"].id, "quantity": 4},
    ])

    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Stock not available"}
    assert await _order_count() == 0
    assert (await seed.get_product(shop["shirt"].id)).quantity == 10
    assert (await seed.get_product(shop["jeans"].id)).quantity == 3


async def test_repeated_lines_share_the_same_stock(client, user_headers, shop, seed):
    resp = await _place(client, user_headers, shop["address"].id, [
        {"productId": shop["jeans"].id, "quantity": 2},
        {"productId": shop["jeans"].id, "quantity": 2},
    ])

    assert resp.status_code == 401
    assert await _order_count() == 0
    assert (await seed.get_product(shop["jeans"].id)).quantity == 3


async def test_empty_product_list_creates_zero_total_order(client, user_headers, shop):
    resp = await _place(client, user_headers, shop["address"].id, [])

    assert resp.status_code == 200
    order = resp.json()["data"]
    assert order["totalPrice"] == 0
    assert order["orderItems"] == []


async def test_missing_product_list_is_accepted(client, user_headers, shop):
    resp = await client.post("/orders/", json={"addressId": shop["address"].id}, headers=user_headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["orderItems"] == []


@pytest.mark.parametrize(
    "case, expected_status, expected_message",
    [
        ("malformed_address", 400, "address id not valid"),
        ("unknown_address", 401, "Address is not found"),
        ("malformed_product", 400, "product id is not valid"),
        ("unknown_product", 400, "Product is not available"),
    ],
)
async def test_create_order_reference_errors(client, user_headers, shop, case, expected_status, expected_message):
    address_id = shop["address"].id
    products = [{"productId": shop["shirt"].id, "quantity": 1}]
    if case == "malformed_address":
        address_id = "not-an-id"
    elif case == "unknown_address":
        address_id = new_id()
    elif case == "malformed_product":
        products = [{"productId": "12345", "quantity": 1}]
    elif case == "unknown_product":
        products = [{"productId": new_id(), "quantity": 1}]

    resp = await _place(client, user_headers, address_id, products)

    assert resp.status_code == expected_status
    assert resp.json()["success"] is False
    assert resp.json()["message"] == expected_message
    assert await _order_count() == 0


async def test_malformed_body_is_a_validation_error(client, user_headers, shop):
    resp = await _place(client, user_headers, shop["address"].id, [{"productId": shop["shirt"].id, "quantity": 0}])
    assert resp.status_code == 400
    assert resp.json()["success"] is False

    resp = await client.post("/orders/", json={"products": []}, headers=user_headers)
    assert resp.status_code == 400
    assert "addressId" in resp.json()["message"]


async def test_create_order_requires_authentication(client, shop):
    resp = await _place(client, {}, shop["address"].id, [])
    assert resp.status_code == 401
    assert resp.json()["success"] is False


async def test_get_all_orders_populates_products_and_address(client, user_headers, admin_headers, shop):
    await _place(client, user_headers, shop["address"].id, [{"productId": shop["shirt"].id, "quantity": 1}])

    resp = await client.get("/orders/", headers=admin_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    order = body["orders"][0]
    assert order["orderItems"][0]["productId"] == {
        "name": "Oxford Shirt",
        "images": ["https://media.example.test/shirt-1.jpg", "https://media.example.test/shirt-2.jpg"],
    }
    assert order["address"] == {
        "name": "Asha Rao",
        "mobile": "9876543210",
        "email": "asha.rao@gmail.com",
        "pincode": "560001",
        "landmark": "Near the park",
        "district": "Bengaluru Urban",
        "state": "Karnataka",
    }


async def test_admin_listings_reject_customers(client, user_headers):
    for path in ("/orders/", "/orders/recent", "/orders/latest"):
        resp = await client.get(path, headers=user_headers)
        assert resp.status_code == 403


async def test_my_orders_are_scoped_to_the_caller(client, user_headers, other_user_headers, shop, seed):
    other_address = await seed.address(user_id="user-2")
    await _place(client, user_headers, shop["address"].id, [{"productId": shop["jeans"].id, "quantity": 1}])
    await _place(client, other_user_headers, other_address.id, [{"productId": shop["shirt"].id, "quantity": 1}])

    resp = await client.get("/orders/mine", headers=user_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    order = body["orders"][0]
    assert order["userId"] == "user-1"
    assert order["address"] == shop["address"].id
    assert order["orderItems"][0]["productId"] == {
        "name": "Slim Jeans",
        "color": "black",
        "brand": shop["refs"]["brand"],
        "size": "32",
    }


async def test_my_orders_empty_is_not_an_error(client, user_headers):
    resp = await client.get("/orders/mine", headers=user_headers)

    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert resp.json()["total"] == 0
    assert resp.json()["orders"] == []


async def test_update_status_is_idempotent(client, user_headers, admin_headers, shop):
    placed = await _place(client, user_headers, shop["address"].id, [{"productId": shop["shirt"].id, "quantity": 1}])
    order_id = placed.json()["data"]["id"]

    first = await client.put(f"/orders/{order_id}", json={"status": "shipped"}, headers=admin_headers)
    second = await client.put(f"/orders/{order_id}", json={"status": "shipped"}, headers=admin_headers)

    assert first.status_code == second.status_code == 200
    assert first.json()["data"] == second.json()["data"]
    assert second.json()["data"]["status"] == "shipped"
    assert second.json()["data"]["totalPrice"] == placed.json()["data"]["totalPrice"]


async def test_update_status_errors(client, user_headers, admin_headers, shop):
    placed = await _place(client, user_headers, shop["address"].id, [])
    order_id = placed.json()["data"]["id"]

    resp = await client.put("/orders/bogus", json={"status": "shipped"}, headers=admin_headers)
    assert (resp.status_code, resp.json()["message"]) == (400, "Invalid order ID")

    resp = await client.put(f"/orders/{new_id()}", json={"status": "shipped"}, headers=admin_headers)
    assert (resp.status_code, resp.json()["message"]) == (400, "Order not found")

    resp = await client.put(f"/orders/{order_id}", json={"status": "teleported"}, headers=admin_headers)
    assert resp.status_code == 400

    resp = await client.put(f"/orders/{order_id}", json={"status": "shipped"}, headers=user_headers)
    assert resp.status_code == 403


async def test_recent_orders_only_include_today(client, user_headers, admin_headers, shop):
    placed = await _place(client, user_headers, shop["address"].id, [{"productId": shop["shirt"].id, "quantity": 1}])
    async with AsyncSessionLocal() as session:
        session.add(Order(
            user_id="user-1",
            address_id=shop["address"].id,
            total_price=10.0,
            created_at=datetime.now(timezone.utc) - timedelta(days=2),
            items=[],
        ))
        await session.commit()

    resp = await client.get("/orders/recent", headers=admin_headers)

    assert resp.status_code == 200
    assert [o["id"] for o in resp.json()["orders"]] == [placed.json()["data"]["id"]]

    latest = await client.get("/orders/latest", headers=admin_headers)
    assert latest.json()["total"] == 2
    assert latest.json()["orders"][0]["id"] == placed.json()["data"]["id"]


async def test_get_and_delete_order(client, user_headers, admin_headers, shop):
    placed = await _place(client, user_headers, shop["address"].id, [{"productId": shop["shirt"].id, "quantity": 1}])
    order_id = placed.json()["data"]["id"]

    resp = await client.get(f"/orders/{order_id}", headers=user_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["orderItems"][0]["productId"]["name"] == "Oxford Shirt"

    resp = await client.delete(f"/orders/{order_id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    resp = await client.get(f"/orders/{order_id}", headers=user_headers)
    assert resp.status_code == 404

    async with AsyncSessionLocal() as session:
        remaining = (await session.execute(select(func.count()).select_from(OrderItem))).scalar_one()
    assert remaining == 0


async def test_orders_are_only_visible_to_their_owner_and_admins(client, user_headers, other_user_headers, admin_headers, shop):
    placed = await _place(client, user_headers, shop["address"].id, [{"productId": shop["shirt"].id, "quantity": 1}])
    order_id = placed.json()["data"]["id"]

    resp = await client.get(f"/orders/{order_id}", headers=other_user_headers)
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Order not found"}

    resp = await client.get(f"/orders/{order_id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["address"]["name"] == "Asha Rao"


async def test_cannot_order_to_another_shoppers_address(client, other_user_headers, shop):
    resp = await _place(client, other_user_headers, shop["address"].id, [{"productId": shop["shirt"].id, "quantity": 1}])

    assert resp.status_code == 401
    assert resp.json()["message"] == "Address is not found"
    assert await _order_count() == 0


async def test_order_id_must_be_well_formed(client, user_headers, admin_headers):
    assert (await client.get("/orders/xyz", headers=user_headers)).status_code == 400
    assert (await client.delete("/orders/xyz", headers=admin_headers)).status_code == 400


async def test_deleted_product_populates_to_null(client, user_headers, admin_headers, shop):
    await _place(client, user_headers, shop["address"].id, [{"productId": shop["jeans"].id, "quantity": 1}])

    resp = await client.delete(f"/products/{shop['jeans'].id}", headers=admin_headers)
    assert resp.status_code == 200

    orders = (await client.get("/orders/", headers=admin_headers)).json()["orders"]
    assert orders[0]["orderItems"][0]["productId"] is None
    assert orders[0]["orderItems"][0]["quantity"] == 1
