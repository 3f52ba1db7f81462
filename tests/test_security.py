from datetime import timedelta

import pytest
from starlette.requests import Request

from shared.config.settings import ORDER_RATE_LIMIT
from shared.security import bearer_claims, create_access_token, limiter, user_id_or_ip


def _request(headers: dict) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
    return Request({"type": "http", "headers": raw, "client": ("10.0.0.7", 5000)})


def test_bearer_claims_reads_subject_and_role():
    token = create_access_token("admin-1", "admin")

    claims = bearer_claims(f"Bearer {token}")

    assert claims["sub"] == "admin-1"
    assert claims["role"] == "admin"
    assert bearer_claims(f"Basic {token}") is None
    assert bearer_claims("Bearer not-a-token") is None
    assert bearer_claims(None) is None


def test_rate_limit_key_prefers_the_signed_in_user():
    token = create_access_token("user-1")

    assert user_id_or_ip(_request({"Authorization": f"Bearer {token}"})) == "user:user-1"
    assert user_id_or_ip(_request({})) == "ip:10.0.0.7"


async def test_expired_token_is_rejected(client):
    token = create_access_token("user-1", expires_delta=timedelta(seconds=-5))

    resp = await client.get("/orders/mine", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401
    assert resp.json()["success"] is False


async def test_shopper_cannot_reach_admin_routes(client, user_headers):
    resp = await client.get("/orders/", headers=user_headers)

    assert resp.status_code == 403
    assert resp.json()["message"] == "Administrator role required"


@pytest.fixture()
def rate_limited():
    limiter.reset()
    limiter.enabled = True
    yield int(ORDER_RATE_LIMIT.split("/")[0])
    limiter.enabled = False
    limiter.reset()


async def test_checkout_is_rate_limited_per_shopper(client, user_headers, other_user_headers, seed, rate_limited):
    address = await seed.address()
    other_address = await seed.address(user_id="user-2")
    order = {"addressId": address.id, "products": []}

    for _ in range(rate_limited):
        assert (await client.post("/orders/", json=order, headers=user_headers)).status_code == 200

    resp = await client.post("/orders/", json=order, headers=user_headers)

    assert resp.status_code == 429
    body = resp.json()
    assert body["success"] is False
    assert body["message"].startswith("Rate limit exceeded")

    # another shopper has their own allowance
    resp = await client.post(
        "/orders/", json={"addressId": other_address.id, "products": []}, headers=other_user_headers
    )
    assert resp.status_code == 200
