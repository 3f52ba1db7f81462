"""Category / subcategory / brand CRUD."""
import pytest

from shared.persistence import new_id


@pytest.mark.parametrize("kind", ["categories", "brands"])
async def test_catalog_crud_round(client, admin_headers, kind):
    created = await client.post(f"/catalog/{kind}/", json={"name": "Outdoor"}, headers=admin_headers)
    assert created.status_code == 201
    entry_id = created.json()["record"]["id"]

    listing = await client.get(f"/catalog/{kind}/")
    assert listing.json()["total"] == 1
    assert listing.json()["records"][0]["name"] == "Outdoor"

    updated = await client.put(f"/catalog/{kind}/{entry_id}", json={"name": "Outdoors"}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["record"]["name"] == "Outdoors"

    deleted = await client.delete(f"/catalog/{kind}/{entry_id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert (await client.get(f"/catalog/{kind}/{entry_id}")).status_code == 404


async def test_duplicate_name_is_rejected(client, admin_headers):
    await client.post("/catalog/brands/", json={"name": "Acme"}, headers=admin_headers)

    resp = await client.post("/catalog/brands/", json={"name": "Acme"}, headers=admin_headers)

    assert resp.status_code == 422
    assert resp.json() == {"success": False, "message": "Duplicate entry found"}


async def test_subcategory_links_to_category(client, admin_headers):
    category = await client.post("/catalog/categories/", json={"name": "Men"}, headers=admin_headers)
    category_id = category.json()["record"]["id"]

    resp = await client.post(
        "/catalog/subcategories/", json={"name": "Shirts", "categoryId": category_id}, headers=admin_headers
    )

    assert resp.status_code == 201
    assert resp.json()["record"]["category"] == {"id": category_id, "name": "Men"}

    resp = await client.post(
        "/catalog/subcategories/", json={"name": "Socks", "categoryId": new_id()}, headers=admin_headers
    )
    assert resp.status_code == 404
    assert resp.json()["message"] == "Category not found"


async def test_catalog_mutations_need_admin(client, user_headers):
    resp = await client.post("/catalog/categories/", json={"name": "Men"}, headers=user_headers)
    assert resp.status_code == 403
    assert resp.json()["success"] is False


async def test_catalog_malformed_id(client):
    resp = await client.get("/catalog/categories/123")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Category ID is Invalid"
