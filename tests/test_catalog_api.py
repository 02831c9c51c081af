import pytest


def test_category_names_unique_per_business_ignoring_case(client, business, category, auth_headers):
    response = client.post("/api/categories", headers=auth_headers, json={"business_id": business.id, "name": " laundry "})
    assert response.status_code == 409
    assert response.json()["detail"]["field"] == "name"

    created = client.post("/api/categories", headers=auth_headers, json={"business_id": business.id, "name": "Alterations"})
    assert created.status_code == 201
    names = [c["name"] for c in client.get("/api/categories", headers=auth_headers, params={"business_id": business.id}).json()]
    assert names == ["Alterations", "Laundry"]


def test_create_item_accepts_price_strings(client, business, category, auth_headers):
    response = client.post("/api/items", headers=auth_headers, json={
        "business_id": business.id,
        "category_id": category.id,
        "name": "Blouse",
        "price": "$4.50",
    })
    assert response.status_code == 201
    item = response.json()
    assert item["price"] == 4.5
    assert item["item_type"] == "service"
    assert item["taxable"] is True


def test_negative_price_is_422(client, business, category, auth_headers):
    response = client.post("/api/items", headers=auth_headers, json={
        "business_id": business.id,
        "category_id": category.id,
        "name": "Blouse",
        "price": -1,
    })
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Price cannot be negative"


def test_item_category_must_belong_to_business(client, db_session, business, auth_headers, other_headers):
    foreign = client.post("/api/business", headers=other_headers, json={"name": "Rival", "phone_number": "5550001111"}).json()
    foreign_category = client.post(
        "/api/categories", headers=other_headers, json={"business_id": foreign["id"], "name": "Laundry"}
    ).json()

    response = client.post("/api/items", headers=auth_headers, json={
        "business_id": business.id,
        "category_id": foreign_category["id"],
        "name": "Blouse",
        "price": 4,
    })
    assert response.status_code == 404


def test_list_items_filters(client, business, category, shirt, suit, auth_headers):
    client.post("/api/items", headers=auth_headers, json={
        "business_id": business.id,
        "category_id": category.id,
        "name": "Garment Bag",
        "price": 2,
        "item_type": "product",
        "sku": "BAG-01",
    })
    params = {"business_id": business.id}

    assert len(client.get("/api/items", headers=auth_headers, params=params).json()) == 3
    products = client.get("/api/items", headers=auth_headers, params={**params, "item_type": "product"}).json()
    assert [i["name"] for i in products] == ["Garment Bag"]
    found = client.get("/api/items", headers=auth_headers, params={**params, "search": "suit"}).json()
    assert [i["id"] for i in found] == [suit.id]
    by_sku = client.get("/api/items", headers=auth_headers, params={**params, "search": "bag-01"}).json()
    assert len(by_sku) == 1


def test_update_and_delete_item(client, shirt, auth_headers):
    response = client.put(f"/api/items/{shirt.id}", headers=auth_headers, json={"price": "4.25"})
    assert response.json()["price"] == 4.25
    assert client.delete(f"/api/items/{shirt.id}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/items/{shirt.id}", headers=auth_headers).status_code == 404


@pytest.mark.parametrize("field", ["name", "price", "taxable", "item_type", "category_id"])
def test_item_update_cannot_null_required_field(client, shirt, auth_headers, field):
    response = client.put(f"/api/items/{shirt.id}", headers=auth_headers, json={field: None})
    assert response.status_code == 422

    unchanged = client.get(f"/api/items/{shirt.id}", headers=auth_headers).json()
    assert unchanged["name"] == shirt.name
    assert unchanged["price"] == 3.99


def test_list_default_catalog(client, auth_headers):
    defaults = client.get("/api/categories/defaults", headers=auth_headers).json()
    assert [d["name"] for d in defaults] == [
        "Dry Cleaning", "Washing", "Alterations", "Household Items", "Specialty Cleaning"
    ]
    assert {d["name"]: d["item_count"] for d in defaults}["Dry Cleaning"] == 12


def test_load_default_catalog_twice_adds_nothing(client, business, auth_headers):
    params = {"business_id": business.id}
    first = client.post("/api/categories/defaults", headers=auth_headers, params=params)
    assert first.status_code == 200
    assert first.json() == {
        "categories_created": ["Dry Cleaning", "Washing", "Alterations", "Household Items", "Specialty Cleaning"],
        "categories_skipped": [],
        "items_created": 26,
        "items_skipped": 0,
    }
    assert len(client.get("/api/items", headers=auth_headers, params=params).json()) == 26

    second = client.post("/api/categories/defaults", headers=auth_headers, params=params).json()
    assert second["categories_created"] == []
    assert len(second["categories_skipped"]) == 5
    assert second["items_created"] == 0
    assert second["items_skipped"] == 26


def test_load_defaults_reuses_existing_category(client, business, auth_headers):
    existing = client.post("/api/categories", headers=auth_headers, json={"business_id": business.id, "name": "alterations"})
    client.post("/api/items", headers=auth_headers, json={
        "business_id": business.id,
        "category_id": existing.json()["id"],
        "name": "Hem Pants",
        "price": 12,
    })

    result = client.post(
        "/api/categories/defaults",
        headers=auth_headers,
        params={"business_id": business.id, "categories": ["Alterations"]},
    ).json()
    assert result["categories_created"] == []
    assert result["categories_skipped"] == ["alterations"]
    assert result["items_created"] == 2
    assert result["items_skipped"] == 1

    names = [c["name"] for c in client.get("/api/categories", headers=auth_headers, params={"business_id": business.id}).json()]
    assert names == ["alterations"]
    hem = client.get("/api/items", headers=auth_headers, params={"business_id": business.id, "search": "hem"}).json()
    assert [i["price"] for i in hem] == [12.0]


def test_load_unknown_default_category_is_400(client, business, auth_headers):
    response = client.post(
        "/api/categories/defaults",
        headers=auth_headers,
        params={"business_id": business.id, "categories": ["Tailoring"]},
    )
    assert response.status_code == 400
    assert client.get("/api/categories", headers=auth_headers, params={"business_id": business.id}).json() == []


def test_other_owner_cannot_load_defaults(client, business, other_headers):
    response = client.post("/api/categories/defaults", headers=other_headers, params={"business_id": business.id})
    assert response.status_code == 403
