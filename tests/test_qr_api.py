import base64
import json

import pytest

from app.services import storage_service as storage_module
from app.services.storage_service import get_storage_service
from app.utils.qr_codes import EntityType, generate_qr_code_data, render_qr_code_png
from app.services import checkout_service
from app.services.checkout_service import CheckoutLine
from main import app


@pytest.fixture
def order_for_qr(db_session, business, customer, shirt):
    return checkout_service.create_order(
        db_session,
        business_id=business.id,
        customer_id=customer.id,
        lines=[CheckoutLine(item_id=shirt.id, quantity=3)],
    )


def test_generate_customer_qr_code(client, db_session, customer, auth_headers, fake_bucket):
    response = client.post("/api/qrcodes/generate", headers=auth_headers, json={
        "entity_type": "Customer",
        "entity_id": customer.id,
    })
    assert response.status_code == 201
    result = response.json()

    key = f"public/qrcodes/Customer/{customer.id}.png"
    assert result["key"] == key
    assert result["url"].startswith("https://storage.example.com/test-bucket/")
    assert json.loads(result["payload"])["customerId"] == customer.id

    stored = fake_bucket.objects[key]
    assert stored["data"].startswith(b"\x89PNG")
    assert stored["metadata"] == {"objectType": "Customer", "objectId": customer.id}

    db_session.refresh(customer)
    assert customer.qr_code == key


def test_product_qr_code_is_stored_on_item(client, shirt, auth_headers):
    result = client.post("/api/qrcodes/generate", headers=auth_headers, json={
        "entity_type": "Product",
        "entity_id": shirt.id,
    }).json()
    assert result["key"] == f"public/qrcodes/Product/{shirt.id}.png"
    assert client.get(f"/api/items/{shirt.id}", headers=auth_headers).json()["qr_code"] == result["key"]


def test_url_requires_a_generated_code(client, customer, auth_headers):
    url = f"/api/qrcodes/Customer/{customer.id}/url"
    assert client.get(url, headers=auth_headers).status_code == 404

    client.post("/api/qrcodes/generate", headers=auth_headers, json={"entity_type": "Customer", "entity_id": customer.id})
    response = client.get(url, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["expires_in"] == 3600


def test_generate_for_unknown_entity_is_404(client, auth_headers):
    response = client.post("/api/qrcodes/generate", headers=auth_headers, json={"entity_type": "Order", "entity_id": "missing"})
    assert response.status_code == 404


def test_print_only_types_cannot_be_stored(client, auth_headers):
    response = client.post("/api/qrcodes/generate", headers=auth_headers, json={"entity_type": "Rack", "entity_id": "r-1"})
    assert response.status_code == 400


def test_other_owner_cannot_generate(client, customer, other_headers):
    response = client.post("/api/qrcodes/generate", headers=other_headers, json={"entity_type": "Customer", "entity_id": customer.id})
    assert response.status_code == 403


def test_snapshot_upload(client, employee, auth_headers, fake_bucket):
    png = render_qr_code_png("snapshot")
    response = client.post("/api/qrcodes/snapshot", headers=auth_headers, json={
        "entity_type": "Employee",
        "entity_id": employee.id,
        "image_base64": "data:image/png;base64," + base64.b64encode(png).decode(),
    })
    assert response.status_code == 201
    assert fake_bucket.objects[f"public/qrcodes/Employee/{employee.id}.png"]["data"] == png


def test_snapshot_must_be_png(client, employee, auth_headers, fake_bucket):
    response = client.post("/api/qrcodes/snapshot", headers=auth_headers, json={
        "entity_type": "Employee",
        "entity_id": employee.id,
        "image_base64": base64.b64encode(b"just text").decode(),
    })
    assert response.status_code == 400
    assert fake_bucket.objects == {}


def test_image_is_rendered_on_the_fly(client, business, auth_headers, fake_bucket):
    response = client.get(f"/api/qrcodes/Business/{business.id}/image", headers=auth_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")
    assert fake_bucket.objects == {}


def test_scan_resolves_entity(client, customer, auth_headers):
    value = generate_qr_code_data(EntityType.CUSTOMER, customer.to_qr_fields())
    response = client.post("/api/qrcodes/scan", headers=auth_headers, json={"value": value})
    assert response.status_code == 200
    result = response.json()
    assert result["found"] is True
    assert result["entity"]["name"] == "Jamie Walker"
    assert result["entity"]["phoneNumber"] == "5552223333"


def test_scan_print_only_label(client, business, auth_headers):
    value = generate_qr_code_data(EntityType.GARMENT, {"id": "g-1", "businessId": business.id})
    result = client.post("/api/qrcodes/scan", headers=auth_headers, json={"value": value}).json()
    assert result["entity_type"] == "Garment"
    assert result["found"] is False
    assert result["entity"] is None


def test_scan_rejects_foreign_codes(client, auth_headers):
    response = client.post("/api/qrcodes/scan", headers=auth_headers, json={"value": "https://example.com"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid QR code"


def test_scan_of_deleted_record_is_404(client, auth_headers):
    value = generate_qr_code_data(EntityType.ORDER, {"id": "gone"})
    assert client.post("/api/qrcodes/scan", headers=auth_headers, json={"value": value}).status_code == 404


def test_storage_not_configured_is_503(client, customer, auth_headers, monkeypatch):
    app.dependency_overrides.pop(get_storage_service)
    monkeypatch.setattr(storage_module, "storage_service", None)
    response = client.post("/api/qrcodes/generate", headers=auth_headers, json={
        "entity_type": "Customer",
        "entity_id": customer.id,
    })
    assert response.status_code == 503


def test_delete_qr_code(client, db_session, order_for_qr, auth_headers, fake_bucket):
    client.post("/api/qrcodes/generate", headers=auth_headers, json={"entity_type": "Order", "entity_id": order_for_qr.id})
    assert fake_bucket.objects

    response = client.delete(f"/api/qrcodes/Order/{order_for_qr.id}", headers=auth_headers)
    assert response.status_code == 200
    assert fake_bucket.objects == {}
    db_session.refresh(order_for_qr)
    assert order_for_qr.qr_code is None

    assert client.delete(f"/api/qrcodes/Order/{order_for_qr.id}", headers=auth_headers).status_code == 404


def test_scan_with_numeric_id_is_400(client, business, auth_headers):
    value = json.dumps({"version": 1, "type": "Rack", "id": 42, "businessId": business.id})
    response = client.post("/api/qrcodes/scan", headers=auth_headers, json={"value": value})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid QR code"
