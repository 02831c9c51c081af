import io

import pytest
from PIL import Image


def test_create_and_list_businesses(client, auth_headers, other_headers):
    response = client.post("/api/business", headers=auth_headers, json={
        "name": "  Fresh Press  ",
        "phone_number": "(555) 765-4321",
        "email": "hello@freshpress.example",
    })
    assert response.status_code == 201
    created = response.json()
    assert created["name"] == "Fresh Press"
    assert created["phone_number"] == "5557654321"
    assert created["is_active"] is True

    assert [b["id"] for b in client.get("/api/business", headers=auth_headers).json()] == [created["id"]]
    assert client.get("/api/business", headers=other_headers).json() == []


def test_validation_errors_are_flattened(client, auth_headers):
    response = client.post("/api/business", headers=auth_headers, json={"name": "Fresh Press", "phone_number": "555"})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["type"] == "validation_error"
    assert detail["message"] == "Phone number must have at least 10 digits"
    assert detail["errors"][0]["field"] == "phone_number"


def test_other_owner_cannot_touch_business(client, business, other_headers):
    assert client.get(f"/api/business/{business.id}", headers=other_headers).status_code == 403
    assert client.put(f"/api/business/{business.id}", headers=other_headers, json={"name": "Mine now"}).status_code == 403


def test_update_business(client, business, auth_headers):
    response = client.put(f"/api/business/{business.id}", headers=auth_headers, json={"hours": "Mon-Sat 7-7"})
    assert response.status_code == 200
    assert response.json()["hours"] == "Mon-Sat 7-7"
    assert response.json()["name"] == "Sparkle Dry Cleaners"


@pytest.mark.parametrize("field", ["name", "phone_number", "is_active"])
def test_update_cannot_null_required_field(client, business, auth_headers, field):
    response = client.put(f"/api/business/{business.id}", headers=auth_headers, json={field: None})
    assert response.status_code == 422
    assert client.get(f"/api/business/{business.id}", headers=auth_headers).json()["name"] == "Sparkle Dry Cleaners"


def test_unknown_business_is_404(client, auth_headers):
    assert client.get("/api/business/does-not-exist", headers=auth_headers).status_code == 404


def test_upload_logo(client, business, auth_headers, fake_bucket):
    buffer = io.BytesIO()
    Image.new("RGB", (64, 64), (0, 128, 255)).save(buffer, format="PNG")

    response = client.post(
        f"/api/business/{business.id}/logo",
        headers=auth_headers,
        files={"file": ("logo.png", buffer.getvalue(), "image/png")},
    )
    assert response.status_code == 200
    assert response.json()["logo_url"]
    assert any(key.endswith(".jpg") for key in fake_bucket.objects)


def test_upload_logo_rejects_wrong_type(client, business, auth_headers):
    response = client.post(
        f"/api/business/{business.id}/logo",
        headers=auth_headers,
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400
