import json

import pytest

from app.utils.qr_codes import (
    EntityType,
    generate_qr_code_data,
    parse_qr_code,
    qr_code_key,
    render_qr_code_png,
)


def test_customer_payload_carries_lookup_fields():
    payload = json.loads(generate_qr_code_data(
        EntityType.CUSTOMER,
        {"id": "c-1", "phone": "5552223333", "businessId": "b-1"},
    ))
    assert payload["version"] == 1
    assert payload["type"] == "Customer"
    assert payload["id"] == "c-1"
    assert payload["customerId"] == "c-1"
    assert payload["phone"] == "5552223333"
    assert payload["businessId"] == "b-1"
    assert "timestamp" in payload


def test_order_payload_accepts_type_string():
    payload = json.loads(generate_qr_code_data("Order", {"id": "o-1", "customerId": "c-1", "businessId": "b-1"}))
    assert payload["orderId"] == "o-1"
    assert payload["employeeId"] is None


def test_payload_requires_id():
    with pytest.raises(ValueError):
        generate_qr_code_data(EntityType.RACK, {"businessId": "b-1"})


def test_parse_generated_payload():
    parsed = parse_qr_code(generate_qr_code_data(EntityType.BUSINESS, {"id": "b-1", "name": "Sparkle"}))
    assert parsed.type is EntityType.BUSINESS
    assert parsed.id == "b-1"
    assert parsed.data["name"] == "Sparkle"


@pytest.mark.parametrize("value", [
    None,
    "",
    "not json",
    "[1, 2, 3]",
    json.dumps({"type": "Customer"}),
    json.dumps({"type": "Spaceship", "id": "x"}),
    json.dumps({"version": 2, "type": "Customer", "id": "x"}),
    json.dumps({"type": "Rack", "id": 42}),
    json.dumps({"type": "Customer", "id": ["x"]}),
])
def test_parse_rejects_foreign_values(value):
    assert parse_qr_code(value) is None


def test_parse_accepts_unversioned_payload():
    parsed = parse_qr_code(json.dumps({"type": "Garment", "id": "g-7", "businessId": "b-1"}))
    assert parsed.type is EntityType.GARMENT


def test_storage_key_layout():
    assert qr_code_key(EntityType.PRODUCT, "i-9") == "public/qrcodes/Product/i-9.png"
    with pytest.raises(ValueError):
        qr_code_key("Customer", "")


def test_render_png():
    png = render_qr_code_png(generate_qr_code_data(EntityType.RACK, {"id": "r-1", "businessId": "b-1"}))
    assert png.startswith(b"\x89PNG\r\n\x1a\n")
