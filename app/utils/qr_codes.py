"""
QR code payloads and images.

A payload is a JSON object identifying one entity:

    {"version": 1, "type": "Customer", "id": "...", "timestamp": "...", ...}

The base fields are shared by every entity type; each type then adds the
handful of fields a scanner needs without a lookup (see PAYLOAD_FIELDS).
"""
import io
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

import qrcode

logger = logging.getLogger(__name__)

QR_PAYLOAD_VERSION = 1
QR_KEY_PREFIX = "public/qrcodes"


class EntityType(str, Enum):
    BUSINESS = "Business"
    EMPLOYEE = "Employee"
    CUSTOMER = "Customer"
    ORDER = "Order"
    PRODUCT = "Product"
    GARMENT = "Garment"
    RACK = "Rack"


# Payload key -> key in the entity data passed to generate_qr_code_data
PAYLOAD_FIELDS: Dict[EntityType, Dict[str, str]] = {
    EntityType.BUSINESS: {"name": "name", "phoneNumber": "phoneNumber"},
    EntityType.EMPLOYEE: {"employeeId": "id", "phone": "phone", "businessId": "businessId"},
    EntityType.CUSTOMER: {"customerId": "id", "phone": "phone", "businessId": "businessId"},
    EntityType.ORDER: {
        "orderId": "id",
        "customerId": "customerId",
        "employeeId": "employeeId",
        "businessId": "businessId",
    },
    EntityType.PRODUCT: {
        "productId": "id",
        "orderItemId": "orderItemId",
        "orderId": "orderId",
        "customerId": "customerId",
        "businessId": "businessId",
    },
    EntityType.GARMENT: {"businessId": "businessId", "customerId": "customerId"},
    EntityType.RACK: {"businessId": "businessId"},
}


@dataclass(frozen=True)
class ParsedQRCode:
    type: EntityType
    data: Dict[str, Any]

    @property
    def id(self) -> str:
        return self.data["id"]


def generate_qr_code_data(entity_type, data: Dict[str, Any]) -> str:
    """
    Build the JSON payload for an entity.

    Args:
        entity_type: EntityType or its string value
        data: entity fields; must contain "id"

    Returns:
        JSON string to embed in the QR image

    Raises:
        ValueError: unknown entity type or missing id
    """
    entity_type = EntityType(entity_type)
    if not data or not data.get("id"):
        raise ValueError(f"Cannot build a QR payload for {entity_type.value} without an id")

    payload = {
        "version": QR_PAYLOAD_VERSION,
        "type": entity_type.value,
        "id": str(data["id"]),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    for payload_key, source_key in PAYLOAD_FIELDS[entity_type].items():
        payload[payload_key] = data.get(source_key)

    return json.dumps(payload)


def parse_qr_code(qr_value: Optional[str]) -> Optional[ParsedQRCode]:
    """
    Parse a scanned value back into (type, data).

    Returns None for anything that is not a payload this module produced:
    invalid JSON, a non-object, an unknown type, a missing or non-string id
    or a newer version.
    """
    if not qr_value or not isinstance(qr_value, str):
        logger.warning("Empty or non-string QR value")
        return None
    try:
        parsed = json.loads(qr_value)
    except json.JSONDecodeError as e:
        logger.warning(f"QR value is not valid JSON: {str(e)}")
        return None

    if not isinstance(parsed, dict) or not isinstance(parsed.get("id"), str) or not parsed["id"]:
        logger.warning("QR payload is missing a string id")
        return None

    # Payloads written before versioning have no version key
    version = parsed.get("version", QR_PAYLOAD_VERSION)
    if not isinstance(version, int) or version > QR_PAYLOAD_VERSION:
        logger.warning(f"Unsupported QR payload version: {version}")
        return None

    try:
        entity_type = EntityType(parsed.get("type"))
    except ValueError:
        logger.warning(f"Unknown QR entity type: {parsed.get('type')}")
        return None

    return ParsedQRCode(type=entity_type, data=parsed)


def qr_code_key(entity_type, entity_id: str) -> str:
    """Storage key for an entity's QR image: public/qrcodes/<EntityType>/<entityId>.png"""
    entity_type = EntityType(entity_type)
    if not entity_id:
        raise ValueError("Cannot build a QR storage key without an entity id")
    return f"{QR_KEY_PREFIX}/{entity_type.value}/{entity_id}.png"


def render_qr_code_png(data: str, box_size: int = 10, border: int = 4) -> bytes:
    """Render a payload as a black-on-white PNG"""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
