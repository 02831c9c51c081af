"""
QR CODE PIPELINE

    entity row -> payload JSON -> PNG -> object storage -> entity.qr_code = key -> signed URL

Each step runs once, in order. A failure stops the pipeline and is raised
to the caller; nothing is retried and the entity is left untouched unless
the upload succeeded.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from app.models.business import Business
from app.models.customers import Customer
from app.models.employees import Employee
from app.models.items import Item
from app.models.orders import Order
from app.services.storage_service import StorageService, StorageError
from app.utils.qr_codes import (
    EntityType,
    ParsedQRCode,
    generate_qr_code_data,
    parse_qr_code,
    qr_code_key,
    render_qr_code_png,
)

logger = logging.getLogger(__name__)

# Entity types backed by a table. Garment and Rack labels are print-only.
ENTITY_MODELS = {
    EntityType.BUSINESS: Business,
    EntityType.EMPLOYEE: Employee,
    EntityType.CUSTOMER: Customer,
    EntityType.ORDER: Order,
    EntityType.PRODUCT: Item,
}


class QRCodeError(Exception):
    pass


class QRCodeEntityNotFound(QRCodeError):
    pass


class QRCodeUploadError(QRCodeError):
    pass


@dataclass
class QRCodeResult:
    entity_type: EntityType
    entity_id: str
    key: str
    url: Optional[str]
    payload: Optional[str] = None


def get_entity(db: Session, entity_type, entity_id: str):
    """Load the row a QR code points at; raises QRCodeEntityNotFound"""
    entity_type = EntityType(entity_type)
    model = ENTITY_MODELS.get(entity_type)
    if model is None:
        raise QRCodeError(f"{entity_type.value} QR codes are not stored on a record")
    entity = db.query(model).filter(model.id == entity_id).first()
    if not entity:
        raise QRCodeEntityNotFound(f"{entity_type.value} with ID {entity_id} not found")
    return entity


def _store(
    db: Session,
    storage: StorageService,
    entity_type: EntityType,
    entity,
    upload,
) -> str:
    key = qr_code_key(entity_type, entity.id)
    metadata = {"objectType": entity_type.value, "objectId": entity.id}
    try:
        upload(key, metadata)
    except StorageError as e:
        logger.error(f"QR upload failed for {entity_type.value} {entity.id}: {str(e)}")
        raise QRCodeUploadError(str(e)) from e

    entity.qr_code = key
    db.commit()
    db.refresh(entity)
    logger.info(f"Stored QR code for {entity_type.value} {entity.id} at {key}")
    return key


def _signed_url(storage: StorageService, key: str, expires_in: int) -> Optional[str]:
    try:
        return storage.get_url(key, expires_in=expires_in)
    except StorageError as e:
        # The key is already saved; the client can ask for a URL again later
        logger.warning(f"Could not sign URL for {key}: {str(e)}")
        return None


def generate_and_attach(
    db: Session,
    storage: StorageService,
    entity_type,
    entity_id: str,
    expires_in: int = 3600,
) -> QRCodeResult:
    """Render the entity's payload as a PNG, upload it and save the key on the entity"""
    entity_type = EntityType(entity_type)
    entity = get_entity(db, entity_type, entity_id)

    payload = generate_qr_code_data(entity_type, entity.to_qr_fields())
    png = render_qr_code_png(payload)

    key = _store(
        db, storage, entity_type, entity,
        lambda k, meta: storage.upload_bytes(k, png, content_type="image/png", metadata=meta),
    )
    return QRCodeResult(
        entity_type=entity_type,
        entity_id=entity.id,
        key=key,
        url=_signed_url(storage, key, expires_in),
        payload=payload,
    )


def attach_snapshot(
    db: Session,
    storage: StorageService,
    entity_type,
    entity_id: str,
    base64_image: str,
    expires_in: int = 3600,
) -> QRCodeResult:
    """Upload a client-captured PNG snapshot of the entity's QR code"""
    entity_type = EntityType(entity_type)
    entity = get_entity(db, entity_type, entity_id)

    key = _store(
        db, storage, entity_type, entity,
        lambda k, meta: storage.upload_base64_image(base64_image, k, metadata=meta),
    )
    return QRCodeResult(
        entity_type=entity_type,
        entity_id=entity.id,
        key=key,
        url=_signed_url(storage, key, expires_in),
    )


def get_qr_code_url(
    db: Session,
    storage: StorageService,
    entity_type,
    entity_id: str,
    expires_in: int = 3600,
) -> QRCodeResult:
    entity_type = EntityType(entity_type)
    entity = get_entity(db, entity_type, entity_id)
    if not entity.qr_code:
        raise QRCodeEntityNotFound(f"{entity_type.value} {entity_id} has no QR code yet")
    try:
        url = storage.get_url(entity.qr_code, expires_in=expires_in)
    except StorageError as e:
        raise QRCodeUploadError(str(e)) from e
    return QRCodeResult(entity_type=entity_type, entity_id=entity.id, key=entity.qr_code, url=url)


def resolve_scan(db: Session, qr_value: str):
    """
    Parse a scanned value and load the entity it names.

    Returns:
        (ParsedQRCode, entity or None); entity is None for print-only types

    Raises:
        QRCodeError: the value is not a valid payload
        QRCodeEntityNotFound: the payload names a record that no longer exists
    """
    parsed: Optional[ParsedQRCode] = parse_qr_code(qr_value)
    if parsed is None:
        raise QRCodeError("Invalid QR code")
    if parsed.type not in ENTITY_MODELS:
        return parsed, None
    return parsed, get_entity(db, parsed.type, parsed.id)


def entity_summary(entity_type, entity) -> dict:
    """The few fields the counter shows after a scan"""
    entity_type = EntityType(entity_type)
    summary = {"id": entity.id}
    if entity_type == EntityType.BUSINESS:
        summary.update(name=entity.name, phoneNumber=entity.phone_number)
    elif entity_type in (EntityType.EMPLOYEE, EntityType.CUSTOMER):
        summary.update(name=entity.full_name, phoneNumber=entity.phone_number, businessId=entity.business_id)
        if entity_type == EntityType.EMPLOYEE:
            summary.update(role=entity.role, status=entity.status)
    elif entity_type == EntityType.ORDER:
        summary.update(
            orderNumber=entity.order_number,
            status=entity.status,
            customerId=entity.customer_id,
            businessId=entity.business_id,
        )
    elif entity_type == EntityType.PRODUCT:
        summary.update(name=entity.name, price=entity.price, businessId=entity.business_id)
    return summary


def remove_qr_code(db: Session, storage: StorageService, entity_type, entity_id: str) -> bool:
    """
    Delete the stored QR image and clear the entity's key.

    Returns:
        False when the entity had no QR code
    """
    entity_type = EntityType(entity_type)
    entity = get_entity(db, entity_type, entity_id)
    if not entity.qr_code:
        return False
    try:
        storage.delete(entity.qr_code)
    except StorageError as e:
        raise QRCodeUploadError(str(e)) from e

    entity.qr_code = None
    db.commit()
    logger.info(f"Removed QR code for {entity_type.value} {entity_id}")
    return True
