import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.qr_codes import (
    QRCodeGenerateRequest,
    QRCodeSnapshotRequest,
    QRCodeResponse,
    QRCodeScanRequest,
    QRCodeScanResponse,
)
from app.core.dependencies import get_current_user, get_owned_business
from app.core.errors import database_error
from app.services import qr_code_service
from app.services.qr_code_service import QRCodeError, QRCodeEntityNotFound, QRCodeUploadError
from app.services.storage_service import StorageService, InvalidImageError, DEFAULT_URL_EXPIRES_IN, get_storage_service
from app.utils.qr_codes import EntityType, generate_qr_code_data, render_qr_code_png

router = APIRouter(tags=["qrcodes"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _check_access(db: Session, entity_type: EntityType, entity_id: str, current_user: User):
    """404 for unknown entities, 403 when the entity belongs to someone else's business"""
    try:
        entity = qr_code_service.get_entity(db, entity_type, entity_id)
    except QRCodeEntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except QRCodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    business_id = entity.id if entity_type == EntityType.BUSINESS else entity.business_id
    get_owned_business(db, business_id, current_user)
    return entity


def _to_response(result, expires_in: int) -> dict:
    return {
        "entity_type": result.entity_type,
        "entity_id": result.entity_id,
        "key": result.key,
        "url": result.url,
        "expires_in": expires_in,
        "payload": result.payload,
    }


@router.post("/generate", response_model=QRCodeResponse, status_code=status.HTTP_201_CREATED)
async def generate_qr_code(
    request: QRCodeGenerateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage_service)
):
    """Render the entity's QR code, store it under public/qrcodes/<Type>/<id>.png and save the key"""
    _check_access(db, request.entity_type, request.entity_id, current_user)
    try:
        result = qr_code_service.generate_and_attach(
            db, storage, request.entity_type, request.entity_id, expires_in=DEFAULT_URL_EXPIRES_IN
        )
    except QRCodeUploadError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"QR code upload failed: {str(e)}")
    except QRCodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        db.rollback()
        raise database_error(e, "generating QR code", "QR code")
    return _to_response(result, DEFAULT_URL_EXPIRES_IN)


@router.post("/snapshot", response_model=QRCodeResponse, status_code=status.HTTP_201_CREATED)
async def upload_qr_snapshot(
    request: QRCodeSnapshotRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage_service)
):
    """Store a QR image captured on the device instead of rendering one here"""
    _check_access(db, request.entity_type, request.entity_id, current_user)
    try:
        result = qr_code_service.attach_snapshot(
            db, storage, request.entity_type, request.entity_id, request.image_base64,
            expires_in=DEFAULT_URL_EXPIRES_IN
        )
    except QRCodeUploadError as e:
        if isinstance(e.__cause__, InvalidImageError):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"QR code upload failed: {str(e)}")
    except QRCodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        db.rollback()
        raise database_error(e, "uploading QR snapshot", "QR code")
    return _to_response(result, DEFAULT_URL_EXPIRES_IN)


@router.get("/{entity_type}/{entity_id}/url", response_model=QRCodeResponse)
async def get_qr_code_url(
    entity_type: EntityType,
    entity_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage_service)
):
    """Fresh signed URL for a stored QR image (valid for QR_URL_EXPIRES_IN seconds)"""
    _check_access(db, entity_type, entity_id, current_user)
    try:
        result = qr_code_service.get_qr_code_url(db, storage, entity_type, entity_id, expires_in=DEFAULT_URL_EXPIRES_IN)
    except QRCodeEntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except QRCodeUploadError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return _to_response(result, DEFAULT_URL_EXPIRES_IN)


@router.get("/{entity_type}/{entity_id}/image")
async def get_qr_code_image(
    entity_type: EntityType,
    entity_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Render the QR code as PNG on the fly, without touching storage (for label printing)"""
    entity = _check_access(db, entity_type, entity_id, current_user)
    payload = generate_qr_code_data(entity_type, entity.to_qr_fields())
    return Response(content=render_qr_code_png(payload), media_type="image/png")


@router.post("/scan", response_model=QRCodeScanResponse)
async def scan_qr_code(
    request: QRCodeScanRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Resolve a scanned payload to the record it identifies"""
    try:
        parsed, entity = qr_code_service.resolve_scan(db, request.value)
    except QRCodeEntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except QRCodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if entity is not None:
        business_id = entity.id if parsed.type == EntityType.BUSINESS else entity.business_id
        get_owned_business(db, business_id, current_user)

    logger.info(f"Scanned {parsed.type.value} QR code for {parsed.id}")
    return {
        "entity_type": parsed.type,
        "entity_id": parsed.id,
        "data": parsed.data,
        "found": entity is not None,
        "entity": qr_code_service.entity_summary(parsed.type, entity) if entity is not None else None,
    }


@router.delete("/{entity_type}/{entity_id}", status_code=status.HTTP_200_OK)
async def delete_qr_code(
    entity_type: EntityType,
    entity_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage_service)
):
    """Remove the stored image so the next /generate starts from scratch"""
    _check_access(db, entity_type, entity_id, current_user)
    try:
        removed = qr_code_service.remove_qr_code(db, storage, entity_type, entity_id)
    except QRCodeUploadError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{entity_type.value} {entity_id} has no QR code"
        )
    return {"message": f"QR code for {entity_type.value} {entity_id} deleted", "id": entity_id}
