from pydantic import BaseModel, Field
from typing import Optional, Dict, Any

from app.utils.qr_codes import EntityType


class QRCodeGenerateRequest(BaseModel):
    entity_type: EntityType = Field(..., description="Business, Employee, Customer, Order or Product")
    entity_id: str

    class Config:
        json_schema_extra = {
            "example": {"entity_type": "Customer", "entity_id": "c0a8012e-5d2b-4c1f-9e0a-6a2d3b4c5d6e"}
        }


class QRCodeSnapshotRequest(QRCodeGenerateRequest):
    image_base64: str = Field(..., min_length=1, description="PNG as base64, optionally a data: URI")


class QRCodeResponse(BaseModel):
    entity_type: EntityType
    entity_id: str
    key: str
    url: Optional[str] = None
    expires_in: int
    payload: Optional[str] = None


class QRCodeScanRequest(BaseModel):
    value: str = Field(..., description="Raw text read from the QR code")


class QRCodeScanResponse(BaseModel):
    entity_type: EntityType
    entity_id: str
    data: Dict[str, Any]
    found: bool
    entity: Optional[Dict[str, Any]] = None
