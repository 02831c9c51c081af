from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime

from app.utils.validators import parse_price, reject_null

ItemType = Literal["service", "product"]


class ItemBase(BaseModel):
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Item name (1-100 characters)",
        examples=["Shirt - Wash & Press", "Suit - Dry Clean"]
    )
    description: Optional[str] = Field(
        None,
        max_length=255,
        description="Item description (optional, max 255 characters)"
    )
    price: float = Field(
        ...,
        description="Price in dollars; numeric strings such as \"$4.50\" are accepted",
        examples=[4.5, 12.99]
    )
    duration: Optional[int] = Field(None, ge=0, description="Turnaround in minutes (services)")
    sku: Optional[str] = Field(None, max_length=50)
    taxable: bool = Field(True, description="Informational; checkout taxes the whole subtotal at TAX_RATE")
    image_url: Optional[str] = Field(None, max_length=500)
    item_type: ItemType = "service"

    @field_validator('name')
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise ValueError(f'{info.field_name} cannot be empty or whitespace only')
        return v.strip()

    @field_validator('price', mode='before')
    @classmethod
    def validate_price(cls, v) -> float:
        return parse_price(v)


class ItemCreate(ItemBase):
    business_id: str
    category_id: str

    class Config:
        json_schema_extra = {
            "example": {
                "business_id": "2f1c7a52-4a47-4a39-9f49-5b0d1d9f0b11",
                "category_id": "7b1b4d0c-1f4f-4d7a-8a8e-2b6f0c2d9e44",
                "name": "Shirt - Wash & Press",
                "price": 3.99,
                "item_type": "service"
            }
        }


class ItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=255)
    price: Optional[float] = None
    duration: Optional[int] = Field(None, ge=0)
    sku: Optional[str] = Field(None, max_length=50)
    taxable: Optional[bool] = None
    image_url: Optional[str] = Field(None, max_length=500)
    item_type: Optional[ItemType] = None
    category_id: Optional[str] = None

    @field_validator('name', 'price', 'taxable', 'item_type', 'category_id', mode='before')
    @classmethod
    def validate_required(cls, v, info):
        return reject_null(v, info.field_name)

    @field_validator('name')
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        if not v.strip():
            raise ValueError(f'{info.field_name} cannot be empty or whitespace only')
        return v.strip()

    @field_validator('price', mode='before')
    @classmethod
    def validate_price(cls, v) -> float:
        return parse_price(v)


class ItemResponse(ItemBase):
    id: str
    business_id: str
    category_id: str
    qr_code: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
