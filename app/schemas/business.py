from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime

from app.utils.validators import validate_email, validate_phone_number, require_text, reject_null


class BusinessBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Business name (required)")
    first_name: Optional[str] = Field(None, max_length=100, description="Owner first name (optional)")
    last_name: Optional[str] = Field(None, max_length=100, description="Owner last name (optional)")
    phone_number: str = Field(..., min_length=1, max_length=20, description="Phone number (required, 10+ digits)")
    email: Optional[str] = Field(None, max_length=100, description="Email address (optional)")
    address: Optional[str] = Field(None, description="Street address (optional)")
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    website: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    hours: Optional[str] = Field(None, max_length=255, description="Opening hours, free text")
    logo_url: Optional[str] = Field(None, max_length=500)
    industry: Optional[str] = Field(None, max_length=100)
    established_date: Optional[date] = None
    tax_id: Optional[str] = Field(None, max_length=50)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return require_text(v, "Business name")

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return validate_phone_number(v)

    @field_validator('email')
    @classmethod
    def validate_email_address(cls, v: Optional[str]) -> Optional[str]:
        return validate_email(v)


class BusinessCreate(BusinessBase):
    class Config:
        json_schema_extra = {
            "example": {
                "name": "Sparkle Dry Cleaners",
                "first_name": "Jane",
                "last_name": "Doe",
                "phone_number": "(555) 123-4567",
                "email": "hello@sparkle.example",
                "city": "Springfield",
                "state": "IL"
            }
        }


class BusinessUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, min_length=1, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    website: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    hours: Optional[str] = Field(None, max_length=255)
    logo_url: Optional[str] = Field(None, max_length=500)
    industry: Optional[str] = Field(None, max_length=100)
    established_date: Optional[date] = None
    tax_id: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None

    @field_validator('name', 'phone_number', 'is_active', mode='before')
    @classmethod
    def validate_required(cls, v, info):
        return reject_null(v, info.field_name)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return require_text(v, "Business name")

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return validate_phone_number(v)

    @field_validator('email')
    @classmethod
    def validate_email_address(cls, v: Optional[str]) -> Optional[str]:
        return validate_email(v)


class BusinessResponse(BusinessBase):
    id: str
    user_id: str
    is_active: bool
    qr_code: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
