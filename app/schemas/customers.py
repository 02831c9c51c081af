from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Any, List
from datetime import date, datetime

from app.utils.validators import validate_email, validate_phone_number, require_text, reject_null, field_label


class CustomerBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100, description="First name (required)")
    last_name: str = Field(..., min_length=1, max_length=100, description="Last name (required)")
    phone_number: str = Field(..., min_length=1, max_length=20, description="Phone number, stored as digits only")
    email: Optional[str] = Field(None, max_length=100, description="Email address (optional)")
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = Field(None, description="Cleaning preferences, e.g. {\"starch\": \"LIGHT\"}")

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        return require_text(v, field_label(info.field_name))

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return validate_phone_number(v)

    @field_validator('email')
    @classmethod
    def validate_email_address(cls, v: Optional[str]) -> Optional[str]:
        return validate_email(v)


class CustomerCreate(CustomerBase):
    business_id: str = Field(..., description="Business the customer belongs to")
    join_date: Optional[date] = Field(None, description="Defaults to today")

    class Config:
        json_schema_extra = {
            "example": {
                "business_id": "2f1c7a52-4a47-4a39-9f49-5b0d1d9f0b11",
                "first_name": "Alex",
                "last_name": "Morgan",
                "phone_number": "(555) 222-3333",
                "email": "alex@example.com"
            }
        }


class CustomerUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, min_length=1, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None

    @field_validator('first_name', 'last_name', 'phone_number', mode='before')
    @classmethod
    def validate_required(cls, v, info):
        return reject_null(v, info.field_name)

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        return require_text(v, field_label(info.field_name))

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return validate_phone_number(v)

    @field_validator('email')
    @classmethod
    def validate_email_address(cls, v: Optional[str]) -> Optional[str]:
        return validate_email(v)


class CustomerResponse(CustomerBase):
    id: str
    business_id: str
    user_id: Optional[str] = None
    join_date: date
    last_active_date: Optional[date] = None
    qr_code: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomerPaginatedResponse(BaseModel):
    items: List[CustomerResponse]
    total: int
    page: int
    page_size: int


class PhoneAvailabilityResponse(BaseModel):
    phone_number: str
    available: bool
    customer_id: Optional[str] = None
