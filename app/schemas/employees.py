from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import date, datetime

from app.utils.validators import validate_email, validate_phone_number, validate_pin, require_text, reject_null, field_label

EmployeeRole = Literal["ADMIN", "MANAGER", "STAFF"]
EmployeeStatus = Literal["ACTIVE", "INACTIVE", "SUSPENDED"]


class EmployeePermissions(BaseModel):
    manageEmployees: bool = False
    manageCustomers: bool = False
    manageProducts: bool = False
    manageOrders: bool = False
    viewReports: bool = False
    processTransactions: bool = False
    manageSettings: bool = False


class EmployeeBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100, description="First name (required)")
    last_name: str = Field(..., min_length=1, max_length=100, description="Last name (required)")
    email: Optional[str] = Field(None, max_length=100, description="Email address (optional)")
    phone_number: str = Field(..., min_length=1, max_length=20, description="Phone number (required, 10+ digits)")
    role: EmployeeRole = Field("STAFF", description="ADMIN, MANAGER or STAFF")
    status: EmployeeStatus = Field("ACTIVE", description="ACTIVE, INACTIVE or SUSPENDED")
    hire_date: date = Field(default_factory=date.today)
    hourly_rate: Optional[float] = Field(None, ge=0)

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


class EmployeeCreate(EmployeeBase):
    business_id: str = Field(..., description="Business the employee works for")
    pin_code: str = Field(..., description="4-digit PIN used at the counter")
    permissions: Optional[EmployeePermissions] = Field(None, description="Defaults to the role template when omitted")

    @field_validator('pin_code')
    @classmethod
    def validate_pin_code(cls, v: str) -> str:
        return validate_pin(v)

    class Config:
        json_schema_extra = {
            "example": {
                "business_id": "2f1c7a52-4a47-4a39-9f49-5b0d1d9f0b11",
                "first_name": "Sam",
                "last_name": "Lee",
                "phone_number": "555-987-6543",
                "role": "STAFF",
                "pin_code": "4821"
            }
        }


class EmployeeUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, min_length=1, max_length=20)
    role: Optional[EmployeeRole] = None
    status: Optional[EmployeeStatus] = None
    hire_date: Optional[date] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    pin_code: Optional[str] = None
    permissions: Optional[EmployeePermissions] = None

    @field_validator(
        'first_name', 'last_name', 'phone_number', 'role', 'status', 'hire_date', 'pin_code',
        mode='before'
    )
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

    @field_validator('pin_code')
    @classmethod
    def validate_pin_code(cls, v: str) -> str:
        return validate_pin(v)


class EmployeeResponse(EmployeeBase):
    """PIN codes are never returned"""
    id: str
    business_id: str
    permissions: EmployeePermissions
    qr_code: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PinVerifyRequest(BaseModel):
    business_id: str
    pin_code: str

    @field_validator('pin_code')
    @classmethod
    def validate_pin_code(cls, v: str) -> str:
        return validate_pin(v)


class PinAvailabilityResponse(BaseModel):
    pin_code: str
    available: bool


class ShiftAction(BaseModel):
    notes: Optional[str] = Field(None, max_length=500)


class ShiftResponse(BaseModel):
    id: str
    employee_id: str
    business_id: str
    clock_in: datetime
    clock_out: Optional[datetime] = None
    duration: Optional[float] = None
    status: str
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class PerformanceMetrics(BaseModel):
    totalHours: float
    averageHoursPerShift: float
    totalShifts: int
    completedShifts: int


class EmployeePerformanceResponse(BaseModel):
    employee_id: str
    period: str
    metrics: PerformanceMetrics
    active_shift: Optional[ShiftResponse] = None
    shifts: List[ShiftResponse]
