from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.utils.validators import validate_email


class TransactionItemResponse(BaseModel):
    id: str
    item_id: Optional[str] = None
    quantity: int
    price_at_transaction: float

    class Config:
        from_attributes = True


class TransactionResponse(BaseModel):
    id: str
    transaction_number: str
    transaction_date: datetime
    status: str
    subtotal: float
    tax: float
    tip: float
    discount: Optional[float] = None
    total: float
    payment_method: str
    payment_status: str
    external_transaction_id: Optional[str] = None
    notes: Optional[str] = None
    customer_id: str
    business_id: str
    employee_id: Optional[str] = None
    order_id: Optional[str] = None
    pickup_date: Optional[datetime] = None
    customer_preferences: Optional[str] = None
    items: List[TransactionItemResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True


class EmailReceiptRequest(BaseModel):
    email: Optional[str] = Field(None, description="Defaults to the customer's email on file")

    @field_validator('email')
    @classmethod
    def validate_email_address(cls, v: Optional[str]) -> Optional[str]:
        return validate_email(v)


class EmailReceiptResponse(BaseModel):
    transaction_id: str
    email: str
    sent: bool
