from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class PaymentRequest(BaseModel):
    amount: Decimal = Field(..., description="Amount in dollars, must be greater than 0")
    currency: str = Field("USD", max_length=3)


class ApplePayRequest(PaymentRequest):
    summary_label: str = Field("Your Purchase", max_length=100)


class CashPaymentRequest(BaseModel):
    amount: Decimal = Field(..., description="Amount due")
    amount_tendered: Decimal = Field(..., ge=0, description="Cash handed over by the customer")


class PaymentMethodsResponse(BaseModel):
    methods: List[str]
    apple_pay_available: bool
    currency: str


class PaymentResultResponse(BaseModel):
    success: bool
    method: str
    amount: Decimal
    transaction_id: Optional[str] = None
    nonce: Optional[str] = None
    card_brand: Optional[str] = None
    last_four_digits: Optional[str] = None
    amount_tendered: Optional[Decimal] = None
    change: Optional[Decimal] = None
    error: Optional[str] = None
    timestamp: datetime

    class Config:
        from_attributes = True
