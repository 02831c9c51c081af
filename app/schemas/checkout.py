from pydantic import BaseModel, Field
from typing import Optional, List, Literal, Any, Dict
from datetime import datetime
from decimal import Decimal

from app.schemas.orders import OrderLineRequest, OrderResponse
from app.schemas.transactions import TransactionResponse
from app.schemas.payment import PaymentResultResponse


class QuoteRequest(BaseModel):
    business_id: str
    items: List[OrderLineRequest] = Field(..., min_length=1)
    tip: Decimal = Field(Decimal("0"), ge=0)


class QuoteLine(BaseModel):
    item_id: str
    name: str
    price: Decimal
    quantity: int
    line_total: Decimal


class QuoteResponse(BaseModel):
    items: List[QuoteLine]
    item_count: int
    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    tip: Decimal
    total: Decimal


class CheckoutRequest(QuoteRequest):
    customer_id: str
    employee_id: Optional[str] = None
    payment_method: Literal["cash", "card", "applepay"] = "cash"
    amount_tendered: Optional[Decimal] = Field(None, ge=0, description="Required for cash payments")
    due_date: Optional[datetime] = Field(None, description="Pickup date shown on the receipt")
    notes: Optional[str] = None
    customer_preferences: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "business_id": "2f1c7a52-4a47-4a39-9f49-5b0d1d9f0b11",
                "customer_id": "c0a8012e-5d2b-4c1f-9e0a-6a2d3b4c5d6e",
                "items": [{"item_id": "7b1b4d0c-1f4f-4d7a-8a8e-2b6f0c2d9e44", "quantity": 3, "starch": "LIGHT"}],
                "tip": "2.00",
                "payment_method": "cash",
                "amount_tendered": "40.00"
            }
        }


class CheckoutResponse(BaseModel):
    order: OrderResponse
    transaction: TransactionResponse
    payment: PaymentResultResponse
    receipt: Dict[str, Any]
