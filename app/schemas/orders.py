from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime

from app.services.order_workflow import OrderStatus
from app.utils.validators import reject_null

StarchLevel = Literal["NONE", "LIGHT", "MEDIUM", "HEAVY"]


class OrderLineRequest(BaseModel):
    item_id: str = Field(..., description="Catalog item id; the price is taken from the catalog")
    quantity: int = Field(1, ge=1, le=1000)
    starch: StarchLevel = "NONE"
    press_only: bool = False
    notes: Optional[str] = Field(None, max_length=500)


class OrderCreate(BaseModel):
    """Drop-off order that is paid later (paid orders go through /api/checkout)"""
    business_id: str
    customer_id: str
    employee_id: Optional[str] = None
    items: List[OrderLineRequest] = Field(..., min_length=1)
    due_date: Optional[datetime] = None
    notes: Optional[str] = None
    priority: int = Field(0, ge=0)


class OrderUpdate(BaseModel):
    """Status is not editable here; use PATCH /{order_id}/status"""
    due_date: Optional[datetime] = None
    notes: Optional[str] = None
    priority: Optional[int] = Field(None, ge=0)
    employee_id: Optional[str] = None

    @field_validator('priority', mode='before')
    @classmethod
    def validate_priority(cls, v):
        return reject_null(v, "priority")


class OrderItemResponse(BaseModel):
    id: str
    item_id: Optional[str] = None
    name: str
    item_type: str
    price_at_order: float
    quantity: int
    status: Optional[str] = None
    starch: str
    press_only: bool
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: str
    order_number: str
    order_date: datetime
    due_date: Optional[datetime] = None
    status: OrderStatus
    notes: Optional[str] = None
    subtotal: float
    tax: float
    tip: float
    total: float
    payment_method: Optional[str] = None
    amount_tendered: Optional[float] = None
    change: Optional[float] = None
    priority: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    customer_id: str
    business_id: str
    employee_id: Optional[str] = None
    qr_code: Optional[str] = None
    items: List[OrderItemResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderStatusUpdate(BaseModel):
    status: OrderStatus

    class Config:
        json_schema_extra = {"example": {"status": "PROCESSING"}}


class StatusOption(BaseModel):
    value: OrderStatus
    label: str


class NextStatusesResponse(BaseModel):
    order_id: str
    current_status: str
    next_statuses: List[StatusOption]
