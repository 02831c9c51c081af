from sqlalchemy import Column, String, Integer, Float, Boolean, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, generate_uuid


class Order(Base):
    """A cleaning order tracked from drop-off through pickup or delivery"""
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    order_number = Column(String(30), unique=True, nullable=False, index=True)
    order_date = Column(DateTime, nullable=False)
    due_date = Column(DateTime, nullable=True)
    status = Column(String(30), nullable=False, default="CREATED", index=True)
    notes = Column(Text, nullable=True)
    subtotal = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    tip = Column(Float, nullable=False, default=0)
    total = Column(Float, nullable=False, default=0)
    payment_method = Column(String(30), nullable=True)
    amount_tendered = Column(Float, nullable=True)
    change = Column(Float, nullable=True)
    priority = Column(Integer, nullable=False, default=0)  # 0 = normal, higher = more urgent
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    business_id = Column(String(36), ForeignKey("business.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    qr_code = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    def to_qr_fields(self) -> dict:
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "employeeId": self.employee_id,
            "businessId": self.business_id,
        }


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(String(36), ForeignKey("items.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(100), nullable=False)
    item_type = Column(String(20), nullable=False, default="service")
    price_at_order = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    status = Column(String(30), nullable=True)
    starch = Column(String(10), nullable=False, default="NONE")  # NONE | LIGHT | MEDIUM | HEAVY
    press_only = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    order = relationship("Order", back_populates="items")
