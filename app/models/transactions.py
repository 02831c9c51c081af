from sqlalchemy import Column, String, Integer, Float, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, generate_uuid


class Transaction(Base):
    """Payment record created at checkout"""
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    transaction_number = Column(String(50), unique=True, nullable=False, index=True)
    transaction_date = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False)  # Completed | Failed | Refunded
    subtotal = Column(Float, nullable=False)
    tax = Column(Float, nullable=False)
    tip = Column(Float, nullable=False, default=0)
    discount = Column(Float, nullable=True)
    total = Column(Float, nullable=False)
    payment_method = Column(String(30), nullable=False)
    payment_status = Column(String(20), nullable=False)  # Paid | Failed
    external_transaction_id = Column(String(100), nullable=True)  # Nonce from the payment gateway
    notes = Column(Text, nullable=True)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    business_id = Column(String(36), ForeignKey("business.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="SET NULL"), nullable=True, index=True)
    pickup_date = Column(DateTime, nullable=True)
    customer_preferences = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    items = relationship("TransactionItem", back_populates="transaction", cascade="all, delete-orphan")


class TransactionItem(Base):
    __tablename__ = "transaction_items"

    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    transaction_id = Column(String(36), ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(String(36), ForeignKey("items.id", ondelete="SET NULL"), nullable=True)
    quantity = Column(Integer, nullable=False)
    price_at_transaction = Column(Float, nullable=False)

    transaction = relationship("Transaction", back_populates="items")
