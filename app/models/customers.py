from sqlalchemy import Column, String, Text, Date, DateTime, JSON, ForeignKey, Index
from sqlalchemy.sql import func
from app.database import Base, generate_uuid

class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    first_name = Column(String(100), nullable=False, index=True)
    last_name = Column(String(100), nullable=False, index=True)
    email = Column(String(100), nullable=True)
    phone_number = Column(String(20), nullable=False)  # Digits only
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    zip_code = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)
    join_date = Column(Date, nullable=False)
    last_active_date = Column(Date, nullable=True)
    preferences = Column(JSON, nullable=True)
    business_id = Column(String(36), ForeignKey("business.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), nullable=True, index=True)
    qr_code = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index('idx_customer_business_phone', 'business_id', 'phone_number'),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_qr_fields(self) -> dict:
        return {"id": self.id, "phone": self.phone_number, "businessId": self.business_id}
