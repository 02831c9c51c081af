from sqlalchemy import Column, String, Text, Boolean, Date, DateTime
from sqlalchemy.sql import func
from app.database import Base, generate_uuid

class Business(Base):
    __tablename__ = "business"
    
    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    name = Column(String(200), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    zip_code = Column(String(20), nullable=True)
    phone_number = Column(String(20), nullable=False)
    email = Column(String(100), nullable=True)
    website = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    hours = Column(String(255), nullable=True)
    logo_url = Column(String(500), nullable=True)
    industry = Column(String(100), nullable=True)
    established_date = Column(Date, nullable=True)
    tax_id = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    user_id = Column(String(36), nullable=False, index=True)  # Owner's user id
    qr_code = Column(String(255), nullable=True)  # Storage key of the QR image
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def to_qr_fields(self) -> dict:
        return {"id": self.id, "name": self.name, "phoneNumber": self.phone_number}
