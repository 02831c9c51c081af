from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base, generate_uuid

class Item(Base):
    """A service (e.g. shirt pressing) or a product sold at the counter"""
    __tablename__ = "items"
    
    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    name = Column(String(100), index=True, nullable=False)
    description = Column(String(255), nullable=True)
    price = Column(Float, nullable=False)
    duration = Column(Integer, nullable=True)  # Minutes, services only
    sku = Column(String(50), nullable=True, index=True)
    taxable = Column(Boolean, default=True, nullable=False)
    image_url = Column(String(500), nullable=True)
    item_type = Column(String(20), default="service", nullable=False)  # service | product
    business_id = Column(String(36), ForeignKey("business.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)
    qr_code = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    category = relationship("Category", back_populates="items")

    def to_qr_fields(self) -> dict:
        return {"id": self.id, "businessId": self.business_id}
