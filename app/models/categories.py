from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base, generate_uuid


class Category(Base):
    """
    Category model for grouping catalog items (e.g. Dry Cleaning, Laundry, Alterations).
    Category names are unique within a business.
    """
    __tablename__ = "categories"
    
    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    name = Column(String(100), index=True, nullable=False)
    description = Column(String(500), nullable=True)
    business_id = Column(String(36), ForeignKey("business.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    items = relationship("Item", back_populates="category", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('business_id', 'name', name='uq_business_category_name'),
    )
