from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.database import Base, generate_uuid

class User(Base):
    """Account holder. Its id is the owner/filter field carried by businesses and customers."""
    __tablename__ = "users"
    
    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    email = Column(String(100), unique=True, index=True, nullable=False)
    username = Column(String(50), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=True)
    role = Column(String(50), default="owner")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
