from sqlalchemy import Column, String, Float, Date, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, generate_uuid

class Employee(Base):
    __tablename__ = "employees"
    
    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    first_name = Column(String(100), index=True, nullable=False)
    last_name = Column(String(100), index=True, nullable=False)
    email = Column(String(100), index=True, nullable=True)
    phone_number = Column(String(20), nullable=False)
    role = Column(String(20), nullable=False, default="STAFF")  # ADMIN | MANAGER | STAFF
    status = Column(String(20), nullable=False, default="ACTIVE")  # ACTIVE | INACTIVE | SUSPENDED
    hire_date = Column(Date, nullable=False)
    hourly_rate = Column(Float, nullable=True)
    pin_code = Column(String(4), nullable=False)
    permissions = Column(JSON, nullable=True)  # {manageEmployees: bool, ...}
    business_id = Column(String(36), ForeignKey("business.id", ondelete="CASCADE"), nullable=False, index=True)
    qr_code = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    shifts = relationship("EmployeeShift", back_populates="employee", cascade="all, delete-orphan")

    # PIN codes identify an employee at the counter, so one per business
    __table_args__ = (
        UniqueConstraint('business_id', 'pin_code', name='uq_business_employee_pin'),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_qr_fields(self) -> dict:
        return {"id": self.id, "phone": self.phone_number, "businessId": self.business_id}
