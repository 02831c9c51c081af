from sqlalchemy import Column, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, generate_uuid

class EmployeeShift(Base):
    """
    A clock-in/clock-out span for one employee.
    status is ACTIVE while the employee is clocked in and COMPLETED afterwards;
    duration holds the worked hours once the shift is closed.
    """
    __tablename__ = "employee_shifts"

    id = Column(String(36), primary_key=True, index=True, default=generate_uuid)
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    business_id = Column(String(36), ForeignKey("business.id", ondelete="CASCADE"), nullable=False, index=True)
    clock_in = Column(DateTime, nullable=False, index=True)
    clock_out = Column(DateTime, nullable=True)
    duration = Column(Float, nullable=True)
    status = Column(String(20), nullable=False, default="ACTIVE")
    notes = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    employee = relationship("Employee", back_populates="shifts")
