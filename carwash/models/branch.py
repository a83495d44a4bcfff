from sqlalchemy import Column, Integer, String, DateTime, Text, Float, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from carwash.database import Base

class BranchStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

class Branch(Base):
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    phone = Column(String(20))
    manager = Column(String(255))
    staff_count = Column(Integer, default=0)

    bank_name = Column(String(100))
    bank_account_number = Column(String(50))
    bank_account_name = Column(String(255))

    operating_hours_open = Column(String(5), default="08:00")
    operating_hours_close = Column(String(5), default="18:00")
    pickup_coverage_radius = Column(Float, default=0)
    latitude = Column(Float)
    longitude = Column(Float)

    status = Column(
        Enum(BranchStatus, values_callable=lambda e: [m.value for m in e], name="branch_status"),
        default=BranchStatus.ACTIVE,
        nullable=False
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    bookings = relationship("Booking", back_populates="branch")
