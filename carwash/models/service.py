from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from carwash.database import Base

class ServiceCategory(str, enum.Enum):
    CAR_REGULAR = "car-regular"
    CAR_PREMIUM = "car-premium"
    MOTORCYCLE = "motorcycle"

class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    category = Column(
        Enum(ServiceCategory, values_callable=lambda e: [m.value for m in e], name="service_category"),
        nullable=False
    )
    price = Column(Integer, nullable=False)
    pickup_fee = Column(Integer, default=0, nullable=False)
    supports_pickup = Column(Boolean, default=False, nullable=False)
    duration = Column(Integer, default=0)  # minutes
    features = Column(JSON, default=list)
    loyalty_points_reward = Column(Integer)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    bookings = relationship("Booking", back_populates="service")
