from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Text, ForeignKey, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from carwash.database import Base

class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PICKED_UP = "picked-up"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class BookingSource(str, enum.Enum):
    ONLINE = "online"
    OFFLINE = "offline"

class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    TRANSFER = "transfer"
    QRIS = "qris"
    CARD = "card"

def _enum_values(enum_cls):
    return [member.value for member in enum_cls]

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    booking_code = Column(String(20), index=True, nullable=False)

    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(20), index=True, nullable=False)
    customer_email = Column(String(255), nullable=False)

    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False)
    booking_date = Column(Date, index=True, nullable=False)
    booking_time = Column(String(5), nullable=False)

    subtotal_price = Column(Integer, nullable=False, default=0)
    total_price = Column(Integer, nullable=False)

    is_pickup_service = Column(Boolean, default=False, nullable=False)
    pickup_address = Column(Text)
    pickup_notes = Column(Text)
    vehicle_plate_number = Column(String(20), nullable=False)

    payment_method = Column(Enum(PaymentMethod, values_callable=_enum_values, name="payment_method"), nullable=False)
    payment_proof = Column(String(500))
    payment_proof_public_id = Column(String(255))
    notes = Column(Text)

    loyalty_points_used = Column(Integer, default=0, nullable=False)
    loyalty_points_earned = Column(Integer, default=0, nullable=False)
    points_credited = Column(Boolean, default=False, nullable=False)
    points_credited_at = Column(DateTime(timezone=True))

    status = Column(
        Enum(BookingStatus, values_callable=_enum_values, name="booking_status"),
        default=BookingStatus.PENDING,
        index=True,
        nullable=False
    )
    booking_source = Column(
        Enum(BookingSource, values_callable=_enum_values, name="booking_source"),
        default=BookingSource.ONLINE,
        nullable=False
    )
    created_by_admin = Column(Boolean, default=False, nullable=False)
    admin_username = Column(String(100))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    service = relationship("Service", back_populates="bookings")
    branch = relationship("Branch", back_populates="bookings")
    loyalty_transactions = relationship("LoyaltyTransaction", back_populates="booking", passive_deletes=True)
