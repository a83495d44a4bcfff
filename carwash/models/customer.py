from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, ForeignKey, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from carwash.database import Base

class LoyaltyTransactionType(str, enum.Enum):
    EARN = "earn"
    REDEEM = "redeem"
    ADJUST = "adjust"

class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), unique=True, index=True, nullable=False)
    email = Column(String(255))
    vehicle_plate_numbers = Column(JSON, default=list)
    total_bookings = Column(Integer, default=0, nullable=False)
    total_loyalty_points = Column(Integer, default=0, nullable=False)
    join_date = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    loyalty_transactions = relationship(
        "LoyaltyTransaction",
        back_populates="customer",
        order_by="LoyaltyTransaction.id.desc()"
    )

class LoyaltyTransaction(Base):
    __tablename__ = "loyalty_transactions"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="SET NULL"))
    type = Column(
        Enum(LoyaltyTransactionType, values_callable=lambda e: [m.value for m in e], name="loyalty_transaction_type"),
        nullable=False
    )
    points = Column(Integer, nullable=False)  # signed
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    customer = relationship("Customer", back_populates="loyalty_transactions")
    booking = relationship("Booking", back_populates="loyalty_transactions")
