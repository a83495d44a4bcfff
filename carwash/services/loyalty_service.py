import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from carwash.core.config import settings
from carwash.models.booking import Booking
from carwash.models.customer import Customer, LoyaltyTransaction, LoyaltyTransactionType

logger = logging.getLogger(__name__)

TIERS = (
    (200, "Platinum"),
    (100, "Gold"),
    (50, "Silver"),
    (0, "Bronze"),
)

@dataclass(frozen=True)
class Redemption:
    points_used: int
    discount: int
    total_price: int

def calculate_points_earned(total_price: float, reward_override: Optional[int] = None) -> int:
    """Points a booking earns, fixed once at creation time"""
    if reward_override is not None:
        return max(int(reward_override), 0)
    return max(math.floor(total_price / settings.LOYALTY_EARN_RATE), 0)

def calculate_redemption(points_requested: int, balance: int, subtotal: int) -> Redemption:
    """Apply up to ``points_requested`` points against ``subtotal``.

    Points are capped at the available balance and at the number of points
    the subtotal can absorb, so a customer never burns points for nothing.
    The discount never exceeds the subtotal and the total never drops below
    zero.
    """
    point_value = settings.LOYALTY_POINT_VALUE
    usable = min(max(points_requested, 0), max(balance, 0))
    usable = min(usable, math.ceil(max(subtotal, 0) / point_value))
    discount = min(usable * point_value, max(subtotal, 0))
    return Redemption(points_used=usable, discount=discount, total_price=max(subtotal - discount, 0))

def customer_tier(points: int) -> str:
    for threshold, name in TIERS:
        if points >= threshold:
            return name
    return TIERS[-1][1]

def redeemable_value(points: int) -> int:
    return max(points, 0) * settings.LOYALTY_POINT_VALUE

class LoyaltyService:
    @staticmethod
    def record_transaction(
        db: Session,
        customer: Customer,
        points: int,
        tx_type: LoyaltyTransactionType,
        description: str,
        booking_id: Optional[int] = None,
    ) -> LoyaltyTransaction:
        """Append a ledger entry; the caller owns the commit"""
        transaction = LoyaltyTransaction(
            customer_id=customer.id,
            booking_id=booking_id,
            type=tx_type,
            points=points,
            description=description,
        )
        db.add(transaction)
        return transaction

    @staticmethod
    def credit_completed_booking(db: Session, booking: Booking) -> bool:
        """Credit a completed booking's earned points exactly once.

        The ``points_credited`` flag is claimed with a single conditional
        UPDATE; only the request that flips it credits the customer, so a
        repeated completion request is a no-op. When no customer matches the
        booking's phone the flag is left unset, so re-sending ``completed``
        once the customer exists still credits the points. Returns True when
        points were credited by this call. The caller owns the commit.
        """
        customer = db.query(Customer).filter(Customer.phone == booking.customer_phone).first()
        if not customer:
            logger.warning(f"No customer with phone {booking.customer_phone} to credit for booking {booking.booking_code}")
            return False

        result = db.execute(
            update(Booking)
            .where(Booking.id == booking.id, Booking.points_credited.is_(False))
            .values(points_credited=True, points_credited_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.info(f"Points for booking {booking.booking_code} already credited")
            return False

        points = booking.loyalty_points_earned or 0
        if points > 0:
            customer.total_loyalty_points = (customer.total_loyalty_points or 0) + points
            LoyaltyService.record_transaction(
                db,
                customer,
                points,
                LoyaltyTransactionType.EARN,
                f"Earned from booking {booking.booking_code}",
                booking_id=booking.id,
            )
        logger.info(f"Credited {points} points to customer {customer.id} for booking {booking.booking_code}")
        return True
