from .branch import Branch, BranchStatus
from .service import Service, ServiceCategory
from .booking import Booking, BookingStatus, BookingSource, PaymentMethod
from .customer import Customer, LoyaltyTransaction, LoyaltyTransactionType

from sqlalchemy.orm import configure_mappers
configure_mappers()

__all__ = [
    "Branch", "BranchStatus",
    "Service", "ServiceCategory",
    "Booking", "BookingStatus", "BookingSource", "PaymentMethod",
    "Customer", "LoyaltyTransaction", "LoyaltyTransactionType"
]
