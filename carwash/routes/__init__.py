from .auth import router as auth_router
from .bookings import router as bookings_router
from .services import router as services_router
from .branches import router as branches_router
from .customers import router as customers_router
from .reports import router as reports_router
from .loyalty import router as loyalty_router

__all__ = [
    "auth_router",
    "bookings_router",
    "services_router",
    "branches_router",
    "customers_router",
    "reports_router",
    "loyalty_router"
]
