from .booking import BookingCreate, BookingUpdate, BookingResponse, BookingEnvelope, BookingListResponse, BookingStatsResponse
from .service import ServiceCreate, ServiceUpdate, ServiceResponse, ServiceEnvelope, ServiceListResponse
from .branch import BranchCreate, BranchUpdate, BranchResponse, BranchEnvelope, BranchListResponse
from .customer import CustomerCreate, CustomerUpdate, CustomerResponse, CustomerEnvelope, CustomerListResponse, LoyaltyTransactionResponse
from .report import ReportResponse, ReportSummary, ReportGroup
from .auth import LoginRequest, PasswordHashRequest, PasswordHashResponse, SessionResponse

__all__ = [
    "BookingCreate", "BookingUpdate", "BookingResponse", "BookingEnvelope", "BookingListResponse", "BookingStatsResponse",
    "ServiceCreate", "ServiceUpdate", "ServiceResponse", "ServiceEnvelope", "ServiceListResponse",
    "BranchCreate", "BranchUpdate", "BranchResponse", "BranchEnvelope", "BranchListResponse",
    "CustomerCreate", "CustomerUpdate", "CustomerResponse", "CustomerEnvelope", "CustomerListResponse", "LoyaltyTransactionResponse",
    "ReportResponse", "ReportSummary", "ReportGroup",
    "LoginRequest", "PasswordHashRequest", "PasswordHashResponse", "SessionResponse"
]
