from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationInfo,
    computed_field,
    field_validator,
)
from typing import Optional, List
from datetime import datetime, date

from carwash.models.booking import BookingStatus, BookingSource, PaymentMethod
from carwash.models.service import ServiceCategory
from carwash.services.status_flow import allowed_next_statuses
from carwash.utils.validators import (
    clean_booking_date,
    clean_email,
    clean_phone,
    clean_plate,
    clean_required_text,
    clean_time,
    reject_null,
)

class BookingCreate(BaseModel):
    customer_name: str
    customer_phone: str
    customer_email: str
    service_id: int = Field(gt=0)
    branch_id: int = Field(gt=0)
    booking_date: date
    booking_time: str
    total_price: float = Field(gt=0)
    is_pickup_service: StrictBool = False
    pickup_address: Optional[str] = Field(None, validate_default=True)
    pickup_notes: Optional[str] = None
    vehicle_plate_number: str
    payment_method: PaymentMethod
    loyalty_points_used: int = Field(0, ge=0)
    notes: Optional[str] = None
    booking_source: Optional[BookingSource] = None
    created_by_admin: StrictBool = False

    model_config = ConfigDict(allow_inf_nan=False)

    @field_validator("customer_name")
    @classmethod
    def validate_name(cls, v):
        return clean_required_text(v)

    @field_validator("customer_phone")
    @classmethod
    def validate_phone(cls, v):
        return clean_phone(v)

    @field_validator("customer_email")
    @classmethod
    def validate_email(cls, v):
        return clean_email(v)

    @field_validator("booking_date", mode="before")
    @classmethod
    def validate_date_format(cls, v):
        return clean_booking_date(v)

    @field_validator("booking_time")
    @classmethod
    def validate_time(cls, v):
        return clean_time(v)

    @field_validator("vehicle_plate_number")
    @classmethod
    def validate_plate(cls, v):
        return clean_plate(v)

    @field_validator("pickup_address")
    @classmethod
    def validate_pickup_address(cls, v, info: ValidationInfo):
        if v is not None:
            v = v.strip() or None
        if info.data.get("is_pickup_service") and not v:
            raise ValueError("is required for pickup service")
        return v

class BookingUpdate(BaseModel):
    """Admin correction; every field optional, unknown fields ignored"""
    status: Optional[BookingStatus] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    booking_date: Optional[date] = None
    booking_time: Optional[str] = None
    vehicle_plate_number: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    payment_proof: Optional[str] = None
    pickup_address: Optional[str] = None
    pickup_notes: Optional[str] = None
    notes: Optional[str] = None
    branch_id: Optional[int] = Field(None, gt=0)

    model_config = ConfigDict(allow_inf_nan=False)

    @field_validator("status", "booking_date", "payment_method", "branch_id")
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

    @field_validator("customer_name")
    @classmethod
    def validate_name(cls, v):
        return clean_required_text(v)

    @field_validator("customer_phone")
    @classmethod
    def validate_phone(cls, v):
        return clean_phone(v)

    @field_validator("customer_email")
    @classmethod
    def validate_email(cls, v):
        return clean_email(reject_null(v))

    @field_validator("booking_date", mode="before")
    @classmethod
    def validate_date_format(cls, v):
        return clean_booking_date(v)

    @field_validator("booking_time")
    @classmethod
    def validate_time(cls, v):
        return clean_time(v)

    @field_validator("vehicle_plate_number")
    @classmethod
    def validate_plate(cls, v):
        return clean_plate(v)

class BookingServiceSummary(BaseModel):
    id: int
    name: str
    category: ServiceCategory
    price: int
    duration: Optional[int] = None
    pickup_fee: int = 0
    features: Optional[List[str]] = []

    model_config = ConfigDict(from_attributes=True)

class BookingBranchSummary(BaseModel):
    id: int
    name: str
    address: str
    phone: Optional[str] = None
    pickup_coverage_radius: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)

class BookingResponse(BaseModel):
    id: int
    booking_code: str
    customer_name: str
    customer_phone: str
    customer_email: str
    service_id: int
    branch_id: int
    booking_date: date
    booking_time: str
    subtotal_price: int
    total_price: int
    is_pickup_service: bool
    pickup_address: Optional[str] = None
    pickup_notes: Optional[str] = None
    vehicle_plate_number: str
    payment_method: PaymentMethod
    payment_proof: Optional[str] = None
    notes: Optional[str] = None
    loyalty_points_used: int
    loyalty_points_earned: int
    points_credited: bool
    status: BookingStatus
    booking_source: BookingSource
    created_by_admin: bool
    admin_username: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    services: Optional[BookingServiceSummary] = Field(None, validation_alias=AliasChoices("service", "services"))
    branches: Optional[BookingBranchSummary] = Field(None, validation_alias=AliasChoices("branch", "branches"))

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def allowed_transitions(self) -> List[BookingStatus]:
        return allowed_next_statuses(self.status, self.is_pickup_service)

class BookingEnvelope(BaseModel):
    booking: BookingResponse

class BookingListResponse(BaseModel):
    bookings: List[BookingResponse]
    total: int
    page: int
    limit: int

class BookingStatsResponse(BaseModel):
    total_bookings: int
    total_revenue: int
    completed_bookings: int
    status_counts: dict

class WhatsAppLinkResponse(BaseModel):
    phone: str
    message: str
    url: str
