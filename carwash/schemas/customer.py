from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from typing import Optional, List
from datetime import datetime

from carwash.models.customer import LoyaltyTransactionType
from carwash.services.loyalty_service import customer_tier
from carwash.utils.validators import clean_email, clean_phone, clean_required_text, reject_null

class CustomerCreate(BaseModel):
    name: str
    phone: str
    email: Optional[str] = None
    vehicle_plate_numbers: List[str] = []
    total_bookings: int = Field(0, ge=0)
    total_loyalty_points: int = Field(0, ge=0)

    model_config = ConfigDict(allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_required_text(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return clean_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return clean_email(v)

class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    vehicle_plate_numbers: Optional[List[str]] = None
    total_bookings: Optional[int] = Field(None, ge=0)
    total_loyalty_points: Optional[int] = Field(None, ge=0)

    model_config = ConfigDict(allow_inf_nan=False)

    @field_validator("vehicle_plate_numbers", "total_bookings", "total_loyalty_points")
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_required_text(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return clean_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return clean_email(v)

class CustomerResponse(BaseModel):
    id: int
    name: str
    phone: str
    email: Optional[str] = None
    vehicle_plate_numbers: List[str] = []
    total_bookings: int
    total_loyalty_points: int
    join_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def tier(self) -> str:
        return customer_tier(self.total_loyalty_points)

class CustomerEnvelope(BaseModel):
    customer: CustomerResponse

class CustomerListResponse(BaseModel):
    customers: List[CustomerResponse]
    total: int

class LoyaltyTransactionResponse(BaseModel):
    id: int
    customer_id: int
    booking_id: Optional[int] = None
    type: LoyaltyTransactionType
    points: int
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class LoyaltyTransactionListResponse(BaseModel):
    transactions: List[LoyaltyTransactionResponse]

class LoyaltyBalanceResponse(BaseModel):
    name: Optional[str] = None
    phone: str
    total_loyalty_points: int
    tier: str
    point_value: int
    redeemable_value: int

class LoyaltyEstimateResponse(BaseModel):
    total_price: int
    loyalty_points_earned: int
