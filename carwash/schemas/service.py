from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator
from typing import Optional, List
from datetime import datetime

from carwash.models.service import ServiceCategory
from carwash.utils.validators import clean_required_text, reject_null

class ServiceBase(BaseModel):
    name: str
    description: Optional[str] = None
    category: ServiceCategory
    price: int
    pickup_fee: int = 0
    supports_pickup: bool = False
    duration: Optional[int] = 0
    features: Optional[List[str]] = []
    loyalty_points_reward: Optional[int] = None

class ServiceCreate(BaseModel):
    name: str
    description: Optional[str] = None
    category: ServiceCategory
    price: int = Field(gt=0)
    pickup_fee: int = Field(0, ge=0)
    supports_pickup: StrictBool = False
    duration: Optional[int] = Field(0, ge=0)
    features: List[str] = []
    loyalty_points_reward: Optional[int] = Field(None, ge=0)
    is_active: StrictBool = True

    model_config = ConfigDict(allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_required_text(v)

class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[ServiceCategory] = None
    price: Optional[int] = Field(None, gt=0)
    pickup_fee: Optional[int] = Field(None, ge=0)
    supports_pickup: Optional[StrictBool] = None
    duration: Optional[int] = Field(None, ge=0)
    features: Optional[List[str]] = None
    loyalty_points_reward: Optional[int] = Field(None, ge=0)
    is_active: Optional[StrictBool] = None

    model_config = ConfigDict(allow_inf_nan=False)

    @field_validator("category", "price", "pickup_fee", "supports_pickup", "features", "is_active")
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_required_text(v)

class ServiceResponse(ServiceBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class ServiceEnvelope(BaseModel):
    service: ServiceResponse

class ServiceListResponse(BaseModel):
    services: List[ServiceResponse]
