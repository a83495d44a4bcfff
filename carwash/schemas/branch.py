from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from typing import Any, Dict, Optional, List
from datetime import datetime

from carwash.models.branch import BranchStatus
from carwash.utils.validators import clean_required_text, clean_time, reject_null

FLAT_FIELDS = (
    "name",
    "address",
    "phone",
    "manager",
    "staff_count",
    "bank_name",
    "bank_account_number",
    "bank_account_name",
    "operating_hours_open",
    "operating_hours_close",
    "pickup_coverage_radius",
    "latitude",
    "longitude",
    "status",
)

CAMEL_FIELDS = {
    "staffCount": "staff_count",
    "pickupCoverageRadius": "pickup_coverage_radius",
}

def flatten_branch_payload(body: Dict[str, Any]) -> Dict[str, Any]:
    """Map the admin UI's branch shape onto column names.

    Accepts flat column names, the camelCase ``staffCount`` and
    ``pickupCoverageRadius``, and the nested ``bankAccount`` and
    ``operatingHours`` objects. Unknown keys are dropped.
    """
    payload = {key: body[key] for key in FLAT_FIELDS if key in body}

    for camel, column in CAMEL_FIELDS.items():
        if camel in body:
            payload[column] = body[camel]

    bank_account = body.get("bankAccount")
    if isinstance(bank_account, dict):
        if "bank" in bank_account:
            payload["bank_name"] = bank_account["bank"]
        if "accountNumber" in bank_account:
            payload["bank_account_number"] = bank_account["accountNumber"]
        if "accountName" in bank_account:
            payload["bank_account_name"] = bank_account["accountName"]

    hours = body.get("operatingHours")
    if isinstance(hours, dict):
        if "open" in hours:
            payload["operating_hours_open"] = hours["open"]
        if "close" in hours:
            payload["operating_hours_close"] = hours["close"]

    return payload

class BankAccount(BaseModel):
    bank: Optional[str] = None
    accountNumber: Optional[str] = None
    accountName: Optional[str] = None

class OperatingHours(BaseModel):
    open: Optional[str] = None
    close: Optional[str] = None

class BranchCreate(BaseModel):
    name: str
    address: str
    phone: Optional[str] = Field(None, max_length=20)
    manager: Optional[str] = None
    staff_count: int = Field(0, ge=0)
    bank_name: Optional[str] = Field(None, max_length=100)
    bank_account_number: Optional[str] = Field(None, max_length=50)
    bank_account_name: Optional[str] = None
    operating_hours_open: str = "08:00"
    operating_hours_close: str = "18:00"
    pickup_coverage_radius: float = Field(0, ge=0)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    status: BranchStatus = BranchStatus.ACTIVE

    model_config = ConfigDict(allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def accept_nested_shape(cls, data):
        if isinstance(data, dict):
            return flatten_branch_payload(data)
        return data

    @field_validator("name", "address")
    @classmethod
    def validate_text(cls, v):
        return clean_required_text(v)

    @field_validator("operating_hours_open", "operating_hours_close")
    @classmethod
    def validate_hours(cls, v):
        return clean_time(v)

class BranchUpdate(BaseModel):
    """Partial update; accepts the same flat and nested shapes as create"""
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    manager: Optional[str] = None
    staff_count: Optional[int] = Field(None, ge=0)
    bank_name: Optional[str] = Field(None, max_length=100)
    bank_account_number: Optional[str] = Field(None, max_length=50)
    bank_account_name: Optional[str] = None
    operating_hours_open: Optional[str] = None
    operating_hours_close: Optional[str] = None
    pickup_coverage_radius: Optional[float] = Field(None, ge=0)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    status: Optional[BranchStatus] = None

    model_config = ConfigDict(allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def accept_nested_shape(cls, data):
        if isinstance(data, dict):
            return flatten_branch_payload(data)
        return data

    @field_validator("staff_count", "pickup_coverage_radius", "status")
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

    @field_validator("name", "address")
    @classmethod
    def validate_text(cls, v):
        return clean_required_text(v)

    @field_validator("operating_hours_open", "operating_hours_close")
    @classmethod
    def validate_hours(cls, v):
        return clean_time(v)

class BranchResponse(BaseModel):
    id: int
    name: str
    address: str
    phone: Optional[str] = None
    manager: Optional[str] = None
    staff_count: Optional[int] = None
    bank_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    bank_account_name: Optional[str] = None
    operating_hours_open: Optional[str] = None
    operating_hours_close: Optional[str] = None
    pickup_coverage_radius: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    status: BranchStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def bankAccount(self) -> BankAccount:
        return BankAccount(
            bank=self.bank_name,
            accountNumber=self.bank_account_number,
            accountName=self.bank_account_name
        )

    @computed_field
    @property
    def operatingHours(self) -> OperatingHours:
        return OperatingHours(open=self.operating_hours_open, close=self.operating_hours_close)

class BranchEnvelope(BaseModel):
    branch: BranchResponse

class BranchListResponse(BaseModel):
    branches: List[BranchResponse]
