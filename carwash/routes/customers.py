from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from carwash.core.config import settings
from carwash.core.dependencies import require_admin
from carwash.database import get_db
from carwash.schemas.customer import (
    CustomerCreate,
    CustomerEnvelope,
    CustomerListResponse,
    CustomerResponse,
    CustomerUpdate,
    LoyaltyBalanceResponse,
    LoyaltyTransactionListResponse,
    LoyaltyTransactionResponse,
)
from carwash.services.customer_service import CustomerService
from carwash.services.loyalty_service import customer_tier, redeemable_value
from carwash.utils.validators import normalize_phone_number, validate_phone_number

router = APIRouter()

@router.get("", response_model=CustomerListResponse)
def get_customers(
    phone: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    customers, total = CustomerService.list_customers(db, phone, search, page, limit)
    return {
        "customers": [CustomerResponse.model_validate(c) for c in customers],
        "total": total,
    }

@router.post("", response_model=CustomerEnvelope, status_code=status.HTTP_201_CREATED)
def create_customer(
    customer_data: CustomerCreate,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    customer = CustomerService.create_customer(db, customer_data)
    return {"customer": CustomerResponse.model_validate(customer)}

@router.get("/loyalty", response_model=LoyaltyBalanceResponse)
def get_loyalty_balance(
    phone: str = Query(...),
    db: Session = Depends(get_db)
):
    """Public balance lookup used by the booking wizard before redeeming"""
    if not validate_phone_number(phone):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="phone must be an Indonesian mobile number (+62, 62 or 0 followed by 9-13 digits)"
        )

    customer = CustomerService.get_by_phone(db, phone)
    points = customer.total_loyalty_points if customer else 0
    return {
        "name": customer.name if customer else None,
        "phone": customer.phone if customer else normalize_phone_number(phone),
        "total_loyalty_points": points,
        "tier": customer_tier(points),
        "point_value": settings.LOYALTY_POINT_VALUE,
        "redeemable_value": redeemable_value(points),
    }

@router.get("/{customer_id}", response_model=CustomerEnvelope)
def get_customer(
    customer_id: int,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    customer = CustomerService.get_customer_by_id(db, customer_id)
    return {"customer": CustomerResponse.model_validate(customer)}

@router.put("/{customer_id}", response_model=CustomerEnvelope)
def update_customer(
    customer_id: int,
    update_data: CustomerUpdate,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    customer = CustomerService.update_customer(db, customer_id, update_data, admin_username)
    return {"customer": CustomerResponse.model_validate(customer)}

@router.get("/{customer_id}/loyalty-transactions", response_model=LoyaltyTransactionListResponse)
def get_loyalty_transactions(
    customer_id: int,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    transactions = CustomerService.list_transactions(db, customer_id)
    return {"transactions": [LoyaltyTransactionResponse.model_validate(t) for t in transactions]}
