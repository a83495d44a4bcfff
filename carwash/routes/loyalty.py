from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from carwash.database import get_db
from carwash.schemas.customer import LoyaltyEstimateResponse
from carwash.services.catalog_service import CatalogService
from carwash.services.loyalty_service import calculate_points_earned

router = APIRouter()

@router.get("/estimate", response_model=LoyaltyEstimateResponse)
def estimate_points(
    total_price: int = Query(..., ge=0, alias="totalPrice"),
    service_id: Optional[int] = Query(None, alias="serviceId"),
    db: Session = Depends(get_db)
):
    """Points a booking with this total would earn"""
    reward_override = None
    if service_id:
        reward_override = CatalogService.get_service_by_id(db, service_id).loyalty_points_reward
    return {
        "total_price": total_price,
        "loyalty_points_earned": calculate_points_earned(total_price, reward_override),
    }
