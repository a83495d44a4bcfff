from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from carwash.core.dependencies import require_admin
from carwash.database import get_db
from carwash.schemas.booking import BookingResponse
from carwash.schemas.report import ReportResponse
from carwash.services.report_service import ReportService

router = APIRouter()

@router.get("", response_model=ReportResponse)
def get_report(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    branch_id: Optional[int] = Query(None, alias="branchId"),
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Revenue report over completed bookings"""
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="startDate must not be after endDate"
        )

    report = ReportService.build_report(db, start_date, end_date, branch_id)
    report["bookings"] = [BookingResponse.model_validate(b) for b in report["bookings"]]
    return report
