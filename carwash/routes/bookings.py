from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status as http_status
from sqlalchemy.orm import Session

from carwash.core.dependencies import optional_admin, require_admin
from carwash.database import get_db
from carwash.models.booking import BookingStatus
from carwash.schemas.booking import (
    BookingCreate,
    BookingEnvelope,
    BookingListResponse,
    BookingResponse,
    BookingStatsResponse,
    BookingUpdate,
    WhatsAppLinkResponse,
)
from carwash.services.booking_service import BookingService
from carwash.services.notification import build_whatsapp_link
from carwash.services.report_service import ReportService

router = APIRouter()

@router.post("", response_model=BookingEnvelope, status_code=http_status.HTTP_201_CREATED)
def create_booking(
    booking_data: BookingCreate,
    admin_username: Optional[str] = Depends(optional_admin),
    db: Session = Depends(get_db)
):
    """Create a booking from the public wizard or the admin manual form"""
    booking = BookingService.create_booking(db, booking_data, admin_username)
    return {"booking": BookingResponse.model_validate(booking)}

@router.get("", response_model=BookingListResponse)
def get_bookings(
    branch_id: Optional[int] = Query(None, alias="branchId"),
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    booking_date: Optional[date] = Query(None, alias="date"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    bookings, total = BookingService.list_bookings(
        db, branch_id, booking_status, booking_date, date_from, date_to, search, page, limit
    )
    return {
        "bookings": [BookingResponse.model_validate(b) for b in bookings],
        "total": total,
        "page": page,
        "limit": limit,
    }

@router.get("/stats", response_model=BookingStatsResponse)
def get_booking_stats(
    branch_id: Optional[int] = Query(None, alias="branchId"),
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Dashboard counters"""
    return ReportService.dashboard_stats(db, branch_id)

@router.get("/by-code/{booking_code}", response_model=BookingEnvelope)
def get_booking_by_code(
    booking_code: str,
    db: Session = Depends(get_db)
):
    """Public tracking lookup"""
    booking = BookingService.get_booking_by_code(db, booking_code)
    return {"booking": BookingResponse.model_validate(booking)}

@router.post("/by-code/{booking_code}/payment-proof", response_model=BookingEnvelope)
def upload_payment_proof(
    booking_code: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db)
):
    booking = BookingService.attach_payment_proof(db, booking_code, file)
    return {"booking": BookingResponse.model_validate(booking)}

@router.get("/{booking_id}", response_model=BookingEnvelope)
def get_booking(
    booking_id: int,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    booking = BookingService.get_booking_by_id(db, booking_id)
    return {"booking": BookingResponse.model_validate(booking)}

@router.put("/{booking_id}", response_model=BookingEnvelope)
def update_booking(
    booking_id: int,
    update_data: BookingUpdate,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Change status and/or correct booking details"""
    booking = BookingService.update_booking(db, booking_id, update_data)
    return {"booking": BookingResponse.model_validate(booking)}

@router.delete("/{booking_id}")
def delete_booking(
    booking_id: int,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return BookingService.delete_booking(db, booking_id)

@router.get("/{booking_id}/whatsapp-link", response_model=WhatsAppLinkResponse)
def get_whatsapp_link(
    booking_id: int,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """wa.me link with the status message for this booking"""
    booking = BookingService.get_booking_by_id(db, booking_id)
    return build_whatsapp_link(booking)
