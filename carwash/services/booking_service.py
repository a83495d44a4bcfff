import io
import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from carwash.core.cloudinary import delete_image, upload_image
from carwash.core.config import settings
from carwash.models.booking import Booking, BookingSource, BookingStatus
from carwash.models.branch import Branch, BranchStatus
from carwash.models.service import Service
from carwash.schemas.booking import BookingCreate, BookingUpdate
from carwash.services.customer_service import CustomerService
from carwash.services.loyalty_service import LoyaltyService, calculate_points_earned, calculate_redemption
from carwash.services.status_flow import can_delete, can_transition
from carwash.utils.search import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)

PAYMENT_PROOF_CONTENT_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")

def generate_booking_code(now: Optional[datetime] = None) -> str:
    """BCW + YYMMDDHHmm of the creation time in the booking timezone"""
    if now is None:
        now = datetime.now(ZoneInfo(settings.BOOKING_TIMEZONE))
    return f"BCW{now:%y%m%d%H%M}"

class BookingService:
    @staticmethod
    def _query(db: Session):
        return db.query(Booking).options(
            joinedload(Booking.service),
            joinedload(Booking.branch)
        )

    @staticmethod
    def create_booking(db: Session, booking_data: BookingCreate, admin_username: Optional[str] = None):
        """Create a booking and upsert its customer.

        The booking row is committed first; the customer upsert that follows
        is best effort and never fails the request.
        """
        try:
            service = db.query(Service).filter(Service.id == booking_data.service_id).first()
            if not service:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Service not found"
                )
            if not service.is_active:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Service is not available"
                )

            branch = db.query(Branch).filter(Branch.id == booking_data.branch_id).first()
            if not branch:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Branch not found"
                )
            if branch.status != BranchStatus.ACTIVE:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Branch is not accepting bookings"
                )

            if booking_data.is_pickup_service and not service.supports_pickup:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Pickup is not available for this service"
                )

            subtotal = service.price + ((service.pickup_fee or 0) if booking_data.is_pickup_service else 0)
            if int(booking_data.total_price) != subtotal:
                logger.warning(
                    f"Client total {booking_data.total_price} differs from computed subtotal {subtotal} "
                    f"for service {service.id}; using computed value"
                )

            customer = CustomerService.get_by_phone(db, booking_data.customer_phone)
            balance = customer.total_loyalty_points if customer else 0
            redemption = calculate_redemption(booking_data.loyalty_points_used, balance, subtotal)
            if redemption.points_used < booking_data.loyalty_points_used:
                logger.info(
                    f"Capped redemption for {booking_data.customer_phone} from "
                    f"{booking_data.loyalty_points_used} to {redemption.points_used} points"
                )

            is_admin_entry = bool(admin_username) and booking_data.created_by_admin
            if is_admin_entry:
                booking_status = BookingStatus.CONFIRMED
                source = booking_data.booking_source or BookingSource.OFFLINE
            else:
                booking_status = BookingStatus.PENDING
                source = BookingSource.ONLINE

            booking = Booking(
                booking_code=generate_booking_code(),
                customer_name=booking_data.customer_name,
                customer_phone=booking_data.customer_phone,
                customer_email=booking_data.customer_email,
                service_id=service.id,
                branch_id=branch.id,
                booking_date=booking_data.booking_date,
                booking_time=booking_data.booking_time,
                subtotal_price=subtotal,
                total_price=redemption.total_price,
                is_pickup_service=booking_data.is_pickup_service,
                pickup_address=booking_data.pickup_address if booking_data.is_pickup_service else None,
                pickup_notes=booking_data.pickup_notes if booking_data.is_pickup_service else None,
                vehicle_plate_number=booking_data.vehicle_plate_number,
                payment_method=booking_data.payment_method,
                notes=booking_data.notes,
                loyalty_points_used=redemption.points_used,
                loyalty_points_earned=calculate_points_earned(redemption.total_price, service.loyalty_points_reward),
                status=booking_status,
                booking_source=source,
                created_by_admin=is_admin_entry,
                admin_username=admin_username if is_admin_entry else None,
            )

            db.add(booking)
            db.commit()
            db.refresh(booking)
            logger.info(f"Created booking {booking.booking_code} ({booking.status.value}) for {booking.customer_phone}")

        except HTTPException:
            db.rollback()
            raise
        except Exception:
            db.rollback()
            logger.exception("Error creating booking")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )

        try:
            CustomerService.upsert_from_booking(db, booking)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"Customer upsert failed for booking {booking.booking_code}")

        return BookingService.get_booking_by_id(db, booking.id)

    @staticmethod
    def get_booking_by_id(db: Session, booking_id: int) -> Booking:
        booking = BookingService._query(db).filter(Booking.id == booking_id).first()
        if not booking:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Booking not found"
            )
        return booking

    @staticmethod
    def get_booking_by_code(db: Session, booking_code: str) -> Booking:
        """Most recent booking carrying the code; codes can repeat within a minute"""
        booking = BookingService._query(db).filter(
            Booking.booking_code == booking_code.strip().upper()
        ).order_by(Booking.created_at.desc(), Booking.id.desc()).first()
        if not booking:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Booking not found"
            )
        return booking

    @staticmethod
    def list_bookings(
        db: Session,
        branch_id: Optional[int] = None,
        booking_status: Optional[BookingStatus] = None,
        booking_date: Optional[date] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ):
        """Filtered, newest-first page of bookings plus the unpaginated total"""
        query = db.query(Booking)

        if branch_id:
            query = query.filter(Booking.branch_id == branch_id)

        if booking_status:
            query = query.filter(Booking.status == booking_status)

        if booking_date:
            query = query.filter(Booking.booking_date == booking_date)

        if date_from:
            query = query.filter(Booking.booking_date >= date_from)

        if date_to:
            query = query.filter(Booking.booking_date <= date_to)

        if search:
            pattern = contains_pattern(search)
            query = query.filter(or_(
                Booking.booking_code.ilike(pattern, escape=LIKE_ESCAPE),
                Booking.customer_name.ilike(pattern, escape=LIKE_ESCAPE),
                Booking.customer_phone.ilike(pattern, escape=LIKE_ESCAPE)
            ))

        total = query.count()
        offset = (page - 1) * limit
        bookings = query.options(
            joinedload(Booking.service),
            joinedload(Booking.branch)
        ).order_by(Booking.created_at.desc(), Booking.id.desc()).offset(offset).limit(limit).all()
        return bookings, total

    @staticmethod
    def update_booking(db: Session, booking_id: int, update_data: BookingUpdate):
        """Apply an allow-listed correction and/or status transition"""
        filtered = update_data.model_dump(exclude_unset=True)
        if not filtered:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No valid fields to update"
            )

        booking = BookingService.get_booking_by_id(db, booking_id)

        new_status = filtered.get("status")
        if new_status is not None and new_status != booking.status:
            if not can_transition(booking.status, new_status, booking.is_pickup_service):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Cannot change booking status from '{booking.status.value}' to '{new_status.value}'"
                )

        if "branch_id" in filtered:
            if not db.query(Branch).filter(Branch.id == filtered["branch_id"]).first():
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Branch not found"
                )

        try:
            previous_status = booking.status
            for field, value in filtered.items():
                setattr(booking, field, value)

            if booking.status == BookingStatus.COMPLETED and "status" in filtered:
                LoyaltyService.credit_completed_booking(db, booking)

            db.commit()
            if previous_status != booking.status:
                logger.info(f"Booking {booking.booking_code}: {previous_status.value} -> {booking.status.value}")
        except HTTPException:
            db.rollback()
            raise
        except Exception:
            db.rollback()
            logger.exception(f"Error updating booking {booking_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )

        return BookingService.get_booking_by_id(db, booking_id)

    @staticmethod
    def delete_booking(db: Session, booking_id: int):
        booking = BookingService.get_booking_by_id(db, booking_id)

        if not can_delete(booking.status):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=(
                    f"Cannot delete booking with status '{booking.status.value}'. "
                    "Only pending or cancelled bookings can be deleted"
                )
            )

        try:
            db.delete(booking)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"Error deleting booking {booking_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )
        logger.info(f"Deleted booking {booking.booking_code}")
        return {"success": True}

    @staticmethod
    def attach_payment_proof(db: Session, booking_code: str, file: UploadFile):
        """Upload a transfer receipt image and link it to the booking"""
        if file.content_type not in PAYMENT_PROOF_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only JPEG, PNG, and WebP images are allowed"
            )

        contents = file.file.read()
        if len(contents) > settings.PAYMENT_PROOF_MAX_BYTES:
            max_mb = settings.PAYMENT_PROOF_MAX_BYTES // (1024 * 1024)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File size must be less than {max_mb}MB"
            )
        if not contents:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="File is empty"
            )

        booking = BookingService.get_booking_by_code(db, booking_code)

        try:
            public_id = f"{booking.booking_code}-{int(datetime.now().timestamp() * 1000)}"
            result = upload_image(io.BytesIO(contents), public_id=public_id)
        except Exception:
            logger.exception(f"Payment proof upload failed for booking {booking.booking_code}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error uploading payment proof"
            )

        previous_public_id = booking.payment_proof_public_id
        try:
            booking.payment_proof = result.get("secure_url")
            booking.payment_proof_public_id = result.get("public_id")
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"Error saving payment proof for booking {booking.booking_code}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )

        if previous_public_id:
            try:
                delete_image(previous_public_id)
            except Exception:
                logger.warning(f"Could not delete replaced payment proof {previous_public_id}", exc_info=True)

        return BookingService.get_booking_by_id(db, booking.id)
