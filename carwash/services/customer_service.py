import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carwash.models.booking import Booking
from carwash.models.customer import Customer, LoyaltyTransaction, LoyaltyTransactionType
from carwash.schemas.customer import CustomerCreate, CustomerUpdate
from carwash.services.loyalty_service import LoyaltyService
from carwash.utils.search import LIKE_ESCAPE, contains_pattern
from carwash.utils.validators import normalize_phone_number, normalize_vehicle_plate

logger = logging.getLogger(__name__)

def merge_plates(existing: Optional[List[str]], *plates: str) -> List[str]:
    """Union of plate numbers, normalized, keeping first-seen order"""
    merged = []
    for plate in list(existing or []) + list(plates):
        if not plate:
            continue
        normalized = normalize_vehicle_plate(plate)
        if normalized not in merged:
            merged.append(normalized)
    return merged

class CustomerService:
    @staticmethod
    def get_by_phone(db: Session, phone: str) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.phone == normalize_phone_number(phone)).first()

    @staticmethod
    def get_customer_by_id(db: Session, customer_id: int) -> Customer:
        customer = db.query(Customer).filter(Customer.id == customer_id).first()
        if not customer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Customer not found"
            )
        return customer

    @staticmethod
    def list_customers(
        db: Session,
        phone: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ):
        query = db.query(Customer)

        if phone:
            query = query.filter(Customer.phone == normalize_phone_number(phone))

        if search:
            pattern = contains_pattern(search)
            query = query.filter(or_(
                Customer.name.ilike(pattern, escape=LIKE_ESCAPE),
                Customer.phone.ilike(pattern, escape=LIKE_ESCAPE)
            ))

        total = query.count()
        offset = (page - 1) * limit
        customers = query.order_by(Customer.join_date.desc(), Customer.id.desc()).offset(offset).limit(limit).all()
        return customers, total

    @staticmethod
    def create_customer(db: Session, customer_data: CustomerCreate) -> Customer:
        phone = customer_data.phone
        if db.query(Customer).filter(Customer.phone == phone).first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A customer with this phone number already exists"
            )

        try:
            customer = Customer(
                name=customer_data.name.strip(),
                phone=phone,
                email=customer_data.email,
                vehicle_plate_numbers=merge_plates([], *customer_data.vehicle_plate_numbers),
                total_bookings=customer_data.total_bookings,
                total_loyalty_points=customer_data.total_loyalty_points,
            )
            db.add(customer)
            db.commit()
            db.refresh(customer)
            return customer
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A customer with this phone number already exists"
            )
        except Exception:
            db.rollback()
            logger.exception("Error creating customer")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )

    @staticmethod
    def update_customer(db: Session, customer_id: int, update_data: CustomerUpdate, admin_username: Optional[str] = None) -> Customer:
        """Apply an allow-listed partial update from the loyalty back office"""
        filtered = update_data.model_dump(exclude_unset=True)
        if not filtered:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No valid fields to update"
            )

        customer = CustomerService.get_customer_by_id(db, customer_id)

        if "phone" in filtered:
            duplicate = db.query(Customer).filter(
                Customer.phone == filtered["phone"],
                Customer.id != customer_id
            ).first()
            if duplicate:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="A customer with this phone number already exists"
                )
        if "vehicle_plate_numbers" in filtered:
            filtered["vehicle_plate_numbers"] = merge_plates([], *filtered["vehicle_plate_numbers"])

        try:
            previous_points = customer.total_loyalty_points or 0
            for field, value in filtered.items():
                setattr(customer, field, value)

            delta = (customer.total_loyalty_points or 0) - previous_points
            if delta:
                LoyaltyService.record_transaction(
                    db,
                    customer,
                    delta,
                    LoyaltyTransactionType.ADJUST,
                    f"Manual adjustment by {admin_username or 'admin'}",
                )

            db.commit()
            db.refresh(customer)
            return customer
        except Exception:
            db.rollback()
            logger.exception(f"Error updating customer {customer_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )

    @staticmethod
    def list_transactions(db: Session, customer_id: int) -> List[LoyaltyTransaction]:
        CustomerService.get_customer_by_id(db, customer_id)
        return db.query(LoyaltyTransaction).filter(
            LoyaltyTransaction.customer_id == customer_id
        ).order_by(LoyaltyTransaction.id.desc()).all()

    @staticmethod
    def upsert_from_booking(db: Session, booking: Booking) -> Customer:
        """Create or refresh the customer record behind a new booking.

        First sighting creates the customer; later bookings merge the plate,
        bump the booking count, take the latest contact details and debit any
        redeemed points. The caller owns the commit.
        """
        customer = db.query(Customer).filter(Customer.phone == booking.customer_phone).first()
        points_used = booking.loyalty_points_used or 0

        if customer is None:
            customer = Customer(
                name=booking.customer_name,
                phone=booking.customer_phone,
                email=booking.customer_email,
                vehicle_plate_numbers=merge_plates([], booking.vehicle_plate_number),
                total_bookings=1,
                total_loyalty_points=0,
            )
            db.add(customer)
            db.flush()
            logger.info(f"Created customer {customer.id} from booking {booking.booking_code}")
        else:
            customer.name = booking.customer_name
            customer.email = booking.customer_email
            customer.vehicle_plate_numbers = merge_plates(customer.vehicle_plate_numbers, booking.vehicle_plate_number)
            customer.total_bookings = (customer.total_bookings or 0) + 1

        if points_used > 0:
            customer.total_loyalty_points = max((customer.total_loyalty_points or 0) - points_used, 0)
            LoyaltyService.record_transaction(
                db,
                customer,
                -points_used,
                LoyaltyTransactionType.REDEEM,
                f"Redeemed on booking {booking.booking_code}",
                booking_id=booking.id,
            )
        return customer
