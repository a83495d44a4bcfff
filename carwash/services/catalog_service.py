import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from carwash.models.booking import Booking
from carwash.models.service import Service
from carwash.schemas.service import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)

class CatalogService:
    """Wash services offered across all branches"""

    @staticmethod
    def get_all_services(db: Session, include_inactive: bool = False):
        query = db.query(Service)
        if not include_inactive:
            query = query.filter(Service.is_active == True)
        return query.order_by(Service.category.asc(), Service.price.asc(), Service.id.asc()).all()

    @staticmethod
    def get_service_by_id(db: Session, service_id: int) -> Service:
        service = db.query(Service).filter(Service.id == service_id).first()
        if not service:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Service not found"
            )
        return service

    @staticmethod
    def create_service(db: Session, service_data: ServiceCreate) -> Service:
        try:
            service = Service(**service_data.model_dump())
            db.add(service)
            db.commit()
            db.refresh(service)
            logger.info(f"Created service {service.id} ({service.name})")
            return service
        except Exception:
            db.rollback()
            logger.exception("Error creating service")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )

    @staticmethod
    def update_service(db: Session, service_id: int, update_data: ServiceUpdate) -> Service:
        filtered = update_data.model_dump(exclude_unset=True)
        if not filtered:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No valid fields to update"
            )

        service = CatalogService.get_service_by_id(db, service_id)

        try:
            for field, value in filtered.items():
                setattr(service, field, value)
            db.commit()
            db.refresh(service)
            return service
        except Exception:
            db.rollback()
            logger.exception(f"Error updating service {service_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )

    @staticmethod
    def delete_service(db: Session, service_id: int):
        """Hard delete; refused while any booking references the service"""
        service = CatalogService.get_service_by_id(db, service_id)

        in_use = db.query(Booking.id).filter(Booking.service_id == service_id).first()
        if in_use:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Cannot delete service that has existing bookings"
            )

        try:
            db.delete(service)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"Error deleting service {service_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )
        return {"success": True}
