from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from carwash.core.dependencies import optional_admin, require_admin
from carwash.database import get_db
from carwash.schemas.service import (
    ServiceCreate,
    ServiceEnvelope,
    ServiceListResponse,
    ServiceResponse,
    ServiceUpdate,
)
from carwash.services.catalog_service import CatalogService

router = APIRouter()

@router.get("", response_model=ServiceListResponse)
def get_services(
    include_inactive: bool = Query(False, alias="includeInactive"),
    admin_username: Optional[str] = Depends(optional_admin),
    db: Session = Depends(get_db)
):
    """Active services; admins may ask for inactive ones too"""
    services = CatalogService.get_all_services(db, include_inactive=include_inactive and bool(admin_username))
    return {"services": [ServiceResponse.model_validate(s) for s in services]}

@router.get("/{service_id}", response_model=ServiceEnvelope)
def get_service(service_id: int, db: Session = Depends(get_db)):
    service = CatalogService.get_service_by_id(db, service_id)
    return {"service": ServiceResponse.model_validate(service)}

@router.post("", response_model=ServiceEnvelope, status_code=status.HTTP_201_CREATED)
def create_service(
    service_data: ServiceCreate,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    service = CatalogService.create_service(db, service_data)
    return {"service": ServiceResponse.model_validate(service)}

@router.put("/{service_id}", response_model=ServiceEnvelope)
def update_service(
    service_id: int,
    update_data: ServiceUpdate,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    service = CatalogService.update_service(db, service_id, update_data)
    return {"service": ServiceResponse.model_validate(service)}

@router.delete("/{service_id}")
def delete_service(
    service_id: int,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return CatalogService.delete_service(db, service_id)
