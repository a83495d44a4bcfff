from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from carwash.core.dependencies import require_admin
from carwash.database import get_db
from carwash.models.branch import BranchStatus
from carwash.schemas.branch import (
    BranchCreate,
    BranchEnvelope,
    BranchListResponse,
    BranchResponse,
    BranchUpdate,
)
from carwash.services.branch_service import BranchService

router = APIRouter()

@router.get("", response_model=BranchListResponse)
def get_branches(
    branch_status: Optional[BranchStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db)
):
    branches = BranchService.get_all_branches(db, branch_status)
    return {"branches": [BranchResponse.model_validate(b) for b in branches]}

@router.get("/{branch_id}", response_model=BranchEnvelope)
def get_branch(branch_id: int, db: Session = Depends(get_db)):
    branch = BranchService.get_branch_by_id(db, branch_id)
    return {"branch": BranchResponse.model_validate(branch)}

@router.post("", response_model=BranchEnvelope, status_code=status.HTTP_201_CREATED)
def create_branch(
    branch_data: BranchCreate,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Accepts flat columns or the nested bankAccount/operatingHours shape"""
    branch = BranchService.create_branch(db, branch_data)
    return {"branch": BranchResponse.model_validate(branch)}

@router.put("/{branch_id}", response_model=BranchEnvelope)
def update_branch(
    branch_id: int,
    update_data: BranchUpdate,
    admin_username: str = Depends(require_admin),
    db: Session = Depends(get_db)
):
    branch = BranchService.update_branch(db, branch_id, update_data)
    return {"branch": BranchResponse.model_validate(branch)}
