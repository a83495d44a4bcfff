import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from carwash.models.branch import Branch, BranchStatus
from carwash.schemas.branch import BranchCreate, BranchUpdate

logger = logging.getLogger(__name__)

class BranchService:
    @staticmethod
    def get_all_branches(db: Session, branch_status: Optional[BranchStatus] = None):
        query = db.query(Branch)
        if branch_status:
            query = query.filter(Branch.status == branch_status)
        return query.order_by(Branch.created_at.asc(), Branch.id.asc()).all()

    @staticmethod
    def get_branch_by_id(db: Session, branch_id: int) -> Branch:
        branch = db.query(Branch).filter(Branch.id == branch_id).first()
        if not branch:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Branch not found"
            )
        return branch

    @staticmethod
    def create_branch(db: Session, branch_data: BranchCreate) -> Branch:
        try:
            branch = Branch(**branch_data.model_dump())
            db.add(branch)
            db.commit()
            db.refresh(branch)
            logger.info(f"Created branch {branch.id} ({branch.name})")
            return branch
        except Exception:
            db.rollback()
            logger.exception("Error creating branch")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )

    @staticmethod
    def update_branch(db: Session, branch_id: int, update_data: BranchUpdate) -> Branch:
        """Partial update; only the fields present in the body change"""
        payload = update_data.model_dump(exclude_unset=True)
        if not payload:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No fields to update"
            )

        branch = BranchService.get_branch_by_id(db, branch_id)

        try:
            for field, value in payload.items():
                setattr(branch, field, value)
            db.commit()
            db.refresh(branch)
            return branch
        except Exception:
            db.rollback()
            logger.exception(f"Error updating branch {branch_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )
