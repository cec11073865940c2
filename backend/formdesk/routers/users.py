"""Account management router (super admin only)."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from formdesk.database import get_db
from formdesk.models.user import User, UserRole
from formdesk.schemas.user import AccessLevelUpdate, UserResponse
from formdesk.services.assignment import AssignmentService
from formdesk.services.auth import require_role

router = APIRouter()

super_admin = require_role(UserRole.SUPER_ADMIN)


@router.get("", response_model=List[UserResponse])
async def list_users(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(super_admin)
):
    """List all accounts."""
    return AssignmentService.list_accounts(db, skip, limit)


@router.post("/{user_id}/promote", response_model=UserResponse)
async def promote_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(super_admin)
):
    return AssignmentService.promote(db, user_id)


@router.post("/{user_id}/demote", response_model=UserResponse)
async def demote_admin(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(super_admin)
):
    """Demote an admin; their assignments are removed."""
    return AssignmentService.demote(db, user_id)


@router.put("/{user_id}/access-level", response_model=UserResponse)
async def set_access_level(
    user_id: int,
    update: AccessLevelUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(super_admin)
):
    return AssignmentService.set_access_level(db, user_id, update.access_level)
