"""Assignment router."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from formdesk.database import get_db
from formdesk.models.user import User, UserRole
from formdesk.schemas.assignment import AssignmentCreate, AssignmentResponse
from formdesk.schemas.user import UserResponse
from formdesk.services.assignment import AssignmentService
from formdesk.services.auth import get_current_active_user, require_role

router = APIRouter()


@router.get("", response_model=List[AssignmentResponse])
async def list_assignments(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.SUPER_ADMIN))
):
    return AssignmentService.list_assignments(db)


@router.post("", response_model=AssignmentResponse, status_code=201)
async def create_assignment(
    data: AssignmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.SUPER_ADMIN))
):
    """Assign a user to an admin (super admin only)."""
    return AssignmentService.create_assignment(db, data)


@router.get("/mine", response_model=List[UserResponse])
async def my_assignments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Admins get their users, users get their admins."""
    if current_user.role == UserRole.ADMIN:
        return AssignmentService.assigned_users(db, current_user)
    if current_user.role == UserRole.USER:
        return AssignmentService.assigned_admins(db, current_user)
    return []


@router.delete("/{assignment_id}")
async def delete_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.SUPER_ADMIN))
):
    AssignmentService.delete_assignment(db, assignment_id)
    return {"message": "Assignment removed"}
