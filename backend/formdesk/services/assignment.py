"""Assignment graph and account role management."""

from typing import List

import structlog
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from formdesk.models.assignment import AdminAssignment
from formdesk.models.user import AccessLevel, User, UserRole
from formdesk.schemas.assignment import AssignmentCreate, AssignmentResponse

logger = structlog.get_logger(__name__)


class AssignmentService:
    """Service for admin -> user edges and role changes."""

    @staticmethod
    def to_response(edge: AdminAssignment) -> AssignmentResponse:
        return AssignmentResponse(
            id=edge.id,
            admin_id=edge.admin_id,
            admin_email=edge.admin.email if edge.admin else None,
            user_id=edge.user_id,
            user_email=edge.user.email if edge.user else None,
            created_at=edge.created_at,
        )

    @staticmethod
    def get_account_or_404(db: Session, user_id: int) -> User:
        account = db.query(User).filter(User.id == user_id).first()
        if not account:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )
        return account

    @staticmethod
    def list_assignments(db: Session) -> List[AssignmentResponse]:
        edges = db.query(AdminAssignment).order_by(AdminAssignment.created_at.desc()).all()
        return [AssignmentService.to_response(e) for e in edges]

    @staticmethod
    def create_assignment(db: Session, data: AssignmentCreate) -> AssignmentResponse:
        admin = AssignmentService.get_account_or_404(db, data.admin_id)
        user = AssignmentService.get_account_or_404(db, data.user_id)
        if admin.role != UserRole.ADMIN or user.role != UserRole.USER:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Assignments link an admin to a user"
            )

        edge = AdminAssignment(admin_id=admin.id, user_id=user.id)
        db.add(edge)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="User is already assigned to this admin"
            )
        db.refresh(edge)

        logger.info("assignment_created", admin_id=admin.id, user_id=user.id)
        return AssignmentService.to_response(edge)

    @staticmethod
    def delete_assignment(db: Session, assignment_id: int) -> None:
        edge = db.query(AdminAssignment).filter(AdminAssignment.id == assignment_id).first()
        if not edge:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Assignment not found"
            )
        db.delete(edge)
        db.commit()
        logger.info("assignment_deleted", assignment_id=assignment_id)

    @staticmethod
    def assigned_users(db: Session, admin: User) -> List[User]:
        return (
            db.query(User)
            .join(AdminAssignment, AdminAssignment.user_id == User.id)
            .filter(AdminAssignment.admin_id == admin.id)
            .order_by(User.email)
            .all()
        )

    @staticmethod
    def assigned_admins(db: Session, user: User) -> List[User]:
        return (
            db.query(User)
            .join(AdminAssignment, AdminAssignment.admin_id == User.id)
            .filter(AdminAssignment.user_id == user.id)
            .order_by(User.email)
            .all()
        )

    @staticmethod
    def list_accounts(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
        return db.query(User).order_by(User.id).offset(skip).limit(limit).all()

    @staticmethod
    def promote(db: Session, user_id: int) -> User:
        """user -> admin. New admins start with partial access."""
        account = AssignmentService.get_account_or_404(db, user_id)
        if account.role != UserRole.USER:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only users can be promoted"
            )
        # Edges pointing at this account only make sense while it is a user
        db.query(AdminAssignment).filter(AdminAssignment.user_id == account.id).delete(
            synchronize_session=False
        )
        account.role = UserRole.ADMIN
        account.user_metadata = {**(account.user_metadata or {}), "access_level": AccessLevel.PARTIAL.value}
        db.commit()
        db.refresh(account)

        logger.info("account_promoted", user_id=account.id)
        return account

    @staticmethod
    def demote(db: Session, user_id: int) -> User:
        """admin -> user, removing every edge the admin owned."""
        account = AssignmentService.get_account_or_404(db, user_id)
        if account.role != UserRole.ADMIN:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only admins can be demoted"
            )
        removed = db.query(AdminAssignment).filter(AdminAssignment.admin_id == account.id).delete(
            synchronize_session=False
        )
        account.role = UserRole.USER
        metadata = dict(account.user_metadata or {})
        metadata.pop("access_level", None)
        account.user_metadata = metadata
        db.commit()
        db.refresh(account)

        logger.info("account_demoted", user_id=account.id, assignments_removed=removed)
        return account

    @staticmethod
    def set_access_level(db: Session, user_id: int, level: AccessLevel) -> User:
        account = AssignmentService.get_account_or_404(db, user_id)
        if account.role != UserRole.ADMIN:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Access level applies to admins only"
            )
        account.user_metadata = {**(account.user_metadata or {}), "access_level": level.value}
        db.commit()
        db.refresh(account)

        logger.info("access_level_changed", user_id=account.id, access_level=level.value)
        return account
