"""
Visibility and redaction rules for submissions.

Super admins see every submission owned by a plain user, admins see the
submissions of users assigned to them, and users see their own. Admins
with partial access get sensitive values replaced before anything leaves
the service layer.
"""

from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.orm import Query, Session

from formdesk.models.assignment import AdminAssignment
from formdesk.models.submission import FILTERABLE_STATUSES, Submission
from formdesk.models.template import FormTemplate
from formdesk.models.user import AccessLevel, User, UserRole
from formdesk.schemas.field import parse_fields
from formdesk.schemas.submission import SubmissionListItem
from formdesk.services.change_feed import Audience
from formdesk.services.render import percent_complete, redact_form_data


class AccessService:
    """Service answering who may see which submission."""

    @staticmethod
    def can_view_sensitive(account: User) -> bool:
        if account.role == UserRole.SUPER_ADMIN:
            return True
        return account.role == UserRole.ADMIN and account.access_level == AccessLevel.FULL

    @staticmethod
    def visible_submissions(db: Session, account: User) -> Query:
        """Query over the submissions the account may review."""
        query = db.query(Submission)
        if account.role == UserRole.SUPER_ADMIN:
            owners = select(User.id).where(User.role == UserRole.USER)
            return query.filter(Submission.user_id.in_(owners))
        if account.role == UserRole.ADMIN:
            assigned = select(AdminAssignment.user_id).where(AdminAssignment.admin_id == account.id)
            return query.filter(Submission.user_id.in_(assigned))
        return query.filter(Submission.user_id == account.id)

    @staticmethod
    def can_view_submission(
        db: Session,
        account: User,
        submission: Submission,
        include_own: bool = True
    ) -> bool:
        if include_own and submission.user_id == account.id:
            return True
        if account.role == UserRole.SUPER_ADMIN:
            return submission.user.role == UserRole.USER
        if account.role == UserRole.ADMIN:
            edge = db.query(AdminAssignment).filter(
                AdminAssignment.admin_id == account.id,
                AdminAssignment.user_id == submission.user_id
            ).first()
            return edge is not None
        return False

    @staticmethod
    def audience_for(db: Session, submission: Submission) -> Audience:
        """Who may be told about changes to this submission."""
        admin_ids = db.scalars(
            select(AdminAssignment.admin_id).where(AdminAssignment.user_id == submission.user_id)
        ).all()
        return Audience(
            owner_id=submission.user_id,
            owner_is_user=submission.user.role == UserRole.USER,
            admin_ids=admin_ids,
        )

    @staticmethod
    def get_viewable_submission(
        db: Session,
        account: User,
        submission_id: int,
        include_own: bool = True
    ) -> Submission:
        """Fetch a submission the account may see; 404 otherwise."""
        submission = db.query(Submission).filter(Submission.id == submission_id).first()
        if not submission or not AccessService.can_view_submission(db, account, submission, include_own):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Submission not found"
            )
        return submission

    @staticmethod
    def list_submissions(
        db: Session,
        account: User,
        status_filter: Optional[str] = None,
        template_id: Optional[int] = None,
        admin_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[SubmissionListItem]:
        """Visible submissions after filters, most recently updated first."""
        query = AccessService.visible_submissions(db, account)

        if status_filter:
            if status_filter not in FILTERABLE_STATUSES:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Unknown status: {status_filter}"
                )
            query = query.filter(Submission.status == status_filter)

        if template_id is not None:
            query = query.filter(Submission.form_template_id == template_id)

        if admin_id is not None:
            if account.role != UserRole.SUPER_ADMIN:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Not enough permissions"
                )
            assigned = select(AdminAssignment.user_id).where(AdminAssignment.admin_id == admin_id)
            query = query.filter(Submission.user_id.in_(assigned))

        if search:
            pattern = f"%{search.strip()}%"
            query = (
                query.join(User, Submission.user_id == User.id)
                .join(FormTemplate, Submission.form_template_id == FormTemplate.id)
                .filter(or_(User.email.ilike(pattern), FormTemplate.name.ilike(pattern)))
            )

        rows = query.order_by(Submission.last_updated.desc(), Submission.id.desc()).all()
        sensitive_ok = AccessService.can_view_sensitive(account) or account.role == UserRole.USER
        return [AccessService.to_list_item(s, sensitive_ok) for s in rows]

    @staticmethod
    def to_list_item(submission: Submission, can_view_sensitive: bool) -> SubmissionListItem:
        fields = parse_fields(submission.form_template.fields)
        data = submission.form_data or {}
        return SubmissionListItem(
            id=submission.id,
            user_id=submission.user_id,
            user_email=submission.user.email,
            form_template_id=submission.form_template_id,
            template_name=submission.form_template.name,
            status=submission.status,
            last_updated=submission.last_updated,
            percent_complete=percent_complete(fields, data),
            form_data=redact_form_data(fields, data, can_view_sensitive),
        )
