"""Submission lifecycle: in_progress until submitted, then completed for good."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import structlog
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from formdesk.config import get_settings
from formdesk.database import insert_ignore
from formdesk.models.submission import Submission, SubmissionStatus
from formdesk.models.template import FormTemplate
from formdesk.models.user import User
from formdesk.schemas.submission import RenderPlan, SubmissionDetail, SubmissionListItem
from formdesk.services.access import AccessService
from formdesk.services.change_feed import feed
from formdesk.services.notes import NoteService
from formdesk.services.render import (
    build_render_plan,
    missing_required_fields,
    sanitize_form_data,
)
from formdesk.services.template import TemplateService

settings = get_settings()
logger = structlog.get_logger(__name__)


class SubmissionService:
    """Service for saving and completing submissions."""

    @staticmethod
    def get_for_template(db: Session, user: User, template_id: int) -> Optional[Submission]:
        """The caller's submission for a template, if any."""
        return db.query(Submission).filter(
            Submission.user_id == user.id,
            Submission.form_template_id == template_id
        ).first()

    @staticmethod
    def _lock_for_write(
        db: Session,
        user: User,
        template: FormTemplate
    ) -> Tuple[Submission, bool]:
        """
        Ensure the (user, template) row exists and lock it.

        The row is created with insert-or-ignore on the unique key so two
        concurrent first saves end up with one row. Returns the locked row
        and whether this call created it.
        """
        created = insert_ignore(
            db,
            Submission,
            {
                "user_id": user.id,
                "form_template_id": template.id,
                "form_data": {},
                "status": SubmissionStatus.IN_PROGRESS.value,
                "last_updated": datetime.utcnow(),
            },
            ("user_id", "form_template_id"),
        )
        submission = (
            db.query(Submission)
            .filter(
                Submission.user_id == user.id,
                Submission.form_template_id == template.id
            )
            .with_for_update()
            .populate_existing()
            .one()
        )
        if submission.is_completed:
            db.rollback()
            logger.info("write_after_completion", submission_id=submission.id, user_id=user.id)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Submission is already completed"
            )
        return submission, created

    @staticmethod
    def _write(
        db: Session,
        user: User,
        template_id: int,
        form_data: Dict[str, Any],
        complete: bool
    ) -> Submission:
        template = TemplateService.get_template_or_404(db, template_id)
        fields = TemplateService.fields_of(template)
        data = sanitize_form_data(fields, form_data)

        if complete and settings.strict_required_validation:
            missing = missing_required_fields(fields, data)
            if missing:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail={"message": "Required fields are missing", "missing": missing}
                )

        submission, created = SubmissionService._lock_for_write(db, user, template)
        submission.form_data = data
        submission.last_updated = datetime.utcnow()
        if complete:
            submission.status = SubmissionStatus.COMPLETED.value

        db.commit()
        db.refresh(submission)

        feed.publish(
            "submissions",
            "INSERT" if created else "UPDATE",
            submission.id,
            submission.id,
            audience=AccessService.audience_for(db, submission),
        )
        logger.info(
            "submission_completed" if complete else "submission_saved",
            submission_id=submission.id,
            user_id=user.id,
            template_id=template_id,
            keys=len(data),
        )
        return submission

    @staticmethod
    def save_progress(
        db: Session,
        user: User,
        template_id: int,
        form_data: Dict[str, Any]
    ) -> Submission:
        """Replace the in-progress form data; 409 once completed."""
        return SubmissionService._write(db, user, template_id, form_data, complete=False)

    @staticmethod
    def submit(
        db: Session,
        user: User,
        template_id: int,
        form_data: Dict[str, Any]
    ) -> Submission:
        """Save and complete. Succeeds at most once per submission."""
        return SubmissionService._write(db, user, template_id, form_data, complete=True)

    @staticmethod
    def list_mine(db: Session, user: User) -> List[SubmissionListItem]:
        rows = (
            db.query(Submission)
            .filter(Submission.user_id == user.id)
            .order_by(Submission.last_updated.desc(), Submission.id.desc())
            .all()
        )
        return [AccessService.to_list_item(s, True) for s in rows]

    @staticmethod
    def render_for_template(db: Session, user: User, template_id: int) -> RenderPlan:
        """Plan for the caller filling a template, with or without a saved row."""
        template = TemplateService.get_template_or_404(db, template_id)
        submission = SubmissionService.get_for_template(db, user, template_id)
        completed = bool(submission and submission.is_completed)
        return RenderPlan(
            template_id=template.id,
            template_name=template.name,
            submission_id=submission.id if submission else None,
            status=submission.status if submission else None,
            read_only=completed,
            autosave_delay_seconds=settings.autosave_delay_seconds,
            fields=build_render_plan(
                TemplateService.fields_of(template),
                submission.form_data if submission else {},
                completed=completed,
            ),
        )

    @staticmethod
    def render_submission(db: Session, account: User, submission_id: int) -> RenderPlan:
        """Plan for any viewer of an existing submission."""
        submission = AccessService.get_viewable_submission(db, account, submission_id)
        is_owner = submission.user_id == account.id
        # Only owners may edit; reviewers always get a read-only plan
        read_only = submission.is_completed or not is_owner
        can_view_sensitive = is_owner or AccessService.can_view_sensitive(account)
        return RenderPlan(
            template_id=submission.form_template_id,
            template_name=submission.form_template.name,
            submission_id=submission.id,
            status=submission.status,
            read_only=read_only,
            fields=build_render_plan(
                TemplateService.fields_of(submission.form_template),
                submission.form_data,
                completed=read_only,
                can_view_sensitive=can_view_sensitive,
            ),
        )

    @staticmethod
    def get_detail(db: Session, account: User, submission_id: int) -> SubmissionDetail:
        """Review view: redacted fields plus notes."""
        submission = AccessService.get_viewable_submission(
            db, account, submission_id, include_own=False
        )
        can_view_sensitive = AccessService.can_view_sensitive(account)
        return SubmissionDetail(
            id=submission.id,
            user_id=submission.user_id,
            user_email=submission.user.email,
            form_template_id=submission.form_template_id,
            template_name=submission.form_template.name,
            status=submission.status,
            last_updated=submission.last_updated,
            can_view_sensitive=can_view_sensitive,
            fields=build_render_plan(
                TemplateService.fields_of(submission.form_template),
                submission.form_data,
                completed=True,
                can_view_sensitive=can_view_sensitive,
            ),
            notes=[NoteService.to_response(n) for n in submission.notes],
        )
