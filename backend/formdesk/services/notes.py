"""Append-only admin notes on submissions."""

from typing import List

import structlog
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from formdesk.models.note import AdminNote
from formdesk.models.user import User
from formdesk.schemas.submission import NoteResponse
from formdesk.services.access import AccessService
from formdesk.services.change_feed import feed

logger = structlog.get_logger(__name__)


class NoteService:
    """Notes are never edited or deleted one by one."""

    @staticmethod
    def to_response(note: AdminNote) -> NoteResponse:
        return NoteResponse(
            id=note.id,
            submission_id=note.submission_id,
            admin_id=note.admin_id,
            admin_email=note.admin.email if note.admin else None,
            note=note.note,
            created_at=note.created_at,
        )

    @staticmethod
    def list_notes(db: Session, account: User, submission_id: int) -> List[NoteResponse]:
        """Notes on a reviewable submission, newest first."""
        AccessService.get_viewable_submission(db, account, submission_id, include_own=False)
        notes = (
            db.query(AdminNote)
            .filter(AdminNote.submission_id == submission_id)
            .order_by(AdminNote.created_at.desc(), AdminNote.id.desc())
            .all()
        )
        return [NoteService.to_response(n) for n in notes]

    @staticmethod
    def add_note(db: Session, admin: User, submission_id: int, text: str) -> NoteResponse:
        submission = AccessService.get_viewable_submission(
            db, admin, submission_id, include_own=False
        )
        text = text.strip()
        if not text:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Note cannot be empty"
            )

        note = AdminNote(submission_id=submission.id, admin_id=admin.id, note=text)
        db.add(note)
        db.commit()
        db.refresh(note)

        feed.publish(
            "admin_notes",
            "INSERT",
            note.id,
            submission.id,
            audience=AccessService.audience_for(db, submission),
        )
        logger.info("note_added", note_id=note.id, submission_id=submission.id, admin_id=admin.id)
        return NoteService.to_response(note)
