"""Submission router: filling forms, reviewing them and annotating them."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from formdesk.database import get_db
from formdesk.models.user import User, UserRole
from formdesk.schemas.submission import (
    FormDataPayload,
    NoteCreate,
    NoteResponse,
    RenderPlan,
    SubmissionDetail,
    SubmissionListItem,
    SubmissionResponse,
)
from formdesk.services.access import AccessService
from formdesk.services.auth import get_current_active_user, require_role
from formdesk.services.notes import NoteService
from formdesk.services.submission import SubmissionService

router = APIRouter()

reviewer = require_role(UserRole.ADMIN, UserRole.SUPER_ADMIN)


# Owner endpoints
@router.get("/mine", response_model=List[SubmissionListItem])
async def list_my_submissions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """The caller's submissions across all templates."""
    return SubmissionService.list_mine(db, current_user)


@router.get("/template/{template_id}", response_model=SubmissionResponse)
async def get_my_submission(
    template_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    submission = SubmissionService.get_for_template(db, current_user, template_id)
    if not submission:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Submission not found"
        )
    return submission


@router.get("/template/{template_id}/render", response_model=RenderPlan)
async def render_my_form(
    template_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Render plan for filling a template."""
    return SubmissionService.render_for_template(db, current_user, template_id)


@router.put("/template/{template_id}", response_model=SubmissionResponse)
async def save_progress(
    template_id: int,
    payload: FormDataPayload,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Autosave and explicit save both land here."""
    return SubmissionService.save_progress(db, current_user, template_id, payload.form_data)


@router.post("/template/{template_id}/submit", response_model=SubmissionResponse)
async def submit_form(
    template_id: int,
    payload: FormDataPayload,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Save and mark completed. No further edits afterwards."""
    return SubmissionService.submit(db, current_user, template_id, payload.form_data)


# Review endpoints
@router.get("", response_model=List[SubmissionListItem])
async def list_submissions(
    status_filter: Optional[str] = Query(None, alias="status"),
    template_id: Optional[int] = None,
    admin_id: Optional[int] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(reviewer)
):
    """Submissions visible to the caller, redacted for partial access."""
    return AccessService.list_submissions(
        db,
        current_user,
        status_filter=status_filter,
        template_id=template_id,
        admin_id=admin_id,
        search=search,
    )


@router.get("/{submission_id}", response_model=SubmissionDetail)
async def get_submission(
    submission_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(reviewer)
):
    return SubmissionService.get_detail(db, current_user, submission_id)


@router.get("/{submission_id}/render", response_model=RenderPlan)
async def render_submission(
    submission_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Render plan for the owner or a reviewer of a submission."""
    return SubmissionService.render_submission(db, current_user, submission_id)


# Notes
@router.get("/{submission_id}/notes", response_model=List[NoteResponse])
async def list_notes(
    submission_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(reviewer)
):
    return NoteService.list_notes(db, current_user, submission_id)


@router.post("/{submission_id}/notes", response_model=NoteResponse, status_code=201)
async def add_note(
    submission_id: int,
    note: NoteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(reviewer)
):
    """Append a note to a submission."""
    return NoteService.add_note(db, current_user, submission_id, note.note)
