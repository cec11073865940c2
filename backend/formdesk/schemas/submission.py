"""Submission, render plan and note Pydantic schemas."""

from datetime import datetime
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, Field


class FormDataPayload(BaseModel):
    """Full local form data sent by autosave, save and submit."""
    form_data: Dict[str, Any] = Field(default_factory=dict)


class SubmissionResponse(BaseModel):
    """Schema for a submission as seen by its owner."""
    id: int
    user_id: int
    form_template_id: int
    form_data: Dict[str, Any]
    status: str
    last_updated: datetime

    class Config:
        from_attributes = True


class SubmissionListItem(BaseModel):
    """Row in a review queue or dashboard."""
    id: int
    user_id: int
    user_email: Optional[str] = None
    form_template_id: int
    template_name: Optional[str] = None
    status: str
    last_updated: datetime
    percent_complete: float
    form_data: Dict[str, Any] = Field(default_factory=dict)


class RenderedField(BaseModel):
    """One entry of a render plan."""
    id: str
    label: str
    type: str
    value: Any = None
    editable: bool
    visible: bool = True
    required: bool = False
    sensitive: bool = False
    redacted: bool = False
    answered: bool = False
    extras: Dict[str, Any] = Field(default_factory=dict)


class RenderPlan(BaseModel):
    """Everything needed to draw a submission form."""
    template_id: int
    template_name: str
    submission_id: Optional[int] = None
    status: Optional[str] = None
    read_only: bool
    autosave_delay_seconds: float = 3.0
    fields: List[RenderedField]


class NoteCreate(BaseModel):
    """Schema for appending a note."""
    note: str = Field(..., min_length=1, max_length=10000)


class NoteResponse(BaseModel):
    """Schema for note responses."""
    id: int
    submission_id: int
    admin_id: int
    admin_email: Optional[str] = None
    note: str
    created_at: datetime


class SubmissionDetail(BaseModel):
    """Review view of one submission, redacted for the viewer."""
    id: int
    user_id: int
    user_email: Optional[str] = None
    form_template_id: int
    template_name: str
    status: str
    last_updated: datetime
    can_view_sensitive: bool
    fields: List[RenderedField]
    notes: List[NoteResponse] = Field(default_factory=list)
