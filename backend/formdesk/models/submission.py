"""Submission model."""

from datetime import datetime
from typing import List, Dict, Any
from enum import Enum as PyEnum

from sqlalchemy import String, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formdesk.database import Base


class SubmissionStatus(str, PyEnum):
    """States the submission lifecycle produces."""
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# Shown in filters and badges, never written by the lifecycle
RESERVED_STATUSES = ("pending", "submitted", "rejected")

FILTERABLE_STATUSES = tuple(s.value for s in SubmissionStatus) + RESERVED_STATUSES


class Submission(Base):
    """
    Submission is one user's attempt at one template.

    There is at most one row per (user_id, form_template_id). Once the
    status is completed the form data is read-only.
    """

    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint("user_id", "form_template_id", name="uq_submissions_user_template"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )
    form_template_id: Mapped[int] = mapped_column(
        ForeignKey("form_templates.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Field id -> entered value, only for touched fields
    form_data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Stored as a plain string so reserved statuses stay representable
    status: Mapped[str] = mapped_column(
        String(32),
        default=SubmissionStatus.IN_PROGRESS.value,
        nullable=False,
        index=True
    )

    last_updated: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="submissions")
    form_template: Mapped["FormTemplate"] = relationship(
        "FormTemplate",
        back_populates="submissions"
    )
    notes: Mapped[List["AdminNote"]] = relationship(
        "AdminNote",
        back_populates="submission",
        order_by="AdminNote.created_at.desc()",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Submission(id={self.id}, user_id={self.user_id}, status='{self.status}')>"

    @property
    def is_completed(self) -> bool:
        return self.status == SubmissionStatus.COMPLETED.value
