"""Admin note model."""

from datetime import datetime

from sqlalchemy import Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formdesk.database import Base


class AdminNote(Base):
    """
    AdminNote is an append-only annotation on a submission.

    Notes are independent of the submission status and are never edited.
    """

    __tablename__ = "admin_notes"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    admin_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    note: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    submission: Mapped["Submission"] = relationship("Submission", back_populates="notes")
    admin: Mapped["User"] = relationship("User")

    def __repr__(self) -> str:
        return f"<AdminNote(id={self.id}, submission_id={self.submission_id}, admin_id={self.admin_id})>"
