"""Admin to user assignment model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formdesk.database import Base


class AdminAssignment(Base):
    """Edge admin -> user scoping which submissions an admin reviews."""

    __tablename__ = "admin_assignments"
    __table_args__ = (
        UniqueConstraint("admin_id", "user_id", name="uq_admin_assignments_admin_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    admin_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    admin: Mapped["User"] = relationship("User", foreign_keys=[admin_id])
    user: Mapped["User"] = relationship("User", foreign_keys=[user_id])

    def __repr__(self) -> str:
        return f"<AdminAssignment(admin_id={self.admin_id}, user_id={self.user_id})>"
