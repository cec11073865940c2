"""Form template model."""

from datetime import datetime
from typing import Optional, List, Dict, Any

from sqlalchemy import String, DateTime, Boolean, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formdesk.database import Base


class FormTemplate(Base):
    """
    FormTemplate is a named, ordered list of fields.

    Field order defines both render and review order. Predefined templates
    are offered to other template authors as starting points.
    """

    __tablename__ = "form_templates"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Ordered list of field descriptors
    fields: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    is_predefined: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    # Owning super admin
    created_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id"),
        nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        onupdate=datetime.utcnow,
        nullable=True
    )

    # Relationships
    creator: Mapped[Optional["User"]] = relationship("User")
    submissions: Mapped[List["Submission"]] = relationship(
        "Submission",
        back_populates="form_template",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<FormTemplate(id={self.id}, name='{self.name}')>"
