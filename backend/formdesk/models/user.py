"""User model for authentication and authorization."""

from datetime import datetime
from typing import Optional, List, Dict, Any
from enum import Enum as PyEnum

from sqlalchemy import String, Boolean, DateTime, Enum, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formdesk.database import Base


class UserRole(str, PyEnum):
    """Account roles, lowest privilege first."""
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    def __str__(self) -> str:
        return self.value


class AccessLevel(str, PyEnum):
    """How much of a submission an admin may see."""
    FULL = "full"
    PARTIAL = "partial"


class User(Base):
    """User model for authentication."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, values_callable=lambda x: [e.value for e in x]),
        default=UserRole.USER,
        nullable=False,
        index=True
    )

    # Free-form; carries an admin's access_level
    user_metadata: Mapped[Dict[str, Any]] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict
    )

    # Profile
    display_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        onupdate=datetime.utcnow,
        nullable=True
    )

    # Relationships
    submissions: Mapped[List["Submission"]] = relationship(
        "Submission",
        back_populates="user"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"

    @property
    def access_level(self) -> AccessLevel:
        """Admin access level; anything other than 'full' is partial."""
        level = (self.user_metadata or {}).get("access_level")
        return AccessLevel.FULL if level == AccessLevel.FULL.value else AccessLevel.PARTIAL
