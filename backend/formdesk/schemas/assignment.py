"""Assignment and invite Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AssignmentCreate(BaseModel):
    """Schema for creating an admin -> user edge."""
    admin_id: int
    user_id: int


class AssignmentResponse(BaseModel):
    """Schema for assignment responses."""
    id: int
    admin_id: int
    admin_email: Optional[str] = None
    user_id: int
    user_email: Optional[str] = None
    created_at: Optional[datetime] = None


class InviteLinkResponse(BaseModel):
    """Shareable invite for the calling admin."""
    code: str
    link: str


class InviteInfo(BaseModel):
    """What an invite code resolves to; invalid codes are not errors."""
    valid: bool
    admin_id: Optional[int] = None
    admin_email: Optional[str] = None


class InviteAcceptResponse(BaseModel):
    """Result of visiting an invite as a signed-in account."""
    status: str
    admin_id: int
    admin_email: Optional[str] = None
