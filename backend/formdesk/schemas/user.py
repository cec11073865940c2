"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Optional, Dict, Any

from pydantic import BaseModel, EmailStr, Field

from formdesk.models.user import UserRole, AccessLevel


class UserCreate(BaseModel):
    """Schema for user registration."""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    invite_code: Optional[str] = None


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Schema for user responses."""
    id: int
    email: str
    role: UserRole
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="user_metadata")
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True


class ProfileUpdate(BaseModel):
    """Schema for profile updates."""
    display_name: Optional[str] = Field(None, max_length=255)
    avatar_url: Optional[str] = Field(None, max_length=1024)


class AccessLevelUpdate(BaseModel):
    """Schema for changing an admin's access level."""
    access_level: AccessLevel


class Token(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    assignment: Optional[str] = None


class TokenData(BaseModel):
    """Schema for decoded token data."""
    user_id: Optional[int] = None
