"""Form template Pydantic schemas."""

from datetime import datetime
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field, field_validator

from formdesk.schemas.field import FormField, ensure_unique_ids


class TemplateCreate(BaseModel):
    """Schema for creating a template from the builder."""
    name: str = Field(..., min_length=1, max_length=255)
    fields: List[FormField] = Field(..., min_length=1)
    is_predefined: bool = False

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Form name is required")
        return v

    @field_validator("fields")
    @classmethod
    def _unique_ids(cls, v):
        return ensure_unique_ids(v)


class TemplateUpdate(BaseModel):
    """Schema for updating a template. Omitted keys are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    fields: Optional[List[FormField]] = Field(None, min_length=1)
    is_predefined: Optional[bool] = None

    @field_validator("name", "fields", "is_predefined", mode="before")
    @classmethod
    def _not_null(cls, v):
        # Defaults are not validated, so None here was sent explicitly
        if v is None:
            raise ValueError("Value may be omitted but not null")
        return v

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Form name is required")
        return v

    @field_validator("fields")
    @classmethod
    def _unique_ids(cls, v):
        return ensure_unique_ids(v)


class TemplateResponse(BaseModel):
    """Schema for template responses."""
    id: int
    name: str
    fields: List[Dict[str, Any]]
    is_predefined: bool
    created_by: Optional[int]
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class TemplateListResponse(BaseModel):
    """Schema for template list responses."""
    id: int
    name: str
    is_predefined: bool
    field_count: int
    created_at: datetime
