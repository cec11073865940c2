"""Form template router."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from formdesk.database import get_db
from formdesk.models.user import User, UserRole
from formdesk.schemas.template import (
    TemplateCreate,
    TemplateUpdate,
    TemplateResponse,
    TemplateListResponse,
)
from formdesk.services.template import TemplateService
from formdesk.services.auth import get_current_active_user, require_role

router = APIRouter()


@router.get("", response_model=List[TemplateListResponse])
async def list_templates(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """List all templates."""
    templates = TemplateService.get_templates(db, skip, limit)
    return [TemplateService.to_list_item(t) for t in templates]


@router.get("/predefined", response_model=List[TemplateResponse])
async def list_predefined_templates(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.SUPER_ADMIN))
):
    """Predefined templates offered as builder starting points."""
    return TemplateService.get_templates(db, predefined_only=True)


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Get a template by ID."""
    return TemplateService.get_template_or_404(db, template_id)


@router.post("", response_model=TemplateResponse, status_code=201)
async def create_template(
    template_data: TemplateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.SUPER_ADMIN))
):
    """Save a template from the builder (super admin only)."""
    return TemplateService.create_template(db, template_data, current_user)


@router.put("/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: int,
    template_data: TemplateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.SUPER_ADMIN))
):
    """Update a template (super admin only)."""
    return TemplateService.update_template(db, template_id, template_data)


@router.delete("/{template_id}")
async def delete_template(
    template_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.SUPER_ADMIN))
):
    """Delete a template and all submissions made from it (super admin only)."""
    removed = TemplateService.delete_template(db, template_id)
    return {"message": "Template deleted successfully", "submissions_removed": removed}
