"""Invite link router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from formdesk.database import get_db
from formdesk.models.user import User, UserRole
from formdesk.schemas.assignment import InviteAcceptResponse, InviteInfo, InviteLinkResponse
from formdesk.services.auth import get_current_active_user, require_role
from formdesk.services.invite import InviteService

router = APIRouter()


@router.get("/link", response_model=InviteLinkResponse)
async def get_invite_link(
    current_user: User = Depends(require_role(UserRole.ADMIN))
):
    """Shareable link for the calling admin."""
    return InviteService.link_for(current_user)


@router.get("/{code}", response_model=InviteInfo)
async def describe_invite(
    code: str,
    db: Session = Depends(get_db)
):
    """Who an invite belongs to. Unknown codes are reported as invalid."""
    return InviteService.describe(db, code)


@router.post("/{code}/accept", response_model=InviteAcceptResponse)
async def accept_invite(
    code: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return InviteService.accept_invite(db, code, current_user)
