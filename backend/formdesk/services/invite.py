"""
Invite links that assign the visitor to an admin.

The code is the admin's id in URL-safe base64 without padding. It is an
encoding, not a secret: anyone who knows an admin id can build one.
"""

import base64
import binascii
from typing import Optional

import structlog
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from formdesk.config import get_settings
from formdesk.database import insert_ignore
from formdesk.models.assignment import AdminAssignment
from formdesk.models.user import User, UserRole
from formdesk.schemas.assignment import InviteAcceptResponse, InviteInfo, InviteLinkResponse

settings = get_settings()
logger = structlog.get_logger(__name__)

ASSIGNED = "assigned"
ALREADY_ASSIGNED = "already_assigned"


class InvalidInviteCode(ValueError):
    """Code does not decode to an account id."""


def encode_invite(admin_id: int) -> str:
    raw = str(admin_id).encode("ascii")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_invite(code: str) -> int:
    padded = code + "=" * (-len(code) % 4)
    try:
        text = base64.urlsafe_b64decode(padded.encode("ascii")).decode("ascii")
    except (binascii.Error, UnicodeError, ValueError):
        raise InvalidInviteCode(code)
    if not text.isdigit() or int(text) <= 0:
        raise InvalidInviteCode(code)
    return int(text)


class InviteService:
    """Service for building and redeeming invite codes."""

    @staticmethod
    def link_for(admin: User) -> InviteLinkResponse:
        code = encode_invite(admin.id)
        return InviteLinkResponse(
            code=code,
            link=f"{settings.public_base_url.rstrip('/')}/invite/{code}",
        )

    @staticmethod
    def resolve_invite(db: Session, code: str) -> Optional[User]:
        """The admin a code points at, or None for any bad code."""
        try:
            admin_id = decode_invite(code)
        except InvalidInviteCode:
            return None
        return db.query(User).filter(
            User.id == admin_id,
            User.role == UserRole.ADMIN
        ).first()

    @staticmethod
    def describe(db: Session, code: str) -> InviteInfo:
        admin = InviteService.resolve_invite(db, code)
        if not admin:
            return InviteInfo(valid=False)
        return InviteInfo(valid=True, admin_id=admin.id, admin_email=admin.email)

    @staticmethod
    def accept_invite(db: Session, code: str, account: User) -> InviteAcceptResponse:
        """
        Assign the account to the invite's admin.

        Repeated visits are harmless: the unique (admin_id, user_id) key
        makes the insert a no-op and the result reports already_assigned.
        """
        admin = InviteService.resolve_invite(db, code)
        if not admin:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Invalid invite link"
            )
        if account.role != UserRole.USER:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only user accounts can accept invites"
            )

        created = insert_ignore(
            db,
            AdminAssignment,
            {"admin_id": admin.id, "user_id": account.id},
            ("admin_id", "user_id"),
        )
        db.commit()

        result = ASSIGNED if created else ALREADY_ASSIGNED
        logger.info("invite_accepted", admin_id=admin.id, user_id=account.id, result=result)
        return InviteAcceptResponse(status=result, admin_id=admin.id, admin_email=admin.email)
