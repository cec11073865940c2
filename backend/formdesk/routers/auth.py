"""Authentication router."""

from datetime import timedelta
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from formdesk.database import get_db
from formdesk.config import get_settings
from formdesk.models.user import User
from formdesk.schemas.user import UserCreate, UserResponse, Token, UserLogin
from formdesk.services.auth import AuthService, get_current_active_user
from formdesk.services.invite import InviteService

settings = get_settings()
logger = structlog.get_logger(__name__)
router = APIRouter()


def _issue_token(user: User, assignment: Optional[str] = None) -> Token:
    access_token = AuthService.create_access_token(
        data={"sub": str(user.id)},
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes)
    )
    return Token(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
        assignment=assignment,
    )


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    """Register a new user, optionally through an admin's invite."""
    user = AuthService.create_user(db, user_data)

    assignment = None
    if user_data.invite_code:
        if InviteService.resolve_invite(db, user_data.invite_code):
            result = InviteService.accept_invite(db, user_data.invite_code, user)
            assignment = result.status
        else:
            logger.info("register_invite_ignored", user_id=user.id)

    return _issue_token(user, assignment)


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """Login and get access token."""
    user = AuthService.authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _issue_token(user)


@router.post("/login/json", response_model=Token)
async def login_json(
    credentials: UserLogin,
    db: Session = Depends(get_db)
):
    """Login with JSON body."""
    user = AuthService.authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _issue_token(user)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_active_user)
):
    """Get current user information."""
    return current_user


@router.post("/logout")
async def logout(
    current_user: User = Depends(get_current_active_user)
):
    """Tokens are stateless; the client drops its copy."""
    logger.info("logout", user_id=current_user.id)
    return {"message": "Logged out"}
