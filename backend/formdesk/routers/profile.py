"""Profile router."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from formdesk.database import get_db
from formdesk.models.user import User
from formdesk.schemas.user import ProfileUpdate, UserResponse
from formdesk.services.auth import get_current_active_user
from formdesk.storage import StorageProvider, avatar_key, get_storage

router = APIRouter()


@router.get("", response_model=UserResponse)
async def get_profile(
    current_user: User = Depends(get_current_active_user)
):
    return current_user


@router.put("", response_model=UserResponse)
async def update_profile(
    profile: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Update display name and avatar URL."""
    for key, value in profile.model_dump(exclude_unset=True).items():
        setattr(current_user, key, value)
    db.commit()
    db.refresh(current_user)
    return current_user


@router.post("/avatar", response_model=UserResponse)
async def upload_avatar(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    storage: StorageProvider = Depends(get_storage)
):
    """Store an avatar image and point the profile at it."""
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Avatar must be an image"
        )
    key = avatar_key(current_user.id, file.filename)
    storage.save(key, file.file)

    current_user.avatar_url = storage.get_url(key)
    db.commit()
    db.refresh(current_user)
    return current_user
