"""Upload router for file and image field values."""

from fastapi import APIRouter, Depends, File, UploadFile

from formdesk.models.user import User
from formdesk.services.auth import get_current_active_user
from formdesk.storage import StorageProvider, get_storage, upload_key

router = APIRouter()


@router.post("", status_code=201)
async def upload_file(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_active_user),
    storage: StorageProvider = Depends(get_storage)
):
    """Store a file; the returned URL becomes the field value."""
    key = upload_key(file.filename)
    storage.save(key, file.file)
    return {
        "url": storage.get_url(key),
        "path": key,
        "filename": file.filename,
        "content_type": file.content_type,
    }
