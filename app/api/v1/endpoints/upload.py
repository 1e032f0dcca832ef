"""Image upload endpoints (college galleries, logos, section images)."""

from typing import List

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from app.core.exceptions import ServiceUnavailableError, ValidationError
from app.core.logging import logger
from app.dependencies import require_admin
from app.models.user import User
from app.schemas import GalleryUploadResponse, MessageResponse, UploadResponse
from app.services.storage_service import StorageError, build_image_path, storage_service

router = APIRouter()


async def _store(file: UploadFile, folder: str) -> dict:
    content = await file.read()
    path = build_image_path(folder, file.filename, file.content_type, len(content))
    try:
        url = await storage_service.upload(path, content, file.content_type)
    except StorageError as e:
        raise ServiceUnavailableError(f"Upload failed: {e}")
    return {"url": url, "path": path, "file_name": file.filename}


@router.post("", response_model=UploadResponse, status_code=201)
async def upload_image(
    file: UploadFile = File(...),
    folder: str = Form("images"),
    current_user: User = Depends(require_admin),
):
    """Upload one image (admin+ only)."""
    stored = await _store(file, folder)
    logger.info(f"Image uploaded by {current_user.email}: {stored['path']}")
    return stored


@router.post("/gallery", response_model=GalleryUploadResponse, status_code=201)
async def upload_gallery(
    files: List[UploadFile] = File(...),
    folder: str = Form(...),
    current_user: User = Depends(require_admin),
):
    """Upload several gallery images into one folder (admin+ only)."""
    if not folder.strip("/"):
        raise ValidationError("Missing required fields")
    stored = [await _store(f, folder) for f in files]
    logger.info(f"{len(stored)} gallery images uploaded by {current_user.email} to {folder}")
    return {"message": f"{len(stored)} images uploaded", "files": stored}


@router.delete("", response_model=MessageResponse)
async def delete_image(
    path: str = Query(..., description="Storage path returned by an upload"),
    current_user: User = Depends(require_admin),
):
    """Delete an uploaded image by its storage path (admin+ only)."""
    if ".." in path or path.startswith("/"):
        raise ValidationError("Invalid storage path")
    try:
        await storage_service.delete(path)
    except StorageError as e:
        raise ServiceUnavailableError(f"Delete failed: {e}")
    logger.info(f"Image deleted by {current_user.email}: {path}")
    return {"message": "File deleted successfully"}
