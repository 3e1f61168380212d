# =============================================================================
# app/routers/upload.py - Image Upload Endpoints
# =============================================================================
# Handles listing image uploads with type/size validation and local storage.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, Query, UploadFile
from pydantic import BaseModel

from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter()


class UploadResponse(BaseModel):
    success: bool = True
    url: str
    file_name: str
    size: int
    type: str


class UploadDeleteResponse(BaseModel):
    success: bool = True
    message: str = "File deleted successfully"


@router.post("", response_model=UploadResponse, status_code=201)
async def upload_image(
    file: Annotated[UploadFile, File(description="JPEG, PNG, WebP or GIF image")],
):
    """
    Upload a listing image.

    Returns the public URL to store as the listing's image_url.
    """
    content = await file.read()
    stored = StorageService.save_image(
        content=content,
        original_name=file.filename,
        content_type=file.content_type,
    )
    return UploadResponse(**stored)


@router.delete("", response_model=UploadDeleteResponse)
async def delete_image(
    file_name: Annotated[str, Query(min_length=1, description="Name returned by the upload")],
):
    """Delete a previously uploaded image."""
    StorageService.delete_image(file_name)
    return UploadDeleteResponse()
