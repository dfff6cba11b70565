"""
File upload and download endpoints.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from skillshub.database import get_db
from skillshub.models.file_object import FileObject
from skillshub.models.user import User
from skillshub.schemas.reference import UploadResponse
from skillshub.api.auth import get_current_user, get_optional_user
from skillshub.config import settings
from skillshub.services.files import read_upload, validate_upload, store_file

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    file_type: Optional[str] = Form(None, alias="fileType"),
    user_id: Optional[int] = Form(None, alias="userId"),
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Upload a file (multipart form: file, fileType, optional userId).

    The uploader is the session user when there is one, else `userId`.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    # Declared size already over the limit: reject before reading anything
    if file.size is not None and file.size > settings.max_upload_bytes:
        validate_upload(file_type, file.content_type, file.size)
    data = await read_upload(file, settings.max_upload_bytes)
    validate_upload(file_type, file.content_type, len(data))

    created_by_id = current_user.id if current_user else user_id

    try:
        stored = await store_file(db, data, file_type, file.filename, file.content_type, created_by_id)
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Error storing upload {file.filename}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to upload file")

    return UploadResponse(
        file_id=stored.id,
        bucket_key=stored.bucket_key,
        size_bytes=stored.size_bytes,
        message="File uploaded successfully",
    )


@router.get("/files/{file_id}")
async def download_file(
    file_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Stored bytes with the recorded content type."""
    file_object = await db.get(FileObject, file_id)
    if not file_object:
        raise HTTPException(status_code=404, detail="File not found")

    return Response(
        content=file_object.data,
        media_type=file_object.content_type or "application/octet-stream",
        headers={"ETag": f'"{file_object.etag}"'} if file_object.etag else None,
    )
