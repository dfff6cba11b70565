"""Uploaded file storage service."""
import hashlib
import logging
import uuid
from pathlib import Path
from typing import Optional

from fastapi import HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from skillshub.config import settings
from skillshub.models.file_object import FileObject

logger = logging.getLogger(__name__)

# Folder each upload category is stored under
BUCKET_PREFIXES = {
    "cv": "applications/cv",
    "cover-letter": "applications/cover-letters",
    "resume": "profiles/resumes",
    "portfolio": "profiles/portfolio",
    "profile-photo": "profiles/photos",
    "other": "misc",
}


UPLOAD_CHUNK_BYTES = 64 * 1024


async def read_upload(file: UploadFile, limit: int) -> bytes:
    """
    Read at most `limit + 1` bytes of an upload.

    Anything past the limit is never read; a result longer than `limit`
    means the file is too large.
    """
    chunks = []
    remaining = limit + 1
    while remaining > 0:
        chunk = await file.read(min(UPLOAD_CHUNK_BYTES, remaining))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def validate_upload(file_type: Optional[str], content_type: Optional[str], size_bytes: int) -> None:
    """
    Validate an upload against the category list and configured limits.

    Raises:
        HTTPException 400: Unknown category, disallowed type
        HTTPException 413: File too large
    """
    if not file_type:
        raise HTTPException(status_code=400, detail="File type is required")

    if file_type not in BUCKET_PREFIXES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type. Must be one of: {', '.join(BUCKET_PREFIXES)}"
        )

    if size_bytes > settings.max_upload_bytes:
        max_mb = round(settings.max_upload_bytes / (1024 * 1024))
        raise HTTPException(
            status_code=413,
            detail=f"File size exceeds maximum allowed size of {max_mb}MB"
        )

    allowed = settings.upload_content_types()
    if content_type not in allowed:
        raise HTTPException(
            status_code=400,
            detail=f"File type {content_type} is not allowed. Allowed types: {', '.join(allowed)}"
        )


def make_bucket_key(file_type: str, filename: Optional[str]) -> str:
    """Unique storage key: `<folder>/<uuid>.<ext>`."""
    extension = Path(filename or "").suffix.lstrip(".").lower()
    name = uuid.uuid4().hex
    if extension:
        name = f"{name}.{extension}"
    return f"{BUCKET_PREFIXES[file_type]}/{name}"


async def store_file(
    db: AsyncSession,
    data: bytes,
    file_type: str,
    filename: Optional[str],
    content_type: Optional[str],
    created_by_id: Optional[int] = None,
) -> FileObject:
    """Persist the bytes as a FileObject and return it."""
    file_object = FileObject(
        bucket_key=make_bucket_key(file_type, filename),
        content_type=content_type,
        size_bytes=len(data),
        etag=hashlib.sha256(data).hexdigest(),
        data=data,
        created_by_id=created_by_id,
    )
    db.add(file_object)
    await db.commit()

    logger.info(f"Stored {file_type} upload {file_object.id} ({file_object.size_bytes} bytes) at {file_object.bucket_key}")
    return file_object
