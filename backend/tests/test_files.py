"""
Tests for file upload and download.
"""
import hashlib
import io

import pytest

from fastapi import UploadFile
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillshub.config import settings
from skillshub.models.file_object import FileObject
from skillshub.services.files import make_bucket_key, read_upload


def test_make_bucket_key_uses_category_folder():
    key = make_bucket_key("cover-letter", "Letter.PDF")
    assert key.startswith("applications/cover-letters/")
    assert key.endswith(".pdf")

    assert make_bucket_key("other", None).startswith("misc/")


@pytest.mark.asyncio
async def test_upload_and_download(seeker_client: AsyncClient, seeker, db: AsyncSession):
    content = b"%PDF-1.4 my cover letter"

    response = await seeker_client.post(
        "/api/upload",
        data={"fileType": "cover-letter"},
        files={"file": ("letter.pdf", content, "application/pdf")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "File uploaded successfully"
    assert data["sizeBytes"] == len(content)
    assert data["bucketKey"].startswith("applications/cover-letters/")

    row = (await db.execute(
        select(FileObject.created_by_id, FileObject.etag).where(FileObject.id == data["fileId"])
    )).one()
    assert row.created_by_id == seeker.user_id
    assert row.etag == hashlib.sha256(content).hexdigest()

    download = await seeker_client.get(f"/api/files/{data['fileId']}")
    assert download.status_code == 200
    assert download.content == content
    assert download.headers["content-type"] == "application/pdf"


@pytest.mark.asyncio
async def test_anonymous_upload_records_user_id(async_client: AsyncClient, seeker, db: AsyncSession):
    response = await async_client.post(
        "/api/upload",
        data={"fileType": "resume", "userId": str(seeker.user_id)},
        files={"file": ("cv.txt", b"plain text cv", "text/plain")},
    )

    assert response.status_code == 200
    created_by = (await db.execute(
        select(FileObject.created_by_id).where(FileObject.id == response.json()["fileId"])
    )).scalar_one()
    assert created_by == seeker.user_id


@pytest.mark.asyncio
async def test_upload_validation(async_client: AsyncClient):
    no_file = await async_client.post("/api/upload", data={"fileType": "resume"})
    assert no_file.status_code == 400
    assert no_file.json()["error"] == "No file provided"

    no_type = await async_client.post(
        "/api/upload", files={"file": ("cv.pdf", b"%PDF", "application/pdf")}
    )
    assert no_type.status_code == 400
    assert no_type.json()["error"] == "File type is required"

    bad_category = await async_client.post(
        "/api/upload", data={"fileType": "selfie"}, files={"file": ("cv.pdf", b"%PDF", "application/pdf")}
    )
    assert bad_category.status_code == 400
    assert bad_category.json()["error"].startswith("Invalid file type. Must be one of: cv, cover-letter")

    bad_mime = await async_client.post(
        "/api/upload", data={"fileType": "resume"}, files={"file": ("run.exe", b"MZ", "application/x-msdownload")}
    )
    assert bad_mime.status_code == 400
    assert "is not allowed" in bad_mime.json()["error"]


@pytest.mark.asyncio
async def test_upload_too_large(async_client: AsyncClient):
    content = b"x" * (settings.max_upload_bytes + 1)

    response = await async_client.post(
        "/api/upload", data={"fileType": "resume"}, files={"file": ("big.pdf", content, "application/pdf")}
    )

    assert response.status_code == 413
    assert response.json() == {"error": "File size exceeds maximum allowed size of 5MB", "kind": "validation"}


@pytest.mark.asyncio
async def test_download_requires_session_and_existing_file(async_client: AsyncClient, seeker_client: AsyncClient):
    assert (await async_client.get("/api/files/abc")).status_code == 401

    missing = await seeker_client.get("/api/files/abc")
    assert missing.status_code == 404
    assert missing.json()["error"] == "File not found"


class CountingBytesIO(io.BytesIO):
    def __init__(self, data: bytes):
        super().__init__(data)
        self.bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        chunk = super().read(size)
        self.bytes_read += len(chunk)
        return chunk


@pytest.mark.asyncio
async def test_read_upload_stops_after_limit():
    source = CountingBytesIO(b"x" * 1_000_000)
    upload = UploadFile(source, filename="big.pdf")

    data = await read_upload(upload, limit=100_000)

    assert len(data) == 100_001
    assert source.bytes_read == 100_001


@pytest.mark.asyncio
async def test_read_upload_returns_small_file_whole():
    upload = UploadFile(io.BytesIO(b"%PDF-1.4 short"), filename="cv.pdf")

    assert await read_upload(upload, limit=100_000) == b"%PDF-1.4 short"
