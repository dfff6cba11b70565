from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, LargeBinary
import uuid

from skillshub.database import Base


class FileObject(Base):
    """
    Uploaded file (resume, cover letter, portfolio asset, logo).

    The bytes live in `data`; everything else about a file is a reference
    resolved through /api/files/{id}.
    """
    __tablename__ = "file_objects"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    bucket_key = Column(String(512), unique=True, nullable=False)
    content_type = Column(String(255), nullable=True)
    size_bytes = Column(Integer, nullable=True)
    etag = Column(String(64), nullable=True)  # sha256 of data
    data = Column(LargeBinary, nullable=False)

    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
