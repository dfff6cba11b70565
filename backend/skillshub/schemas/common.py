"""Shared Pydantic base classes."""
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (both accepted on input)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FileRef(CamelModel):
    """Reference to an uploaded file; resolved via /api/files/{id}."""
    id: str
    bucket_key: str
    content_type: Optional[str] = None
    size_bytes: Optional[int] = None


class Pagination(CamelModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class ErrorResponse(BaseModel):
    """Error envelope returned with every non-2xx response."""
    error: str
    kind: str
