"""Authentication-related Pydantic schemas."""
from typing import Optional
from pydantic import BaseModel

from skillshub.schemas.common import CamelModel


class LoginRequest(BaseModel):
    """Email + password login."""
    email: str
    password: str


class LoginResponse(CamelModel):
    success: bool = True
    message: str
    redirect_url: str
    role: str


class SessionUser(CamelModel):
    """Current session user (GET /api/auth/me)."""
    user_id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    is_email_verified: bool


class MeResponse(CamelModel):
    user: SessionUser
