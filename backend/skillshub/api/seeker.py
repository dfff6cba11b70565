"""
Seeker API endpoints.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from skillshub.database import get_db
from skillshub.models.user import User, UserRole
from skillshub.schemas.application import SeekerApplicationListResponse
from skillshub.api.auth import require_role
from skillshub.services.applications import list_seeker_applications

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/applications", response_model=SeekerApplicationListResponse)
async def my_applications(
    status: Optional[str] = Query(None, description="Application status, or \"all\""),
    current_user: User = Depends(require_role(UserRole.JOB_SEEKER)),
    db: AsyncSession = Depends(get_db)
):
    """The seeker's applications with their job cards, newest first."""
    return await list_seeker_applications(db, current_user, status)
