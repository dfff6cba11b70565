"""
Applications API endpoints.
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from skillshub.database import get_db
from skillshub.models.user import User, UserRole
from skillshub.schemas.application import ApplyRequest, ApplyResponse
from skillshub.api.auth import require_role
from skillshub.services.applications import submit_application

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/apply", response_model=ApplyResponse, status_code=201)
async def apply(
    request: ApplyRequest,
    current_user: User = Depends(require_role(UserRole.JOB_SEEKER)),
    db: AsyncSession = Depends(get_db)
):
    """
    Apply to an OPEN job.

    Returns:
        201: Application created, employer notified
        400: Missing job id / profile / files (`requiresResume` set when no files)
        404: Job or referenced file not found
        409: Already applied
    """
    return await submit_application(db, current_user, request)
