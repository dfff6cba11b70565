"""
Seeker profile endpoints.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from skillshub.database import get_db
from skillshub.models.seeker import SeekerProfile
from skillshub.models.user import User, UserRole
from skillshub.schemas.profile import (
    SeekerProfileResponse,
    SeekerProfileUpdate,
    SeekerProfileUpdateResponse,
)
from skillshub.api.auth import require_role
from skillshub.services.profile import (
    load_seeker,
    build_seeker_account,
    build_seeker_profile,
    update_seeker_profile,
)

logger = logging.getLogger(__name__)
router = APIRouter()

require_seeker = require_role(UserRole.JOB_SEEKER)


@router.get("/seeker", response_model=SeekerProfileResponse)
async def get_seeker_profile(
    current_user: User = Depends(require_seeker),
    db: AsyncSession = Depends(get_db)
):
    """Current seeker's account and profile, including the resume reference."""
    profile = await load_seeker(db, SeekerProfile.user_id == current_user.id)
    if not profile:
        raise HTTPException(status_code=404, detail="Seeker profile not found")

    return SeekerProfileResponse(
        user=build_seeker_account(current_user),
        profile=build_seeker_profile(profile),
    )


@router.patch("/seeker", response_model=SeekerProfileUpdateResponse)
async def patch_seeker_profile(
    update: SeekerProfileUpdate,
    current_user: User = Depends(require_seeker),
    db: AsyncSession = Depends(get_db)
):
    """Partially update (or create) the current seeker's profile."""
    profile = await update_seeker_profile(db, current_user, update)
    logger.info(f"Updated seeker profile for user {current_user.id}: {sorted(update.model_fields_set)}")

    return SeekerProfileUpdateResponse(
        profile=build_seeker_profile(profile),
        message="Profile updated successfully",
    )
