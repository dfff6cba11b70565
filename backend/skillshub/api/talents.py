"""
Talent browsing endpoints for employers (and admins).
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from skillshub.database import get_db
from skillshub.models.seeker import SeekerProfile
from skillshub.models.user import User, UserRole
from skillshub.schemas.common import Pagination
from skillshub.schemas.profile import TalentListResponse, TalentResponse
from skillshub.api.auth import require_role
from skillshub.services.profile import load_seeker, build_talent_detail
from skillshub.services.talents import (
    seeker_criteria,
    employer_open_job_skill_ids,
    talent_skill_criteria,
    browse_talents,
)

logger = logging.getLogger(__name__)

router = APIRouter()

require_recruiter = require_role(UserRole.EMPLOYER, UserRole.ADMIN)


@router.get("", response_model=TalentListResponse)
async def list_talents(
    search: Optional[str] = Query(None),
    pathway: Optional[str] = Query(None),
    skill_id: Optional[int] = Query(None, alias="skillId"),
    min_experience: Optional[int] = Query(None, alias="minExperience", ge=0),
    use_matching: bool = Query(True, alias="useMatching"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(require_recruiter),
    db: AsyncSession = Depends(get_db)
):
    """
    Browse talents.

    With matching on (the default), an employer only sees talents holding at
    least one skill from their OPEN jobs, scored by how many of those skills
    they hold.
    """
    employer_skill_ids: set[int] = set()
    if use_matching and current_user.role == UserRole.EMPLOYER:
        employer_skill_ids = await employer_open_job_skill_ids(db, current_user.id)

    criteria = seeker_criteria(search, pathway, min_experience, search_email=True)
    criteria += talent_skill_criteria(employer_skill_ids, skill_id)

    talents, total = await browse_talents(db, criteria, employer_skill_ids, limit, offset)

    return TalentListResponse(
        talents=talents,
        pagination=Pagination(total=total, limit=limit, offset=offset, has_more=offset + limit < total),
    )


@router.get("/{talent_id}", response_model=TalentResponse)
async def get_talent(
    talent_id: int,
    current_user: User = Depends(require_recruiter),
    db: AsyncSession = Depends(get_db)
):
    """Full talent profile including the resume reference."""
    profile = await load_seeker(db, SeekerProfile.id == talent_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Talent not found")
    return TalentResponse(talent=build_talent_detail(profile))
