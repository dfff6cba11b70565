"""
Public freelancer endpoints (landing page and /freelancers).
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from skillshub.database import get_db
from skillshub.models.seeker import SeekerProfile
from skillshub.schemas.profile import FreelancerListResponse, FreelancerDetail
from skillshub.services.profile import load_seeker, build_freelancer_card, build_freelancer_detail
from skillshub.services.talents import seeker_criteria, list_freelancers

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/available", response_model=FreelancerListResponse)
async def available_freelancers(
    search: Optional[str] = Query(None),
    pathway: Optional[str] = Query(None, description="STUDENT, GRADUATE or ARTISAN; 'all' disables"),
    min_experience: Optional[int] = Query(None, alias="minExperience", ge=0),
    db: AsyncSession = Depends(get_db)
):
    """Verified freelancers, most experienced first (5 skills each)."""
    profiles = await list_freelancers(db, seeker_criteria(search, pathway, min_experience))
    return FreelancerListResponse(
        freelancers=[build_freelancer_card(p, skill_limit=5) for p in profiles]
    )


@router.get("/top", response_model=FreelancerListResponse)
async def top_freelancers(db: AsyncSession = Depends(get_db)):
    """The three most experienced freelancers (3 skills each)."""
    profiles = await list_freelancers(db, seeker_criteria(), limit=3)
    return FreelancerListResponse(
        freelancers=[build_freelancer_card(p, skill_limit=3) for p in profiles]
    )


@router.get("/{profile_id}", response_model=FreelancerDetail)
async def get_freelancer(
    profile_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Flat public profile."""
    profile = await load_seeker(db, SeekerProfile.id == profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return build_freelancer_detail(profile)
