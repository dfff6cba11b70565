"""
Public jobs API endpoints.
Handles job browsing, seeker recommendations and job detail.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from skillshub.database import get_db
from skillshub.models.job import Job, JobStatus
from skillshub.models.seeker import SeekerProfile
from skillshub.models.skill import SkillOnJob, SkillOnProfile
from skillshub.models.user import User, UserRole
from skillshub.schemas.job import JobListResponse, RecommendedJobsResponse, JobDetail, UserSkill
from skillshub.api.auth import require_role
from skillshub.services.jobs import (
    JOB_LOAD_OPTIONS,
    apply_listing_filters,
    build_job_summary,
    build_recommended_job,
    build_job_detail,
    load_job,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/available", response_model=JobListResponse)
async def available_jobs(
    search: Optional[str] = Query(None, description="Matches title or description"),
    job_type: Optional[str] = Query(None, alias="type", description="Job type; 'all' disables the filter"),
    location: Optional[str] = Query(None, description="Partial location match"),
    db: AsyncSession = Depends(get_db)
):
    """List OPEN jobs, newest first."""
    query = select(Job).where(Job.status == JobStatus.OPEN).options(*JOB_LOAD_OPTIONS)
    query = apply_listing_filters(query, search, job_type, location)
    query = query.order_by(Job.created_at.desc(), Job.id.desc())

    result = await db.execute(query)
    jobs = result.scalars().all()

    return JobListResponse(jobs=[build_job_summary(job) for job in jobs])


@router.get("/recommended", response_model=RecommendedJobsResponse)
async def recommended_jobs(
    search: Optional[str] = Query(None),
    job_type: Optional[str] = Query(None, alias="type"),
    location: Optional[str] = Query(None),
    current_user: User = Depends(require_role(UserRole.JOB_SEEKER)),
    db: AsyncSession = Depends(get_db)
):
    """
    OPEN jobs scored against the seeker's skills.

    When the seeker has skills, only jobs sharing at least one of them are
    returned. Results are sorted by match score, then recency.
    """
    result = await db.execute(
        select(SeekerProfile)
        .where(SeekerProfile.user_id == current_user.id)
        .options(selectinload(SeekerProfile.skills).selectinload(SkillOnProfile.skill))
    )
    profile = result.scalar_one_or_none()
    if not profile:
        raise HTTPException(
            status_code=404,
            detail="Job seeker profile not found. Please complete your profile first."
        )

    seeker_skill_ids = {sp.skill_id for sp in profile.skills}

    query = select(Job).where(Job.status == JobStatus.OPEN).options(*JOB_LOAD_OPTIONS)
    if seeker_skill_ids:
        query = query.where(Job.skills.any(SkillOnJob.skill_id.in_(seeker_skill_ids)))
    query = apply_listing_filters(query, search, job_type, location)

    result = await db.execute(query)
    scored = [build_recommended_job(job, seeker_skill_ids) for job in result.scalars().all()]
    scored.sort(key=lambda j: (j.match_score, j.created_at, j.id), reverse=True)

    return RecommendedJobsResponse(
        jobs=scored,
        user_skills=[
            UserSkill(id=sp.skill.id, name=sp.skill.name, level=sp.level)
            for sp in profile.skills
        ],
    )


@router.get("/{job_id}", response_model=JobDetail)
async def get_job(
    job_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Flat job detail with employer contact and skills."""
    job = await load_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return build_job_detail(job)
