"""
Employer API endpoints.
Handles the employer's own job postings, the applications they receive
and talent recruitment.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, func

from skillshub.database import get_db
from skillshub.models.employer import EmployerProfile
from skillshub.models.job import Job, JobStatus
from skillshub.models.user import User, UserRole
from skillshub.schemas.common import Pagination
from skillshub.schemas.job import (
    JobPayload,
    EmployerJobListResponse,
    EmployerJobResponse,
    JobCreateResponse,
    JobUpdateResponse,
)
from skillshub.schemas.application import (
    ApplicationDeleteResponse,
    ApplicationStatusUpdate,
    EmployerApplicationListResponse,
    EmployerApplicationResponse,
    RecruitRequest,
    RecruitResponse,
)
from skillshub.api.auth import require_role
from skillshub.services.jobs import (
    JOB_LOAD_OPTIONS,
    normalize_job_payload,
    resolve_job_skills,
    build_employer_job,
    load_job,
)
from skillshub.services.applications import (
    build_employer_application,
    change_application_status,
    delete_application,
    list_employer_applications,
    load_employer_application,
    recruit_talent,
)

logger = logging.getLogger(__name__)

router = APIRouter()

require_employer = require_role(UserRole.EMPLOYER)


def employer_profile_of(user: User) -> EmployerProfile:
    """The employer's company profile, or 404 if they have not created one yet."""
    if user.employer_profile is None:
        raise HTTPException(
            status_code=404,
            detail="Employer profile not found. Please complete your company profile first."
        )
    return user.employer_profile


# ============================================================
# JOB POSTINGS
# ============================================================

@router.get("/jobs", response_model=EmployerJobListResponse)
async def list_employer_jobs(
    status: Optional[str] = Query(None, description="OPEN or CLOSED"),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """List the employer's jobs with application counts, newest first."""
    employer = employer_profile_of(current_user)

    filters = [Job.employer_id == employer.id]
    if status in (JobStatus.OPEN.value, JobStatus.CLOSED.value):
        filters.append(Job.status == JobStatus(status))

    total = (await db.execute(select(func.count(Job.id)).where(*filters))).scalar_one()

    result = await db.execute(
        select(Job)
        .where(*filters)
        .options(*JOB_LOAD_OPTIONS)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .offset(offset)
        .limit(limit)
    )
    jobs = result.scalars().all()

    return EmployerJobListResponse(
        jobs=[build_employer_job(job) for job in jobs],
        pagination=Pagination(total=total, limit=limit, offset=offset, has_more=offset + limit < total),
    )


@router.post("/jobs", response_model=JobCreateResponse, status_code=201)
async def create_job(
    payload: JobPayload,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """
    Post a new job.

    Title, description and a valid type are required. A missing or invalid
    status defaults to OPEN. Unknown skill ids are ignored.
    """
    data = normalize_job_payload(payload, default_status=JobStatus.OPEN)
    employer = employer_profile_of(current_user)

    try:
        skills = await resolve_job_skills(db, payload.skills or [])
        job = Job(employer_id=employer.id, skills=skills, **data)
        db.add(job)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to create job for employer {employer.id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create job. Please check all fields and try again.")

    created = await load_job(db, job.id)
    logger.info(f"Created job {created.id}: {created.title} ({created.type.value}) for employer {employer.id}")

    return JobCreateResponse(
        job_id=created.id,
        job=build_employer_job(created),
        message="Job posted successfully",
    )


@router.get("/jobs/{job_id}", response_model=EmployerJobResponse)
async def get_employer_job(
    job_id: int,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """A single job owned by the employer."""
    employer = employer_profile_of(current_user)
    job = await load_job(db, job_id, employer_id=employer.id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return EmployerJobResponse(job=build_employer_job(job))


@router.patch("/jobs/{job_id}", response_model=JobUpdateResponse)
async def update_job(
    job_id: int,
    payload: JobPayload,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a job owned by the employer.

    Same normalisation as create, except status only changes when the payload
    carries a valid one. When `skills` is present it replaces the skill set.
    """
    employer = employer_profile_of(current_user)
    job = await load_job(db, job_id, employer_id=employer.id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    data = normalize_job_payload(payload, default_status=None)

    try:
        for field, value in data.items():
            setattr(job, field, value)
        if payload.skills is not None:
            job.skills = await resolve_job_skills(db, payload.skills, job_id=job.id)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to update job {job_id}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update job")

    updated = await load_job(db, job_id)
    logger.info(f"Updated job {job_id} for employer {employer.id}")

    return JobUpdateResponse(job=build_employer_job(updated), message="Job updated successfully")


# ============================================================
# RECRUITMENT
# ============================================================

@router.post("/recruit", response_model=RecruitResponse)
async def recruit(
    request: RecruitRequest,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """
    Invite a talent to one of the employer's jobs.

    An existing application is promoted to SHORTLISTED. Otherwise a
    SHORTLISTED application is created when the talent has a resume on file.
    The talent is always notified.
    """
    if not request.talent_id or not request.job_id:
        raise HTTPException(status_code=400, detail="Talent ID and Job ID are required")

    employer = employer_profile_of(current_user)
    return await recruit_talent(db, current_user, employer, request)


# ============================================================
# APPLICATIONS
# ============================================================

@router.get("/applications", response_model=EmployerApplicationListResponse)
async def list_applications(
    status: Optional[str] = Query(None, description="APPLIED, SHORTLISTED, HIRED or REJECTED"),
    job_id: Optional[int] = Query(None, alias="jobId"),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """Applications to the employer's jobs, optionally for one job or status."""
    employer = employer_profile_of(current_user)
    return await list_employer_applications(db, employer, status, job_id, limit, offset)


@router.get("/applications/{application_id}", response_model=EmployerApplicationResponse)
async def get_application(
    application_id: int,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """One application with the applicant's full skill list and file ids."""
    employer = employer_profile_of(current_user)
    application = await load_employer_application(db, employer, application_id)
    return EmployerApplicationResponse(application=build_employer_application(application))


@router.patch("/applications/{application_id}", response_model=EmployerApplicationResponse)
async def update_application_status(
    application_id: int,
    request: ApplicationStatusUpdate,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """
    Change an application's status.

    Returns:
        200: Updated application
        400: Invalid status
        403: Application is for another employer's job
        404: Application not found
    """
    employer = employer_profile_of(current_user)
    application = await change_application_status(db, employer, application_id, request.status)
    return EmployerApplicationResponse(application=application)


@router.delete("/applications/{application_id}", response_model=ApplicationDeleteResponse)
async def remove_application(
    application_id: int,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    employer = employer_profile_of(current_user)
    await delete_application(db, employer, application_id)
    return ApplicationDeleteResponse(message="Application deleted successfully")
