"""
Job posting business logic.

Covers payload normalisation for the employer post/edit endpoints, skill
attachment, listing filters, match scoring and response building.
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Iterable, Union

from fastapi import HTTPException
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from skillshub.models.employer import EmployerProfile
from skillshub.models.job import Job, JobType, JobStatus, VARIANT_FIELDS, DATE_FIELDS
from skillshub.models.skill import Skill, SkillOnJob
from skillshub.models.application import ApplicationStatus
from skillshub.schemas.common import FileRef
from skillshub.schemas.job import (
    JobPayload,
    SkillSelection,
    JobSkill,
    EmployerSummary,
    EmployerContact,
    JobSummary,
    JobDetail,
    EmployerJob,
    ApplicationsByStatus,
    RecommendedJob,
)

logger = logging.getLogger(__name__)

ALL_VARIANT_FIELDS = tuple(f for fields in VARIANT_FIELDS.values() for f in fields)

# Eager-load everything a job response touches (async sessions cannot lazy load)
JOB_LOAD_OPTIONS = (
    selectinload(Job.employer).selectinload(EmployerProfile.user),
    selectinload(Job.employer).selectinload(EmployerProfile.company_logo_file),
    selectinload(Job.skills).selectinload(SkillOnJob.skill),
    selectinload(Job.applications),
)


# ============================================================
# PAYLOAD NORMALISATION
# ============================================================

def safe_trim(value: Optional[str]) -> Optional[str]:
    """Trim a string; empty or non-string becomes None."""
    if not value or not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or datetime string.

    Blank and unparseable values become None. Aware datetimes are converted
    to naive UTC to match the DateTime columns.
    """
    if not value or not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def normalize_job_payload(payload: JobPayload, default_status: Optional[JobStatus]) -> dict:
    """
    Validate and normalise a job payload into column values.

    Args:
        payload: Incoming request body
        default_status: Status used when the payload's status is missing or
            invalid. None means "leave status unchanged" (edits).

    Raises:
        HTTPException 400: Missing title/description/type or unknown type
    """
    if not payload.title or not payload.title.strip() \
            or not payload.description or not payload.description.strip() \
            or not payload.type:
        raise HTTPException(status_code=400, detail="Title, description, and type are required")

    try:
        job_type = JobType(payload.type)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid job type")

    data = {
        "title": payload.title.strip(),
        "description": payload.description.strip(),
        "type": job_type,
        "location": safe_trim(payload.location),
        "salary_range": safe_trim(payload.salary_range),
    }

    status = payload.status if payload.status in (JobStatus.OPEN.value, JobStatus.CLOSED.value) else None
    if status is not None:
        data["status"] = JobStatus(status)
    elif default_status is not None:
        data["status"] = default_status

    for field in ALL_VARIANT_FIELDS:
        raw = getattr(payload, field)
        data[field] = parse_date(raw) if field in DATE_FIELDS else safe_trim(raw)

    return data


def normalize_skill_selections(skills: Iterable[Union[SkillSelection, int]]) -> dict[int, bool]:
    """Map skill id -> required from `[{skillId, required}]` or bare ids. Later duplicates win."""
    selections: dict[int, bool] = {}
    for item in skills:
        if isinstance(item, SkillSelection):
            selections[item.skill_id] = item.required
        elif isinstance(item, int):
            selections[item] = True
    return selections


async def resolve_job_skills(
    db: AsyncSession,
    skills: Iterable[Union[SkillSelection, int]],
    job_id: Optional[int] = None,
) -> list[SkillOnJob]:
    """
    Build SkillOnJob rows for a job's skill selections.

    Unknown skill ids are ignored. Assign the result to `job.skills`; the
    collection must already be loaded for persistent jobs.
    """
    selections = normalize_skill_selections(skills)
    if not selections:
        return []

    result = await db.execute(select(Skill.id).where(Skill.id.in_(selections.keys())))
    existing_ids = sorted(row[0] for row in result.all())

    ignored = set(selections) - set(existing_ids)
    if ignored:
        logger.warning(f"Ignored unknown skill ids: {sorted(ignored)}")

    return [SkillOnJob(job_id=job_id, skill_id=skill_id, required=selections[skill_id]) for skill_id in existing_ids]


# ============================================================
# QUERIES
# ============================================================

async def load_job(db: AsyncSession, job_id: int, employer_id: Optional[int] = None) -> Optional[Job]:
    """Fetch a job with all relations, optionally scoped to its owning employer."""
    query = select(Job).where(Job.id == job_id).options(*JOB_LOAD_OPTIONS)
    if employer_id is not None:
        query = query.where(Job.employer_id == employer_id)
    result = await db.execute(query.execution_options(populate_existing=True))
    return result.scalar_one_or_none()


def apply_listing_filters(query, search: Optional[str], job_type: Optional[str], location: Optional[str]):
    """Apply the public listing filters (search / type / location) to a Job query."""
    if job_type and job_type != "all":
        query = query.where(Job.type == job_type)
    if location:
        query = query.where(Job.location.ilike(f"%{location}%"))
    if search:
        query = query.where(or_(
            Job.title.ilike(f"%{search}%"),
            Job.description.ilike(f"%{search}%"),
        ))
    return query


def match_score(seeker_skill_ids: set[int], job_skill_ids: set[int]) -> tuple[int, int]:
    """
    Score a job for a seeker.

    Returns (score 0-100, number of matching skills). The score is the share
    of matching skills relative to the larger of the two skill sets.
    """
    matching = len(seeker_skill_ids & job_skill_ids)
    if not seeker_skill_ids:
        return 0, matching
    denominator = max(len(seeker_skill_ids), len(job_skill_ids))
    return round(matching / denominator * 100), matching


# ============================================================
# RESPONSE BUILDERS
# ============================================================

def build_file_ref(file_object) -> Optional[FileRef]:
    if file_object is None:
        return None
    return FileRef(
        id=file_object.id,
        bucket_key=file_object.bucket_key,
        content_type=file_object.content_type,
        size_bytes=file_object.size_bytes,
    )


def build_job_skills(job: Job) -> list[JobSkill]:
    return [
        JobSkill(id=sj.skill.id, name=sj.skill.name, slug=sj.skill.slug, required=sj.required)
        for sj in sorted(job.skills, key=lambda sj: sj.skill.name)
    ]


def build_employer_summary(employer: EmployerProfile, include_contact: bool = False) -> EmployerSummary:
    contact = None
    if include_contact and employer.user is not None:
        contact = EmployerContact(
            name=employer.user.full_name,
            email=employer.user.email,
            phone=employer.user.phone,
        )
    return EmployerSummary(
        id=employer.id,
        name=employer.org_name,
        org_type=employer.org_type,
        website=employer.website,
        verified=employer.verified,
        company_logo=build_file_ref(employer.company_logo_file),
        user=contact,
    )


def _common_fields(job: Job) -> dict:
    return {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "type": job.type.value,
        "location": job.location,
        "salary_range": job.salary_range,
        "status": job.status.value,
        "skills": build_job_skills(job),
        "created_at": job.created_at,
    }


def _variant_fields(job: Job) -> dict:
    return {field: getattr(job, field) for field in ALL_VARIANT_FIELDS}


def build_job_summary(job: Job) -> JobSummary:
    return JobSummary(**_common_fields(job), employer=build_employer_summary(job.employer))


def build_recommended_job(job: Job, seeker_skill_ids: set[int]) -> RecommendedJob:
    score, matching = match_score(seeker_skill_ids, {sj.skill_id for sj in job.skills})
    return RecommendedJob(
        **_common_fields(job),
        employer=build_employer_summary(job.employer),
        match_score=score,
        matching_skills_count=matching,
    )


def build_job_detail(job: Job) -> JobDetail:
    return JobDetail(
        **_common_fields(job),
        **_variant_fields(job),
        employer=build_employer_summary(job.employer, include_contact=True),
        updated_at=job.updated_at,
    )


def build_employer_job(job: Job) -> EmployerJob:
    counts = {status: 0 for status in ApplicationStatus}
    for application in job.applications:
        counts[ApplicationStatus(application.status)] += 1
    return EmployerJob(
        **_common_fields(job),
        **_variant_fields(job),
        application_count=len(job.applications),
        applications_by_status=ApplicationsByStatus(
            applied=counts[ApplicationStatus.APPLIED],
            shortlisted=counts[ApplicationStatus.SHORTLISTED],
            hired=counts[ApplicationStatus.HIRED],
            rejected=counts[ApplicationStatus.REJECTED],
        ),
        updated_at=job.updated_at,
    )
