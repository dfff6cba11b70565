"""
Application business logic: seekers applying to jobs and employers
recruiting talent into them.
"""
import logging
from typing import Optional, Union

from fastapi import HTTPException
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from skillshub.models.application import Application, ApplicationStatus
from skillshub.models.employer import EmployerProfile
from skillshub.models.file_object import FileObject
from skillshub.models.job import Job, JobStatus
from skillshub.models.notification import Notification
from skillshub.models.seeker import SeekerProfile
from skillshub.models.skill import SkillOnProfile
from skillshub.models.user import User
from skillshub.schemas.application import (
    Applicant,
    ApplicantProfile,
    ApplicantSkill,
    ApplicationFiles,
    ApplicationJob,
    ApplyRequest,
    ApplyResponse,
    ApplicationSummary,
    AppliedJob,
    EmployerApplication,
    EmployerApplicationListResponse,
    RecruitRequest,
    RecruitResponse,
    RecruitedApplication,
    SeekerApplication,
    SeekerApplicationListResponse,
)
from skillshub.schemas.common import Pagination
from skillshub.services.jobs import JOB_LOAD_OPTIONS, build_job_summary

logger = logging.getLogger(__name__)

MISSING_RESUME_MESSAGE = "Please upload your CV/resume to your profile or provide a cover letter file"

APPLICATION_STATUSES = tuple(s.value for s in ApplicationStatus)


def parse_id(value: Union[int, str, None], label: str) -> int:
    """Coerce an id from a JSON body (number or numeric string)."""
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"Invalid {label}")


async def file_exists(db: AsyncSession, file_id: str) -> bool:
    result = await db.execute(select(FileObject.id).where(FileObject.id == file_id))
    return result.scalar_one_or_none() is not None


# ============================================================
# APPLY
# ============================================================

async def submit_application(db: AsyncSession, user: User, request: ApplyRequest) -> ApplyResponse:
    """
    Create an application for the seeker.

    The CV falls back to the seeker's profile resume. At least one of CV or
    cover-letter file is required. The employer is notified.

    Raises:
        HTTPException 400: Missing job id, incomplete profile, closed job, no files
        HTTPException 404: Job or referenced file not found
        HTTPException 409: Seeker already applied to this job
    """
    if not request.job_id:
        raise HTTPException(status_code=400, detail="Job ID is required")
    job_id = parse_id(request.job_id, "job ID")

    profile = user.seeker_profile
    if profile is None:
        raise HTTPException(status_code=400, detail="Please complete your profile before applying")

    result = await db.execute(
        select(Job).where(Job.id == job_id).options(selectinload(Job.employer))
    )
    job = result.scalar_one_or_none()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    if job.status != JobStatus.OPEN:
        raise HTTPException(status_code=400, detail="This job is no longer accepting applications")

    cv_file_id = request.cv_file_id or profile.resume_file_id
    cover_letter_file_id = request.cover_letter_file_id

    if not cv_file_id and not cover_letter_file_id:
        raise HTTPException(
            status_code=400,
            detail={"error": MISSING_RESUME_MESSAGE, "requiresResume": True}
        )

    if cv_file_id and not await file_exists(db, cv_file_id):
        raise HTTPException(status_code=404, detail="CV file not found")
    if cover_letter_file_id and not await file_exists(db, cover_letter_file_id):
        raise HTTPException(status_code=404, detail="Cover letter file not found")

    existing = await db.execute(
        select(Application.id).where(Application.job_id == job.id, Application.user_id == user.id)
    )
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=409, detail="You have already applied for this job")

    expected_pay: Optional[int] = None
    if request.expected_pay not in (None, ""):
        expected_pay = parse_id(request.expected_pay, "expected pay")

    application = Application(
        job_id=job.id,
        user_id=user.id,
        status=ApplicationStatus.APPLIED.value,
        cover_letter_text=(request.cover_letter_text or "").strip() or None,
        cover_letter_file_id=cover_letter_file_id,
        cv_file_id=cv_file_id,
        expected_pay=expected_pay,
    )
    db.add(application)
    db.add(Notification(
        user_id=job.employer.user_id,
        type="APPLICATION_RECEIVED",
        title="New Application Received",
        message=f"{user.full_name or user.email} applied for: {job.title}",
        link=f"/dashboard/employer/applications?jobId={job.id}",
    ))

    try:
        await db.commit()
    except IntegrityError:
        # Concurrent duplicate slipped past the check above
        await db.rollback()
        raise HTTPException(status_code=409, detail="You have already applied for this job")

    logger.info(f"User {user.id} applied to job {job.id} (application {application.id})")

    return ApplyResponse(
        message="Application submitted successfully",
        application=ApplicationSummary(
            id=application.id,
            status=application.status,
            job=AppliedJob(title=job.title, employer_name=job.employer.org_name),
        ),
    )


# ============================================================
# RECRUIT
# ============================================================

def compose_invitation(
    talent_first_name: Optional[str],
    job_title: str,
    employer_name: str,
    note: Optional[str] = None,
    has_resume: bool = True,
    contact_email: Optional[str] = None,
) -> str:
    """Recruitment invitation text delivered to the talent."""
    text = f"Hi {talent_first_name or 'there'},\n\n"
    if note:
        text += f"{note}\n\n"
    text += f"I'd like to invite you to apply for the position: {job_title}."

    if not has_resume:
        if contact_email:
            text += (
                f"\n\nPlease upload your CV to your profile or send it to {contact_email} "
                "to proceed with your application."
            )
        else:
            text += "\n\nPlease upload your CV to your profile to proceed with your application."

    text += f"\n\nBest regards,\n{employer_name}"
    return text


async def recruit_talent(
    db: AsyncSession,
    employer_user: User,
    employer: EmployerProfile,
    request: RecruitRequest,
) -> RecruitResponse:
    """
    Invite a talent (seeker profile) to one of the employer's jobs.

    Raises:
        HTTPException 404: Job not owned by the employer, or talent not found
    """
    talent_id = parse_id(request.talent_id, "talent ID")
    job_id = parse_id(request.job_id, "job ID")

    result = await db.execute(select(Job).where(Job.id == job_id, Job.employer_id == employer.id))
    job = result.scalar_one_or_none()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found or you don't have permission")

    result = await db.execute(
        select(SeekerProfile)
        .where(SeekerProfile.id == talent_id)
        .options(selectinload(SeekerProfile.user), selectinload(SeekerProfile.resume_file))
    )
    seeker = result.scalar_one_or_none()
    if not seeker:
        raise HTTPException(status_code=404, detail="Talent not found")

    note = (request.message or "").strip() or None
    has_resume = seeker.resume_file_id is not None

    result = await db.execute(
        select(Application).where(Application.job_id == job.id, Application.user_id == seeker.user_id)
    )
    application = result.scalar_one_or_none()

    if application is not None:
        if application.status not in (ApplicationStatus.SHORTLISTED.value, ApplicationStatus.HIRED.value):
            application.status = ApplicationStatus.SHORTLISTED.value
    elif seeker.resume_file is not None:
        # Employer-initiated applications start shortlisted with the resume as both files
        application = Application(
            job_id=job.id,
            user_id=seeker.user_id,
            status=ApplicationStatus.SHORTLISTED.value,
            cover_letter_text=note or f"You have been invited to apply for the position: {job.title}",
            cover_letter_file_id=seeker.resume_file.id,
            cv_file_id=seeker.resume_file.id,
        )
        db.add(application)

    employer_name = employer.org_name or employer_user.full_name or "An employer"
    db.add(Notification(
        user_id=seeker.user_id,
        type="RECRUITMENT",
        title="New Recruitment Invitation",
        message=compose_invitation(
            seeker.user.first_name,
            job.title,
            employer_name,
            note=note,
            has_resume=has_resume,
            contact_email=employer_user.email,
        ),
        link=f"/jobs/{job.id}",
    ))

    await db.commit()

    logger.info(
        f"Employer {employer.id} recruited talent {seeker.id} for job {job.id} "
        f"(application={application.id if application else None}, has_resume={has_resume})"
    )

    return RecruitResponse(
        message=(
            "Recruitment invitation sent successfully! Application created."
            if has_resume
            else "Recruitment message sent successfully! The talent will be notified to upload their CV."
        ),
        application=RecruitedApplication(
            id=application.id,
            status=application.status,
            talent_name=seeker.user.full_name,
            job_title=job.title,
        ) if application else None,
        has_resume=has_resume,
    )


# ============================================================
# MANAGE
# ============================================================

APPLICANT_SKILL_PREVIEW = 5

# Eager-load what an employer-side application response touches
EMPLOYER_APPLICATION_OPTIONS = (
    selectinload(Application.job),
    selectinload(Application.user)
    .selectinload(User.seeker_profile)
    .selectinload(SeekerProfile.skills)
    .selectinload(SkillOnProfile.skill),
)


def build_employer_application(application: Application, skill_limit: Optional[int] = None) -> EmployerApplication:
    user = application.user
    profile = user.seeker_profile
    applicant_profile = None
    if profile is not None:
        skills = profile.skills if skill_limit is None else profile.skills[:skill_limit]
        applicant_profile = ApplicantProfile(
            headline=profile.headline,
            profession=profile.profession,
            bio=profile.bio,
            years_experience=profile.years_experience,
            availability=profile.availability,
            skills=[ApplicantSkill(id=s.skill.id, name=s.skill.name, level=s.level) for s in skills],
        )

    job = application.job
    return EmployerApplication(
        id=application.id,
        status=application.status,
        cover_letter_text=application.cover_letter_text,
        expected_pay=application.expected_pay,
        created_at=application.created_at,
        job=ApplicationJob(id=job.id, title=job.title, type=job.type.value, location=job.location),
        applicant=Applicant(
            id=user.id,
            name=user.full_name or user.email,
            email=user.email,
            phone=user.phone,
            profile=applicant_profile,
        ),
        files=ApplicationFiles(
            cover_letter_file_id=application.cover_letter_file_id,
            cv_file_id=application.cv_file_id,
        ),
    )


async def list_employer_applications(
    db: AsyncSession,
    employer: EmployerProfile,
    status: Optional[str],
    job_id: Optional[int],
    limit: int,
    offset: int,
) -> EmployerApplicationListResponse:
    """
    Applications to the employer's jobs, newest first. An unknown status is ignored.

    Raises:
        HTTPException 404: job_id is not one of the employer's jobs
    """
    owned = select(Job.id).where(Job.employer_id == employer.id)
    filters = [Application.job_id.in_(owned)]

    if status in APPLICATION_STATUSES:
        filters.append(Application.status == status)

    if job_id is not None:
        result = await db.execute(select(Job.id).where(Job.id == job_id, Job.employer_id == employer.id))
        if result.scalar_one_or_none() is None:
            raise HTTPException(status_code=404, detail="Job not found")
        filters.append(Application.job_id == job_id)

    total = (await db.execute(select(func.count(Application.id)).where(*filters))).scalar_one()

    result = await db.execute(
        select(Application)
        .where(*filters)
        .options(*EMPLOYER_APPLICATION_OPTIONS)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .offset(offset)
        .limit(limit)
    )
    applications = result.scalars().all()

    return EmployerApplicationListResponse(
        applications=[build_employer_application(a, APPLICANT_SKILL_PREVIEW) for a in applications],
        pagination=Pagination(total=total, limit=limit, offset=offset, has_more=offset + limit < total),
    )


async def load_employer_application(db: AsyncSession, employer: EmployerProfile, application_id: int) -> Application:
    """
    Raises:
        HTTPException 404: No such application
        HTTPException 403: Application belongs to another employer's job
    """
    result = await db.execute(
        select(Application)
        .where(Application.id == application_id)
        .options(*EMPLOYER_APPLICATION_OPTIONS)
        .execution_options(populate_existing=True)
    )
    application = result.scalar_one_or_none()
    if application is None:
        raise HTTPException(status_code=404, detail="Application not found")
    if application.job.employer_id != employer.id:
        logger.warning(f"Employer {employer.id} denied access to application {application_id}")
        raise HTTPException(status_code=403, detail="Forbidden")
    return application


async def change_application_status(
    db: AsyncSession,
    employer: EmployerProfile,
    application_id: int,
    status: Optional[str],
) -> EmployerApplication:
    """
    Move an application to any status in the pipeline.

    Raises:
        HTTPException 400: Status is not APPLIED, SHORTLISTED, HIRED or REJECTED
    """
    if status not in APPLICATION_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")

    application = await load_employer_application(db, employer, application_id)
    previous = application.status
    application.status = status
    await db.commit()

    logger.info(f"Application {application_id} status {previous} -> {status} by employer {employer.id}")
    application = await load_employer_application(db, employer, application_id)
    return build_employer_application(application)


async def delete_application(db: AsyncSession, employer: EmployerProfile, application_id: int) -> None:
    application = await load_employer_application(db, employer, application_id)
    await db.delete(application)
    await db.commit()
    logger.info(f"Employer {employer.id} deleted application {application_id}")


async def list_seeker_applications(db: AsyncSession, user: User, status: Optional[str]) -> SeekerApplicationListResponse:
    """The seeker's own applications with job cards, newest first. "all" means no status filter."""
    query = (
        select(Application)
        .where(Application.user_id == user.id)
        .options(selectinload(Application.job).options(*JOB_LOAD_OPTIONS))
        .order_by(Application.created_at.desc(), Application.id.desc())
    )
    if status and status != "all":
        query = query.where(Application.status == status)

    result = await db.execute(query)
    return SeekerApplicationListResponse(
        applications=[
            SeekerApplication(
                id=a.id,
                status=a.status,
                cover_letter_text=a.cover_letter_text,
                expected_pay=a.expected_pay,
                created_at=a.created_at,
                job=build_job_summary(a.job),
            )
            for a in result.scalars().all()
        ]
    )
