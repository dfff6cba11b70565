"""Application and recruitment Pydantic schemas."""
from datetime import datetime
from typing import Optional, Union

from skillshub.schemas.common import CamelModel, Pagination
from skillshub.schemas.job import JobSummary


class ApplyRequest(CamelModel):
    """Request body for POST /api/applications/apply."""
    job_id: Optional[Union[int, str]] = None
    cover_letter_text: Optional[str] = None
    cover_letter_file_id: Optional[str] = None
    cv_file_id: Optional[str] = None
    expected_pay: Optional[Union[int, str]] = None


class AppliedJob(CamelModel):
    title: str
    employer_name: str


class ApplicationSummary(CamelModel):
    id: int
    status: str
    job: AppliedJob


class ApplyResponse(CamelModel):
    success: bool = True
    message: str
    application: ApplicationSummary


class RecruitRequest(CamelModel):
    """Request body for POST /api/employer/recruit."""
    talent_id: Optional[Union[int, str]] = None
    job_id: Optional[Union[int, str]] = None
    message: Optional[str] = None


class RecruitedApplication(CamelModel):
    id: int
    status: str
    talent_name: str
    job_title: str


class RecruitResponse(CamelModel):
    success: bool = True
    message: str
    application: Optional[RecruitedApplication] = None
    has_resume: bool


# ============================================================
# APPLICATION MANAGEMENT
# ============================================================

class ApplicantSkill(CamelModel):
    id: int
    name: str
    level: Optional[int] = None


class ApplicantProfile(CamelModel):
    headline: Optional[str] = None
    profession: Optional[str] = None
    bio: Optional[str] = None
    years_experience: Optional[int] = None
    availability: Optional[str] = None
    skills: list[ApplicantSkill] = []


class Applicant(CamelModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    profile: Optional[ApplicantProfile] = None


class ApplicationJob(CamelModel):
    id: int
    title: str
    type: str
    location: Optional[str] = None


class ApplicationFiles(CamelModel):
    cover_letter_file_id: Optional[str] = None
    cv_file_id: Optional[str] = None


class EmployerApplication(CamelModel):
    """An application to one of the employer's jobs."""
    id: int
    status: str
    cover_letter_text: Optional[str] = None
    expected_pay: Optional[int] = None
    created_at: datetime
    job: ApplicationJob
    applicant: Applicant
    files: ApplicationFiles


class EmployerApplicationListResponse(CamelModel):
    applications: list[EmployerApplication]
    pagination: Pagination


class EmployerApplicationResponse(CamelModel):
    application: EmployerApplication


class ApplicationStatusUpdate(CamelModel):
    """Request body for PATCH /api/employer/applications/{id}."""
    status: Optional[str] = None


class SeekerApplication(CamelModel):
    """One of the seeker's own applications, with the job card."""
    id: int
    status: str
    cover_letter_text: Optional[str] = None
    expected_pay: Optional[int] = None
    created_at: datetime
    job: JobSummary


class SeekerApplicationListResponse(CamelModel):
    applications: list[SeekerApplication]


class ApplicationDeleteResponse(CamelModel):
    success: bool = True
    message: str
