"""Job-related Pydantic schemas."""
from datetime import datetime
from typing import Optional, Union

from skillshub.schemas.common import CamelModel, FileRef, Pagination


class SkillSelection(CamelModel):
    """A skill attached to a job posting form."""
    skill_id: int
    required: bool = True


class JobPayload(CamelModel):
    """
    Request body for creating or updating a job posting.

    Every field is optional at the schema level; the service enforces the
    title/description/type rules so the error message matches the form.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    location: Optional[str] = None
    salary_range: Optional[str] = None
    skills: Optional[list[Union[SkillSelection, int]]] = None

    # GIG
    project_duration: Optional[str] = None
    budget: Optional[str] = None
    deadline: Optional[str] = None
    deliverables: Optional[str] = None

    # INTERNSHIP
    internship_duration: Optional[str] = None
    stipend: Optional[str] = None
    start_date: Optional[str] = None
    learning_objectives: Optional[str] = None

    # PART_TIME
    hours_per_week: Optional[str] = None
    schedule: Optional[str] = None
    hourly_rate: Optional[str] = None

    # FULL_TIME
    work_arrangement: Optional[str] = None
    start_date_full_time: Optional[str] = None
    probation_period: Optional[str] = None
    benefits: Optional[str] = None


class JobSkill(CamelModel):
    id: int
    name: str
    slug: str
    required: bool


class EmployerContact(CamelModel):
    name: str
    email: str
    phone: Optional[str] = None


class EmployerSummary(CamelModel):
    id: int
    name: str
    org_type: Optional[str] = None
    website: Optional[str] = None
    verified: bool = False
    company_logo: Optional[FileRef] = None
    user: Optional[EmployerContact] = None


class JobVariantFields(CamelModel):
    project_duration: Optional[str] = None
    budget: Optional[str] = None
    deadline: Optional[datetime] = None
    deliverables: Optional[str] = None
    internship_duration: Optional[str] = None
    stipend: Optional[str] = None
    start_date: Optional[datetime] = None
    learning_objectives: Optional[str] = None
    hours_per_week: Optional[str] = None
    schedule: Optional[str] = None
    hourly_rate: Optional[str] = None
    work_arrangement: Optional[str] = None
    start_date_full_time: Optional[datetime] = None
    probation_period: Optional[str] = None
    benefits: Optional[str] = None


class JobSummary(CamelModel):
    """Job card as shown in public listings."""
    id: int
    title: str
    description: str
    type: str
    location: Optional[str] = None
    salary_range: Optional[str] = None
    status: str
    employer: EmployerSummary
    skills: list[JobSkill] = []
    created_at: datetime


class RecommendedJob(JobSummary):
    match_score: int
    matching_skills_count: int


class JobDetail(JobVariantFields):
    """Flat job detail (GET /api/jobs/{id})."""
    id: int
    title: str
    description: str
    type: str
    location: Optional[str] = None
    salary_range: Optional[str] = None
    status: str
    employer: EmployerSummary
    skills: list[JobSkill] = []
    created_at: datetime
    updated_at: datetime


class ApplicationsByStatus(CamelModel):
    applied: int = 0
    shortlisted: int = 0
    hired: int = 0
    rejected: int = 0


class EmployerJob(JobVariantFields):
    """A job as seen by its owning employer."""
    id: int
    title: str
    description: str
    type: str
    location: Optional[str] = None
    salary_range: Optional[str] = None
    status: str
    skills: list[JobSkill] = []
    application_count: int = 0
    applications_by_status: ApplicationsByStatus = ApplicationsByStatus()
    created_at: datetime
    updated_at: datetime


class UserSkill(CamelModel):
    id: int
    name: str
    level: Optional[int] = None


class JobListResponse(CamelModel):
    jobs: list[JobSummary]


class RecommendedJobsResponse(CamelModel):
    jobs: list[RecommendedJob]
    user_skills: list[UserSkill]


class EmployerJobListResponse(CamelModel):
    jobs: list[EmployerJob]
    pagination: Pagination


class EmployerJobResponse(CamelModel):
    job: EmployerJob


class JobCreateResponse(CamelModel):
    success: bool = True
    job_id: int
    job: EmployerJob
    message: str


class JobUpdateResponse(CamelModel):
    success: bool = True
    job: EmployerJob
    message: str
