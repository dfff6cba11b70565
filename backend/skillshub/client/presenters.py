"""
Turn API payloads into display-ready view models.

API payloads are camelCase dicts. Missing nested fields fall back to
defaults so a partial response still renders.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


JOB_TYPE_LABELS = {
    "GIG": "Freelance / Project-based",
    "INTERNSHIP": "Internship",
    "PART_TIME": "Part-time",
    "FULL_TIME": "Full-time",
}

PATHWAY_LABELS = {
    "STUDENT": "Student",
    "GRADUATE": "Graduate",
    "ARTISAN": "Artisan",
}

# (payload key, label, is date) per job type, in display order
JOB_DETAIL_FIELDS: dict[str, list[tuple[str, str, bool]]] = {
    "GIG": [
        ("projectDuration", "Project Duration", False),
        ("budget", "Budget", False),
        ("deadline", "Deadline", True),
        ("deliverables", "Deliverables", False),
    ],
    "INTERNSHIP": [
        ("internshipDuration", "Duration", False),
        ("stipend", "Stipend", False),
        ("startDate", "Start Date", True),
        ("learningObjectives", "Learning Objectives", False),
    ],
    "PART_TIME": [
        ("hoursPerWeek", "Hours per Week", False),
        ("schedule", "Schedule", False),
        ("hourlyRate", "Hourly Rate", False),
    ],
    "FULL_TIME": [
        ("workArrangement", "Work Arrangement", False),
        ("startDateFullTime", "Start Date", True),
        ("probationPeriod", "Probation Period", False),
        ("benefits", "Benefits", False),
    ],
}


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _mappings(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def job_type_label(job_type: Optional[str]) -> str:
    return JOB_TYPE_LABELS.get(job_type or "", job_type or "")


def format_date(value: Optional[str]) -> str:
    """ISO date/datetime -> "Month D, YYYY"; "N/A" when absent."""
    if not value:
        return "N/A"
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return value
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


class SkillChip(BaseModel):
    name: str
    required: bool = True
    level: Optional[int] = None


class JobDetailView(BaseModel):
    id: Optional[int] = None
    title: str
    badge: str
    status: str = "OPEN"
    description: str = ""
    location: Optional[str] = None
    salary_range: Optional[str] = None
    detail_lines: list[str] = []
    skills: list[SkillChip] = []
    employer_name: str = ""
    employer_verified: bool = False
    employer_website: Optional[str] = None
    contact_email: Optional[str] = None
    posted_on: str = "N/A"


class TalentView(BaseModel):
    id: Optional[int] = None
    name: str
    profession: str = "Professional"
    headline: str = ""
    bio: str = ""
    pathway: str = ""
    years_experience: int = 0
    skills: list[SkillChip] = []
    resume_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


def job_detail_lines(job: dict[str, Any]) -> list[str]:
    """"Label: value" lines for the job's own type, present values only."""
    lines = []
    for key, label, is_date in JOB_DETAIL_FIELDS.get(job.get("type") or "", []):
        value = job.get(key)
        if value in (None, ""):
            continue
        lines.append(f"{label}: {format_date(value) if is_date else value}")
    return lines


def job_detail_view(job: dict[str, Any]) -> JobDetailView:
    employer = _mapping(job.get("employer"))
    contact = _mapping(employer.get("user"))
    return JobDetailView(
        id=job.get("id"),
        title=job.get("title") or "Untitled job",
        badge=job_type_label(job.get("type")),
        status=job.get("status") or "OPEN",
        description=job.get("description") or "",
        location=job.get("location"),
        salary_range=job.get("salaryRange"),
        detail_lines=job_detail_lines(job),
        skills=[
            SkillChip(name=s.get("name", ""), required=s.get("required", True))
            for s in _mappings(job.get("skills"))
        ],
        employer_name=employer.get("name") or "",
        employer_verified=bool(employer.get("verified")),
        employer_website=employer.get("website"),
        contact_email=contact.get("email"),
        posted_on=format_date(job.get("createdAt")),
    )


def talent_view(talent: dict[str, Any]) -> TalentView:
    """Works for both /api/talents/{id} and /api/freelancers/{id} payloads."""
    resume_id = talent.get("resumeFileId") or _mapping(talent.get("resumeFile")).get("id")
    return TalentView(
        id=talent.get("id"),
        name=talent.get("name") or "Unnamed talent",
        profession=talent.get("profession") or "Professional",
        headline=talent.get("headline") or "",
        bio=talent.get("bio") or "",
        pathway=PATHWAY_LABELS.get(talent.get("pathway") or "", talent.get("pathway") or ""),
        years_experience=talent.get("yearsExperience") or 0,
        skills=[
            SkillChip(name=s.get("name", ""), level=s.get("level") or 1)
            for s in _mappings(talent.get("skills"))
        ],
        resume_url=f"/api/files/{resume_id}" if resume_id else None,
        email=talent.get("email"),
        phone=talent.get("phone"),
    )
