"""
Type-conditional job posting form (post and edit).

The job record is a tagged union: common fields, the selected type, and one
group of fields per type. Switching type only changes which group is
visible and submitted; values typed into other groups are kept.
"""
import logging
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel

from skillshub.config import settings
from skillshub.errors import ApiError
from skillshub.client.api import SkillsHubClient
from skillshub.client.skill_selector import SkillSelector

logger = logging.getLogger(__name__)

JOB_TYPES = ("GIG", "INTERNSHIP", "PART_TIME", "FULL_TIME")
JOB_STATUSES = ("OPEN", "CLOSED")

COMMON_FIELDS = ("title", "description", "location", "salaryRange", "status")

VARIANT_FIELDS: dict[str, tuple[str, ...]] = {
    "GIG": ("projectDuration", "budget", "deadline", "deliverables"),
    "INTERNSHIP": ("internshipDuration", "stipend", "startDate", "learningObjectives"),
    "PART_TIME": ("hoursPerWeek", "schedule", "hourlyRate"),
    "FULL_TIME": ("workArrangement", "startDateFullTime", "probationPeriod", "benefits"),
}

DATE_FIELDS = {
    "deadline": "Invalid deadline date",
    "startDate": "Invalid start date",
    "startDateFullTime": "Invalid start date",
}

DASHBOARD_URL = "/dashboard/employer"


def safe_trim(value: Optional[str]) -> Optional[str]:
    if not value or not isinstance(value, str):
        return None
    return value.strip() or None


def parse_date(value: Optional[str]) -> Optional[date]:
    """Calendar date from "YYYY-MM-DD" or an ISO datetime; None if blank or invalid."""
    text = safe_trim(value)
    if text is None:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


class SubmitResult(BaseModel):
    job_id: int
    message: str
    redirect_to: str = DASHBOARD_URL
    feedback_seconds: float


class JobForm:
    def __init__(self, skills: Optional[SkillSelector] = None, job_type: str = "GIG"):
        self.common: dict[str, str] = {name: "" for name in COMMON_FIELDS}
        self.common["status"] = "OPEN"
        self.type = job_type
        self.variants: dict[str, dict[str, str]] = {
            t: {name: "" for name in fields} for t, fields in VARIANT_FIELDS.items()
        }
        self.skills = skills if skills is not None else SkillSelector([])
        self.errors: dict[str, str] = {}
        self.submitting = False

    @classmethod
    def from_job(cls, job: dict[str, Any], catalogue: Optional[Iterable[dict[str, Any]]] = None) -> "JobForm":
        """Edit form pre-filled from an API job (flat camelCase dict)."""
        job_skills = job.get("skills") or []
        form = cls(SkillSelector(catalogue if catalogue is not None else job_skills), job.get("type") or "GIG")

        for name in COMMON_FIELDS:
            if job.get(name) is not None:
                form.common[name] = str(job[name])

        for fields in VARIANT_FIELDS.values():
            for name in fields:
                value = job.get(name)
                if value is None:
                    continue
                # Date inputs hold YYYY-MM-DD
                form.set_field(name, str(value)[:10] if name in DATE_FIELDS else str(value))

        for skill in job_skills:
            form.skills.add(skill["id"], skill.get("required", True))
        return form

    # ============================================================
    # FIELDS
    # ============================================================

    def set_type(self, job_type: str) -> None:
        """Switch the visible field group. Never clears any values."""
        self.type = job_type
        self.errors.pop("type", None)

    def set_field(self, name: str, value: str) -> None:
        if name in self.common:
            self.common[name] = value
        else:
            for fields in self.variants.values():
                if name in fields:
                    fields[name] = value
                    break
            else:
                raise KeyError(f"Unknown job form field: {name}")
        self.errors.pop(name, None)

    def get_field(self, name: str) -> str:
        if name in self.common:
            return self.common[name]
        for fields in self.variants.values():
            if name in fields:
                return fields[name]
        raise KeyError(f"Unknown job form field: {name}")

    def visible_fields(self) -> list[str]:
        return list(COMMON_FIELDS) + list(VARIANT_FIELDS.get(self.type, ()))

    # ============================================================
    # VALIDATION / PAYLOAD
    # ============================================================

    def validate(self) -> dict[str, str]:
        """Field -> message for every failing rule; empty when valid."""
        errors: dict[str, str] = {}

        title = self.common["title"].strip()
        if not title:
            errors["title"] = "Job title is required"
        elif len(title) < 3:
            errors["title"] = "Job title must be at least 3 characters"

        description = self.common["description"].strip()
        if not description:
            errors["description"] = "Job description is required"
        elif len(description) < 20:
            errors["description"] = "Job description must be at least 20 characters"

        if not self.type:
            errors["type"] = "Job type is required"
        elif self.type not in JOB_TYPES:
            errors["type"] = "Invalid job type"

        status = self.common["status"]
        if not status:
            errors["status"] = "Job status is required"
        elif status not in JOB_STATUSES:
            errors["status"] = "Invalid job status"

        location = self.common["location"].strip()
        if location and len(location) < 2:
            errors["location"] = "Location must be at least 2 characters if provided"

        if len(self.skills) == 0:
            errors["skills"] = "Please add at least one skill to help candidates find your job"

        for name in VARIANT_FIELDS.get(self.type, ()):
            value = self.variants[self.type][name]
            if name in DATE_FIELDS and safe_trim(value) and parse_date(value) is None:
                errors[name] = DATE_FIELDS[name]

        self.errors = errors
        return errors

    def build_payload(self) -> dict[str, Any]:
        """
        Request body with every key present.

        Only the selected type's group carries values; the other groups are
        sent as null even though the form keeps what was typed into them.
        """
        payload: dict[str, Any] = {
            "title": self.common["title"].strip(),
            "description": self.common["description"].strip(),
            "type": self.type,
            "status": self.common["status"],
            "skills": self.skills.entries(),
            "location": safe_trim(self.common["location"]),
            "salaryRange": safe_trim(self.common["salaryRange"]),
        }
        for job_type, fields in VARIANT_FIELDS.items():
            for name in fields:
                if job_type != self.type:
                    payload[name] = None
                elif name in DATE_FIELDS:
                    parsed = parse_date(self.variants[job_type][name])
                    payload[name] = parsed.isoformat() if parsed else None
                else:
                    payload[name] = safe_trim(self.variants[job_type][name])
        return payload

    # ============================================================
    # SUBMIT
    # ============================================================

    async def submit(self, client: SkillsHubClient, job_id: Optional[Union[int, str]] = None) -> Optional[SubmitResult]:
        """
        Validate, then create (POST) or update (PATCH) the job.

        Invalid forms never reach the network. Server and transport failures
        land in errors["submit"]. Returns None on any failure.
        """
        if self.validate():
            return None

        self.submitting = True
        try:
            if job_id is None:
                body = await client.create_job(self.build_payload())
                saved_id = body["jobId"]
            else:
                body = await client.update_job(job_id, self.build_payload())
                saved_id = body["job"]["id"]
        except ApiError as exc:
            self.errors = {"submit": exc.message}
            logger.warning(f"Job form submit failed ({exc.kind.value}): {exc.message}")
            return None
        finally:
            self.submitting = False

        logger.info(f"Job {saved_id} saved ({self.type})")
        return SubmitResult(
            job_id=saved_id,
            message=body.get("message") or "Job saved successfully",
            feedback_seconds=settings.success_feedback_seconds,
        )
