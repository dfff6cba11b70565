"""
Tests for the type-conditional job form.
"""
import json

import httpx
import pytest

from skillshub.client.api import SkillsHubClient
from skillshub.client.job_form import JobForm, VARIANT_FIELDS, DASHBOARD_URL
from skillshub.client.skill_selector import SkillSelector
from skillshub.config import settings

from conftest import make_job, skill_id

CATALOGUE = [
    {"id": 1, "name": "Data Entry", "slug": "data-entry"},
    {"id": 2, "name": "Customer Service", "slug": "customer-service"},
]


def filled_form(title: str = "Data Entry Clerk") -> JobForm:
    form = JobForm(SkillSelector(CATALOGUE), job_type="PART_TIME")
    form.set_field("title", title)
    form.set_field("description", "Enter customer records into the new CRM system.")
    form.set_field("hoursPerWeek", "20")
    form.skills.add(1)
    return form


class RecordingHandler:
    def __init__(self, status: int = 201, body: dict = None):
        self.requests: list[httpx.Request] = []
        self.status = status
        self.body = body if body is not None else {"success": True, "jobId": 42, "message": "Job posted successfully"}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json=self.body)


def client_for(handler) -> SkillsHubClient:
    return SkillsHubClient(httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test"))


# ============================================================
# VARIANTS
# ============================================================

def test_only_selected_type_fields_are_visible():
    form = JobForm(job_type="GIG")
    assert "budget" in form.visible_fields()
    assert "hoursPerWeek" not in form.visible_fields()

    form.set_type("PART_TIME")
    assert "hoursPerWeek" in form.visible_fields()
    assert "budget" not in form.visible_fields()
    assert "title" in form.visible_fields()


def test_switching_type_back_and_forth_retains_values():
    form = JobForm(job_type="GIG")
    form.set_field("budget", "Le 2,000,000")
    form.set_type("FULL_TIME")
    form.set_field("benefits", "Health cover")
    form.set_type("GIG")

    assert form.get_field("budget") == "Le 2,000,000"
    assert form.get_field("benefits") == "Health cover"


def test_payload_sends_other_variants_as_null():
    form = filled_form()
    form.set_type("GIG")
    form.set_field("budget", "Le 1,000")
    form.set_type("PART_TIME")

    payload = form.build_payload()

    expected_keys = {"title", "description", "type", "status", "skills", "location", "salaryRange"}
    expected_keys |= {name for fields in VARIANT_FIELDS.values() for name in fields}
    assert set(payload) == expected_keys
    assert payload["type"] == "PART_TIME"
    assert payload["hoursPerWeek"] == "20"
    assert payload["budget"] is None
    assert payload["location"] is None
    assert payload["skills"] == [{"skillId": 1, "required": True}]
    assert form.get_field("budget") == "Le 1,000"


def test_unknown_field_raises():
    with pytest.raises(KeyError):
        JobForm().set_field("colour", "blue")


# ============================================================
# VALIDATION
# ============================================================

def test_validation_messages():
    form = JobForm(job_type="GIG")
    form.set_field("location", "X")
    form.set_field("status", "ARCHIVED")

    errors = form.validate()

    assert errors["title"] == "Job title is required"
    assert errors["description"] == "Job description is required"
    assert errors["status"] == "Invalid job status"
    assert errors["location"] == "Location must be at least 2 characters if provided"
    assert errors["skills"] == "Please add at least one skill to help candidates find your job"


def test_whitespace_location_counts_as_blank():
    form = filled_form()
    form.set_field("location", "   ")

    assert "location" not in form.validate()
    assert form.build_payload()["location"] is None

    form.set_field("location", " X ")
    assert form.validate()["location"] == "Location must be at least 2 characters if provided"


def test_empty_selector_is_kept():
    selector = SkillSelector(CATALOGUE)
    form = JobForm(selector, job_type="GIG")

    assert form.skills is selector
    form.skills.add(2)
    assert selector.entries() == form.skills.entries()
    assert len(selector) == 1


def test_date_checked_only_in_selected_variant():
    form = filled_form()
    form.set_field("deadline", "someday")
    assert "deadline" not in form.validate()

    form.set_type("GIG")
    assert form.validate()["deadline"] == "Invalid deadline date"

    form.set_field("deadline", "2025-03-01")
    assert "deadline" not in form.validate()
    assert form.build_payload()["deadline"] == "2025-03-01"


@pytest.mark.asyncio
async def test_two_character_title_never_reaches_network():
    handler = RecordingHandler()
    form = filled_form(title="AB")

    result = await form.submit(client_for(handler))

    assert result is None
    assert form.errors["title"] == "Job title must be at least 3 characters"
    assert handler.requests == []


@pytest.mark.asyncio
async def test_three_character_title_submits():
    handler = RecordingHandler()
    form = filled_form(title="ABC")

    result = await form.submit(client_for(handler))

    assert len(handler.requests) == 1
    request = handler.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/api/employer/jobs"
    assert json.loads(request.content)["title"] == "ABC"
    assert result.job_id == 42
    assert result.redirect_to == DASHBOARD_URL
    assert result.feedback_seconds == settings.success_feedback_seconds


@pytest.mark.asyncio
async def test_server_error_is_stored_on_form():
    handler = RecordingHandler(status=400, body={"error": "Invalid job type", "kind": "validation"})
    form = filled_form()

    result = await form.submit(client_for(handler))

    assert result is None
    assert form.errors == {"submit": "Invalid job type"}
    assert form.submitting is False


# ============================================================
# EDIT (against the app)
# ============================================================

@pytest.mark.asyncio
async def test_edit_roundtrip_against_app(employer_client, employer, db):
    job = await make_job(db, employer, title="Old Title", skills=("data-entry",), budget="Le 100")
    client = SkillsHubClient(employer_client)
    catalogue = (await client.skills())["skills"]

    form = JobForm.from_job(await client.employer_job(job.id), catalogue)
    assert form.type == "GIG"
    assert form.get_field("budget") == "Le 100"
    assert form.skills.entries() == [{"skillId": await skill_id(db, "data-entry"), "required": True}]

    form.set_field("title", "New Title")
    form.set_type("INTERNSHIP")
    form.set_field("stipend", "Le 500")
    form.skills.add(await skill_id(db, "customer-service"), required=False)

    result = await form.submit(client, job_id=job.id)

    assert result is not None
    assert result.message == "Job updated successfully"
    saved = await client.employer_job(job.id)
    assert saved["title"] == "New Title"
    assert saved["type"] == "INTERNSHIP"
    assert saved["stipend"] == "Le 500"
    assert saved["budget"] is None
    assert {s["slug"] for s in saved["skills"]} == {"data-entry", "customer-service"}
