"""
Tests for detail modals: one fetch per open, stale-response guard, scroll lock.
"""
import asyncio

import httpx
import pytest

from skillshub.client.api import SkillsHubClient
from skillshub.client.modals import FreelancerProfileModal, JobDetailsModal, SlideModal, TalentProfileModal
from skillshub.client.scroll_lock import ScrollLock
from skillshub.errors import ErrorKind

from conftest import make_employer, make_seeker

DATA_ENTRY_CLERK = {
    "id": 42,
    "title": "Data Entry Clerk",
    "type": "PART_TIME",
    "hoursPerWeek": "20",
    "skills": [{"name": "Excel", "slug": "excel", "required": True}],
    "employer": {"name": "Acme Co", "verified": True},
}


def job_payload(job_id: int) -> dict:
    return {"id": job_id, "title": f"Job {job_id}", "type": "GIG", "employer": {"name": "Acme Co"}}


class GatedTransport:
    """Mock handler whose responses for chosen job ids wait on an event."""

    def __init__(self):
        self.gates: dict[str, asyncio.Event] = {}
        self.requests: list[str] = []

    def gate(self, path: str) -> asyncio.Event:
        self.gates[path] = asyncio.Event()
        return self.gates[path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request.url.path)
        gate = self.gates.get(request.url.path)
        if gate is not None:
            await gate.wait()
        job_id = int(request.url.path.rsplit("/", 1)[-1])
        if job_id == 404:
            return httpx.Response(404, json={"error": "Job not found", "kind": "not_found"})
        return httpx.Response(200, json=job_payload(job_id))


def make_modal(handler) -> tuple[JobDetailsModal, ScrollLock]:
    client = SkillsHubClient(httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test"))
    lock = ScrollLock()
    return JobDetailsModal(client, lock), lock


@pytest.mark.asyncio
async def test_data_entry_clerk_renders():
    modal, lock = make_modal(lambda request: httpx.Response(200, json=DATA_ENTRY_CLERK))

    await modal.show(42)

    view = modal.detail
    assert modal.loading is False
    assert modal.error is None
    assert view.title == "Data Entry Clerk"
    assert view.badge == "Part-time"
    assert "Hours per Week: 20" in view.detail_lines
    assert [(s.name, s.required) for s in view.skills] == [("Excel", True)]
    assert view.employer_name == "Acme Co"
    assert view.employer_verified is True
    assert lock.locked


@pytest.mark.asyncio
async def test_open_sets_loading_synchronously():
    modal, lock = make_modal(lambda request: httpx.Response(200, json=job_payload(1)))

    modal.open(1)

    assert modal.loading is True
    assert modal.detail is None
    assert lock.locked


@pytest.mark.asyncio
async def test_late_response_for_previous_id_is_dropped():
    transport = GatedTransport()
    first_gate = transport.gate("/api/jobs/1")
    modal, _ = make_modal(transport)

    modal.open(1)
    slow_first = asyncio.create_task(modal.load())
    await asyncio.sleep(0.01)

    await modal.show(2)
    assert modal.detail.title == "Job 2"

    first_gate.set()
    await slow_first

    assert modal.entity_id == 2
    assert modal.detail.title == "Job 2"
    assert transport.requests == ["/api/jobs/1", "/api/jobs/2"]


@pytest.mark.asyncio
async def test_response_after_close_is_dropped():
    transport = GatedTransport()
    gate = transport.gate("/api/jobs/5")
    modal, lock = make_modal(transport)

    modal.open(5)
    pending = asyncio.create_task(modal.load())
    await asyncio.sleep(0.01)
    modal.close()
    gate.set()
    await pending

    assert modal.detail is None
    assert modal.loading is False
    assert not lock.locked


@pytest.mark.asyncio
async def test_error_is_shown_and_reopen_refetches():
    transport = GatedTransport()
    modal, _ = make_modal(transport)

    await modal.show(404)
    assert modal.error == "Job not found"
    assert modal.error_kind == ErrorKind.NOT_FOUND
    assert modal.detail is None
    assert modal.loading is False

    modal.close()
    await modal.show(7)
    await modal.show(7)
    assert modal.error is None
    assert transport.requests == ["/api/jobs/404", "/api/jobs/7", "/api/jobs/7"]


@pytest.mark.asyncio
async def test_unusable_job_payload_becomes_inline_error():
    modal, lock = make_modal(lambda request: httpx.Response(200, json={"id": 5, "title": 123, "type": "GIG"}))

    await modal.show(5)

    assert modal.detail is None
    assert modal.error == "Failed to load details"
    assert modal.error_kind == ErrorKind.SERVER
    assert modal.loading is False
    assert lock.locked


@pytest.mark.asyncio
async def test_talent_response_without_talent_becomes_inline_error():
    client = SkillsHubClient(httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"unexpected": True})),
        base_url="http://test",
    ))
    modal = TalentProfileModal(client, ScrollLock())

    await modal.show(9)

    assert modal.detail is None
    assert modal.error == "Failed to load talent profile"
    assert modal.error_kind == ErrorKind.SERVER
    assert modal.loading is False


@pytest.mark.asyncio
async def test_talent_modal_inside_recruit_flow_keeps_lock(db, client_factory):
    """Talent profile modal stays locked while a nested modal opens and closes."""
    employer = await make_employer(db)
    talent = await make_seeker(db, with_resume=True, profession="Welder")
    client = SkillsHubClient(await client_factory(employer.user))
    lock = ScrollLock()

    profile_modal = TalentProfileModal(client, lock)
    await profile_modal.show(talent.id)
    assert profile_modal.detail.profession == "Welder"
    assert profile_modal.detail.resume_url == f"/api/files/{talent.resume_file_id}"

    nested = SlideModal(lock, "Recruit Talent")
    nested.open()
    nested.close()
    assert lock.locked

    profile_modal.close()
    assert not lock.locked


@pytest.mark.asyncio
async def test_freelancer_modal_against_app(api, db):
    talent = await make_seeker(db, profession="Tailor", skills=("tailoring",))
    modal = FreelancerProfileModal(api, ScrollLock())

    await modal.show(talent.id)

    assert modal.detail.name == "Aminata Kamara"
    assert [s.name for s in modal.detail.skills] == ["Tailoring"]
    assert modal.detail.resume_url is None
