"""
Tests for the SkillsHub HTTP client: error mapping, params and unwrapping.
"""
import httpx
import pytest

from skillshub.client.api import SkillsHubClient, clean_params, require_member
from skillshub.errors import ApiError, ErrorKind, kind_for_status

from conftest import make_employer, make_job


def mock_client(handler) -> SkillsHubClient:
    return SkillsHubClient(httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test"))


def test_kind_for_status():
    assert kind_for_status(400) == ErrorKind.VALIDATION
    assert kind_for_status(409) == ErrorKind.VALIDATION
    assert kind_for_status(401) == ErrorKind.AUTH
    assert kind_for_status(403) == ErrorKind.AUTH
    assert kind_for_status(404) == ErrorKind.NOT_FOUND
    assert kind_for_status(502) == ErrorKind.SERVER


def test_clean_params():
    assert clean_params({"a": None, "b": "", "c": 0, "d": True, "e": "x"}) == {"c": 0, "d": "true", "e": "x"}


@pytest.mark.asyncio
async def test_envelope_message_and_kind():
    def handler(request):
        return httpx.Response(404, json={"error": "Job not found", "kind": "not_found"})

    client = mock_client(handler)
    with pytest.raises(ApiError) as exc_info:
        await client.job(42)

    assert exc_info.value.kind == ErrorKind.NOT_FOUND
    assert exc_info.value.message == "Job not found"
    assert exc_info.value.status == 404


@pytest.mark.asyncio
async def test_fallback_message_without_envelope():
    def handler(request):
        return httpx.Response(503, text="upstream down")

    client = mock_client(handler)
    with pytest.raises(ApiError) as exc_info:
        await client.job(42)

    assert exc_info.value.kind == ErrorKind.SERVER
    assert exc_info.value.message == "Failed to load job details"


@pytest.mark.asyncio
async def test_transport_error_is_network_kind():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    client = mock_client(handler)
    with pytest.raises(ApiError) as exc_info:
        await client.available_jobs()

    assert exc_info.value.kind == ErrorKind.NETWORK
    assert exc_info.value.message == "Failed to load jobs"
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_extra_envelope_fields_are_kept():
    def handler(request):
        return httpx.Response(400, json={"error": "Upload a CV", "kind": "validation", "requiresResume": True})

    client = mock_client(handler)
    with pytest.raises(ApiError) as exc_info:
        await client.apply({"jobId": 1})

    assert exc_info.value.payload["requiresResume"] is True


@pytest.mark.asyncio
async def test_non_object_success_body_is_server_error():
    client = mock_client(lambda request: httpx.Response(200, json=[1, 2, 3]))

    with pytest.raises(ApiError) as exc_info:
        await client.skills()

    assert exc_info.value.kind == ErrorKind.SERVER


@pytest.mark.asyncio
async def test_query_params_and_unwrapping():
    seen = []

    def handler(request):
        seen.append(request)
        if request.url.path == "/api/talents/7":
            return httpx.Response(200, json={"talent": {"id": 7, "name": "Sia"}})
        return httpx.Response(200, json={"talents": [], "pagination": {}})

    client = mock_client(handler)
    await client.talents(search="sia", pathway=None, useMatching=False, limit=20)
    talent = await client.talent(7)

    assert dict(seen[0].url.params) == {"search": "sia", "useMatching": "false", "limit": "20"}
    assert talent == {"id": 7, "name": "Sia"}


def test_require_member():
    body = {"job": {"id": 4, "title": "Tailor"}, "jobId": None}

    assert require_member(body, "Failed", "job", "id") == 4
    assert require_member(body, "Failed", "job", expect=dict) == {"id": 4, "title": "Tailor"}

    for path, expect in ((("jobId",), object), (("job", "owner"), object), (("job", "title"), dict)):
        with pytest.raises(ApiError) as exc_info:
            require_member(body, "Failed", *path, expect=expect)
        assert exc_info.value.kind == ErrorKind.SERVER
        assert exc_info.value.message == "Failed"


@pytest.mark.asyncio
async def test_success_body_missing_expected_members_is_server_error():
    def handler(request):
        if request.url.path == "/api/employer/jobs":
            return httpx.Response(201, json={"success": True})
        if request.url.path == "/api/upload":
            return httpx.Response(200, json={"fileId": None})
        return httpx.Response(200, json={"user": {}})

    client = mock_client(handler)

    calls = (
        (client.create_job({"title": "x"}), "Failed to post job"),
        (client.upload(b"data", "cv.pdf", "application/pdf", file_type="cv"), "Failed to upload file"),
        (client.me(), "Failed to load session"),
    )
    for call, message in calls:
        with pytest.raises(ApiError) as exc_info:
            await call
        assert exc_info.value.kind == ErrorKind.SERVER
        assert exc_info.value.message == message


@pytest.mark.asyncio
async def test_reference_data_is_cached():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(200, json={"regions": []})

    client = mock_client(handler)
    await client.regions()
    await client.regions()

    assert calls == ["/api/locations/regions"]


@pytest.mark.asyncio
async def test_against_app(api: SkillsHubClient, db):
    """The client talks to the real app over ASGI."""
    employer = await make_employer(db)
    job = await make_job(db, employer, title="Tailor Needed")

    listing = await api.available_jobs(type="GIG")
    assert [j["id"] for j in listing["jobs"]] == [job.id]

    with pytest.raises(ApiError) as exc_info:
        await api.me()
    assert exc_info.value.kind == ErrorKind.AUTH
    assert exc_info.value.message == "Unauthorized"
