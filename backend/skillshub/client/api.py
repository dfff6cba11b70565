"""
Async HTTP client for the SkillsHub API.

Every call issues exactly one request (no retries) and raises ApiError on
any failure, so UI components only ever deal with one exception type.
"""
import logging
from typing import Any, Optional, Union

import httpx

from skillshub.config import settings
from skillshub.errors import ApiError, ErrorKind, kind_for_status
from skillshub.client.cache import RequestCache

logger = logging.getLogger(__name__)

Id = Union[int, str]


def clean_params(params: dict[str, Any]) -> dict[str, Any]:
    """Drop None/empty values; booleans become 'true'/'false'."""
    cleaned = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        cleaned[key] = str(value).lower() if isinstance(value, bool) else value
    return cleaned


def require_member(body: dict[str, Any], fallback: str, *path: str, expect: type = object) -> Any:
    """
    Value at `path` inside a successful response body.

    Raises:
        ApiError: SERVER when a member is missing, null, or not of type `expect`
    """
    value: Any = body
    for name in path:
        if not isinstance(value, dict) or value.get(name) is None:
            raise ApiError(ErrorKind.SERVER, fallback, payload=body)
        value = value[name]
    if not isinstance(value, expect):
        raise ApiError(ErrorKind.SERVER, fallback, payload=body)
    return value


class SkillsHubClient:
    def __init__(self, http: httpx.AsyncClient, cache: Optional[RequestCache] = None):
        self.http = http
        self.cache = cache or RequestCache()

    @classmethod
    def connect(cls, base_url: Optional[str] = None, **kwargs) -> "SkillsHubClient":
        """Client with its own httpx.AsyncClient (cookies persist across calls)."""
        return cls(httpx.AsyncClient(base_url=base_url or settings.api_base_url, **kwargs))

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "SkillsHubClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ============================================================
    # TRANSPORT
    # ============================================================

    async def request(
        self,
        method: str,
        path: str,
        fallback: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
        data: Optional[dict[str, Any]] = None,
        files: Any = None,
    ) -> dict[str, Any]:
        """
        Issue one request and return the decoded JSON body.

        Raises:
            ApiError: NETWORK when no response arrived; otherwise the kind from
                the error envelope (or derived from the status code). The
                message is the server's `error`, else `fallback`.
        """
        try:
            response = await self.http.request(
                method,
                path,
                params=clean_params(params or {}),
                json=json,
                data=data,
                files=files,
            )
        except httpx.TransportError as exc:
            logger.warning(f"{method} {path} failed: {exc!r}")
            raise ApiError(ErrorKind.NETWORK, fallback) from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_success:
            if not isinstance(body, dict):
                raise ApiError(ErrorKind.SERVER, fallback, response.status_code)
            return body

        payload = body if isinstance(body, dict) else {}
        try:
            kind = ErrorKind(payload.get("kind"))
        except ValueError:
            kind = kind_for_status(response.status_code)
        message = payload.get("error") if isinstance(payload.get("error"), str) else None

        logger.warning(f"{method} {path} -> {response.status_code} ({kind.value}): {message or fallback}")
        raise ApiError(kind, message or fallback, response.status_code, payload)

    # ============================================================
    # AUTH
    # ============================================================

    async def login(self, email: str, password: str) -> dict[str, Any]:
        return await self.request(
            "POST", "/api/auth/login", "Login failed",
            json={"email": email, "password": password},
        )

    async def logout(self) -> dict[str, Any]:
        return await self.request("POST", "/api/auth/logout", "Logout failed")

    async def me(self) -> dict[str, Any]:
        body = await self.request("GET", "/api/auth/me", "Failed to load session")
        require_member(body, "Failed to load session", "user", "userId")
        return body

    # ============================================================
    # JOBS
    # ============================================================

    async def available_jobs(
        self,
        search: Optional[str] = None,
        type: Optional[str] = None,
        location: Optional[str] = None,
    ) -> dict[str, Any]:
        return await self.request(
            "GET", "/api/jobs/available", "Failed to load jobs",
            params={"search": search, "type": type, "location": location},
        )

    async def recommended_jobs(
        self,
        search: Optional[str] = None,
        type: Optional[str] = None,
        location: Optional[str] = None,
    ) -> dict[str, Any]:
        return await self.request(
            "GET", "/api/jobs/recommended", "Failed to load recommended jobs",
            params={"search": search, "type": type, "location": location},
        )

    async def job(self, job_id: Id) -> dict[str, Any]:
        return await self.request("GET", f"/api/jobs/{job_id}", "Failed to load job details")

    async def employer_jobs(
        self,
        status: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> dict[str, Any]:
        return await self.request(
            "GET", "/api/employer/jobs", "Failed to load your jobs",
            params={"status": status, "limit": limit, "offset": offset},
        )

    async def employer_job(self, job_id: Id) -> dict[str, Any]:
        body = await self.request("GET", f"/api/employer/jobs/{job_id}", "Failed to load job")
        return require_member(body, "Failed to load job", "job", expect=dict)

    async def create_job(self, payload: dict[str, Any]) -> dict[str, Any]:
        body = await self.request("POST", "/api/employer/jobs", "Failed to post job", json=payload)
        require_member(body, "Failed to post job", "jobId")
        return body

    async def update_job(self, job_id: Id, payload: dict[str, Any]) -> dict[str, Any]:
        body = await self.request("PATCH", f"/api/employer/jobs/{job_id}", "Failed to update job", json=payload)
        require_member(body, "Failed to update job", "job", "id")
        return body

    # ============================================================
    # APPLICATIONS / RECRUITMENT
    # ============================================================

    async def apply(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self.request(
            "POST", "/api/applications/apply", "Failed to submit application", json=payload
        )

    async def recruit(self, talent_id: Id, job_id: Id, message: Optional[str] = None) -> dict[str, Any]:
        return await self.request(
            "POST", "/api/employer/recruit", "Failed to send recruitment invitation",
            json={"talentId": talent_id, "jobId": job_id, "message": message},
        )

    async def employer_applications(
        self,
        status: Optional[str] = None,
        job_id: Optional[Id] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> dict[str, Any]:
        return await self.request(
            "GET", "/api/employer/applications", "Failed to load applications",
            params={"status": status, "jobId": job_id, "limit": limit, "offset": offset},
        )

    async def employer_application(self, application_id: Id) -> dict[str, Any]:
        body = await self.request(
            "GET", f"/api/employer/applications/{application_id}", "Failed to load application"
        )
        return require_member(body, "Failed to load application", "application", expect=dict)

    async def update_application_status(self, application_id: Id, status: str) -> dict[str, Any]:
        body = await self.request(
            "PATCH", f"/api/employer/applications/{application_id}", "Failed to update application status",
            json={"status": status},
        )
        return require_member(body, "Failed to update application status", "application", expect=dict)

    async def delete_application(self, application_id: Id) -> dict[str, Any]:
        return await self.request(
            "DELETE", f"/api/employer/applications/{application_id}", "Failed to delete application"
        )

    async def seeker_applications(self, status: Optional[str] = None) -> dict[str, Any]:
        return await self.request(
            "GET", "/api/seeker/applications", "Failed to fetch applications", params={"status": status}
        )

    # ============================================================
    # NOTIFICATIONS
    # ============================================================

    async def notifications(self, unread_only: bool = False) -> dict[str, Any]:
        return await self.request(
            "GET", "/api/notifications", "Failed to fetch notifications",
            params={"unreadOnly": unread_only or None},
        )

    async def mark_notifications_read(
        self,
        notification_id: Optional[Id] = None,
        read: Optional[bool] = None,
    ) -> dict[str, Any]:
        """One notification when `notification_id` is given, otherwise all unread ones."""
        payload: dict[str, Any] = {}
        if notification_id is not None:
            payload["notificationId"] = notification_id
        if read is not None:
            payload["read"] = read
        return await self.request(
            "PATCH", "/api/notifications", "Failed to update notification", json=payload
        )

    # ============================================================
    # TALENT
    # ============================================================

    async def available_freelancers(
        self,
        search: Optional[str] = None,
        pathway: Optional[str] = None,
        min_experience: Optional[int] = None,
    ) -> dict[str, Any]:
        return await self.request(
            "GET", "/api/freelancers/available", "Failed to load freelancers",
            params={"search": search, "pathway": pathway, "minExperience": min_experience},
        )

    async def top_freelancers(self) -> dict[str, Any]:
        return await self.request("GET", "/api/freelancers/top", "Failed to load freelancers")

    async def freelancer(self, profile_id: Id) -> dict[str, Any]:
        return await self.request("GET", f"/api/freelancers/{profile_id}", "Failed to load profile")

    async def talents(self, **filters: Any) -> dict[str, Any]:
        """Filters: search, pathway, skillId, minExperience, useMatching, limit, offset."""
        return await self.request("GET", "/api/talents", "Failed to load talents", params=filters)

    async def talent(self, talent_id: Id) -> dict[str, Any]:
        body = await self.request("GET", f"/api/talents/{talent_id}", "Failed to load talent profile")
        return require_member(body, "Failed to load talent profile", "talent", expect=dict)

    # ============================================================
    # PROFILE / FILES
    # ============================================================

    async def seeker_profile(self) -> dict[str, Any]:
        return await self.request("GET", "/api/profile/seeker", "Failed to load profile")

    async def update_seeker_profile(self, changes: dict[str, Any]) -> dict[str, Any]:
        return await self.request("PATCH", "/api/profile/seeker", "Failed to update profile", json=changes)

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        file_type: str,
        user_id: Optional[Id] = None,
    ) -> dict[str, Any]:
        form = {"fileType": file_type}
        if user_id is not None:
            form["userId"] = str(user_id)
        body = await self.request(
            "POST", "/api/upload", "Failed to upload file",
            data=form,
            files={"file": (filename, content, content_type)},
        )
        require_member(body, "Failed to upload file", "fileId")
        return body

    @staticmethod
    def file_url(file_id: str) -> str:
        return f"/api/files/{file_id}"

    # ============================================================
    # LOOKUP DATA (cached)
    # ============================================================

    async def skills(self) -> dict[str, Any]:
        return await self.cache.get_or_fetch(
            RequestCache.make_key("/api/skills"),
            lambda: self.request("GET", "/api/skills", "Failed to load skills"),
        )

    async def regions(self) -> dict[str, Any]:
        return await self.cache.get_or_fetch(
            RequestCache.make_key("/api/locations/regions"),
            lambda: self.request("GET", "/api/locations/regions", "Failed to load regions"),
        )
