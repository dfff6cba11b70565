"""
Filterable lists of jobs and freelancers, and the landing-page sections that
pair a list with its detail modal.
"""
import logging
from typing import Any, Optional, Union

from pydantic import BaseModel

from skillshub.errors import ApiError, ErrorKind
from skillshub.client.api import SkillsHubClient
from skillshub.client.modals import FreelancerProfileModal, JobDetailsModal
from skillshub.client.scroll_lock import ScrollLock

logger = logging.getLogger(__name__)

ALL = "all"


def _filter_value(value: Any) -> Any:
    """None for blank strings and the 'all' option."""
    if isinstance(value, str):
        value = value.strip()
        if not value or value.lower() == ALL:
            return None
    return value


class JobFilters(BaseModel):
    search: Optional[str] = None
    type: Optional[str] = None
    location: Optional[str] = None

    def to_params(self) -> dict[str, Any]:
        params = {
            "search": _filter_value(self.search),
            "type": _filter_value(self.type),
            "location": _filter_value(self.location),
        }
        return {k: v for k, v in params.items() if v is not None}


class FreelancerFilters(BaseModel):
    search: Optional[str] = None
    pathway: Optional[str] = None
    min_experience: Optional[int] = None

    def to_params(self) -> dict[str, Any]:
        params = {
            "search": _filter_value(self.search),
            "pathway": _filter_value(self.pathway),
            "min_experience": self.min_experience if self.min_experience else None,
        }
        return {k: v for k, v in params.items() if v is not None}


class Browser:
    """
    List state behind a browse page: filters, loading, error and results.

    Each refresh() bumps a generation; only the latest refresh may write
    results or errors.
    """

    fallback_error = "Failed to load results"

    def __init__(self, client: SkillsHubClient):
        self.client = client
        self.items: list[dict[str, Any]] = []
        self.loading = False
        self.error: Optional[str] = None
        self.error_kind: Optional[ErrorKind] = None
        self._generation = 0

    async def fetch(self) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def refresh(self) -> None:
        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None
        self.error_kind = None
        try:
            items = await self.fetch()
        except ApiError as exc:
            if generation != self._generation:
                return
            self.error = exc.message
            self.error_kind = exc.kind
            self.items = []
            self.loading = False
            return

        if generation != self._generation:
            logger.debug(f"{type(self).__name__}: dropped stale results")
            return
        self.items = items
        self.loading = False

    @property
    def empty(self) -> bool:
        return not self.loading and self.error is None and not self.items


class JobBrowser(Browser):
    def __init__(self, client: SkillsHubClient, filters: Optional[JobFilters] = None, recommended: bool = False):
        super().__init__(client)
        self.filters = filters or JobFilters()
        self.recommended = recommended
        self.user_skills: list[dict[str, Any]] = []

    async def fetch(self):
        params = self.filters.to_params()
        if self.recommended:
            body = await self.client.recommended_jobs(**params)
            self.user_skills = body.get("userSkills", [])
        else:
            body = await self.client.available_jobs(**params)
        return body.get("jobs", [])

    async def apply_filters(self, **changes: Any) -> None:
        self.filters = self.filters.model_copy(update=changes)
        await self.refresh()


class FreelancerBrowser(Browser):
    """Freelancer list. `top=True` lists the featured three and ignores filters."""

    def __init__(self, client: SkillsHubClient, filters: Optional[FreelancerFilters] = None, top: bool = False):
        super().__init__(client)
        self.filters = filters or FreelancerFilters()
        self.top = top

    async def fetch(self):
        if self.top:
            body = await self.client.top_freelancers()
        else:
            body = await self.client.available_freelancers(**self.filters.to_params())
        return body.get("freelancers", [])

    async def apply_filters(self, **changes: Any) -> None:
        self.filters = self.filters.model_copy(update=changes)
        await self.refresh()


class AvailableJobsSection:
    """Job cards; selecting one opens the job details modal."""

    def __init__(self, client: SkillsHubClient, scroll_lock: ScrollLock, filters: Optional[JobFilters] = None):
        self.browser = JobBrowser(client, filters)
        self.modal = JobDetailsModal(client, scroll_lock)

    async def load(self) -> None:
        await self.browser.refresh()

    async def select(self, job_id: Union[int, str]) -> None:
        await self.modal.show(job_id)

    def close_details(self) -> None:
        self.modal.close()


class TopFreelancersSection:
    def __init__(self, client: SkillsHubClient, scroll_lock: ScrollLock):
        self.browser = FreelancerBrowser(client, top=True)
        self.modal = FreelancerProfileModal(client, scroll_lock)

    async def load(self) -> None:
        await self.browser.refresh()

    async def select(self, profile_id: Union[int, str]) -> None:
        await self.modal.show(profile_id)

    def close_details(self) -> None:
        self.modal.close()
