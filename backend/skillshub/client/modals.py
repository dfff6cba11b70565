"""
Slide-in modal shell and the detail modals built on it.

A detail modal fetches its entity when opened. Every open bumps a request
generation; a response is applied only if its generation is still current,
so a slow answer for a previous id never overwrites the one on screen.
"""
import logging
from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import ValidationError

from skillshub.errors import ApiError, ErrorKind
from skillshub.client.api import SkillsHubClient
from skillshub.client.presenters import JobDetailView, TalentView, job_detail_view, talent_view
from skillshub.client.scroll_lock import Lease, ScrollLock

logger = logging.getLogger(__name__)

ViewT = TypeVar("ViewT")


class SlideModal:
    """Overlay that holds a scroll-lock lease while open."""

    def __init__(self, scroll_lock: ScrollLock, title: str = ""):
        self.scroll_lock = scroll_lock
        self.title = title
        self._lease: Optional[Lease] = None

    @property
    def is_open(self) -> bool:
        return self._lease is not None

    def open(self) -> None:
        if self._lease is None:
            self._lease = self.scroll_lock.acquire()

    def close(self) -> None:
        if self._lease is not None:
            self._lease.release()
            self._lease = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class DetailModal(SlideModal, Generic[ViewT]):
    """
    Modal showing one entity fetched by id.

    Usage:
        modal.open(42)      # loading=True immediately
        await modal.load()  # one GET; detail or error
        modal.close()       # drops state and any in-flight response
    """

    invalid_payload_message = "Failed to load details"

    def __init__(self, client: SkillsHubClient, scroll_lock: ScrollLock, title: str = ""):
        super().__init__(scroll_lock, title)
        self.client = client
        self.entity_id: Optional[Union[int, str]] = None
        self.loading = False
        self.detail: Optional[ViewT] = None
        self.error: Optional[str] = None
        self.error_kind: Optional[ErrorKind] = None
        self._generation = 0

    async def fetch(self, entity_id: Union[int, str]) -> dict[str, Any]:
        raise NotImplementedError

    def present(self, payload: dict[str, Any]) -> ViewT:
        raise NotImplementedError

    def open(self, entity_id: Union[int, str]) -> None:
        super().open()
        self._generation += 1
        self.entity_id = entity_id
        self.loading = True
        self.detail = None
        self.error = None
        self.error_kind = None

    async def load(self) -> None:
        if self.entity_id is None:
            return

        generation = self._generation
        entity_id = self.entity_id
        try:
            payload = await self.fetch(entity_id)
            view = self.present(payload)
        except ApiError as exc:
            self._fail(generation, entity_id, exc.message, exc.kind)
            return
        except ValidationError as exc:
            logger.warning(f"{type(self).__name__}: unusable payload for {entity_id}: {exc.error_count()} errors")
            self._fail(generation, entity_id, self.invalid_payload_message, ErrorKind.SERVER)
            return

        if generation != self._generation:
            logger.debug(f"{type(self).__name__}: dropped stale response for {entity_id}")
            return
        self.detail = view
        self.loading = False

    def _fail(self, generation: int, entity_id: Union[int, str], message: str, kind: ErrorKind) -> None:
        if generation != self._generation:
            logger.debug(f"{type(self).__name__}: dropped stale error for {entity_id}")
            return
        self.error = message
        self.error_kind = kind
        self.loading = False

    async def show(self, entity_id: Union[int, str]) -> None:
        """open() then load()."""
        self.open(entity_id)
        await self.load()

    def close(self) -> None:
        self._generation += 1
        self.entity_id = None
        self.loading = False
        self.detail = None
        self.error = None
        self.error_kind = None
        super().close()


class JobDetailsModal(DetailModal[JobDetailView]):
    def __init__(self, client: SkillsHubClient, scroll_lock: ScrollLock):
        super().__init__(client, scroll_lock, title="Job Details")

    async def fetch(self, entity_id):
        return await self.client.job(entity_id)

    def present(self, payload):
        return job_detail_view(payload)


class TalentProfileModal(DetailModal[TalentView]):
    """Employer-side talent profile (includes the resume link)."""

    def __init__(self, client: SkillsHubClient, scroll_lock: ScrollLock):
        super().__init__(client, scroll_lock, title="Talent Profile")

    async def fetch(self, entity_id):
        return await self.client.talent(entity_id)

    def present(self, payload):
        return talent_view(payload)


class FreelancerProfileModal(DetailModal[TalentView]):
    def __init__(self, client: SkillsHubClient, scroll_lock: ScrollLock):
        super().__init__(client, scroll_lock, title="Freelancer Profile")

    async def fetch(self, entity_id):
        return await self.client.freelancer(entity_id)

    def present(self, payload):
        return talent_view(payload)
