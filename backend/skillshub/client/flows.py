"""
Submit flows behind the "Apply" and "Recruit" modals.

Both follow one state machine: CLOSED -> LOADING_PREREQS -> READY ->
SUBMITTING -> (READY on error | CLOSED after the success pause).
ALL state changes go through `_transition`.
"""
import asyncio
import enum
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from skillshub.config import settings
from skillshub.errors import ApiError
from skillshub.client.api import SkillsHubClient
from skillshub.client.modals import SlideModal
from skillshub.client.scroll_lock import ScrollLock

logger = logging.getLogger(__name__)

Id = Union[int, str]


class FlowState(str, enum.Enum):
    CLOSED = "CLOSED"
    LOADING_PREREQS = "LOADING_PREREQS"
    READY = "READY"
    SUBMITTING = "SUBMITTING"


# Define allowed state transitions
ALLOWED_TRANSITIONS: dict[FlowState, list[FlowState]] = {
    FlowState.CLOSED: [FlowState.LOADING_PREREQS],
    FlowState.LOADING_PREREQS: [FlowState.READY, FlowState.CLOSED],
    FlowState.READY: [FlowState.SUBMITTING, FlowState.CLOSED],
    FlowState.SUBMITTING: [FlowState.READY, FlowState.CLOSED],  # READY on error, CLOSED after success
}


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted"""
    pass


def can_transition(from_state: FlowState, to_state: FlowState) -> bool:
    return to_state in ALLOWED_TRANSITIONS.get(from_state, [])


class SubmitFlow:
    """
    Shared modal flow: load prerequisites, collect input, submit once.

    Subclasses implement `load_prereqs`, `blocking_reason` and `send`.
    """

    title = ""
    prereq_error = "Failed to load form"

    def __init__(
        self,
        client: SkillsHubClient,
        scroll_lock: ScrollLock,
        on_success: Optional[Callable[[dict[str, Any]], None]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.modal = SlideModal(scroll_lock, self.title)
        self.on_success = on_success
        self._sleep = sleep
        self.state = FlowState.CLOSED
        self.error: Optional[str] = None
        self.success_message: Optional[str] = None
        self._generation = 0

    def _transition(self, to_state: FlowState) -> None:
        if not can_transition(self.state, to_state):
            raise InvalidTransitionError(
                f"Invalid transition from {self.state.value} to {to_state.value}"
            )
        logger.debug(f"{type(self).__name__}: {self.state.value} -> {to_state.value}")
        self.state = to_state

    def reset(self) -> None:
        self.error = None
        self.success_message = None

    async def load_prereqs(self) -> None:
        raise NotImplementedError

    def blocking_reason(self) -> Optional[str]:
        """Message explaining why submit is not allowed yet, or None."""
        raise NotImplementedError

    async def send(self) -> dict[str, Any]:
        raise NotImplementedError

    def success_text(self, result: dict[str, Any]) -> str:
        return result.get("message") or "Done"

    @property
    def can_submit(self) -> bool:
        return self.state == FlowState.READY and self.blocking_reason() is None

    async def open(self) -> None:
        """Open the modal and load prerequisites. A load failure leaves an inline error."""
        self._transition(FlowState.LOADING_PREREQS)
        self.modal.open()
        self.reset()
        generation = self._generation
        try:
            await self.load_prereqs()
        except ApiError as exc:
            logger.warning(f"{type(self).__name__}: prerequisites failed: {exc.message}")
            if generation == self._generation:
                self.error = self.prereq_error
        if self.state == FlowState.LOADING_PREREQS:
            self._transition(FlowState.READY)

    def close(self) -> None:
        if self.state == FlowState.CLOSED:
            return
        self._transition(FlowState.CLOSED)
        self._generation += 1
        self.modal.close()
        self.reset()

    async def submit(self) -> bool:
        """
        Submit once. Returns True on success.

        Refused (False, nothing sent) unless the flow is READY. A blocked
        submit sets the reason as the inline error. A response that arrives
        after the modal was closed or reopened is dropped. On success:
        on_success, the feedback pause, then close.
        """
        if self.state != FlowState.READY:
            logger.debug(f"{type(self).__name__}: submit ignored in state {self.state.value}")
            return False

        reason = self.blocking_reason()
        if reason:
            self.error = reason
            return False

        self._transition(FlowState.SUBMITTING)
        self.error = None
        generation = self._generation
        try:
            result = await self.send()
        except ApiError as exc:
            if generation != self._generation:
                logger.debug(f"{type(self).__name__}: dropped error after close: {exc.message}")
                return False
            self.error = exc.message
            self._transition(FlowState.READY)
            return False

        if generation != self._generation:
            logger.debug(f"{type(self).__name__}: dropped response after close")
            return False

        self.success_message = self.success_text(result)
        if self.on_success:
            self.on_success(result)

        await self._sleep(settings.success_feedback_seconds)
        # The user may have closed the modal during the pause
        if self.state == FlowState.SUBMITTING and generation == self._generation:
            self.close()
        return True


class ApplyFlow(SubmitFlow):
    """Seeker applies to a job with their profile resume or an uploaded cover letter."""

    title = "Apply for Job"
    prereq_error = "Failed to load profile information"
    missing_files_message = "Please upload your CV/resume to your profile first, or upload a cover letter file"

    def __init__(self, client: SkillsHubClient, scroll_lock: ScrollLock, job_id: Id, **kwargs):
        super().__init__(client, scroll_lock, **kwargs)
        self.job_id = job_id
        self.resume_file_id: Optional[str] = None
        self.cover_letter_file_id: Optional[str] = None
        self.cover_letter_text = ""
        self.expected_pay = ""
        self.uploading = False

    def reset(self) -> None:
        super().reset()
        self.resume_file_id = None
        self.cover_letter_file_id = None
        self.cover_letter_text = ""
        self.expected_pay = ""

    async def load_prereqs(self) -> None:
        body = await self.client.seeker_profile()
        self.resume_file_id = (body.get("profile") or {}).get("resumeFileId")

    async def upload_cover_letter(self, content: bytes, filename: str, content_type: str) -> Optional[str]:
        """Upload a cover-letter file for this application. Returns its id, or None on failure."""
        self.uploading = True
        try:
            me = await self.client.me()
            body = await self.client.upload(
                content, filename, content_type,
                file_type="cover-letter",
                user_id=me["user"]["userId"],
            )
        except ApiError as exc:
            self.error = exc.message
            return None
        finally:
            self.uploading = False

        self.cover_letter_file_id = body["fileId"]
        self.error = None
        return self.cover_letter_file_id

    def blocking_reason(self) -> Optional[str]:
        if not self.resume_file_id and not self.cover_letter_file_id:
            return self.missing_files_message
        return None

    async def send(self) -> dict[str, Any]:
        pay = self.expected_pay.strip()
        return await self.client.apply({
            "jobId": self.job_id,
            "coverLetterText": self.cover_letter_text.strip() or None,
            "coverLetterFileId": self.cover_letter_file_id,
            "cvFileId": self.resume_file_id,
            "expectedPay": int(pay) if pay.isdigit() else None,
        })

    def success_text(self, result: dict[str, Any]) -> str:
        return result.get("message") or "Application submitted successfully"


class RecruitFlow(SubmitFlow):
    """Employer invites a talent to one of their OPEN jobs."""

    title = "Recruit Talent"
    prereq_error = "Failed to load your job postings"

    def __init__(self, client: SkillsHubClient, scroll_lock: ScrollLock, talent_id: Id, **kwargs):
        super().__init__(client, scroll_lock, **kwargs)
        self.talent_id = talent_id
        self.jobs: list[dict[str, Any]] = []
        self.selected_job_id: Optional[Id] = None
        self.message = ""

    def reset(self) -> None:
        super().reset()
        self.jobs = []
        self.selected_job_id = None
        self.message = ""

    async def load_prereqs(self) -> None:
        body = await self.client.employer_jobs(status="OPEN", limit=100)
        self.jobs = [job for job in body.get("jobs") or [] if isinstance(job, dict) and job.get("status") == "OPEN"]

    def select_job(self, job_id: Optional[Id]) -> None:
        self.selected_job_id = job_id
        self.error = None

    def blocking_reason(self) -> Optional[str]:
        if not self.selected_job_id:
            return "Please select a job posting"
        return None

    async def send(self) -> dict[str, Any]:
        return await self.client.recruit(self.talent_id, self.selected_job_id, self.message.strip() or None)

    def success_text(self, result: dict[str, Any]) -> str:
        if result.get("hasResume"):
            return "Recruitment invitation sent! Application created."
        return "Message sent! The talent will be notified to upload their CV."
