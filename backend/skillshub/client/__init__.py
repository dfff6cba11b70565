from skillshub.errors import ApiError, ErrorKind, kind_for_status
from skillshub.client.api import SkillsHubClient
from skillshub.client.cache import RequestCache
from skillshub.client.scroll_lock import Lease, ScrollLock
from skillshub.client.modals import (
    SlideModal,
    DetailModal,
    JobDetailsModal,
    TalentProfileModal,
    FreelancerProfileModal,
)
from skillshub.client.job_form import JobForm, SubmitResult
from skillshub.client.skill_selector import SkillSelector
from skillshub.client.flows import ApplyFlow, RecruitFlow, FlowState, InvalidTransitionError
from skillshub.client.browse import (
    JobFilters,
    FreelancerFilters,
    JobBrowser,
    FreelancerBrowser,
    AvailableJobsSection,
    TopFreelancersSection,
)

__all__ = [
    "ApiError",
    "ErrorKind",
    "kind_for_status",
    "SkillsHubClient",
    "RequestCache",
    "Lease",
    "ScrollLock",
    "SlideModal",
    "DetailModal",
    "JobDetailsModal",
    "TalentProfileModal",
    "FreelancerProfileModal",
    "JobForm",
    "SubmitResult",
    "SkillSelector",
    "ApplyFlow",
    "RecruitFlow",
    "FlowState",
    "InvalidTransitionError",
    "JobFilters",
    "FreelancerFilters",
    "JobBrowser",
    "FreelancerBrowser",
    "AvailableJobsSection",
    "TopFreelancersSection",
]
