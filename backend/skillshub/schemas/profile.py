"""Seeker profile and talent Pydantic schemas."""
from datetime import datetime
from typing import Optional

from skillshub.schemas.common import CamelModel, FileRef, Pagination


class ProfileSkill(CamelModel):
    id: int
    name: str
    slug: str
    level: int = 1


class EducationEntry(CamelModel):
    id: int
    school: str
    credential: Optional[str] = None
    field: Optional[str] = None
    start_year: Optional[int] = None
    end_year: Optional[int] = None


class TrainingEntry(CamelModel):
    id: int
    training_name: str
    institute: Optional[str] = None
    certificate: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ExperienceEntry(CamelModel):
    id: int
    company_name: str
    role_title: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    description: Optional[str] = None


class PortfolioEntry(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    link_url: Optional[str] = None
    file_id: Optional[str] = None
    file: Optional[FileRef] = None


class FreelancerCard(CamelModel):
    """Public talent card (lists on the landing page and /freelancers)."""
    id: int
    user_id: int
    name: str
    profession: str
    headline: str
    bio: str
    years_experience: int
    pathway: str
    skills: list[ProfileSkill] = []


class FreelancerDetail(FreelancerCard):
    """Public talent profile (GET /api/freelancers/{id})."""
    email: str
    phone: Optional[str] = None
    availability: Optional[str] = None
    education: list[EducationEntry] = []
    trainings: list[TrainingEntry] = []
    experiences: list[ExperienceEntry] = []
    portfolio: list[PortfolioEntry] = []


class FreelancerListResponse(CamelModel):
    freelancers: list[FreelancerCard]


class TalentCard(FreelancerCard):
    """Talent as browsed by an employer, scored against the employer's open jobs."""
    email: str
    phone: Optional[str] = None
    availability: Optional[str] = None
    match_score: int = 0
    matching_skills_count: int = 0
    portfolio_count: int = 0
    experience_count: int = 0
    education_count: int = 0
    training_count: int = 0


class TalentListResponse(CamelModel):
    talents: list[TalentCard]
    pagination: Pagination


class TalentDetail(FreelancerDetail):
    """Full talent profile as seen by an employer (GET /api/talents/{id})."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    resume_file_id: Optional[str] = None
    resume_file: Optional[FileRef] = None


class TalentResponse(CamelModel):
    talent: TalentDetail


class SeekerProfileUpdate(CamelModel):
    """Partial update of the current seeker's profile."""
    pathway: Optional[str] = None
    profession: Optional[str] = None
    headline: Optional[str] = None
    bio: Optional[str] = None
    date_of_birth: Optional[str] = None
    years_experience: Optional[int] = None
    availability: Optional[str] = None
    resume_file_id: Optional[str] = None


class SeekerProfileOut(CamelModel):
    id: int
    user_id: int
    pathway: str
    profession: Optional[str] = None
    headline: Optional[str] = None
    bio: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    years_experience: Optional[int] = None
    availability: Optional[str] = None
    resume_file_id: Optional[str] = None
    resume_file: Optional[FileRef] = None
    skills: list[ProfileSkill] = []
    education: list[EducationEntry] = []
    trainings: list[TrainingEntry] = []
    experiences: list[ExperienceEntry] = []
    portfolio: list[PortfolioEntry] = []


class SeekerAccount(CamelModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class SeekerProfileResponse(CamelModel):
    user: SeekerAccount
    profile: SeekerProfileOut


class SeekerProfileUpdateResponse(CamelModel):
    success: bool = True
    profile: SeekerProfileOut
    message: str
