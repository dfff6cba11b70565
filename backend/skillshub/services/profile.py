"""Seeker profile business logic and response builders."""
import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from skillshub.models.file_object import FileObject
from skillshub.models.seeker import SeekerProfile, Pathway, PortfolioItem
from skillshub.models.skill import SkillOnProfile
from skillshub.models.user import User
from skillshub.schemas.profile import (
    ProfileSkill,
    EducationEntry,
    TrainingEntry,
    ExperienceEntry,
    PortfolioEntry,
    FreelancerCard,
    FreelancerDetail,
    TalentDetail,
    SeekerAccount,
    SeekerProfileOut,
    SeekerProfileUpdate,
)
from skillshub.services.jobs import build_file_ref, parse_date

logger = logging.getLogger(__name__)

# Everything a full profile response touches
SEEKER_DETAIL_OPTIONS = (
    selectinload(SeekerProfile.user),
    selectinload(SeekerProfile.resume_file),
    selectinload(SeekerProfile.skills).selectinload(SkillOnProfile.skill),
    selectinload(SeekerProfile.education),
    selectinload(SeekerProfile.trainings),
    selectinload(SeekerProfile.experiences),
    selectinload(SeekerProfile.portfolio).selectinload(PortfolioItem.file),
)


async def load_seeker(db: AsyncSession, *criteria) -> Optional[SeekerProfile]:
    result = await db.execute(
        select(SeekerProfile)
        .where(*criteria)
        .options(*SEEKER_DETAIL_OPTIONS)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def _newest_first(items, attr: str) -> list:
    """Sort by a nullable attribute, newest first, undated entries last."""
    return sorted(
        items,
        key=lambda item: (getattr(item, attr) is not None, getattr(item, attr) or 0),
        reverse=True,
    )


def build_profile_skills(profile: SeekerProfile, limit: Optional[int] = None) -> list[ProfileSkill]:
    skills = sorted(profile.skills, key=lambda sp: sp.skill.name)
    if limit is not None:
        skills = skills[:limit]
    return [
        ProfileSkill(id=sp.skill.id, name=sp.skill.name, slug=sp.skill.slug, level=sp.level or 1)
        for sp in skills
    ]


def build_portfolio(profile: SeekerProfile, limit: Optional[int] = None) -> list[PortfolioEntry]:
    items = sorted(profile.portfolio, key=lambda item: item.id, reverse=True)
    if limit is not None:
        items = items[:limit]
    return [
        PortfolioEntry(
            id=item.id,
            title=item.title,
            description=item.description,
            link_url=item.link_url,
            file_id=item.file_id,
            file=build_file_ref(item.file),
        )
        for item in items
    ]


def build_history(profile: SeekerProfile) -> dict:
    """Education, trainings and experiences, newest first."""
    return {
        "education": [
            EducationEntry.model_validate(e) for e in _newest_first(profile.education, "start_year")
        ],
        "trainings": [
            TrainingEntry.model_validate(t) for t in _newest_first(profile.trainings, "start_date")
        ],
        "experiences": [
            ExperienceEntry.model_validate(x) for x in _newest_first(profile.experiences, "start_date")
        ],
    }


def _card_fields(profile: SeekerProfile) -> dict:
    return {
        "id": profile.id,
        "user_id": profile.user_id,
        "name": profile.user.full_name,
        "profession": profile.profession or "Professional",
        "headline": profile.headline or "",
        "bio": profile.bio or "",
        "years_experience": profile.years_experience or 0,
        "pathway": profile.pathway.value,
    }


def build_freelancer_card(profile: SeekerProfile, skill_limit: Optional[int] = None) -> FreelancerCard:
    return FreelancerCard(**_card_fields(profile), skills=build_profile_skills(profile, skill_limit))


def build_freelancer_detail(profile: SeekerProfile) -> FreelancerDetail:
    """Public profile: latest 5 portfolio items."""
    return FreelancerDetail(
        **_card_fields(profile),
        **build_history(profile),
        skills=build_profile_skills(profile),
        email=profile.user.email,
        phone=profile.user.phone,
        availability=profile.availability,
        portfolio=build_portfolio(profile, limit=5),
    )


def build_talent_detail(profile: SeekerProfile) -> TalentDetail:
    """Employer view of a talent, including the resume reference."""
    return TalentDetail(
        **_card_fields(profile),
        **build_history(profile),
        skills=build_profile_skills(profile),
        email=profile.user.email,
        phone=profile.user.phone,
        availability=profile.availability,
        portfolio=build_portfolio(profile),
        first_name=profile.user.first_name,
        last_name=profile.user.last_name,
        date_of_birth=profile.date_of_birth,
        resume_file_id=profile.resume_file_id,
        resume_file=build_file_ref(profile.resume_file),
    )


def build_seeker_account(user: User) -> SeekerAccount:
    return SeekerAccount(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
    )


def build_seeker_profile(profile: SeekerProfile) -> SeekerProfileOut:
    return SeekerProfileOut(
        id=profile.id,
        user_id=profile.user_id,
        pathway=profile.pathway.value,
        profession=profile.profession,
        headline=profile.headline,
        bio=profile.bio,
        date_of_birth=profile.date_of_birth,
        years_experience=profile.years_experience,
        availability=profile.availability,
        resume_file_id=profile.resume_file_id,
        resume_file=build_file_ref(profile.resume_file),
        skills=build_profile_skills(profile),
        portfolio=build_portfolio(profile, limit=10),
        **build_history(profile),
    )


async def update_seeker_profile(
    db: AsyncSession,
    user: User,
    update: SeekerProfileUpdate,
) -> SeekerProfile:
    """
    Apply a partial update to the user's seeker profile.

    Only fields present in the request are touched. The profile is created
    when missing, which requires a pathway.

    Raises:
        HTTPException 400: Invalid pathway, or missing pathway for a new profile
        HTTPException 404: resumeFileId does not reference an uploaded file
    """
    data = update.model_dump(exclude_unset=True)

    if "pathway" in data:
        try:
            data["pathway"] = Pathway(data["pathway"])
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid pathway")

    if "date_of_birth" in data:
        data["date_of_birth"] = parse_date(data["date_of_birth"])

    if "resume_file_id" in data:
        if data["resume_file_id"]:
            found = await db.execute(select(FileObject.id).where(FileObject.id == data["resume_file_id"]))
            if found.scalar_one_or_none() is None:
                raise HTTPException(status_code=404, detail="Resume file not found")
        data["resume_file_id"] = data["resume_file_id"] or None

    profile = user.seeker_profile
    if profile is None:
        if not data.get("pathway"):
            raise HTTPException(status_code=400, detail="Pathway is required for new profiles")
        profile = SeekerProfile(user_id=user.id, **data)
        db.add(profile)
        logger.info(f"Created seeker profile for user {user.id}")
    else:
        for field, value in data.items():
            setattr(profile, field, value)

    user.updated_at = datetime.utcnow()
    await db.commit()

    return await load_seeker(db, SeekerProfile.user_id == user.id)
