"""
Talent discovery: public freelancer listings and employer talent browsing.
"""
import logging
from typing import Optional

from sqlalchemy import select, or_, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from skillshub.models.employer import EmployerProfile
from skillshub.models.job import Job, JobStatus
from skillshub.models.seeker import SeekerProfile, Pathway
from skillshub.models.skill import SkillOnJob, SkillOnProfile
from skillshub.models.user import User, UserRole
from skillshub.schemas.profile import TalentCard
from skillshub.services.profile import build_profile_skills

logger = logging.getLogger(__name__)

CARD_LOAD_OPTIONS = (
    selectinload(SeekerProfile.user),
    selectinload(SeekerProfile.skills).selectinload(SkillOnProfile.skill),
)

TALENT_LOAD_OPTIONS = CARD_LOAD_OPTIONS + (
    selectinload(SeekerProfile.portfolio),
    selectinload(SeekerProfile.experiences),
    selectinload(SeekerProfile.education),
    selectinload(SeekerProfile.trainings),
)


def seeker_criteria(
    search: Optional[str] = None,
    pathway: Optional[str] = None,
    min_experience: Optional[int] = None,
    search_email: bool = False,
) -> list:
    """
    WHERE criteria for listing seekers. Requires a join to User.

    Only verified job-seeker accounts are listed. `search` matches profession,
    headline, bio and the user's names (and email for employers).
    """
    criteria = [User.role == UserRole.JOB_SEEKER, User.is_email_verified.is_(True)]

    if pathway and pathway in Pathway.__members__:
        criteria.append(SeekerProfile.pathway == Pathway(pathway))

    if min_experience is not None:
        criteria.append(SeekerProfile.years_experience >= min_experience)

    if search:
        pattern = f"%{search}%"
        columns = [
            SeekerProfile.profession,
            SeekerProfile.headline,
            SeekerProfile.bio,
            User.first_name,
            User.last_name,
        ]
        if search_email:
            columns.append(User.email)
        criteria.append(or_(*[column.ilike(pattern) for column in columns]))

    return criteria


async def list_freelancers(
    db: AsyncSession,
    criteria: list,
    limit: Optional[int] = None,
) -> list[SeekerProfile]:
    """Seekers matching `criteria`, most experienced first."""
    query = (
        select(SeekerProfile)
        .join(User, SeekerProfile.user_id == User.id)
        .where(*criteria)
        .options(*CARD_LOAD_OPTIONS)
        .order_by(SeekerProfile.years_experience.desc().nulls_last(), SeekerProfile.id)
    )
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def employer_open_job_skill_ids(db: AsyncSession, employer_user_id: int) -> set[int]:
    """Distinct skill ids across the employer's OPEN jobs."""
    result = await db.execute(
        select(SkillOnJob.skill_id)
        .join(Job, SkillOnJob.job_id == Job.id)
        .join(EmployerProfile, Job.employer_id == EmployerProfile.id)
        .where(EmployerProfile.user_id == employer_user_id, Job.status == JobStatus.OPEN)
        .distinct()
    )
    return {row[0] for row in result.all()}


def talent_skill_criteria(employer_skill_ids: set[int], skill_id: Optional[int]) -> list:
    """
    Skill restriction for talent browsing.

    With matching skills, talents must hold any of them (or the explicitly
    selected skill). Without, only the selected skill filters.
    """
    if employer_skill_ids:
        wanted = set(employer_skill_ids)
        if skill_id is not None:
            wanted.add(skill_id)
        return [SeekerProfile.skills.any(SkillOnProfile.skill_id.in_(wanted))]
    if skill_id is not None:
        return [SeekerProfile.skills.any(SkillOnProfile.skill_id == skill_id)]
    return []


def talent_match_score(seeker_skill_ids: set[int], employer_skill_ids: set[int]) -> tuple[int, int]:
    """Share of the employer's wanted skills the talent holds, 0-100."""
    if not employer_skill_ids:
        return 0, 0
    matching = len(seeker_skill_ids & employer_skill_ids)
    return round(matching / len(employer_skill_ids) * 100), matching


async def browse_talents(
    db: AsyncSession,
    criteria: list,
    employer_skill_ids: set[int],
    limit: int,
    offset: int,
) -> tuple[list[TalentCard], int]:
    """
    One page of talents, scored against the employer's skills.

    Pages are taken newest account first. Within the page talents are sorted
    by match score, then account age.
    """
    base = select(SeekerProfile).join(User, SeekerProfile.user_id == User.id).where(*criteria)

    total = (await db.execute(
        select(func.count()).select_from(base.subquery())
    )).scalar_one()

    result = await db.execute(
        base.options(*TALENT_LOAD_OPTIONS)
        .order_by(User.created_at.desc(), SeekerProfile.id.desc())
        .offset(offset)
        .limit(limit)
    )
    profiles = result.scalars().all()

    cards = []
    for profile in profiles:
        score, matching = talent_match_score({sp.skill_id for sp in profile.skills}, employer_skill_ids)
        cards.append((profile.user.created_at, TalentCard(
            id=profile.id,
            user_id=profile.user_id,
            name=profile.user.full_name,
            profession=profile.profession or "Professional",
            headline=profile.headline or "",
            bio=profile.bio or "",
            years_experience=profile.years_experience or 0,
            pathway=profile.pathway.value,
            skills=build_profile_skills(profile, limit=10),
            email=profile.user.email,
            phone=profile.user.phone,
            availability=profile.availability,
            match_score=score,
            matching_skills_count=matching,
            portfolio_count=len(profile.portfolio),
            experience_count=len(profile.experiences),
            education_count=len(profile.education),
            training_count=len(profile.trainings),
        )))

    cards.sort(key=lambda pair: (pair[1].match_score, pair[0]), reverse=True)
    return [card for _, card in cards], total
