"""
Pytest fixtures for testing.
"""
import pytest
import pytest_asyncio
import uuid
from datetime import datetime
from typing import AsyncGenerator, Iterable, Optional

from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import selectinload
from sqlalchemy.pool import StaticPool

# Import database module BEFORE app to allow override
import skillshub.database
from skillshub.database import Base
# Import ALL models so Base.metadata knows about all tables
import skillshub.models  # noqa: F401
from skillshub.config import settings
from skillshub.models.user import User, UserRole
from skillshub.models.employer import EmployerProfile
from skillshub.models.seeker import SeekerProfile, Pathway
from skillshub.models.skill import Skill, SkillOnJob, SkillOnProfile
from skillshub.models.job import Job, JobType, JobStatus
from skillshub.models.file_object import FileObject
from skillshub.services.auth import hash_password, create_session
from skillshub.services.seed import seed_reference_data
from skillshub.client.api import SkillsHubClient

# Now import app (after we can override database)
from skillshub.main import app as fastapi_app


# Test database URL (use in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    """
    Fresh seeded database for each test.

    StaticPool keeps one connection alive so every session sees the same
    in-memory database.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Replace the app's engine and sessionmaker so get_db() uses the test database
    original_engine = skillshub.database.engine
    original_sessionmaker = skillshub.database.AsyncSessionLocal

    skillshub.database.engine = test_engine
    skillshub.database.AsyncSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    session = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)()

    try:
        await seed_reference_data(session)
        yield session
    finally:
        await session.close()
        await test_engine.dispose()

        skillshub.database.engine = original_engine
        skillshub.database.AsyncSessionLocal = original_sessionmaker


@pytest_asyncio.fixture
async def async_client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Anonymous HTTP client against the app."""
    transport = ASGITransport(app=fastapi_app)

    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def client_factory(db: AsyncSession):
    """
    Build extra HTTP clients, optionally logged in as a user.

    Usage:
        employer_http = await client_factory(employer.user)
    """
    clients = []

    async def factory(user: Optional[User] = None) -> AsyncClient:
        client = AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test")
        clients.append(client)
        if user is not None:
            await login_as(client, db, user)
        return client

    yield factory

    for client in clients:
        await client.aclose()


# ============================================================
# DATA HELPERS
# ============================================================

async def login_as(client: AsyncClient, db: AsyncSession, user: User) -> str:
    """Create a session for the user and put its token in the client's cookie jar."""
    token = await create_session(db, user)
    client.cookies.set(settings.session_cookie_name, token)
    return token


async def skill_id(db: AsyncSession, slug: str) -> int:
    result = await db.execute(select(Skill.id).where(Skill.slug == slug))
    return result.scalar_one()


async def make_user(
    db: AsyncSession,
    email: str,
    role: UserRole,
    first_name: str = "Test",
    last_name: str = "User",
    verified: bool = True,
    phone: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> User:
    user = User(
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        role=role,
        is_email_verified=verified,
        first_name=first_name,
        last_name=last_name,
        phone=phone,
    )
    if created_at is not None:
        user.created_at = created_at
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def make_file(
    db: AsyncSession,
    data: bytes = b"%PDF-1.4 test resume",
    bucket_key: Optional[str] = None,
    content_type: str = "application/pdf",
    created_by_id: Optional[int] = None,
) -> FileObject:
    file_object = FileObject(
        bucket_key=bucket_key or f"profiles/resumes/{uuid.uuid4().hex}.pdf",
        content_type=content_type,
        size_bytes=len(data),
        data=data,
        created_by_id=created_by_id,
    )
    db.add(file_object)
    await db.commit()
    return file_object


async def make_seeker(
    db: AsyncSession,
    email: str = "seeker@example.com",
    first_name: str = "Aminata",
    last_name: str = "Kamara",
    pathway: Pathway = Pathway.GRADUATE,
    skills: Iterable[str] = (),
    with_resume: bool = False,
    verified: bool = True,
    user_created_at: Optional[datetime] = None,
    **fields,
) -> SeekerProfile:
    """Seeker user + profile. `skills` are slugs (level 3)."""
    user = await make_user(
        db, email, UserRole.JOB_SEEKER, first_name, last_name,
        verified=verified, created_at=user_created_at,
    )
    resume = await make_file(db, bucket_key=f"profiles/resumes/{user.id}.pdf", created_by_id=user.id) if with_resume else None

    profile = SeekerProfile(
        user_id=user.id,
        pathway=pathway,
        resume_file_id=resume.id if resume else None,
        skills=[SkillOnProfile(skill_id=await skill_id(db, slug), level=3) for slug in skills],
        **fields,
    )
    db.add(profile)
    await db.commit()

    result = await db.execute(
        select(SeekerProfile)
        .where(SeekerProfile.id == profile.id)
        .options(selectinload(SeekerProfile.user))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def make_employer(
    db: AsyncSession,
    email: str = "employer@example.com",
    org_name: str = "Freetown Digital Ltd",
    verified: bool = True,
    website: Optional[str] = "https://freetowndigital.sl",
) -> EmployerProfile:
    user = await make_user(db, email, UserRole.EMPLOYER, "Mohamed", "Sesay", phone="+23276000000")
    employer = EmployerProfile(user_id=user.id, org_name=org_name, verified=verified, website=website)
    db.add(employer)
    await db.commit()

    result = await db.execute(
        select(EmployerProfile)
        .where(EmployerProfile.id == employer.id)
        .options(selectinload(EmployerProfile.user))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def make_job(
    db: AsyncSession,
    employer: EmployerProfile,
    title: str = "Website Redesign",
    description: str = "Redesign our company website with a modern responsive layout.",
    job_type: JobType = JobType.GIG,
    status: JobStatus = JobStatus.OPEN,
    skills: Iterable[str] = (),
    created_at: Optional[datetime] = None,
    **fields,
) -> Job:
    """Job for the employer. `skills` are slugs (all required)."""
    job = Job(
        employer_id=employer.id,
        title=title,
        description=description,
        type=job_type,
        status=status,
        skills=[SkillOnJob(skill_id=await skill_id(db, slug), required=True) for slug in skills],
        **fields,
    )
    if created_at is not None:
        job.created_at = created_at
    db.add(job)
    await db.commit()
    await db.refresh(job)
    return job


# ============================================================
# COMMON FIXTURES
# ============================================================

@pytest_asyncio.fixture
async def employer(db: AsyncSession) -> EmployerProfile:
    return await make_employer(db)


@pytest_asyncio.fixture
async def seeker(db: AsyncSession) -> SeekerProfile:
    return await make_seeker(db, skills=("web-design", "graphic-design"), with_resume=True, years_experience=3)


@pytest_asyncio.fixture
async def employer_client(employer: EmployerProfile, client_factory) -> AsyncClient:
    """HTTP client logged in as the employer."""
    return await client_factory(employer.user)


@pytest_asyncio.fixture
async def seeker_client(seeker: SeekerProfile, client_factory) -> AsyncClient:
    """HTTP client logged in as the seeker."""
    return await client_factory(seeker.user)


@pytest.fixture
def api(async_client: AsyncClient) -> SkillsHubClient:
    """SkillsHubClient over the anonymous HTTP client."""
    return SkillsHubClient(async_client)
