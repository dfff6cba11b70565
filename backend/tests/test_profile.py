"""
Tests for the seeker profile endpoints.
"""
import pytest

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillshub.models.seeker import SeekerProfile, Education
from skillshub.models.user import UserRole

from conftest import make_file, make_user


@pytest.mark.asyncio
async def test_get_seeker_profile(seeker_client: AsyncClient, seeker, db: AsyncSession):
    db.add_all([
        Education(seeker_id=seeker.id, school="Fourah Bay College", start_year=2015, end_year=2019),
        Education(seeker_id=seeker.id, school="Njala University", start_year=2020),
        Education(seeker_id=seeker.id, school="Evening Classes"),
    ])
    await db.commit()

    response = await seeker_client.get("/api/profile/seeker")

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["email"] == "seeker@example.com"
    profile = data["profile"]
    assert profile["pathway"] == "GRADUATE"
    assert profile["yearsExperience"] == 3
    assert profile["resumeFileId"] == seeker.resume_file_id
    assert profile["resumeFile"]["contentType"] == "application/pdf"
    assert [s["slug"] for s in profile["skills"]] == ["graphic-design", "web-design"]
    assert [e["school"] for e in profile["education"]] == [
        "Njala University", "Fourah Bay College", "Evening Classes",
    ]


@pytest.mark.asyncio
async def test_get_seeker_profile_missing(client_factory, db: AsyncSession):
    user = await make_user(db, "fresh@example.com", UserRole.JOB_SEEKER)
    client = await client_factory(user)

    response = await client.get("/api/profile/seeker")

    assert response.status_code == 404
    assert response.json()["error"] == "Seeker profile not found"


@pytest.mark.asyncio
async def test_patch_updates_only_given_fields(seeker_client: AsyncClient, seeker, db: AsyncSession):
    response = await seeker_client.patch("/api/profile/seeker", json={
        "headline": "Designer for hire",
        "dateOfBirth": "1998-05-20",
    })

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Profile updated successfully"
    assert data["profile"]["headline"] == "Designer for hire"
    assert data["profile"]["dateOfBirth"].startswith("1998-05-20")
    assert data["profile"]["yearsExperience"] == 3
    assert data["profile"]["resumeFileId"] == seeker.resume_file_id


@pytest.mark.asyncio
async def test_patch_resume_reference(seeker_client: AsyncClient, seeker, db: AsyncSession):
    new_resume = await make_file(db, created_by_id=seeker.user_id)

    ok = await seeker_client.patch("/api/profile/seeker", json={"resumeFileId": new_resume.id})
    assert ok.status_code == 200
    assert ok.json()["profile"]["resumeFileId"] == new_resume.id

    missing = await seeker_client.patch("/api/profile/seeker", json={"resumeFileId": "does-not-exist"})
    assert missing.status_code == 404
    assert missing.json()["error"] == "Resume file not found"

    stored = (await db.execute(
        select(SeekerProfile.resume_file_id).where(SeekerProfile.id == seeker.id)
    )).scalar_one()
    assert stored == new_resume.id


@pytest.mark.asyncio
async def test_patch_invalid_pathway(seeker_client: AsyncClient):
    response = await seeker_client.patch("/api/profile/seeker", json={"pathway": "WIZARD"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid pathway"


@pytest.mark.asyncio
async def test_patch_creates_profile_when_missing(client_factory, db: AsyncSession):
    user = await make_user(db, "fresh@example.com", UserRole.JOB_SEEKER)
    client = await client_factory(user)

    without_pathway = await client.patch("/api/profile/seeker", json={"headline": "Hello"})
    assert without_pathway.status_code == 400
    assert without_pathway.json()["error"] == "Pathway is required for new profiles"

    created = await client.patch("/api/profile/seeker", json={"pathway": "ARTISAN", "profession": "Carpenter"})
    assert created.status_code == 200
    assert created.json()["profile"]["pathway"] == "ARTISAN"
    assert created.json()["profile"]["userId"] == user.id
