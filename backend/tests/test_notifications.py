"""
Tests for GET/PATCH /api/notifications.
"""
import pytest

from datetime import datetime, timedelta
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillshub.client.api import SkillsHubClient
from skillshub.errors import ApiError, ErrorKind
from skillshub.models.notification import Notification

from conftest import make_job


async def notify(db: AsyncSession, user_id: int, title: str, read: bool = False, created_at=None) -> Notification:
    notification = Notification(
        user_id=user_id,
        type="RECRUITMENT",
        title=title,
        message=f"{title} message",
        link="/jobs/1",
        read=read,
    )
    if created_at is not None:
        notification.created_at = created_at
    db.add(notification)
    await db.commit()
    await db.refresh(notification)
    return notification


@pytest.mark.asyncio
async def test_list_notifications_newest_first(seeker_client: AsyncClient, seeker, employer, db: AsyncSession):
    now = datetime.utcnow()
    await notify(db, seeker.user_id, "Older", read=True, created_at=now - timedelta(hours=2))
    await notify(db, seeker.user_id, "Newer", created_at=now)
    await notify(db, employer.user_id, "Not mine")

    response = await seeker_client.get("/api/notifications")

    assert response.status_code == 200
    data = response.json()
    assert [n["title"] for n in data["notifications"]] == ["Newer", "Older"]
    assert data["unreadCount"] == 1
    assert data["notifications"][0]["read"] is False
    assert data["notifications"][0]["link"] == "/jobs/1"

    unread = await seeker_client.get("/api/notifications", params={"unreadOnly": "true"})
    assert [n["title"] for n in unread.json()["notifications"]] == ["Newer"]


@pytest.mark.asyncio
async def test_list_is_capped_at_fifty(seeker_client: AsyncClient, seeker, db: AsyncSession):
    for i in range(55):
        db.add(Notification(user_id=seeker.user_id, type="RECRUITMENT", title=f"N{i}", message="m"))
    await db.commit()

    data = (await seeker_client.get("/api/notifications")).json()

    assert len(data["notifications"]) == 50
    assert data["unreadCount"] == 55


@pytest.mark.asyncio
async def test_mark_one_and_all_read(seeker_client: AsyncClient, seeker, employer, db: AsyncSession):
    first = await notify(db, seeker.user_id, "First")
    second = await notify(db, seeker.user_id, "Second")
    foreign = await notify(db, employer.user_id, "Employer's")

    one = await seeker_client.patch("/api/notifications", json={"notificationId": first.id})
    assert one.status_code == 200
    assert one.json() == {"success": True}
    assert (await seeker_client.get("/api/notifications")).json()["unreadCount"] == 1

    back = await seeker_client.patch("/api/notifications", json={"notificationId": str(first.id), "read": False})
    assert back.status_code == 200
    assert (await seeker_client.get("/api/notifications")).json()["unreadCount"] == 2

    everything = await seeker_client.patch("/api/notifications", json={})
    assert everything.status_code == 200

    rows = dict((await db.execute(select(Notification.id, Notification.read))).all())
    assert rows == {first.id: True, second.id: True, foreign.id: False}


@pytest.mark.asyncio
async def test_cannot_mark_someone_elses_notification(seeker_client: AsyncClient, employer, db: AsyncSession):
    foreign = await notify(db, employer.user_id, "Employer's")

    response = await seeker_client.patch("/api/notifications", json={"notificationId": foreign.id})

    assert response.status_code == 404
    assert response.json()["error"] == "Notification not found"
    read = (await db.execute(select(Notification.read).where(Notification.id == foreign.id))).scalar_one()
    assert read is False


@pytest.mark.asyncio
async def test_notifications_require_login(async_client: AsyncClient):
    response = await async_client.get("/api/notifications")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_application_notification_reaches_employer(seeker_client: AsyncClient, seeker, employer, employer_client, db: AsyncSession):
    """An application shows up in the employer's notifications, then gets marked read."""
    job = await make_job(db, employer, title="Poster Design")
    await seeker_client.post("/api/applications/apply", json={"jobId": job.id})

    api = SkillsHubClient(employer_client)
    body = await api.notifications(unread_only=True)
    assert body["unreadCount"] == 1
    assert body["notifications"][0]["type"] == "APPLICATION_RECEIVED"
    assert body["notifications"][0]["link"] == f"/dashboard/employer/applications?jobId={job.id}"

    await api.mark_notifications_read(body["notifications"][0]["id"])
    assert (await api.notifications())["unreadCount"] == 0

    with pytest.raises(ApiError) as exc_info:
        await api.mark_notifications_read("abc")
    assert exc_info.value.kind == ErrorKind.VALIDATION
    assert exc_info.value.message == "Invalid notification ID"
