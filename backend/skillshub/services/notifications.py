"""In-app notifications: listing and read state."""
import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from skillshub.models.notification import Notification
from skillshub.models.user import User
from skillshub.schemas.notification import NotificationListResponse, NotificationOut
from skillshub.services.applications import parse_id

logger = logging.getLogger(__name__)

NOTIFICATION_PAGE_SIZE = 50


async def list_notifications(db: AsyncSession, user: User, unread_only: bool = False) -> NotificationListResponse:
    """The user's most recent notifications, plus the total unread count."""
    query = select(Notification).where(Notification.user_id == user.id)
    if unread_only:
        query = query.where(Notification.read.is_(False))

    result = await db.execute(
        query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(NOTIFICATION_PAGE_SIZE)
    )
    notifications = result.scalars().all()

    unread_count = (await db.execute(
        select(func.count(Notification.id)).where(Notification.user_id == user.id, Notification.read.is_(False))
    )).scalar_one()

    return NotificationListResponse(
        notifications=[NotificationOut.model_validate(n) for n in notifications],
        unread_count=unread_count,
    )


async def mark_notifications(
    db: AsyncSession,
    user: User,
    notification_id: Optional[object] = None,
    read: Optional[bool] = None,
) -> None:
    """
    Set one notification's read flag (default True), or mark all unread as read.

    Raises:
        HTTPException 400: Notification id is not a number
        HTTPException 404: Notification does not belong to the user
    """
    if notification_id not in (None, ""):
        result = await db.execute(
            select(Notification).where(
                Notification.id == parse_id(notification_id, "notification ID"),
                Notification.user_id == user.id,
            )
        )
        notification = result.scalar_one_or_none()
        if notification is None:
            raise HTTPException(status_code=404, detail="Notification not found")
        notification.read = True if read is None else read
        await db.commit()
        logger.debug(f"Notification {notification.id} read={notification.read} for user {user.id}")
        return

    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user.id, Notification.read.is_(False))
        .values(read=True)
    )
    await db.commit()
    logger.debug(f"Marked {result.rowcount} notifications read for user {user.id}")
