"""
Notification API endpoints.
"""
import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from skillshub.database import get_db
from skillshub.models.user import User
from skillshub.schemas.notification import (
    NotificationListResponse,
    NotificationUpdate,
    NotificationUpdateResponse,
)
from skillshub.api.auth import get_current_user
from skillshub.services.notifications import list_notifications, mark_notifications

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def get_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """The 50 most recent notifications and the unread count."""
    return await list_notifications(db, current_user, unread_only=unread_only)


@router.patch("", response_model=NotificationUpdateResponse)
async def update_notifications(
    request: NotificationUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Mark notifications read.

    With `notificationId`: sets that notification's `read` (default true).
    Without: marks every unread notification read.
    """
    await mark_notifications(db, current_user, request.notification_id, request.read)
    return NotificationUpdateResponse()
