"""Notification Pydantic schemas."""
from datetime import datetime
from typing import Optional, Union

from skillshub.schemas.common import CamelModel


class NotificationOut(CamelModel):
    id: int
    type: str
    title: str
    message: str
    link: Optional[str] = None
    read: bool
    created_at: datetime


class NotificationListResponse(CamelModel):
    notifications: list[NotificationOut]
    unread_count: int


class NotificationUpdate(CamelModel):
    """Mark one notification (`notificationId`) or, when absent, all unread ones."""
    notification_id: Optional[Union[int, str]] = None
    read: Optional[bool] = None


class NotificationUpdateResponse(CamelModel):
    success: bool = True
