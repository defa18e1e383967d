from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from .users import UserSummary


class NotificationResponse(BaseModel):
    """Response model for notification data."""

    id: UUID
    recipient_id: UUID
    sender_id: Optional[UUID]
    sender: Optional[UserSummary] = None
    type: str
    title: str
    message: str
    action_url: Optional[str]
    conversation_id: Optional[UUID]
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationPage(BaseModel):
    """A page of the caller's notifications."""

    notifications: List[NotificationResponse]
    unread_count: int
    total_pages: int
    current_page: int


class NotificationTypeStats(BaseModel):
    type: str
    count: int
    unread_count: int


class NotificationStatsResponse(BaseModel):
    stats: List[NotificationTypeStats]
    total_unread: int
