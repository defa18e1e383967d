import math
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.models.api.notifications import (
    NotificationPage,
    NotificationResponse,
    NotificationStatsResponse,
)
from app.models.api.users import UserResponse
from app.models.db.notification_model import NotificationModel
from app.repositories.notification_repository import NotificationRepository

MAX_PAGE_SIZE = 100


class NotificationService:
    """Service for the principal's notification inbox."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.notification_repo = NotificationRepository(db)

    async def list_notifications(
        self,
        principal: UserResponse,
        page: Optional[int] = 1,
        limit: Optional[int] = 20,
        is_read: Optional[bool] = None,
        notification_type: Optional[str] = None,
    ) -> NotificationPage:
        """List notifications newest first with unread and page counts."""
        if page is not None and page < 1:
            raise ValidationError("Page must be 1 or greater")
        if limit is not None and (limit <= 0 or limit > MAX_PAGE_SIZE):
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

        page = page or 1
        limit = limit or 20

        notifications = await self.notification_repo.list_for_recipient(
            principal.id,
            limit=limit,
            offset=(page - 1) * limit,
            is_read=is_read,
            notification_type=notification_type,
        )
        unread_count = await self.notification_repo.count_for_recipient(
            principal.id, is_read=False
        )
        total = await self.notification_repo.count_for_recipient(
            principal.id, is_read=is_read, notification_type=notification_type
        )

        return NotificationPage(
            notifications=notifications,
            unread_count=unread_count,
            total_pages=math.ceil(total / limit),
            current_page=page,
        )

    async def _load_own(
        self, principal: UserResponse, notification_id: UUID
    ) -> NotificationModel:
        notification = await self.notification_repo.get_model(notification_id)
        if notification is None:
            raise NotFoundError("Notification", notification_id)
        if notification.recipient_id != principal.id:
            raise ForbiddenError()
        return notification

    async def mark_read(
        self, principal: UserResponse, notification_id: UUID
    ) -> NotificationResponse:
        notification = await self._load_own(principal, notification_id)
        return await self.notification_repo.mark_read(notification)

    async def mark_all_read(self, principal: UserResponse) -> int:
        return await self.notification_repo.mark_all_read(principal.id)

    async def delete(self, principal: UserResponse, notification_id: UUID) -> None:
        await self._load_own(principal, notification_id)
        await self.notification_repo.delete(notification_id)

    async def stats(self, principal: UserResponse) -> NotificationStatsResponse:
        """Per-type counts of the principal's notifications."""
        stats, total_unread = await self.notification_repo.stats_for_recipient(
            principal.id
        )
        return NotificationStatsResponse(stats=stats, total_unread=total_unread)
