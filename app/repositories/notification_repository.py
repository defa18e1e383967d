from typing import Any, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import case, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from app.models.api.notifications import NotificationResponse, NotificationTypeStats
from app.models.api.users import UserSummary
from app.models.db.notification_model import NotificationModel
from app.repositories.base_repository import BaseRepository


class NotificationRepository(BaseRepository[NotificationModel, NotificationResponse]):
    """Repository for notification inbox operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, NotificationModel)

    def _load_options(self) -> List[Any]:
        return [selectinload(self.model_class.sender)]

    def _filtered(
        self,
        query: Any,
        recipient_id: UUID,
        is_read: Optional[bool] = None,
        notification_type: Optional[str] = None,
    ) -> Any:
        query = query.where(self.model_class.recipient_id == recipient_id)
        if is_read is not None:
            query = query.where(self.model_class.is_read.is_(is_read))
        if notification_type:
            query = query.where(self.model_class.type == notification_type)
        return query

    async def list_for_recipient(
        self,
        recipient_id: UUID,
        limit: int = 20,
        offset: int = 0,
        is_read: Optional[bool] = None,
        notification_type: Optional[str] = None,
    ) -> List[NotificationResponse]:
        """List a recipient's notifications, newest first."""
        query = self._filtered(
            select(self.model_class), recipient_id, is_read, notification_type
        )
        query = (
            query.options(*self._load_options())
            .execution_options(populate_existing=True)
            .order_by(self.model_class.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(query)
        return [self._to_pydantic(db_model) for db_model in result.scalars().all()]

    async def count_for_recipient(
        self,
        recipient_id: UUID,
        is_read: Optional[bool] = None,
        notification_type: Optional[str] = None,
    ) -> int:
        """Count a recipient's notifications matching the filters."""
        query = self._filtered(
            select(func.count(self.model_class.id)),
            recipient_id,
            is_read,
            notification_type,
        )
        result = await self.db.execute(query)
        return int(result.scalar() or 0)

    async def mark_read(self, notification: NotificationModel) -> NotificationResponse:
        """Flag a single notification as read."""
        notification.is_read = True
        await self.db.commit()
        return self._to_pydantic(notification)

    async def mark_all_read(self, recipient_id: UUID) -> int:
        """Flag every unread notification of a recipient as read."""
        stmt = (
            update(self.model_class)
            .where(
                self.model_class.recipient_id == recipient_id,
                self.model_class.is_read.is_(False),
            )
            .values(is_read=True)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return int(result.rowcount or 0)

    async def stats_for_recipient(
        self, recipient_id: UUID
    ) -> Tuple[List[NotificationTypeStats], int]:
        """Per-type totals and unread counts for a recipient."""
        unread = func.sum(case((self.model_class.is_read.is_(False), 1), else_=0))
        query = (
            select(
                self.model_class.type,
                func.count(self.model_class.id),
                unread,
            )
            .where(self.model_class.recipient_id == recipient_id)
            .group_by(self.model_class.type)
            .order_by(self.model_class.type)
        )
        result = await self.db.execute(query)
        stats = [
            NotificationTypeStats(
                type=row[0], count=int(row[1]), unread_count=int(row[2] or 0)
            )
            for row in result.all()
        ]
        total_unread = sum(item.unread_count for item in stats)
        return stats, total_unread

    def _to_pydantic(self, db_model: Any) -> NotificationResponse:
        """Convert SQLAlchemy NotificationModel to Pydantic NotificationResponse."""
        return NotificationResponse(
            id=db_model.id,
            recipient_id=db_model.recipient_id,
            sender_id=db_model.sender_id,
            sender=UserSummary.from_user(db_model.sender) if db_model.sender else None,
            type=db_model.type,
            title=db_model.title,
            message=db_model.message,
            action_url=db_model.action_url,
            conversation_id=db_model.conversation_id,
            is_read=db_model.is_read,
            created_at=db_model.created_at,
        )
