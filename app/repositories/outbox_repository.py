from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.models.db.outbox_event_model import OutboxEventModel
from app.timestamps import utcnow


class OutboxRepository:
    """Repository for the transactional outbox."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def enqueue(
        self,
        event_type: str,
        payload: Dict[str, Any],
        conversation_id: Optional[UUID] = None,
        at: Optional[datetime] = None,
    ) -> OutboxEventModel:
        """Stage an event inside the caller's transaction."""
        event = OutboxEventModel(
            event_type=event_type,
            conversation_id=conversation_id,
            payload=payload,
            attempts=0,
        )
        if at is not None:
            event.created_at = at
        self.db.add(event)
        await self.db.flush()
        return event

    async def get_pending(
        self,
        limit: int = 100,
        max_attempts: int = 5,
        at: Optional[datetime] = None,
    ) -> List[OutboxEventModel]:
        """Unclaimed, undispatched events with attempts left, oldest first."""
        query = (
            select(OutboxEventModel)
            .where(
                OutboxEventModel.dispatched_at.is_(None),
                OutboxEventModel.attempts < max_attempts,
                _claim_expired(at or utcnow()),
            )
            .order_by(OutboxEventModel.created_at)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def claim(self, event_id: UUID, at: datetime, lease_seconds: int) -> bool:
        """Take a committed lease on a pending event.

        Returns False when the event is already dispatched or another
        dispatcher holds an unexpired lease on it.
        """
        stmt = (
            update(OutboxEventModel)
            .where(
                OutboxEventModel.id == event_id,
                OutboxEventModel.dispatched_at.is_(None),
                _claim_expired(at),
            )
            .values(claimed_until=at + timedelta(seconds=lease_seconds))
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        claimed = result.rowcount == 1
        await self.db.commit()
        return claimed

    def mark_dispatched(self, event: OutboxEventModel, at: datetime) -> None:
        """Flag an event as dispatched; committed with the caller's work."""
        event.dispatched_at = at
        event.claimed_until = None
        event.attempts = (event.attempts or 0) + 1
        event.last_error = None

    async def record_failure(self, event_id: UUID, error: str) -> None:
        """Count a failed attempt and keep the error for inspection."""
        stmt = (
            update(OutboxEventModel)
            .where(OutboxEventModel.id == event_id)
            .values(
                attempts=OutboxEventModel.attempts + 1,
                last_error=error[:2000],
                claimed_until=None,
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(stmt)
        await self.db.commit()


def _claim_expired(at: datetime) -> Any:
    return or_(
        OutboxEventModel.claimed_until.is_(None),
        OutboxEventModel.claimed_until < at,
    )
