"""Drains the transactional outbox into notifications and live pushes."""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.clients.base_realtime_client import BaseRealtimeClient
from app.models.db.notification_model import NotificationModel
from app.models.db.outbox_event_model import OutboxEventModel
from app.repositories.conversation_repository import ConversationRepository
from app.repositories.outbox_repository import OutboxRepository
from app.services.send_message_service import MESSAGE_CREATED
from app.timestamps import utcnow

logger = logging.getLogger(__name__)


class OutboxDispatcher:
    """Turns committed outbox events into notification records.

    An event is first claimed with a committed lease so concurrent
    dispatchers skip it. It is then handled in its own transaction:
    notifications are inserted and the event is marked dispatched together.
    Live pushes happen after the commit and are best-effort.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        realtime_client: Optional[BaseRealtimeClient] = None,
        batch_size: int = 100,
        max_attempts: int = 5,
        poll_interval: float = 2.0,
        claim_seconds: int = 60,
    ):
        self.session_factory = session_factory
        self.realtime_client = realtime_client
        self.batch_size = batch_size
        self.max_attempts = max_attempts
        self.poll_interval = poll_interval
        self.claim_seconds = claim_seconds
        self._stopping = asyncio.Event()

    async def dispatch_pending(self) -> int:
        """Dispatch one batch of pending events. Returns how many succeeded."""
        async with self.session_factory() as session:
            outbox_repo = OutboxRepository(session)
            events = await outbox_repo.get_pending(
                limit=self.batch_size, max_attempts=self.max_attempts
            )
            event_ids = [event.id for event in events]

        dispatched = 0
        for event_id in event_ids:
            if await self._dispatch_one(event_id):
                dispatched += 1
        if dispatched:
            logger.info("Dispatched %d outbox events", dispatched)
        return dispatched

    async def _dispatch_one(self, event_id: UUID) -> bool:
        async with self.session_factory() as session:
            outbox_repo = OutboxRepository(session)
            if not await outbox_repo.claim(event_id, utcnow(), self.claim_seconds):
                logger.debug("Outbox event %s is claimed elsewhere", event_id)
                return False
            event = await session.get(OutboxEventModel, event_id)
            if event is None:
                return False

            event_type = event.event_type
            attempt = (event.attempts or 0) + 1
            payload: Dict[str, Any] = dict(event.payload or {})
            try:
                pushes = await self._handle(session, event_type, payload)
                outbox_repo.mark_dispatched(event, utcnow())
                await session.commit()
            except Exception as e:
                await session.rollback()
                await outbox_repo.record_failure(event_id, str(e))
                logger.warning(
                    "Outbox event %s (%s) failed on attempt %d: %s",
                    event_id,
                    event_type,
                    attempt,
                    e,
                )
                return False

        await self._push(pushes, event_type, payload)
        return True

    async def _handle(
        self, session: AsyncSession, event_type: str, payload: Dict[str, Any]
    ) -> List[UUID]:
        """Apply an event; returns the recipients that should get a live push."""
        if event_type != MESSAGE_CREATED:
            logger.warning("Skipping unknown outbox event type %s", event_type)
            return []

        conversation_id = UUID(payload["conversation_id"])
        sender_id = UUID(payload["sender_id"])
        recipient_ids = [UUID(value) for value in payload.get("recipient_ids", [])]
        sender_name = payload.get("sender_name") or "Someone"

        for recipient_id in recipient_ids:
            session.add(
                NotificationModel(
                    recipient_id=recipient_id,
                    sender_id=sender_id,
                    type="message",
                    title="New Message",
                    message=f"{sender_name} sent you a message",
                    action_url=f"/messages/{conversation_id}",
                    conversation_id=conversation_id,
                    is_read=False,
                )
            )

        muted = await ConversationRepository(session).get_muted_user_ids(
            conversation_id, recipient_ids, utcnow()
        )
        return [user_id for user_id in recipient_ids if user_id not in muted]

    async def _push(
        self, recipient_ids: List[UUID], event_type: str, payload: Dict[str, Any]
    ) -> None:
        if self.realtime_client is None:
            return
        for recipient_id in recipient_ids:
            try:
                await self.realtime_client.publish(recipient_id, event_type, payload)
            except Exception as e:
                logger.warning("Live delivery to %s failed: %s", recipient_id, e)

    async def run(self) -> None:
        """Poll the outbox until stop() is called."""
        logger.info("Outbox dispatcher started")
        while not self._stopping.is_set():
            try:
                await self.dispatch_pending()
            except Exception:
                logger.exception("Outbox dispatch pass failed")
            try:
                await asyncio.wait_for(
                    self._stopping.wait(), timeout=self.poll_interval
                )
            except asyncio.TimeoutError:
                pass
        logger.info("Outbox dispatcher stopped")

    def stop(self) -> None:
        self._stopping.set()
