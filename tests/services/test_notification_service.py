from typing import Any, Optional
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.models.db.notification_model import NotificationModel
from app.services.notification_service import NotificationService


async def add_notification(
    db: AsyncSession,
    recipient_id: UUID,
    type: str = "message",
    is_read: bool = False,
    sender_id: Optional[UUID] = None,
) -> UUID:
    notification = NotificationModel(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=type,
        title="New Message",
        message="Someone sent you a message",
        is_read=is_read,
    )
    db.add(notification)
    await db.commit()
    return notification.id


class TestNotificationService:
    """Tests for the notification inbox."""

    @pytest.fixture
    def service(self, test_db: AsyncSession) -> NotificationService:
        return NotificationService(test_db)

    @pytest.mark.asyncio
    async def test_list_reports_unread_and_pages(
        self, service: NotificationService, test_db: AsyncSession, make_user: Any
    ) -> None:
        ada, bob = await make_user("Ada"), await make_user("Bob")
        for _ in range(3):
            await add_notification(test_db, ada.id)
        await add_notification(test_db, ada.id, is_read=True)
        await add_notification(test_db, bob.id)

        page = await service.list_notifications(ada, page=1, limit=3)

        assert len(page.notifications) == 3
        assert all(n.recipient_id == ada.id for n in page.notifications)
        assert page.unread_count == 3
        assert page.total_pages == 2
        assert page.current_page == 1

        unread_only = await service.list_notifications(ada, is_read=False)
        assert len(unread_only.notifications) == 3
        assert unread_only.total_pages == 1

    @pytest.mark.asyncio
    async def test_list_filters_by_type(
        self, service: NotificationService, test_db: AsyncSession, make_user: Any
    ) -> None:
        ada = await make_user("Ada")
        await add_notification(test_db, ada.id, type="message")
        await add_notification(test_db, ada.id, type="like")

        page = await service.list_notifications(ada, notification_type="like")

        assert [n.type for n in page.notifications] == ["like"]

    @pytest.mark.asyncio
    async def test_mark_read_only_own(
        self, service: NotificationService, test_db: AsyncSession, make_user: Any
    ) -> None:
        ada, bob = await make_user("Ada"), await make_user("Bob")
        notification_id = await add_notification(test_db, ada.id)

        with pytest.raises(ForbiddenError):
            await service.mark_read(bob, notification_id)

        marked = await service.mark_read(ada, notification_id)
        assert marked.is_read is True

        with pytest.raises(NotFoundError):
            await service.mark_read(ada, uuid4())

    @pytest.mark.asyncio
    async def test_mark_all_read_and_stats(
        self, service: NotificationService, test_db: AsyncSession, make_user: Any
    ) -> None:
        ada = await make_user("Ada")
        await add_notification(test_db, ada.id, type="message")
        await add_notification(test_db, ada.id, type="message")
        await add_notification(test_db, ada.id, type="like")

        before = await service.stats(ada)
        assert before.total_unread == 3

        assert await service.mark_all_read(ada) == 3

        after = await service.stats(ada)
        assert after.total_unread == 0
        assert {(s.type, s.count) for s in after.stats} == {("like", 1), ("message", 2)}

    @pytest.mark.asyncio
    async def test_delete(
        self, service: NotificationService, test_db: AsyncSession, make_user: Any
    ) -> None:
        ada, bob = await make_user("Ada"), await make_user("Bob")
        notification_id = await add_notification(test_db, ada.id)

        with pytest.raises(ForbiddenError):
            await service.delete(bob, notification_id)

        await service.delete(ada, notification_id)
        page = await service.list_notifications(ada)
        assert page.notifications == []
        assert page.total_pages == 0

    @pytest.mark.asyncio
    async def test_invalid_pagination(
        self, service: NotificationService, principal: Any
    ) -> None:
        with pytest.raises(ValidationError):
            await service.list_notifications(principal, page=0)

    @pytest.mark.asyncio
    async def test_list_includes_sender_profile(
        self, service: NotificationService, test_db: AsyncSession, make_user: Any
    ) -> None:
        ada, bob = await make_user("Ada"), await make_user("Bob")
        await add_notification(test_db, ada.id, sender_id=bob.id)
        await add_notification(test_db, ada.id, type="system")

        page = await service.list_notifications(ada)

        senders = {n.type: n.sender for n in page.notifications}
        assert senders["message"].id == bob.id
        assert senders["message"].name == "Bob"
        assert senders["system"] is None
