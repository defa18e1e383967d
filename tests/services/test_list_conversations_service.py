from typing import Any
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.models.api.messages import SendMessageRequest
from app.repositories.conversation_repository import ConversationRepository
from app.services.list_conversations_service import ListConversationsService
from app.services.send_message_service import SendMessageService


class TestListConversationsService:
    """Tests for ListConversationsService."""

    @pytest.fixture
    def service(self, test_db: AsyncSession) -> ListConversationsService:
        return ListConversationsService(test_db)

    @pytest.mark.asyncio
    async def test_most_recently_active_first(
        self, service: ListConversationsService, test_db: AsyncSession, make_user: Any
    ) -> None:
        ada, bob, cy = await make_user("Ada"), await make_user("Bob"), await make_user("Cy")
        repo = ConversationRepository(test_db)
        with_bob = await repo.create_conversation([ada.id, bob.id])
        with_cy = await repo.create_conversation([ada.id, cy.id])

        assert [c.id for c in await service.list_conversations(ada)] == [
            with_cy.id,
            with_bob.id,
        ]

        await SendMessageService(test_db).send_message(
            bob, with_bob.id, SendMessageRequest(content="ping")
        )

        listed = await service.list_conversations(ada)
        assert [c.id for c in listed] == [with_bob.id, with_cy.id]
        assert listed[0].message_count == 1
        assert listed[0].last_message.content == "ping"
        assert listed[0].last_message.sender.name == "Bob"
        assert listed[1].last_message is None

        paged = await service.list_conversations(ada, page=2, limit=1)
        assert [c.id for c in paged] == [with_cy.id]

    @pytest.mark.asyncio
    async def test_invalid_pagination(
        self, service: ListConversationsService, principal: Any
    ) -> None:
        with pytest.raises(ValidationError):
            await service.list_conversations(principal, page=0)
        with pytest.raises(ValidationError):
            await service.list_conversations(principal, limit=0)

    @pytest.mark.asyncio
    async def test_summary_requires_membership(
        self, service: ListConversationsService, test_db: AsyncSession, make_user: Any
    ) -> None:
        ada, bob, cy = await make_user("Ada"), await make_user("Bob"), await make_user("Cy")
        conversation = await ConversationRepository(test_db).create_conversation(
            [ada.id, bob.id]
        )

        summary = await service.get_conversation_summary(bob, conversation.id)
        assert summary.id == conversation.id
        assert [p.user.name for p in summary.participants] == ["Ada", "Bob"]

        with pytest.raises(ForbiddenError):
            await service.get_conversation_summary(cy, conversation.id)
        with pytest.raises(NotFoundError):
            await service.get_conversation_summary(ada, uuid4())

    @pytest.mark.asyncio
    async def test_summary_previews_latest_message(
        self, service: ListConversationsService, test_db: AsyncSession, make_user: Any
    ) -> None:
        ada, bob = await make_user("Ada"), await make_user("Bob")
        conversation = await ConversationRepository(test_db).create_conversation(
            [ada.id, bob.id]
        )
        sender = SendMessageService(test_db)
        await sender.send_message(
            ada, conversation.id, SendMessageRequest(content="one")
        )
        latest = await sender.send_message(
            bob, conversation.id, SendMessageRequest(content="two")
        )

        summary = await service.get_conversation_summary(ada, conversation.id)

        assert summary.last_message_id == latest.id
        assert summary.last_message.id == latest.id
        assert summary.last_message.sequence == 2
        assert summary.last_message.content == "two"
        assert summary.last_message.sender.id == bob.id
