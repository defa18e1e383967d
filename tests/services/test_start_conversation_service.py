from typing import Any
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError, ValidationError
from app.models.api.conversations import CreateConversationRequest
from app.services.start_conversation_service import StartConversationService


class TestStartConversationService:
    """Tests for looking up and creating conversations."""

    @pytest.fixture
    def service(self, test_db: AsyncSession) -> StartConversationService:
        return StartConversationService(test_db)

    @pytest.mark.asyncio
    async def test_direct_conversation_is_reused_in_either_direction(
        self, service: StartConversationService, make_user: Any
    ) -> None:
        ada, bob = await make_user("Ada"), await make_user("Bob")

        created = await service.get_or_create(
            ada, CreateConversationRequest(participants=[bob.id])
        )
        again = await service.get_or_create(
            bob, CreateConversationRequest(participants=[ada.id])
        )

        assert again.id == created.id
        assert [p.user.id for p in created.participants] == [ada.id, bob.id]
        assert created.is_group is False
        assert created.admins == []

    @pytest.mark.asyncio
    async def test_principal_listed_twice_is_deduplicated(
        self, service: StartConversationService, make_user: Any
    ) -> None:
        ada, bob = await make_user("Ada"), await make_user("Bob")

        conversation = await service.get_or_create(
            ada, CreateConversationRequest(participants=[ada.id, bob.id, bob.id])
        )

        assert [p.user.id for p in conversation.participants] == [ada.id, bob.id]

    @pytest.mark.asyncio
    async def test_groups_are_never_deduplicated(
        self, service: StartConversationService, make_user: Any
    ) -> None:
        ada, bob, cy = await make_user("Ada"), await make_user("Bob"), await make_user("Cy")
        request = CreateConversationRequest.model_validate(
            {"participants": [str(bob.id), str(cy.id)], "isGroup": True, "groupName": "Team"}
        )

        first = await service.get_or_create(ada, request)
        second = await service.get_or_create(ada, request)

        assert first.id != second.id
        assert first.is_group is True
        assert first.group_name == "Team"
        assert first.admins == [ada.id]
        assert first.participants[0].is_admin is True

    @pytest.mark.asyncio
    async def test_direct_conversation_needs_exactly_two(
        self, service: StartConversationService, make_user: Any
    ) -> None:
        ada, bob, cy = await make_user("Ada"), await make_user("Bob"), await make_user("Cy")

        with pytest.raises(ValidationError):
            await service.get_or_create(
                ada, CreateConversationRequest(participants=[bob.id, cy.id])
            )

    @pytest.mark.asyncio
    async def test_conversation_with_only_self_is_rejected(
        self, service: StartConversationService, make_user: Any
    ) -> None:
        ada = await make_user("Ada")

        with pytest.raises(ValidationError):
            await service.get_or_create(
                ada, CreateConversationRequest(participants=[ada.id])
            )

    @pytest.mark.asyncio
    async def test_unknown_participant_is_not_found(
        self, service: StartConversationService, make_user: Any
    ) -> None:
        ada = await make_user("Ada")

        with pytest.raises(NotFoundError):
            await service.get_or_create(
                ada, CreateConversationRequest(participants=[uuid4()])
            )

    @pytest.mark.asyncio
    async def test_concurrent_create_returns_the_winner(
        self, mock_db: AsyncMock, principal: Any
    ) -> None:
        """Losing the unique direct-key race falls back to the stored pair."""
        other_id = uuid4()
        winner = object()
        service = StartConversationService(mock_db)

        with (
            patch.object(
                service.user_repo,
                "get_existing_ids",
                new_callable=AsyncMock,
                return_value={principal.id, other_id},
            ),
            patch.object(
                service.conversation_repo,
                "get_by_direct_key",
                new_callable=AsyncMock,
                side_effect=[None, winner],
            ),
            patch.object(
                service.conversation_repo,
                "create_conversation",
                new_callable=AsyncMock,
                side_effect=IntegrityError("INSERT", {}, Exception("duplicate")),
            ),
        ):
            result = await service.get_or_create(
                principal, CreateConversationRequest(participants=[other_id])
            )

        assert result is winner
        mock_db.rollback.assert_awaited_once()
