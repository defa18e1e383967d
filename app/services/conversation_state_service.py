import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.api.conversations import ConversationResponse, TypingResponse
from app.models.api.users import UserResponse
from app.repositories.conversation_repository import ConversationRepository
from app.services.access import load_conversation_for_participant
from app.timestamps import as_utc, utcnow

logger = logging.getLogger(__name__)


class ConversationStateService:
    """Service for archive, mute and typing presence state."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.conversation_repo = ConversationRepository(db)

    async def archive(
        self, principal: UserResponse, conversation_id: UUID
    ) -> ConversationResponse:
        """Archive a conversation. There is no unarchive."""
        conversation = await load_conversation_for_participant(
            self.conversation_repo, conversation_id, principal.id
        )
        archived = await self.conversation_repo.archive(conversation)
        logger.info("Conversation %s archived by %s", conversation_id, principal.id)
        return archived

    async def mute(
        self,
        principal: UserResponse,
        conversation_id: UUID,
        muted_until: Optional[datetime],
    ) -> ConversationResponse:
        """Record until when the principal is muted; None clears the mute."""
        conversation = await load_conversation_for_participant(
            self.conversation_repo, conversation_id, principal.id
        )
        return await self.conversation_repo.set_mute(
            conversation, principal.id, as_utc(muted_until)
        )

    async def set_typing(
        self, principal: UserResponse, conversation_id: UUID, is_typing: bool
    ) -> TypingResponse:
        """Start or stop the principal's typing indicator."""
        conversation = await load_conversation_for_participant(
            self.conversation_repo, conversation_id, principal.id
        )
        updated = await self.conversation_repo.set_typing(
            conversation, principal.id, is_typing, utcnow()
        )
        return TypingResponse(
            conversation_id=conversation_id, typing_users=updated.typing_users
        )
