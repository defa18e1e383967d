from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ValidationError
from app.models.api.conversations import ConversationResponse
from app.models.api.users import UserResponse
from app.repositories.conversation_repository import ConversationRepository
from app.services.access import load_conversation_for_participant

MAX_PAGE_SIZE = 100


class ListConversationsService:
    """Service for listing conversations with pagination."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.conversation_repo = ConversationRepository(db)

    async def list_conversations(
        self,
        principal: UserResponse,
        page: Optional[int] = 1,
        limit: Optional[int] = 20,
    ) -> List[ConversationResponse]:
        """
        List the principal's conversations:

        1. Validate pagination
        2. Retrieve non-archived conversations, most recently active first
        3. Return formatted responses
        """
        # Validate parameters
        if page is not None and page < 1:
            raise ValidationError("Page must be 1 or greater")
        if limit is not None and (limit <= 0 or limit > MAX_PAGE_SIZE):
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

        # Use default values if None
        page = page or 1
        limit = limit or 20

        return await self.conversation_repo.list_for_participant(
            principal.id, limit=limit, offset=(page - 1) * limit
        )

    async def get_conversation_summary(
        self, principal: UserResponse, conversation_id: UUID
    ) -> ConversationResponse:
        """Get detailed information about a specific conversation"""
        conversation = await load_conversation_for_participant(
            self.conversation_repo, conversation_id, principal.id
        )
        return self.conversation_repo.to_response(conversation)
