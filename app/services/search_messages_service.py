import re
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import DataError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ValidationError
from app.models.api.messages import MessageResponse
from app.models.api.users import UserResponse
from app.repositories.conversation_repository import ConversationRepository
from app.repositories.message_repository import MessageRepository
from app.services.access import load_conversation_for_participant

SEARCH_RESULT_LIMIT = 50


class SearchMessagesService:
    """Service for searching message content."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.conversation_repo = ConversationRepository(db)
        self.message_repo = MessageRepository(db)

    async def search(
        self,
        principal: UserResponse,
        query: Optional[str],
        conversation_id: Optional[UUID] = None,
    ) -> List[MessageResponse]:
        """
        Case-insensitive regex search over the principal's messages:

        1. Validate the pattern here and again when the database runs it
        2. Scope to one conversation (principal must belong to it) or to all
           of the principal's conversations
        3. Return up to 50 non-deleted matches, newest first
        """
        if not query or not query.strip():
            raise ValidationError("Search query is required")

        # Inline flag is understood by both PostgreSQL and Python regexes
        pattern = f"(?i){query}"
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValidationError(f"Invalid search pattern: {e}")

        if conversation_id is not None:
            await load_conversation_for_participant(
                self.conversation_repo, conversation_id, principal.id
            )
            scope = [conversation_id]
        else:
            scope = self.conversation_repo.conversation_ids_for(principal.id)

        # The database may still reject a pattern Python accepts
        try:
            return await self.message_repo.search(
                scope, pattern, limit=SEARCH_RESULT_LIMIT
            )
        except DataError as e:
            await self.db.rollback()
            raise ValidationError(f"Invalid search pattern: {e.orig}")
