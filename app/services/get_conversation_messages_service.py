from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ValidationError
from app.models.api.conversations import ReceiptsUpdatedResponse
from app.models.api.messages import MessageResponse
from app.models.api.users import UserResponse
from app.repositories.conversation_repository import ConversationRepository
from app.repositories.message_repository import DELIVERED, READ, MessageRepository
from app.services.access import load_conversation_for_participant
from app.timestamps import utcnow

MAX_PAGE_SIZE = 100


class GetConversationMessagesService:
    """Service for reading messages and tracking read/delivery receipts."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.conversation_repo = ConversationRepository(db)
        self.message_repo = MessageRepository(db)

    async def get_conversation_messages(
        self,
        principal: UserResponse,
        conversation_id: UUID,
        page: Optional[int] = 1,
        limit: Optional[int] = 50,
    ) -> List[MessageResponse]:
        """
        Get messages for a specific conversation:

        1. Verify conversation exists and the principal belongs to it
        2. Stamp a read receipt on every message the principal has not read
        3. Return the requested page, counted from the newest message and
           ordered oldest-first
        """
        # Validate parameters
        if page is not None and page < 1:
            raise ValidationError("Page must be 1 or greater")
        if limit is not None and (limit <= 0 or limit > MAX_PAGE_SIZE):
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

        # Use default values if None
        page = page or 1
        limit = limit or 50

        # Step 1: Verify access
        await load_conversation_for_participant(
            self.conversation_repo, conversation_id, principal.id
        )

        # Step 2: Reading marks everything read
        await self.message_repo.add_receipts(
            conversation_id, principal.id, READ, utcnow()
        )

        # Step 3: Page of messages
        return await self.message_repo.get_page(
            conversation_id, limit=limit, offset=(page - 1) * limit
        )

    async def mark_conversation_read(
        self, principal: UserResponse, conversation_id: UUID
    ) -> ReceiptsUpdatedResponse:
        """Stamp read receipts without fetching messages."""
        await load_conversation_for_participant(
            self.conversation_repo, conversation_id, principal.id
        )
        updated = await self.message_repo.add_receipts(
            conversation_id, principal.id, READ, utcnow()
        )
        return ReceiptsUpdatedResponse(conversation_id=conversation_id, updated=updated)

    async def mark_conversation_delivered(
        self, principal: UserResponse, conversation_id: UUID
    ) -> ReceiptsUpdatedResponse:
        """Stamp delivery receipts on messages sent by the other participants."""
        await load_conversation_for_participant(
            self.conversation_repo, conversation_id, principal.id
        )
        updated = await self.message_repo.add_receipts(
            conversation_id, principal.id, DELIVERED, utcnow(), skip_own=True
        )
        return ReceiptsUpdatedResponse(conversation_id=conversation_id, updated=updated)
