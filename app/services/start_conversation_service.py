import logging
from typing import List
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError, ValidationError
from app.models.api.conversations import (
    ConversationResponse,
    CreateConversationRequest,
)
from app.models.api.users import UserResponse
from app.repositories.conversation_repository import (
    ConversationRepository,
    direct_key_for,
)
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class StartConversationService:
    """Service for looking up or creating conversations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.conversation_repo = ConversationRepository(db)
        self.user_repo = UserRepository(db)

    async def get_or_create(
        self, principal: UserResponse, request: CreateConversationRequest
    ) -> ConversationResponse:
        """
        Main business logic for starting a conversation:
        1. Build the participant set (principal plus others, deduplicated)
        2. Check that every participant exists
        3. Return the existing direct conversation for a pair, if any
        4. Otherwise create and persist a new conversation
        """

        # Step 1: Participant set, principal first
        participant_ids = _unique([principal.id, *request.participants])
        if len(participant_ids) < 2:
            raise ValidationError(
                "A conversation needs at least one other participant"
            )
        if not request.is_group and len(participant_ids) != 2:
            raise ValidationError(
                "Direct conversations have exactly two participants; "
                "use a group for more"
            )

        # Step 2: Resolve participants
        existing = await self.user_repo.get_existing_ids(participant_ids)
        missing = [user_id for user_id in participant_ids if user_id not in existing]
        if missing:
            raise NotFoundError("User", missing[0])

        # Step 3: Groups are never deduplicated
        if request.is_group:
            conversation = await self.conversation_repo.create_conversation(
                participant_ids,
                is_group=True,
                group_name=request.group_name or "",
                group_image=request.group_image,
                admin_ids=[principal.id],
            )
            logger.info(
                "Created group conversation %s with %d participants",
                conversation.id,
                len(participant_ids),
            )
            return conversation

        direct_key = direct_key_for(participant_ids)
        conversation = await self.conversation_repo.get_by_direct_key(direct_key)
        if conversation:
            return conversation

        # Step 4: Create the direct conversation
        try:
            conversation = await self.conversation_repo.create_conversation(
                participant_ids, direct_key=direct_key
            )
        except IntegrityError:
            # Another request created the pair first
            await self.db.rollback()
            conversation = await self.conversation_repo.get_by_direct_key(direct_key)
            if conversation is None:
                raise
            return conversation

        logger.info("Created direct conversation %s", conversation.id)
        return conversation


def _unique(ids: List[UUID]) -> List[UUID]:
    seen = set()
    result = []
    for user_id in ids:
        if user_id not in seen:
            seen.add(user_id)
            result.append(user_id)
    return result
