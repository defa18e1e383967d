from uuid import UUID

from app.exceptions import ForbiddenError, NotFoundError
from app.models.db.conversation_model import ConversationModel
from app.repositories.conversation_repository import ConversationRepository


async def load_conversation_for_participant(
    conversation_repo: ConversationRepository,
    conversation_id: UUID,
    user_id: UUID,
    for_update: bool = False,
) -> ConversationModel:
    """Load a conversation and make sure the user is one of its participants."""
    conversation = await conversation_repo.get_model(
        conversation_id, for_update=for_update
    )
    if conversation is None:
        raise NotFoundError("Conversation", conversation_id)
    if not any(p.user_id == user_id for p in conversation.participants):
        raise ForbiddenError()
    return conversation
