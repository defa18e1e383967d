import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.models.api.messages import (
    DeleteMessageResponse,
    EditMessageRequest,
    MessageResponse,
)
from app.models.api.users import UserResponse
from app.models.db.message_model import MessageModel
from app.repositories.message_repository import MessageRepository
from app.timestamps import utcnow

logger = logging.getLogger(__name__)


class EditMessageService:
    """Service for sender-only edits and soft deletes."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.message_repo = MessageRepository(db)

    async def _load_own_message(
        self, principal: UserResponse, message_id: UUID
    ) -> MessageModel:
        message = await self.message_repo.get_model(message_id)
        if message is None:
            raise NotFoundError("Message", message_id)
        if message.sender_id != principal.id:
            raise ForbiddenError()
        return message

    async def edit_message(
        self, principal: UserResponse, message_id: UUID, request: EditMessageRequest
    ) -> MessageResponse:
        """Replace the content of the principal's own message.

        Previous content is not kept.
        """
        message = await self._load_own_message(principal, message_id)
        if message.is_deleted:
            raise ValidationError("Deleted messages cannot be edited")
        if not request.content.strip():
            raise ValidationError("Message content is required")

        edited = await self.message_repo.edit_content(message, request.content, utcnow())
        logger.info("Message %s edited", message_id)
        return edited

    async def delete_message(
        self, principal: UserResponse, message_id: UUID
    ) -> DeleteMessageResponse:
        """Soft delete the principal's own message, keeping its position."""
        message = await self._load_own_message(principal, message_id)
        deleted = await self.message_repo.soft_delete(message, utcnow())
        logger.info("Message %s deleted", message_id)
        return DeleteMessageResponse(id=deleted.id, is_deleted=deleted.is_deleted)
