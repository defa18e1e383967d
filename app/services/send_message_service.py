import logging
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ValidationError
from app.models.api.messages import MessageResponse, SendMessageRequest
from app.models.api.users import UserResponse
from app.repositories.conversation_repository import ConversationRepository
from app.repositories.message_repository import MessageRepository
from app.repositories.outbox_repository import OutboxRepository
from app.services.access import load_conversation_for_participant
from app.timestamps import utcnow

logger = logging.getLogger(__name__)

MESSAGE_CREATED = "message.created"


class SendMessageService:
    """Service for posting messages into conversations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.message_repo = MessageRepository(db)
        self.conversation_repo = ConversationRepository(db)
        self.outbox_repo = OutboxRepository(db)

    async def send_message(
        self,
        principal: UserResponse,
        conversation_id: UUID,
        request: SendMessageRequest,
    ) -> MessageResponse:
        """
        Main business logic for sending a message:
        1. Lock the conversation and check membership
        2. Validate content
        3. Check the reply target
        4. Append the message, move the conversation pointer, enqueue the event
        5. Commit everything at once and return the stored message
        """

        # Step 1: Conversation row is locked until commit
        conversation = await load_conversation_for_participant(
            self.conversation_repo, conversation_id, principal.id, for_update=True
        )

        # Step 2: Content may only be empty when attachments carry the message
        content = request.content or ""
        if not content.strip() and not request.attachments:
            raise ValidationError("Message content or an attachment is required")

        # Step 3: Replies must point into the same conversation
        if request.reply_to is not None:
            target = await self.message_repo.get_in_conversation(
                request.reply_to, conversation_id
            )
            if target is None:
                raise ValidationError(
                    "Reply target not found in this conversation",
                    {"reply_to": str(request.reply_to)},
                )

        # Step 4: Append
        now = utcnow()
        message_id = uuid4()
        recipient_ids = [
            p.user_id for p in conversation.participants if p.user_id != principal.id
        ]
        sequence = await self.conversation_repo.append_message(
            conversation, message_id, now
        )
        await self.message_repo.create_message(
            message_id=message_id,
            conversation_id=conversation_id,
            sequence=sequence,
            sender_id=principal.id,
            content=content,
            message_type=request.message_type.value,
            attachments=[a.model_dump(mode="json") for a in request.attachments],
            reply_to_id=request.reply_to,
            at=now,
        )
        await self.outbox_repo.enqueue(
            MESSAGE_CREATED,
            {
                "message_id": str(message_id),
                "conversation_id": str(conversation_id),
                "sender_id": str(principal.id),
                "sender_name": principal.name,
                "recipient_ids": [str(user_id) for user_id in recipient_ids],
            },
            conversation_id=conversation_id,
            at=now,
        )

        # Step 5: Single commit for message, pointer and outbox event
        await self.db.commit()
        logger.info(
            "Message %s sent to conversation %s (sequence %d)",
            message_id,
            conversation_id,
            sequence,
        )

        return await self.message_repo.get_by_id(message_id)  # type: ignore
