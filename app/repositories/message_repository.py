import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from app.models.api.messages import (
    DELETED_MESSAGE_PLACEHOLDER,
    Attachment,
    MessagePreview,
    MessageResponse,
    ReceiptResponse,
)
from app.models.api.users import UserSummary
from app.models.db.message_model import MessageModel
from app.models.db.receipt_model import MessageReceiptModel
from app.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)

READ = "read"
DELIVERED = "delivered"


class MessageRepository(BaseRepository[MessageModel, MessageResponse]):
    """Repository for message operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, MessageModel)

    def _load_options(self) -> List[Any]:
        return [
            selectinload(self.model_class.sender),
            selectinload(self.model_class.receipts),
            selectinload(self.model_class.reply_to).selectinload(MessageModel.sender),
        ]

    async def create_message(
        self,
        message_id: UUID,
        conversation_id: UUID,
        sequence: int,
        sender_id: UUID,
        content: str,
        message_type: str,
        attachments: List[Dict[str, Any]],
        reply_to_id: Optional[UUID],
        at: datetime,
    ) -> MessageModel:
        """Stage a message inside the caller's transaction."""
        db_model = MessageModel(
            id=message_id,
            conversation_id=conversation_id,
            sequence=sequence,
            sender_id=sender_id,
            content=content,
            message_type=message_type,
            attachments=attachments,
            reply_to_id=reply_to_id,
            created_at=at,
            updated_at=at,
        )
        return await self.add(db_model, commit=False)

    async def get_in_conversation(
        self, message_id: UUID, conversation_id: UUID
    ) -> Optional[MessageModel]:
        """Get a message only if it belongs to the given conversation."""
        query = select(self.model_class).where(
            self.model_class.id == message_id,
            self.model_class.conversation_id == conversation_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_page(
        self, conversation_id: UUID, limit: int = 50, offset: int = 0
    ) -> List[MessageResponse]:
        """Get a page counted from the newest message, returned oldest-first."""
        query = (
            select(self.model_class)
            .where(self.model_class.conversation_id == conversation_id)
            .options(*self._load_options())
            .execution_options(populate_existing=True)
            .order_by(self.model_class.sequence.desc())
            .limit(limit)
            .offset(offset)
        )  # type: ignore
        result = await self.db.execute(query)
        db_models = list(result.scalars().all())
        db_models.reverse()
        return [self._to_pydantic(db_model) for db_model in db_models]

    async def get_ordered_ids(self, conversation_id: UUID) -> List[UUID]:
        """The conversation's message references in chronological order."""
        query = (
            select(self.model_class.id)
            .where(self.model_class.conversation_id == conversation_id)
            .order_by(self.model_class.sequence)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def add_receipts(
        self,
        conversation_id: UUID,
        user_id: UUID,
        kind: str,
        at: datetime,
        skip_own: bool = False,
    ) -> int:
        """Stamp a receipt on every message of the conversation lacking one.

        Existing receipts are never duplicated; a concurrent stamp by the same
        user loses the race on the unique constraint and is discarded.
        """
        already_stamped = select(MessageReceiptModel.message_id).where(
            MessageReceiptModel.user_id == user_id,
            MessageReceiptModel.kind == kind,
        )
        query = select(self.model_class.id).where(
            self.model_class.conversation_id == conversation_id,
            self.model_class.id.not_in(already_stamped),
        )
        if skip_own:
            query = query.where(self.model_class.sender_id != user_id)
        result = await self.db.execute(query)
        message_ids = list(result.scalars().all())
        if not message_ids:
            return 0

        for message_id in message_ids:
            self.db.add(
                MessageReceiptModel(
                    message_id=message_id, user_id=user_id, kind=kind, recorded_at=at
                )
            )
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(
                "Concurrent %s receipts for user %s in conversation %s discarded",
                kind,
                user_id,
                conversation_id,
            )
            return 0
        return len(message_ids)

    async def edit_content(
        self, message: MessageModel, content: str, at: datetime
    ) -> MessageResponse:
        """Replace a message's content and flag it as edited."""
        message_id = message.id
        message.content = content
        message.is_edited = True
        message.edited_at = at
        message.updated_at = at
        await self.db.commit()
        return await self.get_by_id(message_id)

    async def soft_delete(self, message: MessageModel, at: datetime) -> MessageResponse:
        """Replace content with the placeholder and flag the message deleted."""
        message_id = message.id
        message.content = DELETED_MESSAGE_PLACEHOLDER
        message.is_deleted = True
        message.updated_at = at
        await self.db.commit()
        return await self.get_by_id(message_id)

    async def search(
        self,
        conversation_ids: Any,
        pattern: str,
        limit: int = 50,
    ) -> List[MessageResponse]:
        """Regex search over non-deleted content, newest first."""
        query = (
            select(self.model_class)
            .where(
                self.model_class.conversation_id.in_(conversation_ids),
                self.model_class.is_deleted.is_(False),
                self.model_class.content.regexp_match(pattern),
            )
            .options(*self._load_options())
            .execution_options(populate_existing=True)
            .order_by(self.model_class.created_at.desc())
            .limit(limit)
        )  # type: ignore
        result = await self.db.execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    def _to_pydantic(self, db_model: Any) -> MessageResponse:
        """Convert SQLAlchemy MessageModel to Pydantic MessageResponse."""
        read_by = []
        delivered_to = []
        for receipt in db_model.receipts:
            entry = ReceiptResponse(user_id=receipt.user_id, at=receipt.recorded_at)
            if receipt.kind == READ:
                read_by.append(entry)
            elif receipt.kind == DELIVERED:
                delivered_to.append(entry)

        return MessageResponse(
            id=db_model.id,
            conversation_id=db_model.conversation_id,
            sequence=db_model.sequence,
            sender=UserSummary.from_user(db_model.sender),
            content=db_model.content,
            message_type=db_model.message_type,
            attachments=[
                Attachment.model_validate(item) for item in db_model.attachments or []
            ],
            is_edited=db_model.is_edited,
            edited_at=db_model.edited_at,
            is_deleted=db_model.is_deleted,
            read_by=read_by,
            delivered_to=delivered_to,
            reply_to_id=db_model.reply_to_id,
            reply_to=(
                message_preview(db_model.reply_to) if db_model.reply_to else None
            ),
            created_at=db_model.created_at,
            updated_at=db_model.updated_at,
        )


def message_preview(db_model: Any) -> MessagePreview:
    """Summary of a message row whose sender is loaded."""
    return MessagePreview(
        id=db_model.id,
        sequence=db_model.sequence,
        sender=UserSummary.from_user(db_model.sender),
        content=db_model.content,
        message_type=db_model.message_type,
        is_deleted=db_model.is_deleted,
        created_at=db_model.created_at,
    )
