from datetime import datetime, timedelta
from typing import Any, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from app.config import TYPING_TTL_SECONDS
from app.models.api.conversations import ConversationResponse
from app.models.api.participants import MuteEntry, ParticipantResponse, TypingEntry
from app.models.api.users import UserSummary
from app.models.db.conversation_model import ConversationModel
from app.models.db.message_model import MessageModel
from app.models.db.participant_model import ParticipantModel
from app.repositories.base_repository import BaseRepository
from app.repositories.message_repository import message_preview
from app.timestamps import as_utc, utcnow


def direct_key_for(user_ids: Sequence[UUID]) -> str:
    """Order-independent key identifying the direct conversation of a pair."""
    return ":".join(sorted(user_id.hex for user_id in user_ids))


class ConversationRepository(BaseRepository[ConversationModel, ConversationResponse]):
    """Repository for conversation operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, ConversationModel)

    def _load_options(self) -> List[Any]:
        return [
            selectinload(self.model_class.participants).selectinload(
                ParticipantModel.user
            ),
            selectinload(self.model_class.last_message).selectinload(
                MessageModel.sender
            ),
        ]

    async def get_by_direct_key(self, direct_key: str) -> Optional[ConversationResponse]:
        """Find the direct conversation for a participant pair."""
        query = (
            select(self.model_class)
            .where(self.model_class.direct_key == direct_key)
            .options(*self._load_options())
            .execution_options(populate_existing=True)
        )  # type: ignore
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def create_conversation(
        self,
        participant_ids: Sequence[UUID],
        is_group: bool = False,
        group_name: Optional[str] = None,
        group_image: Optional[str] = None,
        admin_ids: Sequence[UUID] = (),
        direct_key: Optional[str] = None,
    ) -> ConversationResponse:
        """Create and commit a conversation with its participants."""
        now = utcnow()
        db_model = ConversationModel(
            is_group=is_group,
            group_name=group_name,
            group_image=group_image,
            direct_key=direct_key,
            is_archived=False,
            last_activity=now,
            message_count=0,
            participants=[
                ParticipantModel(
                    user_id=user_id,
                    position=position,
                    is_admin=user_id in admin_ids,
                    joined_at=now,
                )
                for position, user_id in enumerate(participant_ids)
            ],
        )
        await self.add(db_model)

        # After creating, we need to eagerly load participant users for _to_pydantic
        refreshed = await self.get_model(db_model.id)
        return self._to_pydantic(refreshed)

    async def list_for_participant(
        self, user_id: UUID, limit: int = 20, offset: int = 0
    ) -> List[ConversationResponse]:
        """List a user's non-archived conversations, most recently active first."""
        query = (
            select(self.model_class)
            .join(
                ParticipantModel,
                ParticipantModel.conversation_id == self.model_class.id,
            )
            .where(
                ParticipantModel.user_id == user_id,
                self.model_class.is_archived.is_(False),
            )
            .options(*self._load_options())
            .execution_options(populate_existing=True)
            .order_by(
                self.model_class.last_activity.desc(),
                self.model_class.created_at.desc(),
            )
            .limit(limit)
            .offset(offset)
        )  # type: ignore
        result = await self.db.execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    def conversation_ids_for(self, user_id: UUID) -> Any:
        """Subquery of the ids of every conversation a user belongs to."""
        return select(ParticipantModel.conversation_id).where(
            ParticipantModel.user_id == user_id
        )

    async def append_message(
        self, conversation: ConversationModel, message_id: UUID, at: datetime
    ) -> int:
        """Reserve the next sequence number and point the conversation at it.

        The caller commits; the conversation row should be loaded for update.
        """
        conversation.message_count = (conversation.message_count or 0) + 1
        conversation.last_message_id = message_id
        previous = as_utc(conversation.last_activity)
        if previous is None or at > previous:
            conversation.last_activity = at
        conversation.updated_at = at
        return conversation.message_count

    async def archive(self, conversation: ConversationModel) -> ConversationResponse:
        """Flag a conversation as archived."""
        if not conversation.is_archived:
            conversation.is_archived = True
            await self.db.commit()
        return await self.get_by_id(conversation.id)

    async def set_mute(
        self,
        conversation: ConversationModel,
        user_id: UUID,
        muted_until: Optional[datetime],
    ) -> ConversationResponse:
        """Record or clear a participant's mute-until timestamp."""
        conversation_id = conversation.id
        participant = _find_participant(conversation, user_id)
        participant.muted_until = muted_until
        await self.db.commit()
        return await self.get_by_id(conversation_id)

    async def set_typing(
        self,
        conversation: ConversationModel,
        user_id: UUID,
        is_typing: bool,
        at: datetime,
    ) -> ConversationResponse:
        """Upsert or remove a participant's own typing entry.

        Expired entries of others are left in place and hidden on read.
        """
        conversation_id = conversation.id
        participant = _find_participant(conversation, user_id)
        participant.typing_started_at = at if is_typing else None
        await self.db.commit()
        return await self.get_by_id(conversation_id)

    async def get_muted_user_ids(
        self, conversation_id: UUID, user_ids: Sequence[UUID], at: datetime
    ) -> List[UUID]:
        """Users among user_ids whose mute on the conversation is still active."""
        if not user_ids:
            return []
        query = select(ParticipantModel).where(
            ParticipantModel.conversation_id == conversation_id,
            ParticipantModel.user_id.in_(list(user_ids)),
            ParticipantModel.muted_until.is_not(None),
        )
        result = await self.db.execute(query)
        return [
            participant.user_id
            for participant in result.scalars().all()
            if as_utc(participant.muted_until) > at
        ]

    def _to_pydantic(self, db_model: Any) -> ConversationResponse:
        """Convert SQLAlchemy ConversationModel to Pydantic ConversationResponse."""
        cutoff = utcnow() - timedelta(seconds=TYPING_TTL_SECONDS)
        participants = []
        admins = []
        muted_by = []
        typing_users = []
        for participant in db_model.participants:
            participants.append(
                ParticipantResponse(
                    user=UserSummary.from_user(participant.user),
                    is_admin=participant.is_admin,
                    joined_at=participant.joined_at,
                )
            )
            if participant.is_admin:
                admins.append(participant.user_id)
            if participant.muted_until is not None:
                muted_by.append(
                    MuteEntry(
                        user_id=participant.user_id,
                        muted_until=participant.muted_until,
                    )
                )
            started_at = as_utc(participant.typing_started_at)
            if started_at is not None and started_at >= cutoff:
                typing_users.append(
                    TypingEntry(user_id=participant.user_id, started_at=started_at)
                )

        return ConversationResponse(
            id=db_model.id,
            participants=participants,
            is_group=db_model.is_group,
            group_name=db_model.group_name,
            group_image=db_model.group_image,
            admins=admins,
            is_archived=db_model.is_archived,
            last_message_id=db_model.last_message_id,
            last_message=(
                message_preview(db_model.last_message)
                if db_model.last_message
                else None
            ),
            last_activity=db_model.last_activity,
            message_count=db_model.message_count,
            muted_by=muted_by,
            typing_users=typing_users,
            created_at=db_model.created_at,
            updated_at=db_model.updated_at,
        )


def _find_participant(
    conversation: ConversationModel, user_id: UUID
) -> ParticipantModel:
    for participant in conversation.participants:
        if participant.user_id == user_id:
            return participant
    raise LookupError(f"User {user_id} is not a participant")
