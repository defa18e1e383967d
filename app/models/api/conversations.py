from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .messages import MessagePreview
from .participants import MuteEntry, ParticipantResponse, TypingEntry


class CreateConversationRequest(BaseModel):
    """Request model for looking up or creating a conversation."""

    participants: List[UUID] = Field(
        ..., description="Other participants; the caller is always included"
    )
    is_group: bool = Field(
        default=False, validation_alias=AliasChoices("is_group", "isGroup")
    )
    group_name: Optional[str] = Field(
        default=None,
        max_length=255,
        validation_alias=AliasChoices("group_name", "groupName"),
    )
    group_image: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("group_image", "groupImage")
    )


class ConversationResponse(BaseModel):
    """Response model for conversation data."""

    id: UUID
    participants: List[ParticipantResponse]
    is_group: bool
    group_name: Optional[str]
    group_image: Optional[str]
    admins: List[UUID]
    is_archived: bool
    last_message_id: Optional[UUID]
    last_message: Optional[MessagePreview] = None
    last_activity: datetime
    message_count: int
    muted_by: List[MuteEntry]
    typing_users: List[TypingEntry]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MuteConversationRequest(BaseModel):
    """Request model for muting a conversation; null clears the mute."""

    muted_until: Optional[datetime] = Field(
        ..., validation_alias=AliasChoices("muted_until", "mutedUntil")
    )


class TypingRequest(BaseModel):
    """Request model for typing presence updates."""

    is_typing: bool = Field(..., validation_alias=AliasChoices("is_typing", "isTyping"))


class TypingResponse(BaseModel):
    """Current typing presence of a conversation."""

    conversation_id: UUID
    typing_users: List[TypingEntry]


class ReceiptsUpdatedResponse(BaseModel):
    """Result of a bulk receipt stamp."""

    conversation_id: UUID
    updated: int
