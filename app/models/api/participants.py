from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from .users import UserSummary


class ParticipantResponse(BaseModel):
    """Response model for a conversation member."""

    user: UserSummary
    is_admin: bool
    joined_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class MuteEntry(BaseModel):
    """A participant's mute-until timestamp."""

    user_id: UUID
    muted_until: datetime


class TypingEntry(BaseModel):
    """A participant currently composing a message."""

    user_id: UUID
    started_at: datetime
