from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .users import UserSummary

MAX_ATTACHMENTS = 5
DELETED_MESSAGE_PLACEHOLDER = "This message was deleted"


class MessageType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    VOICE = "voice"


class AttachmentType(str, Enum):
    IMAGE = "image"
    DOCUMENT = "document"
    VIDEO = "video"
    AUDIO = "audio"


class Attachment(BaseModel):
    """Descriptor of an already uploaded file."""

    type: AttachmentType
    url: str
    file_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("file_name", "fileName")
    )
    file_size: Optional[int] = Field(
        default=None, ge=0, validation_alias=AliasChoices("file_size", "fileSize")
    )


class SendMessageRequest(BaseModel):
    """Request model for sending a message."""

    content: str = Field(default="", description="Message text")
    message_type: MessageType = Field(
        default=MessageType.TEXT,
        validation_alias=AliasChoices("message_type", "messageType"),
    )
    reply_to: Optional[UUID] = Field(
        default=None,
        description="Message being replied to",
        validation_alias=AliasChoices("reply_to", "replyTo"),
    )
    attachments: List[Attachment] = Field(
        default_factory=list, max_length=MAX_ATTACHMENTS
    )


class EditMessageRequest(BaseModel):
    """Request model for editing a message."""

    content: str


class ReceiptResponse(BaseModel):
    """A read or delivery receipt."""

    user_id: UUID
    at: datetime


class MessagePreview(BaseModel):
    """Short form of a message shown in conversation lists and replies."""

    id: UUID
    sequence: int
    sender: UserSummary
    content: str
    message_type: MessageType
    is_deleted: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    """Response model for message data."""

    id: UUID
    conversation_id: UUID
    sequence: int
    sender: UserSummary
    content: str
    message_type: MessageType
    attachments: List[Attachment]
    is_edited: bool
    edited_at: Optional[datetime]
    is_deleted: bool
    read_by: List[ReceiptResponse]
    delivered_to: List[ReceiptResponse]
    reply_to_id: Optional[UUID]
    reply_to: Optional[MessagePreview] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DeleteMessageResponse(BaseModel):
    id: UUID
    is_deleted: bool
    detail: str = "Message deleted successfully"
