# API models for request/response contracts
from .conversations import (
    ConversationResponse,
    CreateConversationRequest,
    MuteConversationRequest,
    ReceiptsUpdatedResponse,
    TypingRequest,
    TypingResponse,
)
from .messages import (
    Attachment,
    DeleteMessageResponse,
    EditMessageRequest,
    MessagePreview,
    MessageResponse,
    MessageType,
    ReceiptResponse,
    SendMessageRequest,
)
from .notifications import (
    NotificationPage,
    NotificationResponse,
    NotificationStatsResponse,
)
from .participants import MuteEntry, ParticipantResponse, TypingEntry
from .users import CreateUserRequest, UserResponse, UserSummary

__all__ = [
    "Attachment",
    "ConversationResponse",
    "CreateConversationRequest",
    "CreateUserRequest",
    "DeleteMessageResponse",
    "EditMessageRequest",
    "MessagePreview",
    "MessageResponse",
    "MessageType",
    "MuteConversationRequest",
    "MuteEntry",
    "NotificationPage",
    "NotificationResponse",
    "NotificationStatsResponse",
    "ParticipantResponse",
    "ReceiptResponse",
    "ReceiptsUpdatedResponse",
    "SendMessageRequest",
    "TypingEntry",
    "TypingRequest",
    "TypingResponse",
    "UserResponse",
    "UserSummary",
]
