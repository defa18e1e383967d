# Export all models
from .api import (
    ConversationResponse,
    CreateConversationRequest,
    MessageResponse,
    NotificationResponse,
    SendMessageRequest,
    UserResponse,
)
from .db import (
    ConversationModel,
    MessageModel,
    MessageReceiptModel,
    NotificationModel,
    OutboxEventModel,
    ParticipantModel,
    UserModel,
)

__all__ = [
    # API models
    "ConversationResponse",
    "CreateConversationRequest",
    "MessageResponse",
    "NotificationResponse",
    "SendMessageRequest",
    "UserResponse",
    # DB models
    "ConversationModel",
    "MessageModel",
    "MessageReceiptModel",
    "NotificationModel",
    "OutboxEventModel",
    "ParticipantModel",
    "UserModel",
]
