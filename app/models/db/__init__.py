# SQLAlchemy database models
from .conversation_model import ConversationModel
from .message_model import MessageModel
from .notification_model import NotificationModel
from .outbox_event_model import OutboxEventModel
from .participant_model import ParticipantModel
from .receipt_model import MessageReceiptModel
from .user_model import UserModel

__all__ = [
    "ConversationModel",
    "MessageModel",
    "MessageReceiptModel",
    "NotificationModel",
    "OutboxEventModel",
    "ParticipantModel",
    "UserModel",
]
