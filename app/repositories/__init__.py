# Repository classes for database operations
from .base_repository import BaseRepository
from .conversation_repository import ConversationRepository
from .message_repository import MessageRepository
from .notification_repository import NotificationRepository
from .outbox_repository import OutboxRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "ConversationRepository",
    "MessageRepository",
    "NotificationRepository",
    "OutboxRepository",
    "UserRepository",
]
