import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.timestamps import utcnow


class NotificationModel(Base):
    """SQLAlchemy model for notifications table."""

    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    recipient_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    sender_id = Column(Uuid, ForeignKey("users.id"))
    type = Column(String(30), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    action_url = Column(String(1024))
    conversation_id = Column(Uuid)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    sender = relationship("UserModel", foreign_keys=[sender_id])
