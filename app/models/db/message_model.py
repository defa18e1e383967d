import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.database import Base
from app.timestamps import utcnow


class MessageModel(Base):
    """SQLAlchemy model for messages table."""

    __tablename__ = "messages"
    __table_args__ = (
        UniqueConstraint(
            "conversation_id", "sequence", name="uq_message_conversation_sequence"
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    conversation_id = Column(Uuid, ForeignKey("conversations.id"), nullable=False)
    # Position in the conversation, 1-based, never reused
    sequence = Column(Integer, nullable=False)
    sender_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False, default="")
    message_type = Column(String(10), nullable=False, default="text")
    attachments = Column(JSON, default=list)
    is_edited = Column(Boolean, nullable=False, default=False)
    edited_at = Column(DateTime(timezone=True))
    is_deleted = Column(Boolean, nullable=False, default=False)
    reply_to_id = Column(Uuid, ForeignKey("messages.id"))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    sender = relationship("UserModel")
    reply_to = relationship("MessageModel", remote_side=[id])
    receipts = relationship(
        "MessageReceiptModel",
        back_populates="message",
        cascade="all, delete-orphan",
        order_by="MessageReceiptModel.recorded_at",
    )

    # Constraints (enforced by database CHECK constraints in the migration)
    # message_type IN ('text', 'image', 'file', 'voice')
