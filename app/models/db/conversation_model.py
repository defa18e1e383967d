import uuid

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.timestamps import utcnow


class ConversationModel(Base):
    """SQLAlchemy model for conversations table."""

    __tablename__ = "conversations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    is_group = Column(Boolean, nullable=False, default=False)
    group_name = Column(String(255))
    group_image = Column(String(1024))
    # Sorted participant pair of a direct conversation, null for groups
    direct_key = Column(String(80), unique=True)
    is_archived = Column(Boolean, nullable=False, default=False)
    last_message_id = Column(Uuid)
    last_activity = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    message_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    participants = relationship(
        "ParticipantModel",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="ParticipantModel.position",
    )
    # No foreign key on last_message_id; messages already reference conversations
    last_message = relationship(
        "MessageModel",
        primaryjoin="foreign(ConversationModel.last_message_id) == MessageModel.id",
        viewonly=True,
    )
