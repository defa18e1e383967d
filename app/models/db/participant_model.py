import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.database import Base
from app.timestamps import utcnow


class ParticipantModel(Base):
    """SQLAlchemy model for conversation_participants table.

    Mute and typing state are keyed by participant, one row per member.
    """

    __tablename__ = "conversation_participants"
    __table_args__ = (
        UniqueConstraint("conversation_id", "user_id", name="uq_participant_user"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    conversation_id = Column(Uuid, ForeignKey("conversations.id"), nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    is_admin = Column(Boolean, nullable=False, default=False)
    muted_until = Column(DateTime(timezone=True))
    typing_started_at = Column(DateTime(timezone=True))
    joined_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    conversation = relationship("ConversationModel", back_populates="participants")
    user = relationship("UserModel")
