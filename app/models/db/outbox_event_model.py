import uuid

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, Uuid

from app.database import Base
from app.timestamps import utcnow


class OutboxEventModel(Base):
    """SQLAlchemy model for outbox_events table.

    Rows are written in the same transaction as the change they describe and
    drained by the outbox dispatcher.
    """

    __tablename__ = "outbox_events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_type = Column(String(50), nullable=False)
    conversation_id = Column(Uuid)
    payload = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    # Lease held by the dispatcher currently handling the event
    claimed_until = Column(DateTime(timezone=True))
    dispatched_at = Column(DateTime(timezone=True))
    attempts = Column(Integer, nullable=False, default=0)
    last_error = Column(Text)
