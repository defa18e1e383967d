import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.timestamps import utcnow


class MessageReceiptModel(Base):
    """SQLAlchemy model for message_receipts table."""

    __tablename__ = "message_receipts"
    __table_args__ = (
        UniqueConstraint("message_id", "user_id", "kind", name="uq_receipt_once"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    message_id = Column(Uuid, ForeignKey("messages.id"), nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    kind = Column(String(10), nullable=False)
    recorded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    message = relationship("MessageModel", back_populates="receipts")

    # kind IN ('read', 'delivered')
