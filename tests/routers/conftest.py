from datetime import datetime, timezone
from uuid import uuid4

import pytest

from app.models.api.conversations import ConversationResponse
from app.models.api.messages import MessageResponse, MessageType
from app.models.api.participants import ParticipantResponse
from app.models.api.users import UserResponse, UserSummary


@pytest.fixture
def sample_conversation(principal: UserResponse) -> ConversationResponse:
    """Direct conversation between the principal and one other user."""
    now = datetime.now(timezone.utc)
    return ConversationResponse(
        id=uuid4(),
        participants=[
            ParticipantResponse(
                user=UserSummary(id=principal.id, name=principal.name),
                is_admin=False,
                joined_at=now,
            ),
            ParticipantResponse(
                user=UserSummary(id=uuid4(), name="Alan"),
                is_admin=False,
                joined_at=now,
            ),
        ],
        is_group=False,
        group_name=None,
        group_image=None,
        admins=[],
        is_archived=False,
        last_message_id=None,
        last_activity=now,
        message_count=0,
        muted_by=[],
        typing_users=[],
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def sample_message(
    principal: UserResponse, sample_conversation: ConversationResponse
) -> MessageResponse:
    now = datetime.now(timezone.utc)
    return MessageResponse(
        id=uuid4(),
        conversation_id=sample_conversation.id,
        sequence=1,
        sender=UserSummary(id=principal.id, name=principal.name),
        content="Hello",
        message_type=MessageType.TEXT,
        attachments=[],
        is_edited=False,
        edited_at=None,
        is_deleted=False,
        read_by=[],
        delivered_to=[],
        reply_to_id=None,
        created_at=now,
        updated_at=now,
    )
