from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models.api.conversations import (
    ConversationResponse,
    CreateConversationRequest,
    MuteConversationRequest,
    ReceiptsUpdatedResponse,
    TypingRequest,
    TypingResponse,
)
from app.models.api.messages import MessageResponse, SendMessageRequest
from app.models.api.users import UserResponse
from app.services.conversation_state_service import ConversationStateService
from app.services.get_conversation_messages_service import (
    GetConversationMessagesService,
)
from app.services.list_conversations_service import ListConversationsService
from app.services.send_message_service import SendMessageService
from app.services.start_conversation_service import StartConversationService

router = APIRouter()


@router.get("", response_model=List[ConversationResponse])
async def list_conversations(
    page: Optional[int] = Query(1, description="Page number, starting at 1", ge=1),
    limit: Optional[int] = Query(
        20, description="Maximum number of conversations to return", ge=1, le=100
    ),
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> List[ConversationResponse]:
    """
    List the caller's non-archived conversations, most recently active first.

    Query parameters:
    - page: Page number (default: 1)
    - limit: Conversations per page (default: 20, max: 100)
    """
    service = ListConversationsService(db)
    return await service.list_conversations(principal, page=page, limit=limit)


@router.post("", response_model=ConversationResponse)
async def create_conversation(
    request: CreateConversationRequest,
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ConversationResponse:
    """Return the direct conversation with the participants, or create one."""
    service = StartConversationService(db)
    return await service.get_or_create(principal, request)


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: UUID,
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ConversationResponse:
    """
    Get detailed information about a specific conversation.

    Path parameters:
    - conversation_id: UUID of the conversation
    """
    service = ListConversationsService(db)
    return await service.get_conversation_summary(principal, conversation_id)


@router.get("/{conversation_id}/messages", response_model=List[MessageResponse])
async def get_conversation_messages(
    conversation_id: UUID,
    page: Optional[int] = Query(1, description="Page number, newest first", ge=1),
    limit: Optional[int] = Query(
        50, description="Maximum number of messages to return", ge=1, le=100
    ),
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> List[MessageResponse]:
    """
    Get a page of messages and mark the conversation read for the caller.

    Pages are counted from the newest message; each page is ordered
    oldest-first.
    """
    service = GetConversationMessagesService(db)
    return await service.get_conversation_messages(
        principal, conversation_id, page=page, limit=limit
    )


@router.post("/{conversation_id}/messages", response_model=MessageResponse)
async def send_message(
    conversation_id: UUID,
    request: SendMessageRequest,
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Send a message with up to 5 attachments."""
    service = SendMessageService(db)
    return await service.send_message(principal, conversation_id, request)


@router.put("/{conversation_id}/read", response_model=ReceiptsUpdatedResponse)
async def mark_conversation_read(
    conversation_id: UUID,
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ReceiptsUpdatedResponse:
    """Mark every message in the conversation as read by the caller."""
    service = GetConversationMessagesService(db)
    return await service.mark_conversation_read(principal, conversation_id)


@router.put("/{conversation_id}/delivered", response_model=ReceiptsUpdatedResponse)
async def mark_conversation_delivered(
    conversation_id: UUID,
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ReceiptsUpdatedResponse:
    """Mark messages from the other participants as delivered to the caller."""
    service = GetConversationMessagesService(db)
    return await service.mark_conversation_delivered(principal, conversation_id)


@router.put("/{conversation_id}/archive", response_model=ConversationResponse)
async def archive_conversation(
    conversation_id: UUID,
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ConversationResponse:
    """Archive the conversation."""
    service = ConversationStateService(db)
    return await service.archive(principal, conversation_id)


@router.put("/{conversation_id}/mute", response_model=ConversationResponse)
async def mute_conversation(
    conversation_id: UUID,
    request: MuteConversationRequest,
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ConversationResponse:
    """Mute the conversation for the caller until the given time."""
    service = ConversationStateService(db)
    return await service.mute(principal, conversation_id, request.muted_until)


@router.post("/{conversation_id}/typing", response_model=TypingResponse)
async def set_typing(
    conversation_id: UUID,
    request: TypingRequest,
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> TypingResponse:
    """Start or stop the caller's typing indicator."""
    service = ConversationStateService(db)
    return await service.set_typing(principal, conversation_id, request.is_typing)
