from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models.api.messages import (
    DeleteMessageResponse,
    EditMessageRequest,
    MessageResponse,
)
from app.models.api.users import UserResponse
from app.services.edit_message_service import EditMessageService
from app.services.search_messages_service import SearchMessagesService

router = APIRouter()


@router.get("/search", response_model=List[MessageResponse])
async def search_messages(
    query: Optional[str] = Query(None, description="Case-insensitive regex"),
    conversation_id: Optional[UUID] = Query(
        None, description="Restrict the search to one conversation"
    ),
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> List[MessageResponse]:
    """Search message content across the caller's conversations."""
    service = SearchMessagesService(db)
    return await service.search(principal, query, conversation_id=conversation_id)


@router.put("/{message_id}", response_model=MessageResponse)
async def edit_message(
    message_id: UUID,
    request: EditMessageRequest,
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Edit a message; only its sender may do so."""
    service = EditMessageService(db)
    return await service.edit_message(principal, message_id, request)


@router.delete("/{message_id}", response_model=DeleteMessageResponse)
async def delete_message(
    message_id: UUID,
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> DeleteMessageResponse:
    """Soft delete a message; only its sender may do so."""
    service = EditMessageService(db)
    return await service.delete_message(principal, message_id)
