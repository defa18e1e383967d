from typing import Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models.api.notifications import (
    NotificationPage,
    NotificationResponse,
    NotificationStatsResponse,
)
from app.models.api.users import UserResponse
from app.services.notification_service import NotificationService

router = APIRouter()


@router.get("", response_model=NotificationPage)
async def list_notifications(
    page: Optional[int] = Query(1, ge=1),
    limit: Optional[int] = Query(20, ge=1, le=100),
    is_read: Optional[bool] = Query(None, description="Filter by read state"),
    type: Optional[str] = Query(None, description="Filter by notification type"),
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> NotificationPage:
    """List the caller's notifications, newest first."""
    service = NotificationService(db)
    return await service.list_notifications(
        principal, page=page, limit=limit, is_read=is_read, notification_type=type
    )


@router.get("/stats", response_model=NotificationStatsResponse)
async def notification_stats(
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> NotificationStatsResponse:
    """Per-type totals and unread counts."""
    service = NotificationService(db)
    return await service.stats(principal)


@router.put("/read-all")
async def mark_all_notifications_read(
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, int]:
    """Mark all of the caller's notifications as read."""
    service = NotificationService(db)
    updated = await service.mark_all_read(principal)
    return {"updated": updated}


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: UUID,
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> NotificationResponse:
    """Mark one notification as read."""
    service = NotificationService(db)
    return await service.mark_read(principal, notification_id)


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: UUID,
    principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, str]:
    """Delete one notification."""
    service = NotificationService(db)
    await service.delete(principal, notification_id)
    return {"detail": "Notification deleted successfully"}
