"""Request-scoped dependencies shared by the routers."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.api.users import UserResponse
from app.repositories.user_repository import UserRepository


async def get_current_user(
    x_user_id: Optional[str] = Header(
        None, description="Authenticated user id set by the auth gateway"
    ),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Resolve the authenticated principal for the request."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid user id")

    user = await UserRepository(db).get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user
