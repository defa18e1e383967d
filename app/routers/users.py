from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models.api.users import CreateUserRequest, UserResponse
from app.services.user_service import UserService

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    request: CreateUserRequest, db: AsyncSession = Depends(get_db)
) -> UserResponse:
    """Register a user profile."""
    service = UserService(db)
    return await service.create_user(request)


@router.get("/me", response_model=UserResponse)
async def get_me(principal: UserResponse = Depends(get_current_user)) -> UserResponse:
    """Return the authenticated user."""
    return principal


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    _principal: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Get a user profile."""
    service = UserService(db)
    return await service.get_user(user_id)
