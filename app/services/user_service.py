import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.api.users import CreateUserRequest, UserResponse
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Service for the user directory."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def create_user(self, request: CreateUserRequest) -> UserResponse:
        """Register a profile; emails are unique."""
        name = request.name.strip()
        email = request.email.strip().lower()
        if not name:
            raise ValidationError("Name is required")
        if "@" not in email:
            raise ValidationError("A valid email address is required")

        if await self.user_repo.get_by_email(email):
            raise ConflictError("A user with this email already exists")

        user = await self.user_repo.create_user(
            name=name,
            email=email,
            avatar=request.avatar or "",
            headline=request.headline or "",
        )
        logger.info("Created user %s", user.id)
        return user

    async def get_user(self, user_id: UUID) -> UserResponse:
        """Get a user profile by ID."""
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user
