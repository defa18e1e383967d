from typing import Any, Iterable, Optional, Set
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.models.api.users import UserResponse
from app.models.db.user_model import UserModel
from app.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[UserModel, UserResponse]):
    """Repository for user directory operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, UserModel)

    async def get_by_email(self, email: str) -> Optional[UserResponse]:
        """Get a user by email address."""
        query = select(self.model_class).where(self.model_class.email == email)
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def get_existing_ids(self, ids: Iterable[UUID]) -> Set[UUID]:
        """Return the subset of ids that belong to registered users."""
        ids = list(ids)
        if not ids:
            return set()
        query = select(self.model_class.id).where(self.model_class.id.in_(ids))
        result = await self.db.execute(query)
        return set(result.scalars().all())

    async def create_user(
        self, name: str, email: str, avatar: str = "", headline: str = ""
    ) -> UserResponse:
        """Create a new user profile."""
        db_model = UserModel(name=name, email=email, avatar=avatar, headline=headline)
        await self.add(db_model)
        return self._to_pydantic(db_model)

    def _to_pydantic(self, db_model: Any) -> UserResponse:
        """Convert SQLAlchemy UserModel to Pydantic UserResponse."""
        return UserResponse(
            id=db_model.id,
            name=db_model.name,
            email=db_model.email,
            avatar=db_model.avatar or "",
            headline=db_model.headline or "",
            created_at=db_model.created_at,
            updated_at=db_model.updated_at,
        )
