from typing import Any, Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.database import Base

ModelType = TypeVar("ModelType", bound=Base)
PydanticType = TypeVar("PydanticType", bound=BaseModel)


class BaseRepository(Generic[ModelType, PydanticType]):
    """Generic base repository with common CRUD operations."""

    def __init__(self, db: AsyncSession, model_class: Any):
        self.db = db
        self.model_class = model_class

    def _load_options(self) -> List[Any]:
        """Loader options applied whenever a row is fetched."""
        return []

    async def get_model(
        self, id: UUID, for_update: bool = False
    ) -> Optional[ModelType]:
        """Get a single ORM row by ID with its relationships refreshed."""
        query = (
            select(self.model_class)
            .where(self.model_class.id == id)
            .options(*self._load_options())
            .execution_options(populate_existing=True)
        )  # type: ignore
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_id(self, id: UUID) -> Optional[PydanticType]:
        """Get a single record by ID."""
        db_model = await self.get_model(id)
        return self._to_pydantic(db_model) if db_model else None

    async def add(self, db_model: ModelType, commit: bool = True) -> ModelType:
        """Add a new row; flush only when the caller owns the transaction."""
        self.db.add(db_model)
        if commit:
            await self.db.commit()
        else:
            await self.db.flush()
        return db_model

    async def delete(self, id: UUID) -> bool:
        """Delete a record by ID."""
        query = select(self.model_class).where(self.model_class.id == id)  # type: ignore
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()

        if not db_model:
            return False

        await self.db.delete(db_model)
        await self.db.commit()
        return True

    def to_response(self, db_model: ModelType) -> PydanticType:
        """Convert a row already loaded by the caller."""
        return self._to_pydantic(db_model)

    def _to_pydantic(self, db_model: ModelType) -> PydanticType:
        """Convert SQLAlchemy model to Pydantic model.

        This should be overridden in subclasses for specific conversion logic.
        """
        raise NotImplementedError
