from typing import Any
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.api.users import CreateUserRequest
from app.services.user_service import UserService


class TestUserService:
    """Tests for UserService against an in-memory database."""

    @pytest.fixture
    def service(self, test_db: AsyncSession) -> UserService:
        return UserService(test_db)

    @pytest.mark.asyncio
    async def test_create_user_normalizes_email(self, service: UserService) -> None:
        user = await service.create_user(
            CreateUserRequest(name=" Ada ", email="Ada@Example.com ", headline="Math")
        )

        assert user.name == "Ada"
        assert user.email == "ada@example.com"
        assert user.headline == "Math"
        assert user.avatar == ""

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, service: UserService) -> None:
        await service.create_user(CreateUserRequest(name="Ada", email="ada@example.com"))

        with pytest.raises(ConflictError):
            await service.create_user(
                CreateUserRequest(name="Other", email="ADA@example.com")
            )

    @pytest.mark.asyncio
    async def test_email_must_look_like_an_address(self, service: UserService) -> None:
        with pytest.raises(ValidationError):
            await service.create_user(CreateUserRequest(name="Ada", email="ada"))

    @pytest.mark.asyncio
    async def test_blank_name_is_rejected(self, service: UserService) -> None:
        with pytest.raises(ValidationError):
            await service.create_user(
                CreateUserRequest(name="   ", email="ada@example.com")
            )

    @pytest.mark.asyncio
    async def test_get_user(self, service: UserService, make_user: Any) -> None:
        user = await make_user("Bob")

        found = await service.get_user(user.id)

        assert found.id == user.id
        with pytest.raises(NotFoundError):
            await service.get_user(uuid4())
