from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateUserRequest(BaseModel):
    """Request model for registering a user profile."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: str = Field(..., min_length=3, max_length=255, description="Unique email")
    avatar: Optional[str] = Field(default="", description="Avatar URL")
    headline: Optional[str] = Field(default="", description="Profile headline")


class UserResponse(BaseModel):
    """Response model for user data."""

    id: UUID
    name: str
    email: str
    avatar: str
    headline: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """Public user fields shown next to messages and participants."""

    id: UUID
    name: str
    avatar: str = ""
    headline: str = ""

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_user(cls, user: Any) -> "UserSummary":
        return cls(
            id=user.id,
            name=user.name,
            avatar=user.avatar or "",
            headline=user.headline or "",
        )
