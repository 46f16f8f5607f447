"""User Schemas — registration, profile and role-change payloads.

Invariants:
    - Registration never accepts an email: it comes from the verified identity
    - RoleChange.role restricted to known roles (Literal, validated by Pydantic)
    - Emails normalized to lowercase, matching the identity resolver
"""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from devconnect.models.user import User
from devconnect.schemas.common import CamelModel, Pagination


class UserRegister(CamelModel):
    """PUT /users body. Falls back to token claims when fields are omitted."""
    name: str | None = Field(None, max_length=200)
    photo_url: str | None = Field(None, alias="photoURL", max_length=2000)


class UserResponse(CamelModel):
    email: str
    name: str | None = None
    photo_url: str | None = Field(None, alias="photoURL")
    role: str
    payment_status: str
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            email=user.email,
            name=user.name,
            photo_url=user.photo_url,
            role=user.role,
            payment_status=user.payment_status,
            created_at=user.created_at,
        )


class UserList(CamelModel):
    users: list[UserResponse]
    pagination: Pagination


class RoleChange(CamelModel):
    """PATCH /users/admin body."""
    email: str = Field(min_length=3, max_length=320)
    role: Literal["user", "admin"]

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v


class AdminStats(CamelModel):
    users: int
    posts: int
    comments: int
    reported_comments: int
