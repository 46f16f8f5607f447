"""Announcement Schemas — admin broadcast payloads."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, ValidationInfo, field_validator

from devconnect.models.announcement import Announcement
from devconnect.schemas.common import CamelModel


class AnnouncementCreate(CamelModel):
    title: str = Field(min_length=1, max_length=300)
    message: str = Field(min_length=1, max_length=10_000)

    @field_validator("title", "message")
    @classmethod
    def strip_text(cls, v: str, info: ValidationInfo) -> str:
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v


class AnnouncementAuthor(CamelModel):
    name: str | None = None
    image: str | None = None
    role: str


class AnnouncementResponse(CamelModel):
    id: UUID
    title: str
    message: str
    posted_at: datetime
    author: AnnouncementAuthor

    @classmethod
    def from_announcement(cls, a: Announcement) -> "AnnouncementResponse":
        return cls(
            id=a.id,
            title=a.title,
            message=a.message,
            posted_at=a.posted_at,
            author=AnnouncementAuthor(
                name=a.author_name, image=a.author_image, role=a.author_role,
            ),
        )


class AnnouncementCount(CamelModel):
    count: int
