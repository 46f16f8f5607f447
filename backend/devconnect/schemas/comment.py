"""Comment Schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from devconnect.models.comment import Comment
from devconnect.schemas.common import CamelModel


class CommentCreate(CamelModel):
    post_id: UUID
    message: str = Field(min_length=1, max_length=5000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message cannot be empty or whitespace")
        return v


class CommentResponse(CamelModel):
    id: UUID
    post_id: UUID
    email: str
    name: str | None = None
    message: str
    feedback: str = ""
    created_at: datetime

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            post_id=comment.post_id,
            email=comment.email,
            name=comment.name,
            message=comment.message,
            feedback=comment.feedback,
            created_at=comment.created_at,
        )


class CommentReport(CamelModel):
    """A non-empty feedback marks the comment as reported."""
    feedback: str = Field(min_length=1, max_length=500)

    @field_validator("feedback")
    @classmethod
    def strip_feedback(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("feedback cannot be empty or whitespace")
        return v
