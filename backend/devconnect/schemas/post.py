"""Post Schemas — creation, listing and vote payloads.

Invariants:
    - PostCreate.title: 1-300 chars, stripped, non-empty
    - PostCreate.tag: lowercase, or None when blank
    - Author fields are never accepted from clients (taken from the identity)
    - VoteRequest.vote_type is free text: unknown values are a no-op downstream
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from devconnect.models.post import Post
from devconnect.schemas.common import CamelModel, Pagination


class PostCreate(CamelModel):
    title: str = Field(min_length=1, max_length=300)
    description: str = Field("", max_length=20_000)
    tag: str | None = Field(None, max_length=100)
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v

    @field_validator("tag")
    @classmethod
    def normalize_tag(cls, v: str | None) -> str | None:
        """Tags are stored lowercase; blank means untagged."""
        if v is None:
            return None
        return v.strip().lower() or None


class PostResponse(CamelModel):
    id: UUID
    author_email: str
    author: str | None = None
    author_photo: str | None = None
    title: str
    description: str
    tag: str | None = None
    up_vote: list[str]
    down_vote: list[str]
    up_vote_count: int
    down_vote_count: int
    time_of_post: datetime
    extra: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            author_email=post.author_email,
            author=post.author,
            author_photo=post.author_photo,
            title=post.title,
            description=post.description,
            tag=post.tag,
            up_vote=list(post.up_vote or []),
            down_vote=list(post.down_vote or []),
            up_vote_count=len(post.up_vote or []),
            down_vote_count=len(post.down_vote or []),
            time_of_post=post.time_of_post,
            extra=post.extra or {},
        )


class PostList(CamelModel):
    posts: list[PostResponse]
    pagination: Pagination


class VoteRequest(CamelModel):
    vote_type: str | None = None


class VoteResponse(CamelModel):
    up_vote_count: int
    down_vote_count: int
