"""Post ORM — a discussion thread with its voter sets.

Invariants:
    - up_vote ∩ down_vote = ∅ (enforced by the vote ledger, not the DB)
    - vote_score == len(up_vote) - len(down_vote) after every vote write
    - vote_version increments on every vote write (compare-and-swap token)
    - Deleting a post deletes its comments (FK ON DELETE CASCADE + repository)

Design Decisions:
    - JSON arrays for voter sets: a vote write is a single-row UPDATE, atomic
      without multi-statement transactions
    - vote_score denormalized: popularity sort stays a plain ORDER BY
    - extra JSON column keeps free-form client fields the API does not model
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from devconnect.db.base import Base


class Post(Base):
    """Community post."""
    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    author_email: Mapped[str] = mapped_column(
        String(320), nullable=False, index=True,
    )
    author: Mapped[str | None] = mapped_column(String(200), nullable=True)
    author_photo: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    tag: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    up_vote: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    down_vote: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    vote_score: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, index=True,
    )
    vote_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    extra: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    time_of_post: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @property
    def owner_email(self) -> str:
        return self.author_email
