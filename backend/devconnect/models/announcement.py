"""Announcement ORM — admin broadcast shown to all members.

Invariants:
    - Created and deleted by admins only (gated in the orchestrator)
    - author_* columns are a snapshot taken at creation time
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from devconnect.db.base import Base


class Announcement(Base):
    """Announcement entity."""
    __tablename__ = "announcements"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    author_email: Mapped[str] = mapped_column(String(320), nullable=False)
    author_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    author_image: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    author_role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="admin",
    )
    posted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @property
    def owner_email(self) -> str:
        return self.author_email
