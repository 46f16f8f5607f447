"""User ORM — community member keyed by email.

Invariants:
    - email is the primary key (sole identity key, no surrogate id)
    - role ∈ {user, admin}; payment_status ∈ {unpaid, paid}
    - Users are never deleted

Design Decisions:
    - String columns for role/payment_status over DB enums: new roles need no migration
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from devconnect.db.base import Base


class User(Base):
    """Registered community member."""
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(320), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    photo_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="user",
    )
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="unpaid",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
