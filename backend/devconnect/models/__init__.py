"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Users keyed by email; everything else by UUID

Design Decisions:
    - One file per entity for locality (ADR: ExMA max 3-4 files to understand a feature)
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs (ADR: standard SQLAlchemy pattern)
"""

from devconnect.models.user import User  # noqa: F401
from devconnect.models.post import Post  # noqa: F401
from devconnect.models.comment import Comment  # noqa: F401
from devconnect.models.announcement import Announcement  # noqa: F401
from devconnect.models.tag import Tag  # noqa: F401
