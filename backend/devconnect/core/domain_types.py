"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Email is the sole user identity key; PostId, CommentId, AnnouncementId wrap UUIDs
    - All valid states encoded as Enums — no raw string matching in core logic
    - Identity is immutable once verified

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

Email = NewType("Email", str)
PostId = NewType("PostId", UUID)
CommentId = NewType("CommentId", UUID)
AnnouncementId = NewType("AnnouncementId", UUID)


@dataclass(frozen=True)
class Identity:
    """Verified caller identity, as produced by the identity resolver."""
    email: Email
    name: str | None = None
    picture: str | None = None


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """User roles — maps to DB `role` column."""
    USER = "user"
    ADMIN = "admin"


class PaymentStatus(str, Enum):
    """Membership payment state — maps to DB `payment_status` column."""
    UNPAID = "unpaid"
    PAID = "paid"


class VoteType(str, Enum):
    """Vote directions accepted by the vote ledger."""
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class Action(str, Enum):
    """Actions the authorization policy knows how to gate."""
    DELETE_OWN_RESOURCE = "delete_own_resource"
    MODERATE_RESOURCE = "moderate_resource"
    ADMIN_ONLY = "admin_only"
    SET_ROLE = "set_role"


class DenialReason(str, Enum):
    """Why the policy denied an action — doubles as the error code."""
    NOT_RESOURCE_OWNER = "NOT_RESOURCE_OWNER"
    FORBIDDEN_ADMINS_ONLY = "FORBIDDEN_ADMINS_ONLY"
    REDUNDANT_UPDATE = "REDUNDANT_UPDATE"


class ResourceKind(str, Enum):
    """Resources that go through the generic delete flow."""
    POST = "post"
    COMMENT = "comment"
    ANNOUNCEMENT = "announcement"
