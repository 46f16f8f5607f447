"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, ORM models satisfy the *Like
      protocols without inheriting from anything (ADR: no framework in core)
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE these protocols are never async themselves
    - IdentityResolver is sync: shared-secret verification does no IO
"""

from typing import Protocol
from uuid import UUID

from devconnect.core.domain_types import Email, Identity, PaymentStatus, Role
from devconnect.core.vote_ledger import VoteSets


class UserLike(Protocol):
    """Structural contract for user records handed to the orchestrator."""
    email: str
    name: str | None
    photo_url: str | None
    role: str
    payment_status: str


class PostLike(Protocol):
    """Structural contract for posts as seen by the vote flow."""
    id: UUID
    author_email: str
    up_vote: list
    down_vote: list
    vote_version: int


class OwnedResource(Protocol):
    """Anything with an id and an owning email — posts, comments, announcements."""
    id: UUID

    @property
    def owner_email(self) -> str | None: ...


class IdentityResolver(Protocol):
    """Contract for bearer-credential verification — implemented by shell."""
    def resolve(self, token: str) -> Identity: ...


class UserRepository(Protocol):
    """Role store accessor — implemented by shell."""
    async def get(self, email: Email) -> UserLike | None: ...
    async def create(
        self, email: Email, name: str | None, photo_url: str | None,
    ) -> UserLike: ...
    async def set_role(self, email: Email, role: Role) -> None: ...
    async def set_payment_status(
        self, email: Email, status: PaymentStatus,
    ) -> None: ...


class DeletableRepository(Protocol):
    """Lookup + delete by id — the shape the generic delete flow needs."""
    async def get(self, resource_id: UUID) -> OwnedResource | None: ...
    async def delete(self, resource_id: UUID) -> bool: ...


class PostRepository(DeletableRepository, Protocol):
    """Contract for post persistence — implemented by shell."""
    async def get(self, resource_id: UUID) -> PostLike | None: ...
    async def save_votes(
        self, post_id: UUID, votes: VoteSets, expected_version: int,
    ) -> bool: ...


class CommentRepository(DeletableRepository, Protocol):
    """Contract for comment persistence — implemented by shell."""


class AnnouncementRepository(DeletableRepository, Protocol):
    """Contract for announcement persistence — implemented by shell."""
    async def create(
        self, *, title: str, message: str, author_email: Email,
        author_name: str | None, author_image: str | None, author_role: Role,
    ) -> UUID: ...


class PaymentGateway(Protocol):
    """Contract for the payment provider — implemented by shell."""
    async def create_intent(
        self, amount_cents: int, currency: str, metadata: dict[str, str],
    ) -> dict: ...
    async def retrieve_intent(self, intent_id: str) -> dict: ...
