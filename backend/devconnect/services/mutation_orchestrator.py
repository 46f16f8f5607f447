"""Mutation Orchestrator — identity → lookup → policy → transition → persist.

Invariants:
    - Steps run in fixed order and short-circuit on the first failure:
      UnauthorizedError → ResourceNotFoundError → ForbiddenError/RedundantUpdateError
      → PersistenceError (raised by repositories)
    - Voter identity always comes from the verified Identity, never from request bodies
    - Unknown vote types are a no-op: current counts returned, nothing written
    - Vote writes are compare-and-swap on vote_version; a lost race raises ConcurrencyError

Design Decisions:
    - Repositories injected via constructor: the orchestrator is testable with
      in-memory fakes, no DB or FastAPI required (ADR: impureim sandwich)
    - Delete variants expressed as _DELETE_RULES configuration instead of one
      handler body per resource (ADR: no copy-pasted route logic)
    - Users never seen before are treated as Role.USER: registration is lazy
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from devconnect.core.authorization import Decision, decide
from devconnect.core.domain_types import (
    Action, DenialReason, Email, Identity, ResourceKind, Role,
)
from devconnect.core.errors import (
    ConcurrencyError, ErrorContext, ForbiddenError, RedundantUpdateError,
    ResourceNotFoundError, UnauthorizedError,
)
from devconnect.core.repository_protocols import (
    AnnouncementRepository, CommentRepository, DeletableRepository,
    PostRepository, UserLike, UserRepository,
)
from devconnect.core.vote_ledger import VoteSets, apply_vote, parse_vote_type

logger = logging.getLogger(__name__)

_DENIAL_MESSAGES: dict[DenialReason, str] = {
    DenialReason.NOT_RESOURCE_OWNER: "You can only delete your own content",
    DenialReason.FORBIDDEN_ADMINS_ONLY: "Forbidden: admins only",
    DenialReason.REDUNDANT_UPDATE: "User already has this role",
}

# kind → gating action; repository resolved per-instance in _repository_for()
_DELETE_RULES: dict[ResourceKind, Action] = {
    ResourceKind.POST: Action.MODERATE_RESOURCE,
    ResourceKind.COMMENT: Action.MODERATE_RESOURCE,
    ResourceKind.ANNOUNCEMENT: Action.ADMIN_ONLY,
}


@dataclass(frozen=True)
class VoteCounts:
    """Projection returned by cast_vote."""
    up_vote_count: int
    down_vote_count: int


class MutationOrchestrator:
    """Processes a single authenticated write request end-to-end."""

    def __init__(
        self,
        users: UserRepository,
        posts: PostRepository,
        comments: CommentRepository,
        announcements: AnnouncementRepository,
    ):
        self.users = users
        self.posts = posts
        self.comments = comments
        self.announcements = announcements

    # ─── Votes ───────────────────────────────────────────────────

    async def cast_vote(
        self, identity: Identity | None, post_id: UUID, raw_vote_type: str | None,
    ) -> VoteCounts:
        """Toggle the caller's vote on a post and return the new counts."""
        actor = self._require_identity(identity)
        post = await self.posts.get(post_id)
        if post is None:
            raise ResourceNotFoundError("Post", str(post_id))

        current = VoteSets.from_lists(post.up_vote, post.down_vote)
        vote_type = parse_vote_type(raw_vote_type)
        if vote_type is None:
            logger.warning(
                f"Ignoring unknown vote type {raw_vote_type!r} on post {post_id}",
                extra={"actor_email": actor.email, "resource_id": str(post_id)},
            )
            return VoteCounts(current.up_count, current.down_count)

        updated = apply_vote(current, actor.email, vote_type)
        saved = await self.posts.save_votes(post_id, updated, post.vote_version)
        if not saved:
            raise ConcurrencyError(
                "Post votes changed while the vote was being applied; retry the request",
                ErrorContext(
                    actor_email=actor.email, resource_type="Post",
                    resource_id=str(post_id),
                ),
            )
        logger.info(
            f"Vote {vote_type.value} applied to post {post_id}",
            extra={"actor_email": actor.email, "resource_id": str(post_id)},
        )
        return VoteCounts(updated.up_count, updated.down_count)

    # ─── Deletion ────────────────────────────────────────────────

    async def delete_resource(
        self, identity: Identity | None, kind: ResourceKind, resource_id: UUID,
    ) -> None:
        """Delete a post, comment or announcement if the policy allows it."""
        actor = self._require_identity(identity)
        repository = self._repository_for(kind)
        resource = await repository.get(resource_id)
        if resource is None:
            raise ResourceNotFoundError(kind.value.capitalize(), str(resource_id))

        role = await self.actor_role(actor.email)
        decision = decide(
            actor.email, role, resource.owner_email, _DELETE_RULES[kind],
        )
        self._enforce(decision, actor, kind.value, resource_id)

        if not await repository.delete(resource_id):
            # row vanished between lookup and delete
            raise ResourceNotFoundError(kind.value.capitalize(), str(resource_id))
        logger.info(
            f"{kind.value} {resource_id} deleted",
            extra={"actor_email": actor.email, "resource_id": str(resource_id)},
        )

    async def delete_post(self, identity: Identity | None, post_id: UUID) -> None:
        await self.delete_resource(identity, ResourceKind.POST, post_id)

    async def delete_comment(self, identity: Identity | None, comment_id: UUID) -> None:
        await self.delete_resource(identity, ResourceKind.COMMENT, comment_id)

    async def delete_announcement(
        self, identity: Identity | None, announcement_id: UUID,
    ) -> None:
        await self.delete_resource(
            identity, ResourceKind.ANNOUNCEMENT, announcement_id,
        )

    # ─── Admin actions ───────────────────────────────────────────

    async def change_role(
        self, identity: Identity | None, target_email: Email, requested_role: Role,
    ) -> None:
        """Set another user's role. Redundant updates rejected before the admin check."""
        actor = self._require_identity(identity)
        target = await self.users.get(target_email)
        if target is None:
            raise ResourceNotFoundError("User", target_email)

        role = await self.actor_role(actor.email)
        decision = decide(
            actor.email, role, target.email, Action.SET_ROLE,
            current_role=Role(target.role), requested_role=requested_role,
        )
        self._enforce(decision, actor, "User", target_email)

        await self.users.set_role(target_email, requested_role)
        logger.info(
            f"Role of {target_email} set to {requested_role.value}",
            extra={"actor_email": actor.email, "resource_id": target_email},
        )

    async def create_announcement(
        self, identity: Identity | None, title: str, message: str,
    ) -> UUID:
        """Insert an announcement authored by the calling admin."""
        admin = await self.authorize_admin(identity)
        announcement_id = await self.announcements.create(
            title=title,
            message=message,
            author_email=Email(admin.email),
            author_name=admin.name,
            author_image=admin.photo_url,
            author_role=Role(admin.role),
        )
        logger.info(
            f"Announcement {announcement_id} created",
            extra={"actor_email": admin.email, "resource_id": str(announcement_id)},
        )
        return announcement_id

    async def authorize_admin(self, identity: Identity | None) -> UserLike:
        """Gate admin-only reads and writes. Returns the admin's user record."""
        actor = self._require_identity(identity)
        user = await self.users.get(actor.email)
        role = Role(user.role) if user is not None else Role.USER
        decision = decide(actor.email, role, None, Action.ADMIN_ONLY)
        self._enforce(decision, actor, None, None)
        return user

    # ─── Helpers ─────────────────────────────────────────────────

    async def actor_role(self, email: Email) -> Role:
        """Current role of a user; unknown users are plain users."""
        user = await self.users.get(email)
        if user is None:
            return Role.USER
        return Role(user.role)

    def _repository_for(self, kind: ResourceKind) -> DeletableRepository:
        return {
            ResourceKind.POST: self.posts,
            ResourceKind.COMMENT: self.comments,
            ResourceKind.ANNOUNCEMENT: self.announcements,
        }[kind]

    @staticmethod
    def _require_identity(identity: Identity | None) -> Identity:
        if identity is None or not identity.email:
            raise UnauthorizedError()
        return identity

    @staticmethod
    def _enforce(
        decision: Decision,
        actor: Identity,
        resource_type: str | None,
        resource_id: UUID | str | None,
    ) -> None:
        """Raise the typed failure matching a denial."""
        if decision.allowed:
            return
        context = ErrorContext(
            actor_email=actor.email,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
        )
        message = _DENIAL_MESSAGES[decision.reason]
        if decision.reason is DenialReason.REDUNDANT_UPDATE:
            raise RedundantUpdateError(message, context)
        raise ForbiddenError(decision.reason.value, message, context)
