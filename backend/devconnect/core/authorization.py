"""Authorization Policy — pure allow/deny decisions for gated mutations.

Invariants:
    - decide() is PURE: no IO, no role lookups, deterministic for equal inputs
    - Unauthenticated callers never reach decide() (orchestrator precondition)
    - SET_ROLE checks the redundant-update guard BEFORE the admin rule
    - Every denial carries a DenialReason (never a bare False)

Design Decisions:
    - Decision dataclass over exceptions: policy stays testable without pytest.raises,
      orchestrator maps denials to ForbiddenError/RedundantUpdateError
    - MODERATE_RESOURCE used for both post and comment deletion: one consistent
      owner-or-admin rule instead of per-resource variations
"""

from dataclasses import dataclass

from devconnect.core.domain_types import Action, DenialReason, Role


@dataclass(frozen=True)
class Decision:
    """Policy outcome. reason is None iff allowed."""
    allowed: bool
    reason: DenialReason | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenialReason) -> "Decision":
        return cls(allowed=False, reason=reason)


def _is_owner(actor_email: str, resource_owner_email: str | None) -> bool:
    return resource_owner_email is not None and actor_email == resource_owner_email


def decide(
    actor_email: str,
    actor_role: Role,
    resource_owner_email: str | None,
    action: Action,
    *,
    current_role: Role | None = None,
    requested_role: Role | None = None,
) -> Decision:
    """Map (actor, role, owner, action) to an allow/deny Decision."""
    if action is Action.DELETE_OWN_RESOURCE:
        if _is_owner(actor_email, resource_owner_email):
            return Decision.allow()
        return Decision.deny(DenialReason.NOT_RESOURCE_OWNER)

    if action is Action.MODERATE_RESOURCE:
        if _is_owner(actor_email, resource_owner_email) or actor_role is Role.ADMIN:
            return Decision.allow()
        return Decision.deny(DenialReason.NOT_RESOURCE_OWNER)

    if action is Action.SET_ROLE:
        if requested_role is not None and requested_role == current_role:
            return Decision.deny(DenialReason.REDUNDANT_UPDATE)
        return _admin_only(actor_role)

    if action is Action.ADMIN_ONLY:
        return _admin_only(actor_role)

    raise ValueError(f"Unknown action: {action!r}")


def _admin_only(actor_role: Role) -> Decision:
    if actor_role is Role.ADMIN:
        return Decision.allow()
    return Decision.deny(DenialReason.FORBIDDEN_ADMINS_ONLY)
