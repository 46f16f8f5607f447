"""Vote Ledger — pure toggle transition over a post's up/down voter sets.

Invariants:
    - apply_vote is PURE: returns a new VoteSets, never mutates its input
    - After any transition the actor appears in at most one of the two sets
    - up ∩ down = ∅ is preserved by every transition
    - Applying the same (actor, vote_type) twice returns the original sets

Design Decisions:
    - frozenset over list: membership is the only question asked of a vote set,
      duplicates are impossible by construction
    - Unknown vote types are parsed to None and treated as a no-op by the caller
      rather than raised (mirrors observed client behavior)
"""

from dataclasses import dataclass, field
from collections.abc import Iterable

from devconnect.core.domain_types import Email, VoteType


@dataclass(frozen=True)
class VoteSets:
    """Immutable snapshot of a post's voters."""
    up: frozenset[str] = field(default_factory=frozenset)
    down: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_lists(
        cls, up: Iterable[str] | None, down: Iterable[str] | None,
    ) -> "VoteSets":
        """Build from stored arrays (None treated as empty)."""
        return cls(up=frozenset(up or ()), down=frozenset(down or ()))

    @property
    def up_count(self) -> int:
        return len(self.up)

    @property
    def down_count(self) -> int:
        return len(self.down)

    @property
    def score(self) -> int:
        return self.up_count - self.down_count

    def as_lists(self) -> tuple[list[str], list[str]]:
        """Sorted lists for storage — stable output for identical sets."""
        return sorted(self.up), sorted(self.down)


def parse_vote_type(raw: str | None) -> VoteType | None:
    """Map a client-supplied vote type to VoteType, or None if unrecognised."""
    if raw is None:
        return None
    try:
        return VoteType(raw)
    except ValueError:
        return None


def toggle(members: frozenset[str], email: str) -> frozenset[str]:
    """Remove email if present, add it otherwise."""
    if email in members:
        return members - {email}
    return members | {email}


def apply_vote(sets: VoteSets, email: Email, vote_type: VoteType) -> VoteSets:
    """Compute the next voter sets for a single vote.

    The opposite set always loses the actor; the target set is toggled.
    """
    if vote_type is VoteType.UPVOTE:
        return VoteSets(up=toggle(sets.up, email), down=sets.down - {email})
    return VoteSets(up=sets.up - {email}, down=toggle(sets.down, email))
