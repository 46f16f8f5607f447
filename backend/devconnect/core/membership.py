"""Membership Rules — free-tier post allowance and payment confirmation.

Invariants:
    - Paid members have no post limit
    - Unpaid members may hold at most free_post_limit posts at once
    - Only a provider status of "succeeded" upgrades a membership
"""

from devconnect.core.domain_types import PaymentStatus

SUCCEEDED_INTENT_STATUS = "succeeded"


def can_publish(
    payment_status: PaymentStatus, published_count: int, free_post_limit: int,
) -> bool:
    """Whether a member may publish one more post."""
    if payment_status is PaymentStatus.PAID:
        return True
    return published_count < free_post_limit


def intent_confirms_payment(intent: dict, expected_email: str) -> bool:
    """Provider intent succeeded and was created for this member."""
    metadata = intent.get("metadata") or {}
    return (
        intent.get("status") == SUCCEEDED_INTENT_STATUS
        and metadata.get("email") == expected_email
    )
