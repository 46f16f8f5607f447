"""Membership Payments — payment-intent creation and paid-status confirmation.

Invariants:
    - Intents are tagged with the payer's email (metadata.email)
    - A membership is upgraded only when the provider reports the intent as
      succeeded AND the intent belongs to the caller (core.membership)
    - Already-paid members cannot be upgraded again (RedundantUpdateError)

Design Decisions:
    - Gateway and user store injected: the service never builds HTTP clients
    - Provider responses missing id/client_secret are treated as provider errors
"""

import logging

from devconnect.core.domain_types import Identity, PaymentStatus
from devconnect.core.errors import (
    ErrorContext, PaymentNotCompletedError, PaymentProviderError,
    RedundantUpdateError, ResourceNotFoundError,
)
from devconnect.core.membership import intent_confirms_payment
from devconnect.core.repository_protocols import PaymentGateway, UserRepository

logger = logging.getLogger(__name__)


class MembershipPayments:
    """Creates payment intents and confirms membership upgrades."""

    def __init__(self, gateway: PaymentGateway, users: UserRepository, currency: str):
        self.gateway = gateway
        self.users = users
        self.currency = currency

    async def create_intent(self, identity: Identity, amount_cents: int) -> tuple[str, str]:
        """Return (payment_intent_id, client_secret) for a new intent."""
        intent = await self.gateway.create_intent(
            amount_cents, self.currency, {"email": identity.email},
        )
        intent_id = intent.get("id")
        client_secret = intent.get("client_secret")
        if not intent_id or not client_secret:
            raise PaymentProviderError(
                "Intent response missing id or client_secret", "malformed_response",
            )
        logger.info(
            f"Payment intent {intent_id} created for {amount_cents} {self.currency}",
            extra={"actor_email": identity.email, "resource_id": intent_id},
        )
        return intent_id, client_secret

    async def confirm(self, identity: Identity, intent_id: str) -> PaymentStatus:
        """Mark the caller as paid once the provider confirms the intent."""
        user = await self.users.get(identity.email)
        if user is None:
            raise ResourceNotFoundError("User", identity.email)
        if PaymentStatus(user.payment_status) is PaymentStatus.PAID:
            raise RedundantUpdateError(
                "Membership is already paid",
                ErrorContext(actor_email=identity.email),
            )

        intent = await self.gateway.retrieve_intent(intent_id)
        if not intent_confirms_payment(intent, identity.email):
            raise PaymentNotCompletedError(
                intent_id, ErrorContext(actor_email=identity.email, resource_id=intent_id),
            )

        await self.users.set_payment_status(identity.email, PaymentStatus.PAID)
        logger.info(
            f"Membership upgraded via intent {intent_id}",
            extra={"actor_email": identity.email, "resource_id": intent_id},
        )
        return PaymentStatus.PAID
