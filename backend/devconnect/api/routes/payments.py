"""Payment Routes — membership upgrade through payment intents."""

from fastapi import APIRouter, Depends

from devconnect.api.deps import (
    get_payment_gateway, get_user_repository, require_identity,
)
from devconnect.config import Settings, get_settings
from devconnect.core.domain_types import Identity
from devconnect.core.repository_protocols import PaymentGateway
from devconnect.infrastructure.sql_repositories import SqlUserRepository
from devconnect.schemas.payment import (
    PaymentConfirm, PaymentConfirmResponse, PaymentIntentCreate, PaymentIntentResponse,
)
from devconnect.services.membership_payments import MembershipPayments

router = APIRouter(prefix="/api/v1/payments", tags=["payments"])


def get_membership_payments(
    gateway: PaymentGateway = Depends(get_payment_gateway),
    users: SqlUserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
) -> MembershipPayments:
    return MembershipPayments(gateway, users, settings.payment_currency)


@router.post("/intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: PaymentIntentCreate,
    identity: Identity = Depends(require_identity),
    payments: MembershipPayments = Depends(get_membership_payments),
):
    intent_id, client_secret = await payments.create_intent(identity, body.amount)
    return PaymentIntentResponse(
        client_secret=client_secret, payment_intent_id=intent_id,
    )


@router.post("/confirm", response_model=PaymentConfirmResponse)
async def confirm_payment(
    body: PaymentConfirm,
    identity: Identity = Depends(require_identity),
    payments: MembershipPayments = Depends(get_membership_payments),
):
    status = await payments.confirm(identity, body.payment_intent_id)
    return PaymentConfirmResponse(
        success=True, message="Membership upgraded", payment_status=status.value,
    )
