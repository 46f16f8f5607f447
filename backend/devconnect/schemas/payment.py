"""Payment Schemas — membership upgrade via payment intents.

Invariants:
    - amount is in the smallest currency unit (cents), 50 minimum (provider floor)
"""

from pydantic import Field

from devconnect.schemas.common import CamelModel


class PaymentIntentCreate(CamelModel):
    amount: int = Field(ge=50, le=1_000_000)


class PaymentIntentResponse(CamelModel):
    client_secret: str
    payment_intent_id: str


class PaymentConfirm(CamelModel):
    payment_intent_id: str = Field(min_length=1, max_length=255)


class PaymentConfirmResponse(CamelModel):
    success: bool
    message: str
    payment_status: str
