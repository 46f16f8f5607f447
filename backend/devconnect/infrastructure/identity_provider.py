"""JWT Identity Resolver — verifies bearer tokens and extracts the caller's identity.

Invariants:
    - Only tokens signed with the configured secret/algorithm are accepted
    - issuer/audience are verified only when configured
    - A token without an email claim is rejected (email is the identity key)
    - All verification failures raise UnauthorizedError (never leak jose internals)

Design Decisions:
    - python-jose over hand-rolled HMAC checks: exp/iss/aud validation for free
    - Sync resolve(): shared-secret verification does no IO
"""

import logging

from jose import JWTError, jwt

from devconnect.core.domain_types import Email, Identity
from devconnect.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)


class JwtIdentityResolver:
    """Resolve `Authorization: Bearer` tokens into an Identity."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        issuer: str | None = None,
        audience: str | None = None,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience

    def resolve(self, token: str) -> Identity:
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as e:
            logger.info(f"Rejected bearer token: {e}")
            raise UnauthorizedError("Invalid or expired token")

        email = claims.get("email")
        if not isinstance(email, str) or not email:
            raise UnauthorizedError("Token carries no email claim")
        return Identity(
            email=Email(email.strip().lower()),
            name=claims.get("name"),
            picture=claims.get("picture"),
        )
