"""Request Dependencies — identity, repositories, orchestrator and payment gateway.

Invariants:
    - get_identity never raises: a missing bearer yields None, the orchestrator
      turns that into UnauthorizedError (single place for the precondition)
    - require_identity is for routes outside the orchestrator (reads, creation)
    - A present-but-invalid token always fails with 401, even on optional routes
    - Everything request-scoped is built from the request's AsyncSession

Design Decisions:
    - HTTPBearer(auto_error=False): FastAPI's default 403 on missing header would
      bypass the DevConnectError envelope
    - Resolver and gateway cached per process; tests override via dependency_overrides
    - The cached gateway owns an httpx client, closed by close_payment_gateway()
      on shutdown
"""

from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.config import get_settings
from devconnect.core.domain_types import Identity
from devconnect.core.errors import UnauthorizedError
from devconnect.core.repository_protocols import IdentityResolver, PaymentGateway
from devconnect.infrastructure.database import get_db
from devconnect.infrastructure.identity_provider import JwtIdentityResolver
from devconnect.infrastructure.sql_repositories import (
    SqlAnnouncementRepository, SqlCommentRepository,
    SqlPostRepository, SqlTagRepository, SqlUserRepository,
)
from devconnect.infrastructure.stripe_client import StripePaymentGateway
from devconnect.services.mutation_orchestrator import MutationOrchestrator

bearer = HTTPBearer(auto_error=False)


@lru_cache
def get_identity_resolver() -> IdentityResolver:
    settings = get_settings()
    return JwtIdentityResolver(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
    )


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    settings = get_settings()
    return StripePaymentGateway(
        secret_key=settings.stripe_secret_key,
        api_base=settings.stripe_api_base,
        timeout_seconds=settings.stripe_timeout_seconds,
    )


async def close_payment_gateway() -> None:
    """Close the cached gateway's HTTP client, if one was ever built."""
    if get_payment_gateway.cache_info().currsize:
        await get_payment_gateway().aclose()
        get_payment_gateway.cache_clear()


def get_identity(
    cred: HTTPAuthorizationCredentials | None = Depends(bearer),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Identity | None:
    """Verified identity of the caller, or None when no bearer was sent."""
    if cred is None:
        return None
    return resolver.resolve(cred.credentials)


def require_identity(identity: Identity | None = Depends(get_identity)) -> Identity:
    if identity is None:
        raise UnauthorizedError()
    return identity


def get_user_repository(db: AsyncSession = Depends(get_db)) -> SqlUserRepository:
    return SqlUserRepository(db)


def get_post_repository(db: AsyncSession = Depends(get_db)) -> SqlPostRepository:
    return SqlPostRepository(db)


def get_comment_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlCommentRepository:
    return SqlCommentRepository(db)


def get_tag_repository(db: AsyncSession = Depends(get_db)) -> SqlTagRepository:
    return SqlTagRepository(db)


def get_orchestrator(db: AsyncSession = Depends(get_db)) -> MutationOrchestrator:
    return MutationOrchestrator(
        users=SqlUserRepository(db),
        posts=SqlPostRepository(db),
        comments=SqlCommentRepository(db),
        announcements=SqlAnnouncementRepository(db),
    )
