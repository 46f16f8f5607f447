"""User Routes — registration, profile, admin listing, role changes and stats.

Invariants:
    - Registration is an upsert keyed by the verified email (201 new / 200 existing)
    - Role changes go through MutationOrchestrator.change_role (policy-gated)
    - Admin-only reads call authorize_admin before touching the DB
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.api.deps import (
    get_identity, get_orchestrator, get_user_repository, require_identity,
)
from devconnect.core.domain_types import Email, Identity, Role
from devconnect.core.errors import ResourceNotFoundError
from devconnect.infrastructure.database import get_db
from devconnect.infrastructure.sql_repositories import SqlUserRepository
from devconnect.models import Comment, Post, User
from devconnect.schemas.common import InsertResult, MutationResult, Pagination
from devconnect.schemas.user import (
    AdminStats, RoleChange, UserList, UserRegister, UserResponse,
)
from devconnect.services.mutation_orchestrator import MutationOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.put("", response_model=InsertResult, response_model_exclude_none=True)
async def register_user(
    body: UserRegister,
    response: Response,
    identity: Identity = Depends(require_identity),
    users: SqlUserRepository = Depends(get_user_repository),
):
    """Store the caller as a user if not already known."""
    if await users.get(identity.email) is not None:
        return InsertResult(message="User already exists")

    user = await users.create(
        identity.email,
        name=body.name or identity.name,
        photo_url=body.photo_url or identity.picture,
    )
    logger.info("New user stored", extra={"actor_email": user.email})
    response.status_code = status.HTTP_201_CREATED
    return InsertResult(message="New user stored", inserted_id=user.email)


@router.get("/me", response_model=UserResponse)
async def get_me(
    identity: Identity = Depends(require_identity),
    users: SqlUserRepository = Depends(get_user_repository),
):
    """Profile of the caller, including role and payment status."""
    user = await users.get(identity.email)
    if user is None:
        raise ResourceNotFoundError("User", identity.email)
    return UserResponse.from_user(user)


@router.get("", response_model=UserList)
async def list_users(
    search: str | None = Query(None, max_length=100),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    identity: Identity | None = Depends(get_identity),
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
    db: AsyncSession = Depends(get_db),
):
    """List users (admins only), optionally filtered by name or email."""
    await orchestrator.authorize_admin(identity)

    query = select(User)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(User.name.ilike(pattern), User.email.ilike(pattern)),
        )
    total = await db.scalar(
        select(func.count()).select_from(query.subquery()),
    )
    result = await db.execute(
        query.order_by(User.created_at.desc()).limit(limit).offset(offset),
    )
    return UserList(
        users=[UserResponse.from_user(u) for u in result.scalars().all()],
        pagination=Pagination(limit=limit, offset=offset, total=total or 0),
    )


@router.patch("/admin", response_model=MutationResult)
async def change_user_role(
    body: RoleChange,
    identity: Identity | None = Depends(get_identity),
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
):
    """Promote or demote a user (admins only)."""
    role = Role(body.role)
    await orchestrator.change_role(identity, Email(body.email), role)
    return MutationResult(message=f"User role updated to {role.value}")


@router.get("/admin/stats", response_model=AdminStats)
async def admin_stats(
    identity: Identity | None = Depends(get_identity),
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
    db: AsyncSession = Depends(get_db),
):
    """Site-wide counts for the admin dashboard."""
    await orchestrator.authorize_admin(identity)
    return AdminStats(
        users=await db.scalar(select(func.count()).select_from(User)) or 0,
        posts=await db.scalar(select(func.count()).select_from(Post)) or 0,
        comments=await db.scalar(select(func.count()).select_from(Comment)) or 0,
        reported_comments=await db.scalar(
            select(func.count()).select_from(Comment).where(Comment.feedback != ""),
        ) or 0,
    )
