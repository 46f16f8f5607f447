"""Post Routes — create, list, read, delete, vote, and list comments of a post.

Invariants:
    - Author fields always come from the verified identity / user record
    - Unpaid members capped at settings.free_post_limit posts (core.membership)
    - DELETE and vote delegate to MutationOrchestrator (identity → lookup → policy → write)
    - Listing is paginated; sort=popularity orders by denormalized vote_score

Design Decisions:
    - First post by an unknown email registers the user lazily (same as PUT /users)
    - search matches title or tag, case-insensitive substring
"""

import logging
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.api.deps import (
    get_identity, get_orchestrator, get_post_repository,
    get_user_repository, require_identity,
)
from devconnect.config import Settings, get_settings
from devconnect.core.domain_types import Identity, PaymentStatus
from devconnect.core.errors import (
    ErrorContext, PostLimitReachedError, ResourceNotFoundError,
)
from devconnect.core.membership import can_publish
from devconnect.infrastructure.database import get_db
from devconnect.infrastructure.sql_repositories import (
    SqlPostRepository, SqlUserRepository,
)
from devconnect.models import Comment, Post
from devconnect.schemas.comment import CommentResponse
from devconnect.schemas.common import InsertResult, MutationResult, Pagination
from devconnect.schemas.post import (
    PostCreate, PostList, PostResponse, VoteRequest, VoteResponse,
)
from devconnect.services.mutation_orchestrator import MutationOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


async def get_post_or_404(post_id: UUID, db: AsyncSession) -> Post:
    """Get post or raise ResourceNotFoundError. Exported for comment routes."""
    post = await db.get(Post, post_id)
    if post is None:
        raise ResourceNotFoundError("Post", str(post_id))
    return post


@router.post(
    "", response_model=InsertResult, status_code=status.HTTP_201_CREATED,
)
async def create_post(
    body: PostCreate,
    identity: Identity = Depends(require_identity),
    users: SqlUserRepository = Depends(get_user_repository),
    posts: SqlPostRepository = Depends(get_post_repository),
    settings: Settings = Depends(get_settings),
):
    """Publish a post as the caller."""
    user = await users.get(identity.email)
    if user is None:
        user = await users.create(identity.email, identity.name, identity.picture)

    published = await posts.count_by_author(user.email)
    if not can_publish(
        PaymentStatus(user.payment_status), published, settings.free_post_limit,
    ):
        raise PostLimitReachedError(
            settings.free_post_limit, ErrorContext(actor_email=user.email),
        )

    post = await posts.create(
        author=user,
        title=body.title,
        description=body.description,
        tag=body.tag,
        extra=body.extra,
    )
    logger.info(
        f"Post {post.id} created",
        extra={"actor_email": user.email, "resource_id": str(post.id)},
    )
    return InsertResult(message="Post created", inserted_id=str(post.id))


@router.get("", response_model=PostList)
async def list_posts(
    email: str | None = Query(None, max_length=320),
    tag: str | None = Query(None, max_length=100),
    search: str | None = Query(None, max_length=100),
    sort: Literal["newest", "popularity"] = Query("newest"),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List posts with filters, sorting and pagination."""
    query = select(Post)
    if email:
        query = query.where(Post.author_email == email.strip().lower())
    if tag:
        query = query.where(Post.tag == tag.strip().lower())
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(Post.title.ilike(pattern), Post.tag.ilike(pattern)),
        )

    total = await db.scalar(
        select(func.count()).select_from(query.subquery()),
    )
    if sort == "popularity":
        query = query.order_by(Post.vote_score.desc(), Post.time_of_post.desc())
    else:
        query = query.order_by(Post.time_of_post.desc())

    result = await db.execute(query.limit(limit).offset(offset))
    return PostList(
        posts=[PostResponse.from_post(p) for p in result.scalars().all()],
        pagination=Pagination(limit=limit, offset=offset, total=total or 0),
    )


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get a single post with its vote counts."""
    return PostResponse.from_post(await get_post_or_404(post_id, db))


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_post_comments(post_id: UUID, db: AsyncSession = Depends(get_db)):
    """Comments on a post, oldest first."""
    await get_post_or_404(post_id, db)
    result = await db.execute(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc()),
    )
    return [CommentResponse.from_comment(c) for c in result.scalars().all()]


@router.delete("/{post_id}", response_model=MutationResult)
async def delete_post(
    post_id: UUID,
    identity: Identity | None = Depends(get_identity),
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
):
    """Delete a post (author or admin)."""
    await orchestrator.delete_post(identity, post_id)
    return MutationResult(message="Post deleted successfully")


@router.patch("/{post_id}/vote", response_model=VoteResponse)
async def vote_on_post(
    post_id: UUID,
    body: VoteRequest,
    identity: Identity | None = Depends(get_identity),
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
):
    """Toggle the caller's upvote/downvote on a post."""
    counts = await orchestrator.cast_vote(identity, post_id, body.vote_type)
    return VoteResponse(
        up_vote_count=counts.up_vote_count,
        down_vote_count=counts.down_vote_count,
    )
