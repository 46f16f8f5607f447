"""Comment Routes — create, report, moderate and delete comments.

Invariants:
    - Commenter email/name come from the verified identity and user record
    - Reporting sets feedback to a non-empty reason; any member may report
    - DELETE delegates to MutationOrchestrator (owner or admin)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.api.deps import (
    get_comment_repository, get_identity, get_orchestrator,
    get_user_repository, require_identity,
)
from devconnect.api.routes.posts import get_post_or_404
from devconnect.core.domain_types import Identity
from devconnect.core.errors import ResourceNotFoundError
from devconnect.infrastructure.database import get_db
from devconnect.infrastructure.sql_repositories import (
    SqlCommentRepository, SqlUserRepository,
)
from devconnect.models import Comment
from devconnect.schemas.comment import CommentCreate, CommentReport, CommentResponse
from devconnect.schemas.common import InsertResult, MutationResult
from devconnect.services.mutation_orchestrator import MutationOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/comments", tags=["comments"])


@router.post(
    "", response_model=InsertResult, status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    body: CommentCreate,
    identity: Identity = Depends(require_identity),
    users: SqlUserRepository = Depends(get_user_repository),
    comments: SqlCommentRepository = Depends(get_comment_repository),
    db: AsyncSession = Depends(get_db),
):
    """Comment on a post as the caller."""
    await get_post_or_404(body.post_id, db)
    user = await users.get(identity.email)
    comment = await comments.create(
        post_id=body.post_id,
        email=identity.email,
        name=user.name if user is not None else identity.name,
        message=body.message,
    )
    logger.info(
        f"Comment {comment.id} added to post {body.post_id}",
        extra={"actor_email": identity.email, "resource_id": str(comment.id)},
    )
    return InsertResult(message="Comment added", inserted_id=str(comment.id))


@router.get("/reported", response_model=list[CommentResponse])
async def list_reported_comments(
    identity: Identity | None = Depends(get_identity),
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
    db: AsyncSession = Depends(get_db),
):
    """Reported comments awaiting moderation (admins only)."""
    await orchestrator.authorize_admin(identity)
    result = await db.execute(
        select(Comment)
        .where(Comment.feedback != "")
        .order_by(Comment.created_at.desc()),
    )
    return [CommentResponse.from_comment(c) for c in result.scalars().all()]


@router.patch("/{comment_id}/report", response_model=MutationResult)
async def report_comment(
    comment_id: UUID,
    body: CommentReport,
    identity: Identity = Depends(require_identity),
    comments: SqlCommentRepository = Depends(get_comment_repository),
):
    """Flag a comment for moderation with a reason."""
    if not await comments.set_feedback(comment_id, body.feedback):
        raise ResourceNotFoundError("Comment", str(comment_id))
    logger.info(
        f"Comment {comment_id} reported",
        extra={"actor_email": identity.email, "resource_id": str(comment_id)},
    )
    return MutationResult(message="Comment reported")


@router.delete("/{comment_id}", response_model=MutationResult)
async def delete_comment(
    comment_id: UUID,
    identity: Identity | None = Depends(get_identity),
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
):
    """Delete a comment (owner or admin)."""
    await orchestrator.delete_comment(identity, comment_id)
    return MutationResult(message="Comment deleted successfully")
