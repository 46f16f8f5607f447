"""Tag Routes — reference data for post categorisation.

Invariants:
    - Names are unique; a collision is 409 DUPLICATE_RESOURCE even when two
      admins create the same tag concurrently (unique index decides, not a pre-check)
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.api.deps import get_identity, get_orchestrator, get_tag_repository
from devconnect.core.domain_types import Identity
from devconnect.infrastructure.database import get_db
from devconnect.infrastructure.sql_repositories import SqlTagRepository
from devconnect.models import Tag
from devconnect.schemas.tag import TagCreate, TagResponse
from devconnect.services.mutation_orchestrator import MutationOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/tags", tags=["tags"])


@router.get("", response_model=list[TagResponse])
async def list_tags(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Tag).order_by(Tag.name))
    return [TagResponse(id=t.id, name=t.name) for t in result.scalars().all()]


@router.post(
    "", response_model=TagResponse, status_code=status.HTTP_201_CREATED,
)
async def create_tag(
    body: TagCreate,
    identity: Identity | None = Depends(get_identity),
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
    tags: SqlTagRepository = Depends(get_tag_repository),
):
    """Add a tag (admins only)."""
    await orchestrator.authorize_admin(identity)
    tag = await tags.create(body.name)
    logger.info(f"Tag {tag.name!r} created")
    return TagResponse(id=tag.id, name=tag.name)
