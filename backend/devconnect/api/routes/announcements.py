"""Announcement Routes — public reads, admin-only writes.

Invariants:
    - POST and DELETE gated by MutationOrchestrator (ADMIN_ONLY)
    - Listing is newest first
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.api.deps import get_identity, get_orchestrator
from devconnect.core.domain_types import Identity
from devconnect.infrastructure.database import get_db
from devconnect.models import Announcement
from devconnect.schemas.announcement import (
    AnnouncementCount, AnnouncementCreate, AnnouncementResponse,
)
from devconnect.schemas.common import InsertResult, MutationResult
from devconnect.services.mutation_orchestrator import MutationOrchestrator

router = APIRouter(prefix="/api/v1/announcements", tags=["announcements"])


@router.get("", response_model=list[AnnouncementResponse])
async def list_announcements(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Announcement).order_by(Announcement.posted_at.desc()),
    )
    return [
        AnnouncementResponse.from_announcement(a)
        for a in result.scalars().all()
    ]


@router.get("/count", response_model=AnnouncementCount)
async def count_announcements(db: AsyncSession = Depends(get_db)):
    count = await db.scalar(select(func.count()).select_from(Announcement))
    return AnnouncementCount(count=count or 0)


@router.post(
    "", response_model=InsertResult, status_code=status.HTTP_201_CREATED,
)
async def create_announcement(
    body: AnnouncementCreate,
    identity: Identity | None = Depends(get_identity),
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
):
    """Publish an announcement (admins only)."""
    announcement_id = await orchestrator.create_announcement(
        identity, body.title, body.message,
    )
    return InsertResult(
        message="Announcement created", inserted_id=str(announcement_id),
    )


@router.delete("/{announcement_id}", response_model=MutationResult)
async def delete_announcement(
    announcement_id: UUID,
    identity: Identity | None = Depends(get_identity),
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
):
    """Remove an announcement (admins only)."""
    await orchestrator.delete_announcement(identity, announcement_id)
    return MutationResult(message="Announcement deleted successfully")
