"""SQL Repositories — SQLAlchemy implementations of the core boundary protocols.

Invariants:
    - Every write goes through a repository; routes never commit themselves
    - Every method runs under database.persistence_guard with its own operation label
    - save_votes is a single conditional UPDATE (compare-and-swap on vote_version)
    - Deleting a post deletes its comments in the same commit
    - A tag name colliding with the unique index surfaces as DuplicateResourceError,
      whether or not the caller checked for the name first

Design Decisions:
    - One class per aggregate, all sharing the request-scoped AsyncSession
      (ADR: repositories are cheap wrappers, constructed per request)
    - Bulk delete()/update() statements over ORM unit-of-work for writes the
      orchestrator already validated; rowcount drives NotFound detection
"""

from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from devconnect.core.domain_types import Email, PaymentStatus, Role
from devconnect.core.errors import DuplicateResourceError
from devconnect.core.vote_ledger import VoteSets
from devconnect.infrastructure.database import persistence_guard
from devconnect.models import Announcement, Comment, Post, Tag, User


class SqlUserRepository:
    """Users table — also the role store accessor."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, email: Email) -> User | None:
        async with persistence_guard(self.db, "user lookup"):
            return await self.db.get(User, email)

    async def create(
        self, email: Email, name: str | None, photo_url: str | None,
    ) -> User:
        user = User(
            email=email, name=name, photo_url=photo_url,
            role=Role.USER.value, payment_status=PaymentStatus.UNPAID.value,
        )
        async with persistence_guard(self.db, "user insert"):
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        return user

    async def set_role(self, email: Email, role: Role) -> None:
        async with persistence_guard(self.db, "role update"):
            await self.db.execute(
                update(User).where(User.email == email).values(role=role.value),
            )
            await self.db.commit()

    async def set_payment_status(
        self, email: Email, status: PaymentStatus,
    ) -> None:
        async with persistence_guard(self.db, "payment status update"):
            await self.db.execute(
                update(User)
                .where(User.email == email)
                .values(payment_status=status.value),
            )
            await self.db.commit()


class SqlPostRepository:
    """Posts table — creation, vote writes and deletion."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, resource_id: UUID) -> Post | None:
        async with persistence_guard(self.db, "post lookup"):
            return await self.db.get(Post, resource_id)

    async def count_by_author(self, email: Email) -> int:
        async with persistence_guard(self.db, "post count"):
            count = await self.db.scalar(
                select(func.count()).select_from(Post)
                .where(Post.author_email == email),
            )
        return count or 0

    async def create(
        self, *, author: User, title: str, description: str,
        tag: str | None, extra: dict[str, Any],
    ) -> Post:
        post = Post(
            author_email=author.email,
            author=author.name,
            author_photo=author.photo_url,
            title=title,
            description=description,
            tag=tag,
            extra=extra,
        )
        async with persistence_guard(self.db, "post insert"):
            self.db.add(post)
            await self.db.commit()
        return post

    async def save_votes(
        self, post_id: UUID, votes: VoteSets, expected_version: int,
    ) -> bool:
        up, down = votes.as_lists()
        async with persistence_guard(self.db, "vote update"):
            result = await self.db.execute(
                update(Post)
                .where(Post.id == post_id)
                .where(Post.vote_version == expected_version)
                .values(
                    up_vote=up,
                    down_vote=down,
                    vote_score=votes.score,
                    vote_version=expected_version + 1,
                )
                .execution_options(synchronize_session=False),
            )
            await self.db.commit()
        return result.rowcount == 1

    async def delete(self, resource_id: UUID) -> bool:
        async with persistence_guard(self.db, "post delete"):
            await self.db.execute(
                delete(Comment).where(Comment.post_id == resource_id),
            )
            result = await self.db.execute(
                delete(Post).where(Post.id == resource_id),
            )
            await self.db.commit()
        return result.rowcount == 1


class SqlCommentRepository:
    """Comments table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, resource_id: UUID) -> Comment | None:
        async with persistence_guard(self.db, "comment lookup"):
            return await self.db.get(Comment, resource_id)

    async def create(
        self, *, post_id: UUID, email: Email, name: str | None, message: str,
    ) -> Comment:
        comment = Comment(post_id=post_id, email=email, name=name, message=message)
        async with persistence_guard(self.db, "comment insert"):
            self.db.add(comment)
            await self.db.commit()
        return comment

    async def set_feedback(self, comment_id: UUID, feedback: str) -> bool:
        """Mark a comment reported. False when the comment does not exist."""
        async with persistence_guard(self.db, "comment report"):
            result = await self.db.execute(
                update(Comment)
                .where(Comment.id == comment_id)
                .values(feedback=feedback)
                .execution_options(synchronize_session=False),
            )
            await self.db.commit()
        return result.rowcount == 1

    async def delete(self, resource_id: UUID) -> bool:
        async with persistence_guard(self.db, "comment delete"):
            result = await self.db.execute(
                delete(Comment).where(Comment.id == resource_id),
            )
            await self.db.commit()
        return result.rowcount == 1


class SqlAnnouncementRepository:
    """Announcements table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, resource_id: UUID) -> Announcement | None:
        async with persistence_guard(self.db, "announcement lookup"):
            return await self.db.get(Announcement, resource_id)

    async def create(
        self, *, title: str, message: str, author_email: Email,
        author_name: str | None, author_image: str | None, author_role: Role,
    ) -> UUID:
        announcement = Announcement(
            title=title,
            message=message,
            author_email=author_email,
            author_name=author_name,
            author_image=author_image,
            author_role=author_role.value,
        )
        async with persistence_guard(self.db, "announcement insert"):
            self.db.add(announcement)
            await self.db.commit()
        return announcement.id

    async def delete(self, resource_id: UUID) -> bool:
        async with persistence_guard(self.db, "announcement delete"):
            result = await self.db.execute(
                delete(Announcement).where(Announcement.id == resource_id),
            )
            await self.db.commit()
        return result.rowcount == 1


class SqlTagRepository:
    """Tags table — names are unique."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, name: str) -> Tag:
        tag = Tag(name=name)
        async with persistence_guard(self.db, "tag insert"):
            self.db.add(tag)
            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                raise DuplicateResourceError("Tag", name)
        return tag
