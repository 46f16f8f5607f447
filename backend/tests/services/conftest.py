"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test engine
    - Bearer tokens are signed with the configured test secret
    - The payment gateway is always the in-memory fake (no network)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Seed helpers write through their own session so route sessions never share
      identity-map state with the test
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient
from jose import jwt

from devconnect.api.deps import get_payment_gateway
from devconnect.config import get_settings
from devconnect.db.base import Base
from devconnect.infrastructure.database import get_db, DatabaseSessionManager
from devconnect.models import Comment, Post, User
import devconnect.infrastructure.database as db_module
from devconnect.main import app
from tests.services.fake_repositories import FakePaymentGateway


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def fake_gateway():
    return FakePaymentGateway()


@pytest.fixture
async def client(test_engine, test_session_factory, fake_gateway):
    """FastAPI test client with DB and payment dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def auth():
    """Build Authorization headers for an email: auth("a@x.com", name="Ann")."""
    settings = get_settings()

    def _headers(email: str, **claims) -> dict[str, str]:
        token = jwt.encode(
            {"email": email, **claims},
            settings.jwt_secret, algorithm=settings.jwt_algorithm,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def seed_user(test_session_factory):
    """Insert a user: await seed_user("a@x.com", role="admin")."""
    async def _seed(
        email: str, name: str | None = None,
        role: str = "user", payment_status: str = "unpaid",
    ) -> User:
        async with test_session_factory() as db:
            user = User(
                email=email, name=name or email.split("@")[0],
                role=role, payment_status=payment_status,
            )
            db.add(user)
            await db.commit()
            return user

    return _seed


@pytest.fixture
def seed_post(test_session_factory):
    """Insert a post: await seed_post("a@x.com", title="T", tag="python")."""
    async def _seed(
        author_email: str, title: str = "A post", tag: str | None = None,
        up_vote: list | None = None, down_vote: list | None = None,
    ) -> Post:
        up_vote = up_vote or []
        down_vote = down_vote or []
        async with test_session_factory() as db:
            post = Post(
                author_email=author_email,
                author=author_email.split("@")[0],
                title=title,
                tag=tag,
                up_vote=up_vote,
                down_vote=down_vote,
                vote_score=len(up_vote) - len(down_vote),
            )
            db.add(post)
            await db.commit()
            return post

    return _seed


@pytest.fixture
def seed_comment(test_session_factory):
    """Insert a comment: await seed_comment(post.id, "a@x.com", feedback="spam")."""
    async def _seed(post_id, email: str, message: str = "Nice", feedback: str = "") -> Comment:
        async with test_session_factory() as db:
            comment = Comment(
                post_id=post_id, email=email, message=message, feedback=feedback,
            )
            db.add(comment)
            await db.commit()
            return comment

    return _seed


@pytest.fixture
def fetch(test_session_factory):
    """Read a row through a fresh session: await fetch(Post, post.id)."""
    async def _fetch(model, key):
        async with test_session_factory() as db:
            return await db.get(model, key)

    return _fetch
