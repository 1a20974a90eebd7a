"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

# Settings se leen al importar microblog: apuntamos a SQLite antes
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from microblog.core.security import create_access_token
from microblog.db.base import Base
from microblog.db.session import get_session
from microblog.feed.models import Post, PostLike
from microblog.follows.models import Follow
from microblog.profile.models import Profile
from microblog.users.models import User

# "Ahora" de la sesión de tests, sin microsegundos (SQLite guarda segundos)
NOW = datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# --- seed helpers ---


async def make_user(db: AsyncSession, username: str) -> User:
    user = User(username=username, created_at=NOW - timedelta(days=400))
    db.add(user)
    await db.flush()
    return user


async def make_post(
    db: AsyncSession,
    author: User,
    *,
    parent: Post | None = None,
    age: timedelta = timedelta(hours=1),
    content: str = "hola",
) -> Post:
    post = Post(
        author=author,
        parent_post=parent,
        content=content,
        created_at=NOW - age,
    )
    db.add(post)
    await db.flush()
    return post


async def make_like(
    db: AsyncSession, user: User, post: Post, *, age: timedelta = timedelta(minutes=5)
) -> PostLike:
    like = PostLike(user_id=user.id, post_id=post.id, created_at=NOW - age)
    db.add(like)
    await db.flush()
    return like


async def make_follow(db: AsyncSession, follower: User, following: User) -> Follow:
    follow = Follow(follower_id=follower.id, following_id=following.id, created_at=NOW)
    db.add(follow)
    await db.flush()
    return follow


async def make_profile(db: AsyncSession, user: User, **fields) -> Profile:
    fields.setdefault("created_at", datetime(2023, 3, 15, tzinfo=timezone.utc))
    prof = Profile(user_id=user.id, **fields)
    db.add(prof)
    await db.flush()
    return prof


# --- HTTP ---


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Async test client wired to the per-test database."""
    from microblog.main import app

    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(str(user_id))}"}
