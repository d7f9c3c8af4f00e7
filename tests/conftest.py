"""Shared test fixtures.

Each test gets a fresh in-memory SQLite database (aiosqlite, single shared
connection), a session bound to it, small model factories and an HTTP client
whose ``get_db`` dependency points at the same database.
"""
from collections.abc import AsyncGenerator
from itertools import count

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.db.base import Base
from app.db.session import get_db, unix_now
from app.models import Post, User

_emails = count(1)


@pytest.fixture()
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def file_db_url(tmp_path) -> AsyncGenerator[str, None]:
    """A file-backed SQLite database with the schema created; separate connections see each other's commits."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield url


@pytest.fixture()
async def file_session_maker(file_db_url) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(file_db_url, connect_args={"timeout": 5})
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()


@pytest.fixture()
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture()
async def db(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


async def make_user(db: AsyncSession, **kwargs) -> User:
    n = next(_emails)
    kwargs.setdefault("email", f"user{n}@example.com")
    kwargs.setdefault("first_name", f"First{n}")
    kwargs.setdefault("last_name", f"Last{n}")
    user = User(**kwargs)
    db.add(user)
    await db.flush()
    return user


async def make_post(db: AsyncSession, author: User, **kwargs) -> Post:
    kwargs.setdefault("content", "hello")
    kwargs.setdefault("created_at", unix_now())
    post = Post(user_id=author.id, **kwargs)
    db.add(post)
    await db.flush()
    return post


def auth_header(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    from app.main import app

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
