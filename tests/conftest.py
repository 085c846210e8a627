"""Shared test fixtures.

Uses an in-memory SQLite database per test and runs with Redis disabled,
so neither Postgres nor Redis is required.
"""

from __future__ import annotations

import os

os.environ["CAMPUS_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["CAMPUS_REDIS_URL"] = ""
os.environ["CAMPUS_LOG_FORMAT"] = "console"

from collections.abc import AsyncGenerator, Callable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402
from sqlalchemy.sql import Executable  # noqa: E402

from campus.config import get_settings  # noqa: E402
from campus.database import close_db, get_engine, get_session, init_db  # noqa: E402
from campus.db.models import Base  # noqa: E402
from campus.main import create_app  # noqa: E402
from campus.redis_client import close_redis, init_redis  # noqa: E402

get_settings.cache_clear()


@pytest.fixture
def as_session() -> Callable[[str], dict[str, str]]:
    """Build request headers carrying a given anonymous session cookie."""
    cookie_name = get_settings().session_cookie_name

    def _headers(session_id: str) -> dict[str, str]:
        return {"Cookie": f"{cookie_name}={session_id}"}

    return _headers


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Fresh schema in a fresh in-memory database."""
    settings = get_settings()
    await init_db(settings.database_url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for service calls and assertions."""
    async for session in get_session():
        yield session
        break


@pytest_asyncio.fixture
async def client(database: None) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP test client against the shared test database."""
    app = create_app()
    await init_redis(get_settings().redis_url)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await close_redis()


@pytest.fixture
def concurrent_write(monkeypatch) -> Callable[[AsyncSession, Executable], None]:
    """Run a competing statement right after the session's next query.

    Simulates another request committing the same row between a service's
    existence check and its insert.
    """

    def _install(session: AsyncSession, statement: Executable) -> None:
        original = session.execute
        fired = False

        async def execute(*args, **kwargs):
            nonlocal fired
            result = await original(*args, **kwargs)
            if not fired:
                fired = True
                await original(statement)
            return result

        monkeypatch.setattr(session, "execute", execute)

    return _install
