"""Shared test fixtures: async SQLite DB per test + test client."""

import os

# Settings refuse to load without a signing secret
os.environ.setdefault("JWT_SECRET", "test-only-signing-secret-0123456789")

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

# Import all models so metadata is populated
import app.models  # noqa: E402, F401
from app.core.database import get_session  # noqa: E402
from app.core.seed import seed_demo_data  # noqa: E402
from app.main import app  # noqa: E402
from app.services.note_store import NoteStore  # noqa: E402


@pytest.fixture
async def engine(tmp_path):
    # File-backed so concurrent requests get their own connections
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def test_session_factory(engine):
    """Session factory bound to the test SQLite engine."""
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as sess:
        yield sess


@pytest.fixture
async def seeded(session) -> None:
    """acme + globex tenants, each with admin@ and user@ accounts."""
    await seed_demo_data(session)


@pytest.fixture
async def client(test_session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with one DB session per request."""

    async def _override_session():
        async with test_session_factory() as sess:
            yield sess

    app.dependency_overrides[get_session] = _override_session
    app.state.note_store = NoteStore(free_plan_note_limit=3)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
