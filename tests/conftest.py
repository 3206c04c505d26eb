"""
Pytest fixtures - test DB, client, fake event bus.
Isolated tests: a fresh in-memory SQLite database per test, no broker.
"""

from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.dependencies import get_event_handler
from app.db.base import Base
from app.db.models import User
from app.db.repositories.user_repository import UserRepository
from app.db.session import get_db
from app.main import app
from app.queue.events import Event, build_event

# In-memory SQLite shared by every session of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


class FakeEventHandler:
    """Records envelopes instead of publishing them."""

    def __init__(self):
        self.events: list[Event] = []
        self.error: Exception | None = None

    async def send_event(self, event_type: str, payload: Any) -> None:
        if self.error is not None:
            raise self.error
        self.events.append(build_event(event_type, payload))


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as s:
        yield s


@pytest.fixture
def repo(session: AsyncSession) -> UserRepository:
    return UserRepository(session)


@pytest.fixture
def event_handler() -> FakeEventHandler:
    return FakeEventHandler()


@pytest_asyncio.fixture
async def client(session: AsyncSession, event_handler: FakeEventHandler):
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_handler] = lambda: event_handler
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


def make_user(i: int, country: str = "ES", **overrides) -> User:
    """Unsaved user with a predictable name and unique email per (i, country)."""
    fields = {
        "first_name": f"zechao{i}",
        "last_name": f"jin{i}",
        "nick_name": f"zen{i}",
        "email": f"zechao{i}.{country.lower()}@example.com",
        "password": "superpassword",
        "country": country,
    }
    fields.update(overrides)
    return User(**fields)


@pytest_asyncio.fixture
async def create_users(session: AsyncSession):
    """Insert n users per country directly, bypassing the repository."""

    async def _create(n: int, *countries: str) -> list[User]:
        users = [make_user(i, c) for c in (countries or ("ES",)) for i in range(n)]
        session.add_all(users)
        await session.commit()
        for u in users:
            await session.refresh(u)
        return users

    return _create


@pytest.fixture
def user_factory():
    return make_user
