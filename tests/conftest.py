"""
Shared fixtures: an in-memory SQLite database per test and httpx clients
wired to the app through ``dependency_overrides``.
"""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from typing import Dict, Tuple

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from database.models import Base, ToDo, User
from database.session import get_db_session
from database.todos import insert_todo
from database.users import create_user
from main import create_app

TEST_USER_1 = {"email": "test@test.com", "password": "123456"}
TEST_USER_2 = {"email": "test2@test2.com", "password": "1234567"}


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(session_factory):
    application = create_app()

    async def _override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = _override_db_session
    return application


def _client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    )


@pytest.fixture
async def client(app):
    async with _client(app) as c:
        yield c


@pytest.fixture
async def other_client(app):
    """A second, independent cookie jar for a second user."""
    async with _client(app) as c:
        yield c


@pytest.fixture
def seed(session_factory):
    """Helpers that write straight to the database, bypassing HTTP."""

    class _Seed:
        async def user(self, props: Dict[str, str]) -> User:
            async with session_factory() as session:
                user = await create_user(session, props["email"], props["password"])
                await session.commit()
                return user

        async def todo(self, user_id: int, task: str, completed: bool = False) -> ToDo:
            async with session_factory() as session:
                todo = await insert_todo(session, user_id, task, completed)
                await session.commit()
                return todo

    return _Seed()


async def login(client: httpx.AsyncClient, props: Dict[str, str]) -> httpx.Response:
    return await client.post("/api/v1/users/sessions", json=props)


@pytest.fixture
def register_and_login(client, seed):
    """Create a user directly, then sign ``client`` in as them."""

    async def _register_and_login(props: Dict[str, str] = TEST_USER_1) -> Tuple[httpx.AsyncClient, User]:
        user = await seed.user(props)
        res = await login(client, props)
        assert res.status_code == 200
        return client, user

    return _register_and_login
