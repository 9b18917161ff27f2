"""Service test fixtures — shared in-memory store + one ASGI app per service.

Invariants:
    - Every test gets a fresh in-memory SQLite database shared by all four apps
    - get_db dependency overridden on every app to use the test store
    - The content app's discussion client talks to the discussion app in-process
      (ASGITransport), so the cascade crosses a real HTTP boundary
    - Apps are built per test: settings and guard policy can be changed freely

Design Decisions:
    - SQLite in-memory with StaticPool: fast, no external dependency, one
      connection seen by every app (the "shared store")
    - Session cookies minted with the same codec the identity service uses,
      so guard tests do not depend on the login route
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

import bugle.models  # noqa: F401
from bugle.config import Settings
from bugle.core.domain_types import Role, ServiceName
from bugle.core.passwords import hash_password
from bugle.core.session_token import SessionToken, encode_session_token
from bugle.db.base import Base
from bugle.infrastructure.database import DatabaseSessionManager, get_db
from bugle.infrastructure.discussion_client import DiscussionClient
from bugle.main import create_app
from bugle.models.user import User

DISCUSSION_BASE_URL = "http://discussion"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
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
def test_settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        session_secret="test-session-secret",
        session_token_format="signed",
        discussion_service_url=DISCUSSION_BASE_URL,
        cors_origins=["http://test"],
    )


@pytest.fixture
def build_app(test_engine, test_session_factory, test_settings):
    """Factory: create a service app wired to the test store."""

    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    def _build(service: ServiceName):
        app = create_app(service, test_settings)
        app.dependency_overrides[get_db] = override_get_db
        manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
        manager.engine = test_engine
        manager._session_factory = test_session_factory
        app.state.db_manager = manager
        return app

    return _build


@pytest.fixture
def discussion_app(build_app):
    return build_app(ServiceName.DISCUSSION)


@pytest.fixture
def identity_app(build_app):
    return build_app(ServiceName.IDENTITY)


@pytest.fixture
def ads_app(build_app):
    return build_app(ServiceName.ADS)


@pytest.fixture
async def content_app(build_app, discussion_app):
    app = build_app(ServiceName.CONTENT)
    client = DiscussionClient(
        DISCUSSION_BASE_URL, transport=ASGITransport(app=discussion_app),
    )
    app.state.discussion_client = client
    yield app
    await client.close()


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def identity_client(identity_app):
    async with _client(identity_app) as c:
        yield c


@pytest.fixture
async def content_client(content_app):
    async with _client(content_app) as c:
        yield c


@pytest.fixture
async def discussion_client(discussion_app):
    async with _client(discussion_app) as c:
        yield c


@pytest.fixture
async def ads_client(ads_app):
    async with _client(ads_app) as c:
        yield c


@pytest.fixture
def make_cookie(test_settings):
    """Mint a session cookie value the way the identity service does."""

    def _make(username: str, role: str | None) -> str:
        return encode_session_token(
            SessionToken(username=username, role=role),
            test_settings.session_token_format,
            test_settings.session_secret,
        )

    return _make


@pytest.fixture
def act_as(make_cookie, test_settings):
    """Put a session cookie for (username, role) into a client's cookie jar."""

    def _act_as(client: AsyncClient, username: str, role: str | None) -> None:
        client.cookies.set(test_settings.session_cookie_name, make_cookie(username, role))

    return _act_as


@pytest.fixture
def seed_user(test_session_factory):
    """Insert a user straight into the credential store."""

    async def _seed(username: str, role: Role = Role.READER, password: str = "pw") -> User:
        async with test_session_factory() as session:
            user = User(
                username=username,
                password_hash=hash_password(password),
                role=role.value,
            )
            session.add(user)
            await session.commit()
            return user

    return _seed


@pytest.fixture
def unreachable_discussion(content_app):
    """Point the content app's cascade at a discussion service that never answers."""
    calls: list[httpx.Request] = []

    def _refuse(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    content_app.state.discussion_client = DiscussionClient(
        DISCUSSION_BASE_URL, transport=httpx.MockTransport(_refuse),
    )
    return calls
