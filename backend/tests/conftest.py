"""Shared fixtures.

Unit tests need nothing here beyond the token helper. API tests that hit
PostgreSQL use ``client`` / ``client_user_b``; they skip themselves when
no server answers on DATABASE_HOST:DATABASE_PORT.
"""

import socket
import uuid
from collections.abc import AsyncGenerator, Iterator
from datetime import UTC, datetime, timedelta

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.ext.asyncio import create_async_engine

from job_tracker.core.config import settings
from job_tracker.models import Base

# Same server, "<name>_test" database. Split on the last "/" only: the
# user name contains the database name too.
TEST_DATABASE_URL = (
    f"{settings.database_url.rsplit('/', 1)[0]}/{settings.database_name}_test"
)

TEST_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
USER_B_ID = uuid.UUID("00000000-0000-0000-0000-000000000099")

TEST_AUTH_SECRET = "test-secret-key-that-is-at-least-32-characters-long"  # nosec B105


def create_test_jwt(
    user_id: uuid.UUID = TEST_USER_ID,
    *,
    secret: str = TEST_AUTH_SECRET,
    expires_delta: timedelta | None = None,
    audience: str | None = None,
) -> str:
    """Session token the API accepts when auth is on.

    A negative ``expires_delta`` gives an already-expired token; a
    different ``secret`` or ``audience`` gives one that fails verification.
    """
    issued = datetime.now(UTC)
    claims = {
        "sub": str(user_id),
        "aud": audience or settings.auth_audience,
        "iss": settings.auth_issuer,
        "iat": issued,
        "exp": issued + (expires_delta or timedelta(hours=1)),
    }
    return jwt.encode(claims, secret, algorithm="HS256")


def _postgres_reachable() -> bool:
    try:
        with socket.create_connection(
            (settings.database_host, settings.database_port), timeout=1
        ):
            return True
    except OSError:
        return False


_HAS_POSTGRES = _postgres_reachable()


def skip_if_no_postgres() -> None:
    if not _HAS_POSTGRES:
        pytest.skip("PostgreSQL unreachable (docker compose up -d db)")


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Engine on the test database; tables created and dropped per test."""
    skip_if_no_postgres()
    engine = create_async_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS pgcrypto"))
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


def _api_client(user_id: uuid.UUID) -> AsyncClient:
    from job_tracker.main import app

    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={settings.auth_cookie_name: create_test_jwt(user_id)},
    )


@pytest_asyncio.fixture
async def client(
    db_engine: AsyncEngine, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[AsyncClient, None]:
    """API client signed in as TEST_USER_ID against the test database.

    Sessions commit on success and roll back on error, as ``get_db`` does.
    """
    from job_tracker.core.database import get_db
    from job_tracker.main import app

    sessions = async_sessionmaker(db_engine, expire_on_commit=False)

    async def test_db() -> AsyncGenerator[AsyncSession, None]:
        async with sessions() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    monkeypatch.setattr(settings, "auth_enabled", True)
    monkeypatch.setattr(settings, "auth_secret", SecretStr(TEST_AUTH_SECRET))
    app.dependency_overrides[get_db] = test_db
    try:
        async with _api_client(TEST_USER_ID) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture
async def client_user_b(
    client: AsyncClient,  # noqa: ARG001 - database override and auth
) -> AsyncGenerator[AsyncClient, None]:
    """Second owner on the same database, for isolation checks."""
    async with _api_client(USER_B_ID) as ac:
        yield ac


@pytest.fixture(autouse=True)
def disable_rate_limiting(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Bulk endpoints are unthrottled except in the rate limiting tests."""
    from job_tracker.core.rate_limiting import limiter

    monkeypatch.setattr(limiter, "enabled", False)
    yield
