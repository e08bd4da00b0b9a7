"""Fixtures for API unit tests: AsyncClient, session cookies, recording audit sink, SQLite data client."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from gc_app.api import dependencies
from gc_app.auth.session_token import cookie_name, encode_session_token
from gc_app.config.settings import get_settings
from gc_app.infrastructure.database import models  # noqa: F401
from gc_app.infrastructure.database.client import build_data_client
from gc_app.infrastructure.database.repository import SqlAlchemyRepository
from gc_app.infrastructure.database.session import Base, build_engine, build_session_factory
from gc_app.main import app


@pytest.fixture
def audit_sink():
    sink = AsyncMock()
    sink.save = AsyncMock(return_value=None)
    return sink


@pytest.fixture
def app_with_overrides(audit_sink):
    """App with the audit sink overridden so tests can inspect entries."""
    app.dependency_overrides[dependencies.get_audit_sink] = lambda: audit_sink
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    """Async HTTP client for testing; uses overridden app. Redirects are not followed."""
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def login(async_client):
    """Attach a signed session cookie for a user with the given roles."""

    def _login(user_id: str = "u-1", *roles: str, provider: str = "microsoft-entra-id"):
        settings = get_settings()
        token = encode_session_token(
            {"id": user_id, "name": "Test User", "email": f"{user_id}@canada.ca", "roles": list(roles), "provider": provider},
            settings,
        )
        async_client.cookies.set(cookie_name(settings), token)
        return token

    return _login


@pytest.fixture
async def data_client(tmp_path, app_with_overrides, audit_sink):
    """Intercepted data client over a throwaway SQLite database, wired into the app."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    client = build_data_client(SqlAlchemyRepository(build_session_factory(engine)), audit_sink)
    app_with_overrides.dependency_overrides[dependencies.get_data_client] = lambda: client
    yield client
    await engine.dispose()
