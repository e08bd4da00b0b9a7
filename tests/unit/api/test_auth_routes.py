"""Tests for /api/auth: OIDC sign-in and callback, sign-out, session lookup."""

from unittest.mock import AsyncMock

import pytest
from authlib.integrations.starlette_client import OAuthError
from starlette.responses import RedirectResponse

from gc_app.api import dependencies
from gc_app.auth.providers import OIDCProvider, gckey_profile
from gc_app.auth.session_token import DEV_COOKIE_NAME, decode_session_token
from gc_app.config.settings import get_settings
from gc_app.governance.audit_models import AuditAction


class FakeOAuth:
    """Stands in for the authlib registry; every provider shares one client."""

    def __init__(self, client):
        self.client = client

    def create_client(self, name):
        return self.client


@pytest.fixture
def oauth_client():
    client = AsyncMock()
    client.authorize_redirect = AsyncMock(
        return_value=RedirectResponse("https://gckey.example/authorize", status_code=302)
    )
    client.authorize_access_token = AsyncMock(return_value={"userinfo": {"sub": "pai-42"}})
    return client


@pytest.fixture(autouse=True)
def oidc(app_with_overrides, oauth_client):
    provider = OIDCProvider(
        id="gckey",
        name="GCKey",
        issuer="https://gckey.example",
        client_id="gk",
        client_secret=None,
        scope="openid",
        profile=gckey_profile,
    )
    app_with_overrides.dependency_overrides[dependencies.get_providers] = lambda: {"gckey": provider}
    app_with_overrides.dependency_overrides[dependencies.get_oauth] = lambda: FakeOAuth(oauth_client)


async def test_session_endpoint(async_client, login):
    assert (await async_client.get("/api/auth/session")).json() is None
    login("u-1", "manager")
    data = (await async_client.get("/api/auth/session")).json()
    assert data["user"]["id"] == "u-1"
    assert data["user"]["roles"] == ["manager"]
    assert data["provider"] == "microsoft-entra-id"


async def test_signin_unknown_provider_redirects_to_error(async_client):
    r = await async_client.get("/api/auth/signin/okta", params={"callbackUrl": "/fr/dashboard"})
    assert r.status_code == 307
    assert r.headers["location"] == "/fr/auth/error?error=Configuration"


async def test_signin_then_callback_sets_session_cookie(async_client, oauth_client, audit_sink):
    r = await async_client.get("/api/auth/signin/gckey", params={"callbackUrl": "/fr/dashboard"})
    assert r.status_code == 302
    redirect_uri = oauth_client.authorize_redirect.call_args[0][1]
    assert redirect_uri.endswith("/api/auth/callback/gckey")

    r = await async_client.get("/api/auth/callback/gckey")
    assert r.status_code == 307
    assert r.headers["location"] == "http://localhost:8000/fr/dashboard"

    token = r.cookies.get(DEV_COOKIE_NAME)
    claims = decode_session_token(token, get_settings())
    assert claims["sub"] == "pai-42"
    assert claims["roles"] == ["citizen"]
    assert claims["provider"] == "gckey"

    (entry,) = [c[0][0] for c in audit_sink.save.call_args_list]
    assert entry.action == AuditAction.LOGIN
    assert entry.entity_id == "pai-42"
    assert entry.user_id == "pai-42"


async def test_callback_denied_by_provider(async_client, oauth_client):
    oauth_client.authorize_access_token.side_effect = OAuthError(error="access_denied")
    r = await async_client.get("/api/auth/callback/gckey")
    assert r.status_code == 307
    assert r.headers["location"] == "/en/auth/error?error=AccessDenied"


async def test_callback_other_provider_error_is_configuration(async_client, oauth_client):
    oauth_client.authorize_access_token.side_effect = OAuthError(error="invalid_client")
    r = await async_client.get("/api/auth/callback/gckey")
    assert r.headers["location"] == "/en/auth/error?error=Configuration"


async def test_signout_clears_cookie_and_logs(async_client, login, audit_sink):
    login("u-1", "user")
    r = await async_client.post("/api/auth/signout")
    assert r.status_code == 303
    assert r.headers["location"] == "http://localhost:8000"
    assert f'{DEV_COOKIE_NAME}=""' in r.headers["set-cookie"]

    (entry,) = [c[0][0] for c in audit_sink.save.call_args_list]
    assert entry.action == AuditAction.LOGOUT
    assert entry.entity_id == "u-1"
