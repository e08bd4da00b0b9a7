"""Auth tests: session JWT encode/decode, cookie naming and session reading."""

from datetime import datetime, timedelta, timezone

import pytest
from starlette.requests import Request

from gc_app.auth.session_token import (
    DEV_COOKIE_NAME,
    SECURE_COOKIE_NAME,
    cookie_name,
    cookie_options,
    decode_session_token,
    encode_session_token,
    read_session,
)
from gc_app.config.settings import AppSettings
from gc_app.security.exceptions import InvalidSessionTokenError


@pytest.fixture
def settings():
    return AppSettings(auth_secret="x" * 40)


def request_with_cookie(name, value):
    return Request({"type": "http", "headers": [(b"cookie", f"{name}={value}".encode())]})


def test_token_round_trip_carries_claims(settings):
    token = encode_session_token({"id": "u-1", "roles": ["admin"], "provider": "gckey"}, settings)
    claims = decode_session_token(token, settings)
    assert claims["sub"] == "u-1"
    assert claims["roles"] == ["admin"]
    assert claims["provider"] == "gckey"
    assert claims["exp"] - claims["iat"] == 8 * 60 * 60
    assert claims["jti"]


def test_expired_token_rejected(settings):
    issued = datetime.now(timezone.utc) - timedelta(hours=9)
    token = encode_session_token({"id": "u-1"}, settings, now=issued)
    with pytest.raises(InvalidSessionTokenError):
        decode_session_token(token, settings)


def test_token_signed_with_other_secret_rejected(settings):
    token = encode_session_token({"id": "u-1"}, AppSettings(auth_secret="y" * 40))
    with pytest.raises(InvalidSessionTokenError):
        decode_session_token(token, settings)


def test_cookie_name_and_options_depend_on_environment():
    dev = AppSettings(environment="dev")
    prod = AppSettings(environment="prod", auth_secret="p" * 48)
    assert cookie_name(dev) == DEV_COOKIE_NAME
    assert cookie_name(prod) == SECURE_COOKIE_NAME
    assert cookie_options(dev)["secure"] is False
    options = cookie_options(prod)
    assert options["secure"] is True
    assert options["httponly"] is True
    assert options["samesite"] == "lax"
    assert options["max_age"] == 8 * 60 * 60


def test_read_session_from_cookie(settings):
    token = encode_session_token(
        {"id": "u-1", "name": "Jane", "roles": ["manager", "bogus"], "provider": "microsoft-entra-id"},
        settings,
    )
    session = read_session(request_with_cookie(DEV_COOKIE_NAME, token), settings)
    assert session.user.id == "u-1"
    assert session.user.name == "Jane"
    assert session.user.roles == ["manager"]
    assert session.provider == "microsoft-entra-id"
    assert session.expires is not None


def test_read_session_missing_or_invalid_cookie(settings):
    assert read_session(Request({"type": "http", "headers": []}), settings) is None
    assert read_session(request_with_cookie(DEV_COOKIE_NAME, "not-a-jwt"), settings) is None
