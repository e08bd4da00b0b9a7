"""Session cookie: a signed JWT (HS256) carrying id, roles and provider. 8-hour lifetime."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

from jose import JWTError, jwt
from starlette.requests import Request
from starlette.responses import Response

from gc_app.auth.callbacks import session_callback
from gc_app.config.settings import AppSettings
from gc_app.security.exceptions import InvalidSessionTokenError
from gc_app.security.session import Session

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
SECURE_COOKIE_NAME = "__Secure-authjs.session-token"
DEV_COOKIE_NAME = "authjs.session-token"


def cookie_name(settings: AppSettings) -> str:
    return SECURE_COOKIE_NAME if settings.is_production else DEV_COOKIE_NAME


def cookie_options(settings: AppSettings) -> Dict[str, Any]:
    # SameSite=lax is required for the OIDC redirect back from the provider
    return {
        "httponly": True,
        "samesite": "lax",
        "path": "/",
        "secure": settings.is_production,
        "max_age": settings.session_max_age,
    }


def encode_session_token(
    claims: Mapping[str, Any],
    settings: AppSettings,
    now: Optional[datetime] = None,
) -> str:
    now = now or datetime.now(timezone.utc)
    payload = {
        **claims,
        "sub": str(claims.get("id") or claims.get("sub") or ""),
        "jti": claims.get("jti") or str(uuid.uuid4()),
        "iat": now,
        "exp": now + timedelta(seconds=settings.session_max_age),
    }
    return jwt.encode(payload, settings.auth_secret, algorithm=ALGORITHM)


def decode_session_token(token: str, settings: AppSettings) -> Dict[str, Any]:
    """Raises InvalidSessionTokenError on bad signature, malformed token or expiry."""
    try:
        return jwt.decode(token, settings.auth_secret, algorithms=[ALGORITHM])
    except JWTError as e:
        raise InvalidSessionTokenError(f"Invalid session token: {e}") from e


def read_session(request: Request, settings: AppSettings) -> Optional[Session]:
    """Session from the request cookie; None when absent or invalid."""
    raw = request.cookies.get(cookie_name(settings))
    if not raw:
        return None
    try:
        claims = decode_session_token(raw, settings)
    except InvalidSessionTokenError as e:
        logger.info("Ignoring session cookie: %s", e.message)
        return None
    return session_callback(claims)


def set_session_cookie(response: Response, token: str, settings: AppSettings) -> None:
    response.set_cookie(cookie_name(settings), token, **cookie_options(settings))


def clear_session_cookie(response: Response, settings: AppSettings) -> None:
    options = cookie_options(settings)
    response.delete_cookie(
        cookie_name(settings),
        path=options["path"],
        secure=options["secure"],
        httponly=options["httponly"],
        samesite=options["samesite"],
    )
