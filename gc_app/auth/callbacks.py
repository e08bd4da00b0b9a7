"""Auth callbacks: token shaping at sign-in, session exposure, route authorization, redirect safety."""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

from gc_app.auth.providers import ENTRA_LOGIN_HOST
from gc_app.security.rbac import Role, is_authenticated, parse_roles
from gc_app.security.route_policy import SPLASH_PATHS, matches_route
from gc_app.security.session import Session, SessionUser

PUBLIC_ROUTES = ("/login", "/auth/error")


def jwt_callback(
    token: Mapping[str, Any],
    user: Optional[Mapping[str, Any]] = None,
    account: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Runs when the session token is created: copy id, roles and profile onto the token."""
    claims = dict(token)
    if user:
        claims["id"] = user.get("id") or claims.get("sub") or ""
        roles = user.get("roles")
        claims["roles"] = (
            [Role(r).value for r in parse_roles(roles)] if roles is not None else [Role.USER.value]
        )
        claims["name"] = user.get("name")
        claims["email"] = user.get("email")
    if account:
        claims["provider"] = account.get("provider")
    return claims


def session_callback(token: Mapping[str, Any]) -> Session:
    """Controls what the rest of the app sees of the token."""
    exp = token.get("exp")
    return Session(
        user=SessionUser(
            id=str(token.get("id") or token.get("sub") or ""),
            name=token.get("name"),
            email=token.get("email"),
            roles=parse_roles(token.get("roles")),
        ),
        provider=token.get("provider"),
        expires=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
        id=token.get("jti"),
    )


def authorized(session: Optional[Session], pathname: str) -> bool:
    """
    Session-validation view of route protection. Agrees with the edge gate on two rules:
    the splash page is always public and /api routes govern themselves.
    """
    if pathname in SPLASH_PATHS:
        return True
    if any(matches_route(pathname, route) for route in PUBLIC_ROUTES):
        return True
    if pathname.startswith("/api/"):
        return True
    return is_authenticated(session)


def redirect_callback(url: str, base_url: str) -> str:
    """Allow federated logout to Entra ID; resolve relative URLs; block other origins."""
    if url.startswith(f"{ENTRA_LOGIN_HOST}/"):
        return url
    if url.startswith("/") and not url.startswith("//"):
        return f"{base_url.rstrip('/')}{url}"
    target, base = urlsplit(url), urlsplit(base_url)
    if (target.scheme, target.netloc) == (base.scheme, base.netloc):
        return url
    return base_url
