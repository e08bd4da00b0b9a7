"""Edge authorization policy: static/public/admin path rules, locale-aware redirects, security headers.

Pure functions; the Starlette middleware in gc_app.api.middleware applies the decisions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import quote, urlencode

from gc_app.security.rbac import Role, has_role
from gc_app.security.session import Session

LOCALES = ("en", "fr")
DEFAULT_LOCALE = "en"

CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline' 'unsafe-eval'",
        "style-src 'self' 'unsafe-inline'",
        "img-src 'self' data: https://www.canada.ca https://*.gc.ca",
        "font-src 'self' data:",
        "connect-src 'self'",
        "frame-ancestors 'none'",
        "base-uri 'self'",
        "form-action 'self'",
    ]
)

SECURITY_HEADERS: dict[str, str] = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-XSS-Protection": "1; mode=block",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=(), interest-cohort=()",
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
}

EXCLUDED_PREFIXES = ("/static", "/health")
ADMIN_ROUTES = ("/admin", "/dashboard/admin")
PUBLIC_PATHS = ("/login", "/auth", "/api/auth")
API_PREFIX = "/api/"
SPLASH_PATHS = ("/", "/en", "/fr")


class GateAction(str, Enum):
    PASS_THROUGH = "pass_through"
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GateDecision:
    action: GateAction
    location: Optional[str] = None
    reason: Optional[str] = None


def matches_route(pathname: str, path: str) -> bool:
    """Segment-wise match of path, bare or under a locale prefix: /login matches /fr/login/x, not /loginx."""
    for prefix in ("",) + tuple(f"/{loc}" for loc in LOCALES):
        route = f"{prefix}{path}"
        if pathname == route or pathname.startswith(f"{route}/"):
            return True
    return False


def is_static_path(pathname: str) -> bool:
    return pathname.startswith(EXCLUDED_PREFIXES) or "." in pathname


def is_api_path(pathname: str) -> bool:
    return pathname.startswith(API_PREFIX)


def is_public_path(pathname: str) -> bool:
    if pathname in SPLASH_PATHS or pathname.startswith("/api/auth/"):
        return True
    return any(matches_route(pathname, path) for path in PUBLIC_PATHS)


def is_admin_path(pathname: str) -> bool:
    return any(matches_route(pathname, path) for path in ADMIN_ROUTES)


def locale_for_path(pathname: str) -> str:
    return "fr" if pathname.startswith("/fr") else DEFAULT_LOCALE


def has_locale_prefix(pathname: str) -> bool:
    return any(pathname == f"/{loc}" or pathname.startswith(f"/{loc}/") for loc in LOCALES)


def localized_path(pathname: str) -> Optional[str]:
    """Default-locale rewrite for un-prefixed page paths; None when the path is already routable."""
    if pathname == "/" or has_locale_prefix(pathname):
        return None
    if pathname == "/api" or pathname.startswith("/api/"):
        return None
    return f"/{DEFAULT_LOCALE}{pathname}"


def login_url(locale: str, callback_url: Optional[str] = None) -> str:
    url = f"/{locale}/login"
    if callback_url:
        url = f"{url}?{urlencode({'callbackUrl': callback_url}, quote_via=quote, safe='/')}"
    return url


def access_denied_url(locale: str) -> str:
    return f"/{locale}/access-denied"


def auth_error_url(locale: str, error: str) -> str:
    return f"/{locale}/auth/error?{urlencode({'error': error})}"


def evaluate_request(pathname: str, session: Optional[Session]) -> GateDecision:
    """
    Evaluate one inbound request:
    static -> pass through; /api/* -> allow; admin route -> session + admin role required;
    non-public route -> session required; otherwise allow.
    """
    if is_static_path(pathname):
        return GateDecision(GateAction.PASS_THROUGH)

    # API routes enforce their own session and permission checks (401/403 JSON)
    if is_api_path(pathname):
        return GateDecision(GateAction.ALLOW)

    locale = locale_for_path(pathname)

    if is_admin_path(pathname):
        if session is None:
            return GateDecision(GateAction.REDIRECT, login_url(locale), "unauthenticated")
        if not has_role(session, Role.ADMIN):
            return GateDecision(GateAction.REDIRECT, access_denied_url(locale), "missing_admin_role")

    if not is_public_path(pathname) and session is None:
        return GateDecision(
            GateAction.REDIRECT, login_url(locale, callback_url=pathname), "unauthenticated"
        )

    return GateDecision(GateAction.ALLOW)
