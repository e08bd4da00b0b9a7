"""Page routes. Thin JSON views; layout and templating live outside this service."""

from enum import Enum
from typing import Annotated, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request

from gc_app.api.dependencies import get_audit_logger, get_providers, get_session, require_session
from gc_app.auth.providers import OIDCProvider
from gc_app.governance.audit_logger import AuditLogger
from gc_app.security.exceptions import AuthorizationError
from gc_app.security.rbac import get_permissions, is_admin, is_authenticated
from gc_app.security.session import Session

router = APIRouter()


class Locale(str, Enum):
    EN = "en"
    FR = "fr"


SPLASH_TITLE = "Government of Canada / Gouvernement du Canada"

AUTH_ERROR_MESSAGES = {
    Locale.EN: {
        "Configuration": "Server configuration error.",
        "AccessDenied": "You do not have permission to access this page.",
        "Verification": "The verification link has expired or has already been used.",
        "SessionRequired": "Your session has expired. Please sign in again.",
        "default": "An unexpected error occurred. Please try again later.",
    },
    Locale.FR: {
        "Configuration": "Erreur de configuration du serveur.",
        "AccessDenied": "Vous n'avez pas la permission d'accéder à cette page.",
        "Verification": "Le lien de vérification a expiré ou a déjà été utilisé.",
        "SessionRequired": "Votre session a expiré. Veuillez vous connecter de nouveau.",
        "default": "Une erreur inattendue s'est produite. Veuillez réessayer plus tard.",
    },
}


def auth_error_message(locale: Locale, error: Optional[str]) -> str:
    messages = AUTH_ERROR_MESSAGES[locale]
    return messages.get(error or "default", messages["default"])


@router.get("/")
async def splash():
    """Bilingual language selection page."""
    return {
        "page": "splash",
        "title": SPLASH_TITLE,
        "locales": [{"code": loc.value, "href": f"/{loc.value}"} for loc in Locale],
    }


@router.get("/{locale}")
async def home(
    locale: Locale,
    session: Annotated[Optional[Session], Depends(get_session)],
):
    return {"page": "home", "locale": locale.value, "authenticated": is_authenticated(session)}


@router.get("/{locale}/login")
async def login(
    locale: Locale,
    providers: Annotated[dict[str, OIDCProvider], Depends(get_providers)],
    callback_url: Annotated[Optional[str], Query(alias="callbackUrl")] = None,
):
    callback = callback_url or f"/{locale.value}/dashboard"
    return {
        "page": "login",
        "locale": locale.value,
        "callbackUrl": callback,
        "providers": [
            {
                "id": p.id,
                "name": p.name,
                "href": f"/api/auth/signin/{p.id}?callbackUrl={quote(callback, safe='/')}",
            }
            for p in providers.values()
        ],
    }


@router.get("/{locale}/dashboard")
async def dashboard(
    locale: Locale,
    session: Annotated[Session, Depends(require_session)],
):
    return {
        "page": "dashboard",
        "locale": locale.value,
        "user": session.to_dict()["user"],
        "permissions": sorted(p.value for p in get_permissions(session)),
    }


@router.get("/{locale}/dashboard/admin")
async def admin_dashboard(
    request: Request,
    locale: Locale,
    session: Annotated[Session, Depends(require_session)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
):
    if not is_admin(session):
        await audit.log_access_denied("Page", request.url.path, reason="admin role required")
        raise AuthorizationError("Admin role required")
    return {"page": "admin", "locale": locale.value, "user": session.to_dict()["user"]}


@router.get("/{locale}/access-denied")
async def access_denied(locale: Locale):
    return {
        "page": "access-denied",
        "locale": locale.value,
        "message": auth_error_message(locale, "AccessDenied"),
    }


@router.get("/{locale}/auth/error")
async def auth_error(locale: Locale, error: Optional[str] = None):
    """Map auth error codes to a localized message."""
    return {
        "page": "auth-error",
        "locale": locale.value,
        "error": error,
        "message": auth_error_message(locale, error),
    }
