"""Auth API router: OIDC sign-in and callback, sign-out, session lookup."""

import logging
from typing import Annotated, Optional

from authlib.integrations.starlette_client import OAuth, OAuthError
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse

from gc_app.api.dependencies import (
    get_app_settings,
    get_audit_logger,
    get_oauth,
    get_optional_data_client,
    get_providers,
    get_session,
)
from gc_app.auth.actions import federated_sign_out_url
from gc_app.auth.callbacks import jwt_callback, redirect_callback
from gc_app.auth.providers import OIDCProvider
from gc_app.auth.session_token import clear_session_cookie, encode_session_token, set_session_cookie
from gc_app.config.settings import AppSettings
from gc_app.core.context import set_context
from gc_app.governance.audit_logger import AuditLogger
from gc_app.infrastructure.database.client import DataClient
from gc_app.security.route_policy import auth_error_url, locale_for_path
from gc_app.security.session import Session

logger = logging.getLogger(__name__)

router = APIRouter()

CALLBACK_URL_KEY = "callbackUrl"
REDIRECT_STATUS = 307
# 303 so a POSTed sign-out is followed with GET at the identity provider
SIGNOUT_STATUS = 303


def _error_redirect(callback_url: Optional[str], error: str) -> RedirectResponse:
    locale = locale_for_path(callback_url or "/")
    return RedirectResponse(auth_error_url(locale, error), status_code=REDIRECT_STATUS)


def _error_code(exc: OAuthError) -> str:
    return "AccessDenied" if exc.error == "access_denied" else "Configuration"


@router.get("/signin/{provider_id}")
async def signin(
    request: Request,
    provider_id: str,
    providers: Annotated[dict[str, OIDCProvider], Depends(get_providers)],
    oauth: Annotated[OAuth, Depends(get_oauth)],
    callback_url: Annotated[Optional[str], Query(alias="callbackUrl")] = None,
):
    """Start the authorization-code flow; the callback URL survives the round trip in the state cookie."""
    if provider_id not in providers:
        logger.warning("Sign-in requested for unconfigured provider %s", provider_id)
        return _error_redirect(callback_url, "Configuration")

    request.session[CALLBACK_URL_KEY] = callback_url or "/"
    client = oauth.create_client(provider_id)
    redirect_uri = str(request.url_for("callback", provider_id=provider_id))
    return await client.authorize_redirect(request, redirect_uri)


@router.get("/callback/{provider_id}", name="callback")
async def callback(
    request: Request,
    provider_id: str,
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    providers: Annotated[dict[str, OIDCProvider], Depends(get_providers)],
    oauth: Annotated[OAuth, Depends(get_oauth)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
    data_client: Annotated[Optional[DataClient], Depends(get_optional_data_client)],
):
    callback_url = request.session.pop(CALLBACK_URL_KEY, None)
    provider = providers.get(provider_id)
    if provider is None:
        return _error_redirect(callback_url, "Configuration")

    client = oauth.create_client(provider_id)
    try:
        token = await client.authorize_access_token(request)
        claims = token.get("userinfo") or await client.userinfo(token=token)
    except OAuthError as e:
        logger.warning("OIDC callback failed for %s: %s", provider_id, e.error)
        return _error_redirect(callback_url, _error_code(e))

    user = provider.profile(claims)
    session_claims = jwt_callback({"sub": user["id"]}, user=user, account={"provider": provider_id})

    set_context(user_id=session_claims["id"])
    audit.set_context(user_id=session_claims["id"])
    if data_client is not None:
        profile = {
            "email": session_claims.get("email"),
            "name": session_claims.get("name"),
            "provider": provider_id,
            "roles": session_claims["roles"],
        }
        await data_client.model("User").upsert(
            where={"id": session_claims["id"]},
            create={"id": session_claims["id"], **profile},
            update=profile,
        )
    await audit.log_login(session_claims["id"], metadata={"provider": provider_id})

    target = redirect_callback(callback_url or "/", settings.auth_url)
    response = RedirectResponse(target, status_code=REDIRECT_STATUS)
    set_session_cookie(response, encode_session_token(session_claims, settings), settings)
    return response


@router.api_route("/signout", methods=["GET", "POST"])
async def signout(
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    session: Annotated[Optional[Session], Depends(get_session)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
):
    """Clear the local session, then end the identity provider session (federated sign-out)."""
    if session is not None:
        await audit.log_logout(session.user.id, metadata={"provider": session.provider})
    target = redirect_callback(federated_sign_out_url(settings), settings.auth_url)
    response = RedirectResponse(target, status_code=SIGNOUT_STATUS)
    clear_session_cookie(response, settings)
    return response


@router.get("/session")
async def current_session(
    session: Annotated[Optional[Session], Depends(get_session)],
):
    return session.to_dict() if session is not None else None
