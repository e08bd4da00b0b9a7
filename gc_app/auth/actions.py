"""Federated sign-out via the Entra ID end_session endpoint (ITSG-33 AC-12)."""

from urllib.parse import quote

from gc_app.auth.providers import ENTRA_LOGIN_HOST
from gc_app.config.settings import AppSettings


def federated_sign_out_url(settings: AppSettings) -> str:
    """
    Where to send the browser once the local session is cleared.
    Without tenant configuration (e.g. GCKey) this is a local-only sign-out back to the app.
    """
    app_url = settings.auth_url
    if not settings.azure_ad_tenant_id:
        return app_url
    return (
        f"{ENTRA_LOGIN_HOST}/{settings.azure_ad_tenant_id}/oauth2/v2.0/logout"
        f"?post_logout_redirect_uri={quote(app_url, safe='')}"
    )
