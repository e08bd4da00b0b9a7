"""OIDC identity providers: Microsoft Entra ID and the GCKey stub.

Profile mappers turn ID-token/userinfo claims into the user dict consumed by the jwt callback.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from gc_app.config.settings import AppSettings
from gc_app.security.rbac import Role, parse_roles

ENTRA_ID = "microsoft-entra-id"
GCKEY = "gckey"

ENTRA_LOGIN_HOST = "https://login.microsoftonline.com"


@dataclass(frozen=True)
class OIDCProvider:
    id: str
    name: str
    issuer: str
    client_id: str
    client_secret: Optional[str]
    scope: str
    profile: Callable[[Mapping[str, Any]], Dict[str, Any]]

    @property
    def server_metadata_url(self) -> str:
        return f"{self.issuer.rstrip('/')}/.well-known/openid-configuration"


def entra_id_profile(claims: Mapping[str, Any]) -> Dict[str, Any]:
    """Map Entra ID claims; the custom `roles` claim is filtered to known roles, absent -> user."""
    claimed = claims.get("roles") or []
    roles = parse_roles(claimed) if claimed else [Role.USER]
    return {
        "id": claims["sub"],
        "name": claims.get("name"),
        "email": claims.get("email"),
        "image": None,
        "roles": roles,
    }


def gckey_profile(claims: Mapping[str, Any]) -> Dict[str, Any]:
    """GCKey only issues a Persistent Anonymous Identifier; no name or email."""
    return {
        "id": claims["sub"],
        "name": None,
        "email": None,
        "image": None,
        "roles": [Role.CITIZEN],
    }


def entra_id_issuer(tenant_id: str) -> str:
    return f"{ENTRA_LOGIN_HOST}/{tenant_id}/v2.0"


def azure_ad_provider(settings: AppSettings) -> Optional[OIDCProvider]:
    if not (settings.azure_ad_client_id and settings.azure_ad_tenant_id):
        return None
    return OIDCProvider(
        id=ENTRA_ID,
        name="Microsoft Entra ID",
        issuer=entra_id_issuer(settings.azure_ad_tenant_id),
        client_id=settings.azure_ad_client_id,
        client_secret=settings.azure_ad_client_secret,
        # Least privilege: no Graph scopes unless /me is needed
        scope="openid profile email",
        profile=entra_id_profile,
    )


def gckey_provider(settings: AppSettings) -> Optional[OIDCProvider]:
    if not (settings.gckey_enabled and settings.gckey_issuer and settings.gckey_client_id):
        return None
    return OIDCProvider(
        id=GCKEY,
        name="GCKey",
        issuer=settings.gckey_issuer,
        client_id=settings.gckey_client_id,
        client_secret=settings.gckey_client_secret,
        scope="openid",
        profile=gckey_profile,
    )


def configured_providers(settings: AppSettings) -> Dict[str, OIDCProvider]:
    providers = {}
    for build in (azure_ad_provider, gckey_provider):
        provider = build(settings)
        if provider is not None:
            providers[provider.id] = provider
    return providers
