"""authlib Starlette OAuth registry built from the configured OIDC providers."""

from typing import Mapping

from authlib.integrations.starlette_client import OAuth

from gc_app.auth.providers import OIDCProvider


def build_oauth(providers: Mapping[str, OIDCProvider]) -> OAuth:
    oauth = OAuth()
    for provider in providers.values():
        oauth.register(
            name=provider.id,
            client_id=provider.client_id,
            client_secret=provider.client_secret,
            server_metadata_url=provider.server_metadata_url,
            client_kwargs={"scope": provider.scope},
        )
    return oauth
