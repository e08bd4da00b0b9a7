"""Authentication: OIDC providers, session token, callbacks, federated sign-out."""

from gc_app.auth.actions import federated_sign_out_url
from gc_app.auth.callbacks import authorized, jwt_callback, redirect_callback, session_callback
from gc_app.auth.providers import OIDCProvider, configured_providers
from gc_app.auth.session_token import (
    decode_session_token,
    encode_session_token,
    read_session,
)

__all__ = [
    "OIDCProvider",
    "authorized",
    "configured_providers",
    "decode_session_token",
    "encode_session_token",
    "federated_sign_out_url",
    "jwt_callback",
    "read_session",
    "redirect_callback",
    "session_callback",
]
