"""FastAPI dependency injection: settings, session, audit sink/logger, data client, OAuth registry."""

import logging
from typing import Annotated, Optional

from authlib.integrations.starlette_client import OAuth
from fastapi import Depends, Request

from gc_app.auth.callbacks import authorized
from gc_app.auth.oauth import build_oauth
from gc_app.auth.providers import OIDCProvider, configured_providers
from gc_app.auth.session_token import read_session
from gc_app.config.settings import AppSettings, get_settings
from gc_app.core.context import get_context
from gc_app.governance.audit_logger import AuditLogger
from gc_app.governance.audit_sink import AuditSink, ConsoleAuditSink
from gc_app.infrastructure.database.audit_sink import DatabaseAuditSink
from gc_app.infrastructure.database.client import DataClient, build_data_client
from gc_app.infrastructure.database.exceptions import DatabaseUnavailableError
from gc_app.infrastructure.database.repository import SqlAlchemyRepository
from gc_app.infrastructure.database.session import get_session_factory
from gc_app.security.exceptions import AuthenticationRequired
from gc_app.security.session import Session

logger = logging.getLogger(__name__)

_audit_sink: AuditSink | None = None
_data_client: DataClient | None = None
_oauth: OAuth | None = None


def get_app_settings() -> AppSettings:
    return get_settings()


def get_audit_sink() -> AuditSink:
    """Return singleton sink: database when configured, console otherwise."""
    global _audit_sink
    if _audit_sink is None:
        factory = get_session_factory()
        if factory is None:
            logger.warning("DATABASE_URL not configured. Audit entries go to the console.")
            _audit_sink = ConsoleAuditSink()
        else:
            _audit_sink = DatabaseAuditSink(factory)
    return _audit_sink


def get_data_client(
    sink: Annotated[AuditSink, Depends(get_audit_sink)],
) -> DataClient:
    """Return singleton data client with the soft-delete -> compliance -> audit chain."""
    global _data_client
    if _data_client is None:
        factory = get_session_factory()
        if factory is None:
            raise DatabaseUnavailableError("Database is not configured")
        _data_client = build_data_client(SqlAlchemyRepository(factory), sink)
    return _data_client


def get_providers(
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> dict[str, OIDCProvider]:
    return configured_providers(settings)


def get_oauth(
    providers: Annotated[dict[str, OIDCProvider], Depends(get_providers)],
) -> OAuth:
    """Return singleton authlib registry."""
    global _oauth
    if _oauth is None:
        _oauth = build_oauth(providers)
    return _oauth


def get_audit_logger(
    sink: Annotated[AuditSink, Depends(get_audit_sink)],
) -> AuditLogger:
    """Audit logger bound to the current request's context (set by AuditContextMiddleware)."""
    return AuditLogger(get_context(), sink)


def get_session(
    request: Request,
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> Optional[Session]:
    """Session decoded by the gate middleware, or decoded here when the gate did not run."""
    if hasattr(request.state, "session"):
        return request.state.session
    return read_session(request, settings)


def require_session(
    request: Request,
    session: Annotated[Optional[Session], Depends(get_session)],
) -> Session:
    """Server-side check for protected pages and API routes."""
    pathname = request.url.path
    if session is None or not authorized(session, pathname):
        raise AuthenticationRequired("Authentication required", callback_url=pathname)
    return session


def get_optional_data_client(
    sink: Annotated[AuditSink, Depends(get_audit_sink)],
) -> Optional[DataClient]:
    """Data client when a database is configured; None otherwise (sign-in still works without one)."""
    if get_session_factory() is None:
        return None
    return get_data_client(sink)
