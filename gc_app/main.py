# gc_app/main.py

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from gc_app.api.middleware import (
    REDIRECT_STATUS,
    AuditContextMiddleware,
    SecurityGateMiddleware,
    apply_security_headers,
)
from gc_app.api.routers import auth, documents, health, pages
from gc_app.config.logging import configure_logging
from gc_app.config.settings import get_settings
from gc_app.domain.exceptions import DomainError, DomainValidationError
from gc_app.domain.validators.input_validator import field_errors
from gc_app.infrastructure.database.exceptions import (
    DatabaseUnavailableError,
    DataAccessError,
    RecordNotFoundError,
    UnknownModelError,
    UnsupportedOperationError,
)
from gc_app.security.exceptions import AuthenticationRequired, AuthorizationError
from gc_app.security.route_policy import access_denied_url, locale_for_path, login_url

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
)

# Middleware order: last added runs first (outermost).
# Request flow: SecurityGate -> AuditContext -> Session (OIDC state) -> routers.
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.auth_secret,
    session_cookie="gc_app.oauth-state",
    same_site="lax",
    https_only=settings.is_production,
)
app.add_middleware(AuditContextMiddleware)
app.add_middleware(SecurityGateMiddleware)


def _is_api(request: Request) -> bool:
    return request.url.path.startswith("/api/")


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Request validation failed",
            "errors": [e.to_dict() for e in field_errors(exc)],
        },
    )


@app.exception_handler(DomainValidationError)
async def domain_validation_error_handler(request, exc: DomainValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "errors": [e.to_dict() for e in exc.errors]},
    )


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(AuthenticationRequired)
async def authentication_required_handler(request: Request, exc: AuthenticationRequired):
    if _is_api(request):
        return JSONResponse(status_code=401, content={"detail": exc.message})
    locale = locale_for_path(request.url.path)
    response = RedirectResponse(login_url(locale, exc.callback_url), status_code=REDIRECT_STATUS)
    return apply_security_headers(response)


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request: Request, exc: AuthorizationError):
    if _is_api(request):
        return JSONResponse(status_code=403, content={"detail": exc.message})
    locale = locale_for_path(request.url.path)
    response = RedirectResponse(access_denied_url(locale), status_code=REDIRECT_STATUS)
    return apply_security_headers(response)


@app.exception_handler(RecordNotFoundError)
async def record_not_found_handler(request, exc: RecordNotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(UnknownModelError)
@app.exception_handler(UnsupportedOperationError)
async def bad_operation_handler(request, exc: DataAccessError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(DatabaseUnavailableError)
async def database_unavailable_handler(request, exc: DatabaseUnavailableError):
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.exception_handler(DataAccessError)
async def data_access_error_handler(request, exc: DataAccessError):
    logger.error("Data access failed: %s", exc.message)
    return JSONResponse(status_code=500, content={"detail": "Data access error"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    # Runs outside the request's audit scope, so correlate from request.state
    session = getattr(request.state, "session", None)
    logger.exception(
        "Unhandled error on %s",
        request.url.path,
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "user_id": session.user.id if session else None,
        },
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routers: /health, /api/auth, /api/documents, then locale pages (catch-all /{locale} last)
app.include_router(health.router)
app.include_router(auth.router, prefix="/api/auth")
app.include_router(documents.router, prefix="/api/documents")
app.include_router(pages.router)
