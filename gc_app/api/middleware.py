"""API middleware: edge security gate (auth, locale, security headers) and request-scoped audit context."""

import json
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from gc_app.auth.session_token import read_session
from gc_app.config.settings import get_settings
from gc_app.core.context import audit_scope
from gc_app.governance.audit_logger import context_from_headers
from gc_app.security.route_policy import (
    SECURITY_HEADERS,
    GateAction,
    evaluate_request,
    localized_path,
)

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
REDIRECT_STATUS = 307


def apply_security_headers(response: Response) -> Response:
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


class SecurityGateMiddleware(BaseHTTPMiddleware):
    """
    Evaluated once per request: static paths pass untouched; everything else gets the
    security header set and is allowed, sent to login, or sent to access-denied.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        pathname = request.url.path
        session = read_session(request, get_settings())
        request.state.session = session

        decision = evaluate_request(pathname, session)
        if decision.action == GateAction.PASS_THROUGH:
            return await call_next(request)

        if decision.action == GateAction.REDIRECT:
            logger.info(
                json.dumps(
                    {
                        "event": "gate_redirect",
                        "path": pathname,
                        "location": decision.location,
                        "reason": decision.reason,
                    }
                )
            )
            response: Response = RedirectResponse(decision.location, status_code=REDIRECT_STATUS)
        else:
            localized = localized_path(pathname)
            if localized is not None:
                if request.url.query:
                    localized = f"{localized}?{request.url.query}"
                response = RedirectResponse(localized, status_code=REDIRECT_STATUS)
            else:
                response = await call_next(request)

        return apply_security_headers(response)


class AuditContextMiddleware(BaseHTTPMiddleware):
    """Bind the requester's audit context for the request; echo X-Request-ID; log the request after response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        session = getattr(request.state, "session", None)
        ctx = context_from_headers(
            request.headers,
            user_id=session.user.id if session else None,
            session_id=session.id if session else None,
        )
        request.state.request_id = ctx.request_id

        with audit_scope(**ctx.to_dict()):
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = ctx.request_id
            logger.info(
                json.dumps(
                    {
                        "event": "request_audit",
                        "request_id": ctx.request_id,
                        "user_id": ctx.user_id,
                        "path": request.url.path,
                        "method": request.method,
                        "status_code": response.status_code,
                    }
                )
            )
        return response
