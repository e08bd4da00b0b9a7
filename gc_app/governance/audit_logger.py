"""Audit logging for Government of Canada compliance. No FastAPI.

Entries are immutable and append-only. Logging never raises and never blocks the
caller's primary operation: sink failures are reported and swallowed.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from gc_app.core.context import AuditContext
from gc_app.governance.audit_models import (
    AuditAction,
    AuditEntry,
    AuditLoggerOptions,
    SecurityClassification,
)
from gc_app.governance.audit_sink import AuditSink, ConsoleAuditSink

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"

PII_FIELDS = frozenset(
    {
        "email",
        "name",
        "firstName",
        "lastName",
        "phone",
        "address",
        "sin",
        "dateOfBirth",
        "password",
        "passwordHash",
        "first_name",
        "last_name",
        "date_of_birth",
        "password_hash",
    }
)

SESSION_ENTITY = "Session"


def anonymize_ip(ip: Optional[str]) -> Optional[str]:
    """Zero the last IPv4 octet; keep the first three IPv6 groups. Anything else passes through."""
    if not ip:
        return None
    if "." in ip:
        parts = ip.split(".")
        if len(parts) == 4:
            return f"{parts[0]}.{parts[1]}.{parts[2]}.0"
    elif ":" in ip:
        parts = ip.split(":")
        if len(parts) >= 4:
            return f"{':'.join(parts[:3])}::"
    return ip


def sanitize_values(
    values: Optional[Mapping[str, Any]], include_pii: bool = False
) -> Optional[Dict[str, Any]]:
    """Replace denylisted fields with [REDACTED] unless PII is explicitly allowed."""
    if values is None:
        return None
    if include_pii:
        return dict(values)
    return {key: (REDACTED if key in PII_FIELDS else value) for key, value in values.items()}


class AuditLogger:
    """
    Builds AuditEntry records from the current AuditContext and routes them to a sink.

    Usage:
        audit = AuditLogger(AuditContext(user_id=session.user.id), sink)
        await audit.log_create("User", user["id"], user)
    """

    def __init__(
        self,
        context: Optional[AuditContext] = None,
        sink: Optional[AuditSink] = None,
    ) -> None:
        self._context = context or AuditContext()
        self._sink: AuditSink = sink or ConsoleAuditSink()

    @property
    def context(self) -> AuditContext:
        return self._context

    def set_context(self, **partial: Any) -> None:
        """Enrich the context (e.g. once authentication completes mid-request)."""
        self._context = self._context.merge(**partial)

    async def _log(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: str,
        *,
        old_values: Optional[Mapping[str, Any]] = None,
        new_values: Optional[Mapping[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        options: Optional[AuditLoggerOptions] = None,
    ) -> None:
        options = options or AuditLoggerOptions()
        ctx = self._context
        entry = AuditEntry(
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id),
            timestamp=datetime.now(timezone.utc),
            user_id=ctx.user_id,
            user_agent=ctx.user_agent,
            ip_address=anonymize_ip(ctx.ip_address),
            session_id=ctx.session_id,
            request_id=ctx.request_id,
            old_values=sanitize_values(old_values, options.include_pii),
            new_values=sanitize_values(new_values, options.include_pii),
            metadata={**(metadata or {}), **(options.metadata or {})},
            security_classification=(
                options.security_classification or SecurityClassification.UNCLASSIFIED
            ),
        )
        try:
            await self._sink.save(entry)
        except Exception:
            logger.exception(
                "Failed to write audit log: action=%s entity_type=%s", action.value, entity_type
            )

    async def log_create(
        self,
        entity_type: str,
        entity_id: str,
        new_values: Optional[Mapping[str, Any]] = None,
        options: Optional[AuditLoggerOptions] = None,
    ) -> None:
        await self._log(
            AuditAction.CREATE, entity_type, entity_id, new_values=new_values, options=options
        )

    async def log_read(
        self,
        entity_type: str,
        entity_id: str,
        options: Optional[AuditLoggerOptions] = None,
    ) -> None:
        """Sensitive data access."""
        await self._log(AuditAction.READ, entity_type, entity_id, options=options)

    async def log_update(
        self,
        entity_type: str,
        entity_id: str,
        old_values: Optional[Mapping[str, Any]] = None,
        new_values: Optional[Mapping[str, Any]] = None,
        options: Optional[AuditLoggerOptions] = None,
    ) -> None:
        await self._log(
            AuditAction.UPDATE,
            entity_type,
            entity_id,
            old_values=old_values,
            new_values=new_values,
            options=options,
        )

    async def log_delete(
        self,
        entity_type: str,
        entity_id: str,
        old_values: Optional[Mapping[str, Any]] = None,
        options: Optional[AuditLoggerOptions] = None,
    ) -> None:
        await self._log(
            AuditAction.DELETE, entity_type, entity_id, old_values=old_values, options=options
        )

    async def log_login(
        self,
        user_id: str,
        metadata: Optional[Dict[str, Any]] = None,
        options: Optional[AuditLoggerOptions] = None,
    ) -> None:
        await self._log(
            AuditAction.LOGIN, SESSION_ENTITY, user_id, metadata=metadata, options=options
        )

    async def log_logout(
        self,
        user_id: str,
        metadata: Optional[Dict[str, Any]] = None,
        options: Optional[AuditLoggerOptions] = None,
    ) -> None:
        await self._log(
            AuditAction.LOGOUT, SESSION_ENTITY, user_id, metadata=metadata, options=options
        )

    async def log_access_denied(
        self,
        entity_type: str,
        entity_id: str,
        reason: Optional[str] = None,
        options: Optional[AuditLoggerOptions] = None,
    ) -> None:
        """Authorization failures default to PROTECTED_A."""
        options = options or AuditLoggerOptions()
        if options.security_classification is None:
            options = replace(options, security_classification=SecurityClassification.PROTECTED_A)
        await self._log(
            AuditAction.ACCESS_DENIED,
            entity_type,
            entity_id,
            metadata={"reason": reason},
            options=options,
        )

    async def log_export(
        self,
        entity_type: str,
        entity_ids: Sequence[str],
        format: str,
        options: Optional[AuditLoggerOptions] = None,
    ) -> None:
        ids: List[str] = [str(i) for i in entity_ids]
        await self._log(
            AuditAction.EXPORT,
            entity_type,
            ",".join(ids),
            metadata={"format": format, "count": len(ids)},
            options=options,
        )

    async def log_import(
        self,
        entity_type: str,
        count: int,
        source: str,
        options: Optional[AuditLoggerOptions] = None,
    ) -> None:
        await self._log(
            AuditAction.IMPORT,
            entity_type,
            "batch",
            metadata={"count": count, "source": source},
            options=options,
        )


def context_from_headers(
    headers: Mapping[str, str],
    user_id: Optional[str] = None,
    session_id: Optional[str] = None,
) -> AuditContext:
    """Requester metadata from inbound headers: first X-Forwarded-For entry, else X-Real-IP."""
    forwarded = headers.get("x-forwarded-for")
    ip_address = forwarded.split(",")[0].strip() if forwarded else None
    if not ip_address:
        ip_address = headers.get("x-real-ip")
    return AuditContext(
        user_id=user_id,
        user_agent=headers.get("user-agent"),
        ip_address=ip_address,
        session_id=session_id,
        request_id=headers.get("x-request-id") or str(uuid.uuid4()),
    )


def create_audit_logger(
    user_id: Optional[str] = None,
    request: Any = None,
    sink: Optional[AuditSink] = None,
) -> AuditLogger:
    """Audit logger with context derived from an inbound request (anything exposing .headers)."""
    headers = request.headers if request is not None else {}
    return AuditLogger(context_from_headers(headers, user_id=user_id), sink)
