"""Audit trail interceptor: records create/update/delete through the audit logger.

The prior row is read before update/delete (best effort) so entries carry a diff.
Bookkeeping failures are logged; the primary operation's result is always returned.
"""

import logging
from typing import Any, Optional

from gc_app.core.context import get_context
from gc_app.governance.audit_logger import AuditLogger
from gc_app.governance.audit_sink import AuditSink
from gc_app.infrastructure.database.operations import (
    CREATE,
    DELETE,
    FIND_UNIQUE,
    UPDATE,
    Operation,
    Proceed,
)

logger = logging.getLogger(__name__)

SKIP_AUDIT_MODELS = frozenset({"AuditLog", "VerificationToken"})


def _entity_id(record: Any) -> Optional[str]:
    if isinstance(record, dict) and record.get("id") is not None:
        return str(record["id"])
    return None


class AuditTrailInterceptor:
    name = "audit"

    def __init__(self, sink: AuditSink) -> None:
        self._sink = sink

    async def intercept(self, operation: Operation, proceed: Proceed) -> Any:
        if operation.model in SKIP_AUDIT_MODELS or operation.action not in (CREATE, UPDATE, DELETE):
            return await proceed(operation)

        old_values = None
        if operation.action in (UPDATE, DELETE):
            old_values = await self._fetch_previous(operation, proceed)

        result = await proceed(operation)

        try:
            audit = AuditLogger(get_context(), self._sink)
            if operation.action == CREATE:
                await audit.log_create(operation.model, _entity_id(result) or "unknown", result)
            elif operation.action == UPDATE:
                await audit.log_update(
                    operation.model, _entity_id(result) or "unknown", old_values, result
                )
            else:
                await audit.log_delete(
                    operation.model, _entity_id(old_values) or "unknown", old_values
                )
        except Exception:
            logger.exception(
                "Failed to create audit log: model=%s action=%s", operation.model, operation.action
            )

        return result

    @staticmethod
    async def _fetch_previous(operation: Operation, proceed: Proceed) -> Optional[dict]:
        try:
            return await proceed(
                operation.rewrite(FIND_UNIQUE, {"where": operation.args.get("where")})
            )
        except Exception:
            logger.debug("Could not read previous %s state", operation.model, exc_info=True)
            return None
