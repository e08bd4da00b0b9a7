"""Audit sink protocol and the console implementation. Governance depends on this; infrastructure implements persistence."""

import json
import logging
from typing import Protocol

from gc_app.governance.audit_models import AuditEntry

AUDIT_LOGGER_NAME = "gc_app.audit"
AUDIT_PREFIX = "[AUDIT]"


class AuditSink(Protocol):
    """Destination for immutable audit entries. Must not allow mutation of written entries."""

    async def save(self, entry: AuditEntry) -> None:
        """Persist one entry. May raise AuditPersistenceError; the logger swallows it."""
        ...


class ConsoleAuditSink:
    """Fallback used when no database is configured: one structured line per entry."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(AUDIT_LOGGER_NAME)

    async def save(self, entry: AuditEntry) -> None:
        self._logger.info("%s %s", AUDIT_PREFIX, json.dumps(entry.to_dict(), default=str))
