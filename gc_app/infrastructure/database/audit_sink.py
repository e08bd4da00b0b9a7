"""DB-backed audit sink. Appends entries to the audit_logs table. Implements AuditSink protocol."""

import json
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gc_app.governance.audit_models import AuditEntry
from gc_app.governance.exceptions import AuditPersistenceError
from gc_app.infrastructure.database.models import AuditLog


def _jsonable(values: Optional[dict]) -> Optional[Any]:
    """Round-trip through json so datetimes and UUIDs in record snapshots fit a JSON column."""
    if values is None:
        return None
    return json.loads(json.dumps(values, default=str))


class DatabaseAuditSink:
    """Writes each entry in its own session; no transaction is shared with the audited operation."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def save(self, entry: AuditEntry) -> None:
        row = AuditLog(
            action=entry.action.value,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            user_id=entry.user_id,
            user_agent=entry.user_agent,
            ip_address=entry.ip_address,
            session_id=entry.session_id,
            request_id=entry.request_id,
            old_values=_jsonable(entry.old_values),
            new_values=_jsonable(entry.new_values),
            metadata_=_jsonable(entry.metadata),
            security_classification=entry.security_classification.value,
            timestamp=entry.timestamp,
        )
        try:
            async with self._session_factory() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as e:
            raise AuditPersistenceError(f"Audit write failed: {e}") from e
