"""Soft delete interceptor.

For models declaring soft_delete, delete becomes an update stamping deleted_at and
reads hide soft-deleted rows unless the caller's where clause mentions deleted_at
(see include_deleted / only_deleted). Records are retained for GC information
management requirements. First delete wins: re-deleting keeps the original timestamp.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

from gc_app.infrastructure.database.operations import (
    COUNT,
    DELETE,
    DELETE_MANY,
    DELETED_AT,
    FIND_FIRST,
    FIND_MANY,
    FIND_UNIQUE,
    UPDATE,
    UPDATE_MANY,
    Operation,
    Proceed,
)

_FILTERED_READS = (FIND_MANY, FIND_FIRST, COUNT)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def mentions_deleted_at(where: Optional[Mapping[str, Any]]) -> bool:
    """True when the where clause (including nested AND/OR) already constrains deleted_at."""
    for key, value in (where or {}).items():
        if key == DELETED_AT:
            return True
        if key in ("AND", "OR") and any(mentions_deleted_at(w) for w in value):
            return True
    return False


def include_deleted(where: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Query args matching live and soft-deleted rows. Usage: find_many(**include_deleted())."""
    any_state = {"OR": [{DELETED_AT: None}, {DELETED_AT: {"not": None}}]}
    return {"where": {"AND": [dict(where or {}), any_state]}}


def only_deleted(where: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Query args matching soft-deleted rows only."""
    return {"where": {**dict(where or {}), DELETED_AT: {"not": None}}}


class SoftDeleteInterceptor:
    name = "soft_delete"

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock

    async def intercept(self, operation: Operation, proceed: Proceed) -> Any:
        if not operation.capabilities.soft_delete:
            return await proceed(operation)

        action = operation.action
        where = operation.args.get("where") or {}

        if action == DELETE:
            existing = await proceed(operation.rewrite(FIND_UNIQUE, {"where": where}))
            if existing is not None and existing.get(DELETED_AT) is not None:
                return existing
            return await proceed(
                operation.rewrite(UPDATE, {"where": where, "data": {DELETED_AT: self._clock()}})
            )

        if action == DELETE_MANY:
            live_only = {"AND": [dict(where), {DELETED_AT: None}]}
            return await proceed(
                operation.rewrite(
                    UPDATE_MANY, {"where": live_only, "data": {DELETED_AT: self._clock()}}
                )
            )

        if action in _FILTERED_READS and not mentions_deleted_at(where):
            return await proceed(operation.with_args(where={**where, DELETED_AT: None}))

        if action == FIND_UNIQUE and not mentions_deleted_at(where):
            result = await proceed(operation)
            if result is not None and result.get(DELETED_AT) is not None:
                return None
            return result

        return await proceed(operation)
