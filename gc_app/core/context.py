"""Request-scoped audit context. One ContextVar per process; each asyncio task sees its own value."""

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterator, Optional


@dataclass(frozen=True)
class AuditContext:
    """Who is acting and from where. Snapshot only; never persisted."""

    user_id: Optional[str] = None
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    session_id: Optional[str] = None
    request_id: Optional[str] = None

    def merge(self, **partial: Any) -> "AuditContext":
        """Return a copy with the given fields replaced (last write wins)."""
        known = {f.name for f in fields(self)}
        unknown = set(partial) - known
        if unknown:
            raise TypeError(f"Unknown audit context fields: {sorted(unknown)}")
        return replace(self, **partial)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


_EMPTY = AuditContext()

audit_context_ctx: contextvars.ContextVar[AuditContext] = contextvars.ContextVar(
    "audit_context", default=_EMPTY
)


def get_context() -> AuditContext:
    return audit_context_ctx.get()


def set_context(**partial: Any) -> AuditContext:
    """Shallow-merge fields into the current task's context."""
    ctx = audit_context_ctx.get().merge(**partial)
    audit_context_ctx.set(ctx)
    return ctx


def clear_context() -> None:
    audit_context_ctx.set(_EMPTY)


@contextmanager
def audit_scope(**fields_: Any) -> Iterator[AuditContext]:
    """Bind a fresh context for the duration of the block, then restore the previous one."""
    token = audit_context_ctx.set(_EMPTY.merge(**fields_))
    try:
        yield audit_context_ctx.get()
    finally:
        audit_context_ctx.reset(token)
