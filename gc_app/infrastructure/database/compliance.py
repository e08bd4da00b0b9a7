"""Compliance interceptor: created_by / updated_by attribution from the request's audit context.

Only fills values the caller left empty; never overwrites an explicit value.
"""

from typing import Any, Dict, Mapping, Optional

from gc_app.core.context import get_context
from gc_app.infrastructure.database.operations import (
    CREATE,
    CREATE_MANY,
    CREATED_BY,
    UPDATE,
    UPDATE_MANY,
    UPDATED_BY,
    UPSERT,
    ModelCapabilities,
    Operation,
    Proceed,
)

_WRITES = (CREATE, CREATE_MANY, UPDATE, UPDATE_MANY, UPSERT)


def _stamp(
    data: Optional[Mapping[str, Any]],
    user_id: str,
    created_by: bool = False,
    updated_by: bool = False,
) -> Optional[Dict[str, Any]]:
    if data is None:
        return None
    stamped = dict(data)
    if created_by and not stamped.get(CREATED_BY):
        stamped[CREATED_BY] = user_id
    if updated_by and not stamped.get(UPDATED_BY):
        stamped[UPDATED_BY] = user_id
    return stamped


class ComplianceInterceptor:
    name = "compliance"

    async def intercept(self, operation: Operation, proceed: Proceed) -> Any:
        user_id = get_context().user_id
        caps: ModelCapabilities = operation.capabilities
        if (
            not user_id
            or operation.action not in _WRITES
            or not (caps.created_by or caps.updated_by)
        ):
            return await proceed(operation)

        args = operation.args
        action = operation.action

        if action == CREATE:
            args = {**args, "data": _stamp(args.get("data"), user_id, caps.created_by, caps.updated_by)}
        elif action == CREATE_MANY:
            records = args.get("data") or []
            args = {
                **args,
                "data": [_stamp(r, user_id, caps.created_by, caps.updated_by) for r in records],
            }
        elif action in (UPDATE, UPDATE_MANY):
            args = {**args, "data": _stamp(args.get("data"), user_id, updated_by=caps.updated_by)}
        elif action == UPSERT:
            args = {
                **args,
                "create": _stamp(args.get("create"), user_id, caps.created_by, caps.updated_by),
                "update": _stamp(args.get("update"), user_id, updated_by=caps.updated_by),
            }

        return await proceed(operation.rewrite(action, args))
