"""Data-access operation shape, repository and interceptor protocols.

Operations are Prisma-shaped: an action name plus an args dict (where/data/create/update).
Records travel as plain dicts keyed by column attribute name.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Dict, Protocol

CREATE = "create"
CREATE_MANY = "create_many"
UPDATE = "update"
UPDATE_MANY = "update_many"
UPSERT = "upsert"
DELETE = "delete"
DELETE_MANY = "delete_many"
FIND_MANY = "find_many"
FIND_FIRST = "find_first"
FIND_UNIQUE = "find_unique"
COUNT = "count"

ACTIONS = (
    CREATE,
    CREATE_MANY,
    UPDATE,
    UPDATE_MANY,
    UPSERT,
    DELETE,
    DELETE_MANY,
    FIND_MANY,
    FIND_FIRST,
    FIND_UNIQUE,
    COUNT,
)

DELETED_AT = "deleted_at"
CREATED_BY = "created_by"
UPDATED_BY = "updated_by"


@dataclass(frozen=True)
class ModelCapabilities:
    """Static per-model declaration of which bookkeeping columns exist."""

    soft_delete: bool = False
    created_by: bool = False
    updated_by: bool = False


@dataclass(frozen=True)
class Operation:
    model: str
    action: str
    args: Dict[str, Any] = field(default_factory=dict)
    capabilities: ModelCapabilities = ModelCapabilities()

    def with_args(self, **args: Any) -> "Operation":
        """Copy with the given top-level args replaced."""
        return replace(self, args={**self.args, **args})

    def rewrite(self, action: str, args: Dict[str, Any]) -> "Operation":
        return replace(self, action=action, args=args)


Proceed = Callable[[Operation], Awaitable[Any]]


class Repository(Protocol):
    """Executes an operation against storage. The innermost link of the chain."""

    async def execute(self, operation: Operation) -> Any:
        ...


class QueryInterceptor(Protocol):
    """One stage of the chain: may rewrite the operation, must call proceed at most once per write."""

    name: str

    async def intercept(self, operation: Operation, proceed: Proceed) -> Any:
        ...
