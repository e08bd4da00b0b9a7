"""Data client: a fixed interceptor chain over a base repository.

Call order for every operation: soft_delete -> compliance -> audit -> repository.
Soft delete runs first so compliance stamps updated_by on the rewritten update and
the audit trail records what actually happened.
"""

from functools import partial
from typing import Any, Dict, List, Mapping, Optional, Sequence

from gc_app.governance.audit_sink import AuditSink
from gc_app.infrastructure.database.audit_trail import AuditTrailInterceptor
from gc_app.infrastructure.database.compliance import ComplianceInterceptor
from gc_app.infrastructure.database.exceptions import (
    UnknownModelError,
    UnsupportedOperationError,
)
from gc_app.infrastructure.database.models import MODEL_CAPABILITIES
from gc_app.infrastructure.database.operations import (
    COUNT,
    CREATE,
    CREATE_MANY,
    DELETE,
    DELETE_MANY,
    DELETED_AT,
    FIND_FIRST,
    FIND_MANY,
    FIND_UNIQUE,
    UPDATE,
    UPDATE_MANY,
    UPSERT,
    ModelCapabilities,
    Operation,
    QueryInterceptor,
    Repository,
)
from gc_app.infrastructure.database.soft_delete import SoftDeleteInterceptor


class DataClient:
    def __init__(
        self,
        base: Repository,
        interceptors: Sequence[QueryInterceptor] = (),
        capabilities: Mapping[str, ModelCapabilities] = MODEL_CAPABILITIES,
    ) -> None:
        self._base_repository = base
        self._interceptors = tuple(interceptors)
        self._capabilities = dict(capabilities)

    @property
    def interceptor_names(self) -> List[str]:
        return [i.name for i in self._interceptors]

    @property
    def base(self) -> "DataClient":
        """Same repository with no interceptors (e.g. hard delete for a right-to-erasure request)."""
        return DataClient(self._base_repository, (), self._capabilities)

    def model(self, name: str) -> "ModelDelegate":
        if name not in self._capabilities:
            raise UnknownModelError(f"Unknown model '{name}'")
        return ModelDelegate(self, name, self._capabilities[name])

    async def execute(self, operation: Operation) -> Any:
        return await self._call(0, operation)

    async def _call(self, index: int, operation: Operation) -> Any:
        if index == len(self._interceptors):
            return await self._base_repository.execute(operation)
        return await self._interceptors[index].intercept(operation, partial(self._call, index + 1))


class ModelDelegate:
    """Per-model facade: one coroutine per action."""

    def __init__(self, client: DataClient, model: str, capabilities: ModelCapabilities) -> None:
        self._client = client
        self._model = model
        self._capabilities = capabilities

    async def _run(self, action: str, **args: Any) -> Any:
        args = {k: v for k, v in args.items() if v is not None}
        return await self._client.execute(
            Operation(self._model, action, args, self._capabilities)
        )

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._run(CREATE, data=data)

    async def create_many(self, data: Sequence[Dict[str, Any]]) -> Dict[str, int]:
        return await self._run(CREATE_MANY, data=list(data))

    async def update(self, where: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._run(UPDATE, where=where, data=data)

    async def update_many(self, where: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, int]:
        return await self._run(UPDATE_MANY, where=where, data=data)

    async def upsert(
        self, where: Dict[str, Any], create: Dict[str, Any], update: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._run(UPSERT, where=where, create=create, update=update)

    async def delete(self, where: Dict[str, Any]) -> Dict[str, Any]:
        return await self._run(DELETE, where=where)

    async def delete_many(self, where: Optional[Dict[str, Any]] = None) -> Dict[str, int]:
        return await self._run(DELETE_MANY, where=where or {})

    async def find_many(
        self,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[Dict[str, str]] = None,
        skip: Optional[int] = None,
        take: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        return await self._run(FIND_MANY, where=where, order_by=order_by, skip=skip, take=take)

    async def find_first(
        self,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[Dict[str, str]] = None,
    ) -> Optional[Dict[str, Any]]:
        return await self._run(FIND_FIRST, where=where, order_by=order_by)

    async def find_unique(self, where: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self._run(FIND_UNIQUE, where=where)

    async def count(self, where: Optional[Dict[str, Any]] = None) -> int:
        return await self._run(COUNT, where=where)

    async def restore(self, where: Dict[str, Any]) -> Dict[str, Any]:
        """Clear deleted_at on a soft-deleted record."""
        if not self._capabilities.soft_delete:
            raise UnsupportedOperationError(f"{self._model} does not support soft delete")
        return await self._run(UPDATE, where=where, data={DELETED_AT: None})


def build_data_client(
    base: Repository,
    sink: AuditSink,
    capabilities: Mapping[str, ModelCapabilities] = MODEL_CAPABILITIES,
) -> DataClient:
    return DataClient(
        base,
        [SoftDeleteInterceptor(), ComplianceInterceptor(), AuditTrailInterceptor(sink)],
        capabilities,
    )
