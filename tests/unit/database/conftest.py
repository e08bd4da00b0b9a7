"""Fixtures for data-layer tests: in-memory repository, recording audit sink, data client."""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from gc_app.core.context import clear_context
from gc_app.infrastructure.database.audit_trail import AuditTrailInterceptor
from gc_app.infrastructure.database.client import DataClient
from gc_app.infrastructure.database.compliance import ComplianceInterceptor
from gc_app.infrastructure.database.exceptions import RecordNotFoundError
from gc_app.infrastructure.database.operations import Operation
from gc_app.infrastructure.database.soft_delete import SoftDeleteInterceptor

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

_COMPARATORS = {
    "equals": lambda field, value: field == value,
    "not": lambda field, value: field != value,
    "in": lambda field, value: field in value,
    "not_in": lambda field, value: field not in value,
    "gt": lambda field, value: field is not None and field > value,
    "gte": lambda field, value: field is not None and field >= value,
    "lt": lambda field, value: field is not None and field < value,
    "lte": lambda field, value: field is not None and field <= value,
}


def matches(record: dict, where) -> bool:
    for key, value in (where or {}).items():
        if key == "OR":
            if not any(matches(record, w) for w in value):
                return False
        elif key == "AND":
            if not all(matches(record, w) for w in value):
                return False
        elif isinstance(value, dict):
            if not all(_COMPARATORS[op](record.get(key), operand) for op, operand in value.items()):
                return False
        elif record.get(key) != value:
            return False
    return True


class FakeRepository:
    """In-memory base repository speaking the same operation dialect as SqlAlchemyRepository."""

    def __init__(self):
        self.tables: dict[str, dict[str, dict]] = {}
        self.operations: list[Operation] = []

    def _table(self, model: str) -> dict:
        return self.tables.setdefault(model, {})

    def _rows(self, model: str, where) -> list[dict]:
        return [r for r in self._table(model).values() if matches(r, where)]

    async def execute(self, operation: Operation):
        self.operations.append(operation)
        handler = getattr(self, f"_{operation.action}")
        return handler(operation.model, operation.args)

    def _create(self, model, args):
        record = {"id": str(uuid.uuid4()), "deleted_at": None, **args["data"]}
        self._table(model)[record["id"]] = record
        return dict(record)

    def _create_many(self, model, args):
        for data in args["data"]:
            self._create(model, {"data": data})
        return {"count": len(args["data"])}

    def _update(self, model, args):
        rows = self._rows(model, args.get("where"))
        if not rows:
            raise RecordNotFoundError(f"{model} not found")
        rows[0].update(args.get("data") or {})
        return dict(rows[0])

    def _update_many(self, model, args):
        rows = self._rows(model, args.get("where"))
        for row in rows:
            row.update(args.get("data") or {})
        return {"count": len(rows)}

    def _upsert(self, model, args):
        if self._rows(model, args.get("where")):
            return self._update(model, {"where": args["where"], "data": args["update"]})
        return self._create(model, {"data": args["create"]})

    def _delete(self, model, args):
        rows = self._rows(model, args.get("where"))
        if not rows:
            raise RecordNotFoundError(f"{model} not found")
        return dict(self._table(model).pop(rows[0]["id"]))

    def _delete_many(self, model, args):
        rows = self._rows(model, args.get("where"))
        for row in rows:
            self._table(model).pop(row["id"])
        return {"count": len(rows)}

    def _find_many(self, model, args):
        return [dict(r) for r in self._rows(model, args.get("where"))]

    def _find_first(self, model, args):
        rows = self._rows(model, args.get("where"))
        return dict(rows[0]) if rows else None

    def _find_unique(self, model, args):
        return self._find_first(model, args)

    def _count(self, model, args):
        return len(self._rows(model, args.get("where")))

    def actions(self) -> list[str]:
        return [op.action for op in self.operations]


@pytest.fixture(autouse=True)
def reset_context():
    clear_context()
    yield
    clear_context()


@pytest.fixture
def repository():
    return FakeRepository()


@pytest.fixture
def audit_sink():
    sink = AsyncMock()
    sink.save = AsyncMock(return_value=None)
    return sink


@pytest.fixture
def data_client(repository, audit_sink):
    return DataClient(
        repository,
        [
            SoftDeleteInterceptor(clock=lambda: FIXED_NOW),
            ComplianceInterceptor(),
            AuditTrailInterceptor(audit_sink),
        ],
    )
