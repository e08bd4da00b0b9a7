# gc_app/infrastructure/database/repository.py

from typing import Any, Dict, List, Mapping, Optional, Type

from sqlalchemy import and_, delete, func, inspect, or_, select, true, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gc_app.infrastructure.database.exceptions import (
    RecordNotFoundError,
    UnknownModelError,
    UnsupportedOperationError,
)
from gc_app.infrastructure.database.models import MODELS
from gc_app.infrastructure.database.operations import ACTIONS, Operation

_COMPARATORS = {
    "equals": lambda column, value: column.is_(None) if value is None else column == value,
    "not": lambda column, value: column.is_not(None) if value is None else column != value,
    "in": lambda column, value: column.in_(list(value)),
    "not_in": lambda column, value: column.not_in(list(value)),
    "gt": lambda column, value: column > value,
    "gte": lambda column, value: column >= value,
    "lt": lambda column, value: column < value,
    "lte": lambda column, value: column <= value,
}


class SqlAlchemyRepository:
    """
    Base repository: executes Prisma-shaped operations against the ORM.
    Knows nothing about soft delete, attribution or audit; interceptors add those.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        models: Mapping[str, Type[Any]] = MODELS,
    ) -> None:
        self._session_factory = session_factory
        self._models = dict(models)

    async def execute(self, operation: Operation) -> Any:
        if operation.action not in ACTIONS:
            raise UnsupportedOperationError(f"Unsupported action '{operation.action}'")
        model = self._model(operation.model)
        handler = getattr(self, f"_{operation.action}")
        async with self._session_factory() as session:
            return await handler(session, model, operation.args)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _model(self, name: str) -> Type[Any]:
        try:
            return self._models[name]
        except KeyError:
            raise UnknownModelError(f"Unknown model '{name}'") from None

    @staticmethod
    def _column(model: Type[Any], key: str):
        attrs = inspect(model).column_attrs
        if key not in attrs:
            raise UnsupportedOperationError(f"{model.__name__} has no column '{key}'")
        return getattr(model, key)

    def _where(self, model: Type[Any], where: Optional[Mapping[str, Any]]):
        conditions = []
        for key, value in (where or {}).items():
            if key == "OR":
                conditions.append(or_(*[self._where(model, w) for w in value]))
            elif key == "AND":
                conditions.append(and_(*[self._where(model, w) for w in value]))
            else:
                conditions.append(self._condition(self._column(model, key), value))
        return and_(true(), *conditions)

    @staticmethod
    def _condition(column, value: Any):
        if isinstance(value, Mapping):
            parts = []
            for op, operand in value.items():
                comparator = _COMPARATORS.get(op)
                if comparator is None:
                    raise UnsupportedOperationError(f"Unsupported where operator '{op}'")
                parts.append(comparator(column, operand))
            return and_(*parts)
        if value is None:
            return column.is_(None)
        return column == value

    @staticmethod
    def _to_dict(obj: Any) -> Dict[str, Any]:
        return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}

    def _select(self, model: Type[Any], args: Mapping[str, Any]):
        stmt = select(model).where(self._where(model, args.get("where")))
        for key, direction in (args.get("order_by") or {}).items():
            column = self._column(model, key)
            stmt = stmt.order_by(column.desc() if direction == "desc" else column.asc())
        if args.get("skip"):
            stmt = stmt.offset(args["skip"])
        if args.get("take"):
            stmt = stmt.limit(args["take"])
        return stmt

    async def _first(self, session: AsyncSession, model: Type[Any], where: Optional[Mapping[str, Any]]):
        stmt = select(model).where(self._where(model, where)).limit(1)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def _require(self, session: AsyncSession, model: Type[Any], where: Optional[Mapping[str, Any]]):
        obj = await self._first(session, model, where)
        if obj is None:
            raise RecordNotFoundError(f"{model.__name__} not found for {dict(where or {})}")
        return obj

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def _create(self, session: AsyncSession, model: Type[Any], args: Mapping[str, Any]) -> Dict[str, Any]:
        obj = model(**args.get("data", {}))
        session.add(obj)
        await session.commit()
        await session.refresh(obj)
        return self._to_dict(obj)

    async def _create_many(self, session: AsyncSession, model: Type[Any], args: Mapping[str, Any]) -> Dict[str, int]:
        objs = [model(**record) for record in args.get("data", [])]
        session.add_all(objs)
        await session.commit()
        return {"count": len(objs)}

    async def _update(self, session: AsyncSession, model: Type[Any], args: Mapping[str, Any]) -> Dict[str, Any]:
        obj = await self._require(session, model, args.get("where"))
        for key, value in (args.get("data") or {}).items():
            self._column(model, key)
            setattr(obj, key, value)
        await session.commit()
        await session.refresh(obj)
        return self._to_dict(obj)

    async def _update_many(self, session: AsyncSession, model: Type[Any], args: Mapping[str, Any]) -> Dict[str, int]:
        stmt = (
            update(model)
            .where(self._where(model, args.get("where")))
            .values(**(args.get("data") or {}))
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        await session.commit()
        return {"count": result.rowcount}

    async def _upsert(self, session: AsyncSession, model: Type[Any], args: Mapping[str, Any]) -> Dict[str, Any]:
        existing = await self._first(session, model, args.get("where"))
        if existing is None:
            return await self._create(session, model, {"data": args.get("create") or {}})
        return await self._update(
            session, model, {"where": args.get("where"), "data": args.get("update") or {}}
        )

    async def _delete(self, session: AsyncSession, model: Type[Any], args: Mapping[str, Any]) -> Dict[str, Any]:
        obj = await self._require(session, model, args.get("where"))
        snapshot = self._to_dict(obj)
        await session.delete(obj)
        await session.commit()
        return snapshot

    async def _delete_many(self, session: AsyncSession, model: Type[Any], args: Mapping[str, Any]) -> Dict[str, int]:
        stmt = delete(model).where(self._where(model, args.get("where")))
        result = await session.execute(stmt)
        await session.commit()
        return {"count": result.rowcount}

    async def _find_many(self, session: AsyncSession, model: Type[Any], args: Mapping[str, Any]) -> List[Dict[str, Any]]:
        result = await session.execute(self._select(model, args))
        return [self._to_dict(obj) for obj in result.scalars().all()]

    async def _find_first(self, session: AsyncSession, model: Type[Any], args: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        result = await session.execute(self._select(model, {**args, "take": 1}))
        obj = result.scalars().first()
        return self._to_dict(obj) if obj is not None else None

    async def _find_unique(self, session: AsyncSession, model: Type[Any], args: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        obj = await self._first(session, model, args.get("where"))
        return self._to_dict(obj) if obj is not None else None

    async def _count(self, session: AsyncSession, model: Type[Any], args: Mapping[str, Any]) -> int:
        stmt = select(func.count()).select_from(model).where(self._where(model, args.get("where")))
        result = await session.execute(stmt)
        return result.scalar_one()
