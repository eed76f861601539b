from __future__ import annotations
from typing import Any, Generic, Iterable, Sequence, TypeVar
from sqlalchemy import select, func, delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.inspection import inspect as sa_inspect

T = TypeVar("T")  # SQLAlchemy model class (Declarative)


class BaseRepository(Generic[T]):
    """
    Shared repository for SQLAlchemy 2.x async models.
    - Accepts model instances only; services build them from schemas.
    - Methods flush but never commit; commit/rollback belongs to the service.
    """

    def __init__(self, model: type[T]) -> None:
        self.model = model

    # ------------------------ Read ------------------------

    async def get(self, session: AsyncSession, pk: Any) -> T | None:
        """Fetch one row by primary key."""
        return await session.get(self.model, pk)

    async def exists(self, session: AsyncSession, **filters: Any) -> bool:
        """Existence check (equality filters only)."""
        stmt = select(func.count()).select_from(self.model).filter_by(**filters)
        res = await session.execute(stmt)
        return int(res.scalar_one()) > 0

    async def list(
        self,
        session: AsyncSession,
        *,
        where: dict[str, Any] | None = None,
        order_by: Sequence[InstrumentedAttribute] | None = None,
        limit: int | None = None,
        offset: int | None = 0,
    ) -> list[T]:
        """List rows, ordered by primary key unless ``order_by`` is given."""
        stmt = select(self.model)
        if where:
            stmt = stmt.filter_by(**where)
        if order_by:
            stmt = stmt.order_by(*order_by)
        else:
            stmt = stmt.order_by(*sa_inspect(self.model).primary_key)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        res = await session.execute(stmt)
        return list(res.scalars().all())

    async def count(self, session: AsyncSession, **filters: Any) -> int:
        stmt = select(func.count()).select_from(self.model)
        if filters:
            stmt = stmt.filter_by(**filters)
        res = await session.execute(stmt)
        return int(res.scalar_one())

    # ------------------------ Write ------------------------

    async def create(self, session: AsyncSession, obj: T) -> T:
        """
        Insert a new row.
        - only transient (new, no PK) instances are accepted; use save() otherwise
        """
        state = sa_inspect(obj)
        if not state.transient:
            raise ValueError("create(): expected a transient (new) SQLAlchemy model instance")
        session.add(obj)
        await session.flush()
        return obj

    async def save(self, session: AsyncSession, obj: T) -> T:
        """
        Persist a model whatever its state.
        - transient: add -> flush
        - detached: merge(load=True) -> flush
        - persistent: flush
        """
        state = sa_inspect(obj)
        if state.transient:
            session.add(obj)
            await session.flush()
            return obj
        if state.detached:
            merged = await session.merge(obj, load=True)
            await session.flush()
            return merged
        await session.flush()
        return obj

    async def delete(self, session: AsyncSession, pk: Any) -> bool:
        """Delete by primary key; True when a row was removed."""
        pk_cols = sa_inspect(self.model).primary_key
        if len(pk_cols) != 1:
            raise ValueError("delete(): composite primary key is not supported")
        pk_col = pk_cols[0]
        stmt = sa_delete(self.model).where(pk_col == pk)
        res = await session.execute(stmt)
        return (res.rowcount or 0) > 0

    async def delete_all(self, session: AsyncSession, models: Iterable[T]) -> int:
        """Delete the given persistent instances; returns how many were removed."""
        items = list(models)
        for m in items:
            await session.delete(m)
        await session.flush()
        return len(items)
