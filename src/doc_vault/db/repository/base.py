from __future__ import annotations

from typing import Any, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .mixins import CRUDMixin, apply_filters

T = TypeVar("T")


class Repository(CRUDMixin[T], Generic[T]):
    """Generic async SQLAlchemy repository.

    - Exposes common CRUD helpers over an AsyncSession and a model class.
    - Create/Delete come from CRUDMixin to keep custom repos consistent.
    - This class provides get, list and count.
    """

    def __init__(self, session: AsyncSession, model: Type[T]):
        self.session = session
        self.model = model

    async def get(self, id: Any) -> Optional[T]:
        return await self.session.get(self.model, id)

    async def list(
        self,
        *,
        where: Optional[dict[str, Any]] = None,
        order_by: Sequence[Any] | Any | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Sequence[T]:
        stmt = apply_filters(select(self.model), self.model, where)
        if order_by is not None:
            clauses = order_by if isinstance(order_by, (list, tuple)) else (order_by,)
            stmt = stmt.order_by(*clauses)
        if limit:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        return (await self.session.execute(stmt)).scalars().all()

    async def count(self, where: Optional[dict[str, Any]] = None) -> int:
        base_stmt = apply_filters(select(self.model), self.model, where)
        stmt = select(func.count()).select_from(base_stmt.subquery())
        return int((await self.session.execute(stmt)).scalar_one())
