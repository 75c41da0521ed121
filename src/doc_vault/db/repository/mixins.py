from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import and_, delete

T = TypeVar("T")


class CRUDMixin(Generic[T]):
    async def create(self, **data) -> T:  # type: ignore[override]
        obj = self.model(**data)  # type: ignore[attr-defined]
        self.session.add(obj)     # type: ignore[attr-defined]
        await self.session.flush()  # type: ignore[attr-defined]
        return obj

    async def delete(self, id: Any) -> int:  # type: ignore[override]
        # zero rows affected is a valid outcome (concurrent deletes)
        cond = self.model.id == id  # type: ignore[attr-defined]
        res = await self.session.execute(delete(self.model).where(cond))  # type: ignore[attr-defined]
        return int(res.rowcount or 0)


def apply_filters(stmt, model, where: dict[str, Any] | None):
    if not where:
        return stmt
    return stmt.where(and_(*[(getattr(model, k) == v) for k, v in where.items()]))
