from __future__ import annotations

from typing import Callable, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from .engine import DBEngine

T = TypeVar("T")
R = TypeVar("R")


class UnitOfWork:
    """One session per unit.

    A clean exit commits (or, for read-only units, just closes the session so
    loaded rows stay readable once detached). Any exception rolls back.
    """

    def __init__(self, engine: DBEngine, *, commit_on_success: bool = True):
        self._engine = engine
        self._commit_on_success = commit_on_success
        self.session: AsyncSession | None = None
        self._session_cm = None

    async def __aenter__(self) -> "UnitOfWork":
        self._session_cm = self._engine.session()
        self.session = await self._session_cm.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        try:
            if exc_type is not None:
                await self.session.rollback()
            elif self._commit_on_success:
                await self.session.commit()
        finally:
            await self._session_cm.__aexit__(exc_type, exc, tb)

    def repo(self, model: Type[T]) -> "Repository[T]":
        assert self.session is not None
        # Local import to avoid circular dependency during module import
        from .repository.base import Repository

        return Repository[T](self.session, model)

    def bind(self, repo_cls: Callable[[AsyncSession], R]) -> R:
        """Build a model-specific repository over this unit's session."""
        assert self.session is not None
        return repo_cls(self.session)


__all__ = ["UnitOfWork"]
