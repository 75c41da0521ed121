"""ORM model for the ``documents`` table.

Column names keep the camelCase schema (``filename``, ``originalName``,
``fileSize``, ``uploadDate``); attribute names are snake_case.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, inspect
from sqlalchemy.orm import Mapped, mapped_column

from doc_vault.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(Base):
    __tablename__ = "documents"
    # AUTOINCREMENT: ids are never reused after a delete
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    stored_name: Mapped[str] = mapped_column("filename", String(255), nullable=False, unique=True)
    original_name: Mapped[str] = mapped_column("originalName", String(255), nullable=False)
    file_size: Mapped[int] = mapped_column("fileSize", Integer, nullable=False)
    upload_date: Mapped[datetime] = mapped_column(
        "uploadDate", DateTime(timezone=True), nullable=False, default=_utcnow, index=True
    )

    def __repr__(self) -> str:
        state = inspect(self)
        if state.detached or state.expired:
            return f"<Document at {hex(id(self))}>"
        return f"<Document(id={self.id}, stored_name={self.stored_name!r})>"
