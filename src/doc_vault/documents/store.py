from __future__ import annotations

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from doc_vault.db.repository import Repository

from .models import Document


class DocumentStore(Repository[Document]):
    """Metadata half of the document store: the ``documents`` table."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Document)

    async def insert(self, stored_name: str, original_name: str, size: int) -> Document:
        return await self.create(stored_name=stored_name, original_name=original_name, file_size=size)

    async def list_all(self) -> Sequence[Document]:
        # newest first; id breaks ties between uploads in the same instant
        return await self.list(order_by=(Document.upload_date.desc(), Document.id.desc()))
