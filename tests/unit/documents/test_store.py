"""DocumentStore over a real SQLite file."""

from datetime import datetime, timedelta, timezone

import pytest

from doc_vault.db.uow import UnitOfWork
from doc_vault.documents import Document, DocumentStore


@pytest.mark.documents
@pytest.mark.asyncio
async def test_insert_sets_id_and_upload_date(db_engine):
    async with UnitOfWork(db_engine) as uow:
        doc = await uow.bind(DocumentStore).insert("doc-1-a.pdf", "a.pdf", 2000)

    assert doc.id == 1
    assert doc.upload_date is not None

    async with UnitOfWork(db_engine, commit_on_success=False) as uow:
        loaded = await uow.bind(DocumentStore).get(doc.id)
    assert loaded.stored_name == "doc-1-a.pdf"
    assert loaded.original_name == "a.pdf"
    assert loaded.file_size == 2000


@pytest.mark.asyncio
async def test_list_all_orders_by_upload_date_then_id(db_engine):
    now = datetime.now(timezone.utc)
    async with UnitOfWork(db_engine) as uow:
        store = uow.bind(DocumentStore)
        older = await store.create(stored_name="doc-1-a.pdf", original_name="a.pdf", file_size=1, upload_date=now - timedelta(minutes=5))
        tie_a = await store.create(stored_name="doc-2-b.pdf", original_name="b.pdf", file_size=1, upload_date=now)
        tie_b = await store.create(stored_name="doc-3-c.pdf", original_name="c.pdf", file_size=1, upload_date=now)

    async with UnitOfWork(db_engine, commit_on_success=False) as uow:
        docs = await uow.bind(DocumentStore).list_all()

    assert [d.id for d in docs] == [tie_b.id, tie_a.id, older.id]


@pytest.mark.asyncio
async def test_delete_unknown_affects_zero_rows(db_engine):
    async with UnitOfWork(db_engine) as uow:
        assert await uow.bind(DocumentStore).delete(42) == 0


@pytest.mark.asyncio
async def test_failed_unit_of_work_rolls_back(db_engine):
    with pytest.raises(RuntimeError):
        async with UnitOfWork(db_engine) as uow:
            await uow.bind(DocumentStore).insert("doc-1-a.pdf", "a.pdf", 1)
            raise RuntimeError("boom")

    async with UnitOfWork(db_engine, commit_on_success=False) as uow:
        assert await uow.repo(Document).count() == 0


@pytest.mark.asyncio
async def test_rows_from_read_only_unit_stay_readable(db_engine):
    async with UnitOfWork(db_engine) as uow:
        await uow.bind(DocumentStore).insert("doc-1-a.pdf", "a.pdf", 10)
        await uow.bind(DocumentStore).insert("doc-2-b.pdf", "b.pdf", 20)

    async with UnitOfWork(db_engine, commit_on_success=False) as uow:
        docs = await uow.bind(DocumentStore).list_all()

    # session is closed here; attributes must not need a refresh
    assert sorted(d.original_name for d in docs) == ["a.pdf", "b.pdf"]
    assert sorted(d.file_size for d in docs) == [10, 20]
    assert all(d.upload_date is not None for d in docs)
