import asyncio

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kitchen_sheet.database import init_db, make_engine
from kitchen_sheet.engine.columns import headers
from kitchen_sheet.engine.orders import OrderRecord
from kitchen_sheet.services.journal.sql import SqlJournalStore
from kitchen_sheet.services.projection.memory import MemoryProjectionStore
from kitchen_sheet.services.rebuilder import rebuild_projection


def run_with_journal(tmp_path, body):
    """Run ``body(journal)`` against a fresh SQLite journal."""

    async def run():
        engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'journal.db'}")
        try:
            await init_db(engine)
            session_maker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
            return await body(SqlJournalStore(session_maker))
        finally:
            await engine.dispose()

    return asyncio.run(run())


def test_append_then_read_back(tmp_path, order_factory):
    record = order_factory()

    async def body(journal):
        entry = await journal.append(record)
        return entry, await journal.read_all(), await journal.count()

    entry, entries, count = run_with_journal(tmp_path, body)

    assert entry.entry_id == 1
    assert count == 1
    assert entries[0].timestamp == record.timestamp
    assert entries[0].customer == record.customer
    assert entries[0].to_record() == record


def test_entries_come_back_in_append_order(tmp_path, order_factory):
    async def body(journal):
        for name in ["first", "second", "third"]:
            await journal.append(order_factory(customer_name=name))
        return await journal.read_all()

    entries = run_with_journal(tmp_path, body)

    assert [e.customer.name for e in entries] == ["first", "second", "third"]
    assert [e.entry_id for e in entries] == [1, 2, 3]


def test_rebuild_from_sql_journal(tmp_path, columns, order_factory):
    projection = MemoryProjectionStore(headers=headers(columns))

    async def body(journal):
        await journal.append(order_factory())
        await journal.append(order_factory(items={"coffee": [["iced"], ["hot"]]}))
        return await rebuild_projection(journal, projection)

    report = run_with_journal(tmp_path, body)

    assert report.summary == "Replayed 2 of 2 journal entries"
    assert projection.totals_row()["coffee - options"] == "1x(iced), 1x(hot)"


def test_health_check(tmp_path):
    async def body(journal):
        return await journal.health_check()

    assert run_with_journal(tmp_path, body) is True


def test_empty_order_is_stored(tmp_path, order_factory):
    async def body(journal):
        await journal.append(order_factory(items={}))
        return await journal.read_all()

    entries = run_with_journal(tmp_path, body)
    assert isinstance(entries[0].to_record(), OrderRecord)
    assert entries[0].line_items() == ()
