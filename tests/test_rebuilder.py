import asyncio
from datetime import datetime

from kitchen_sheet.engine.catalog import Catalog
from kitchen_sheet.engine.columns import headers
from kitchen_sheet.engine.orders import Customer
from kitchen_sheet.services.ingestion import ingest_order
from kitchen_sheet.services.projection.memory import MemoryProjectionStore
from kitchen_sheet.services.rebuilder import rebuild_projection, refresh_schema


def fill_journal(journal, order_factory, count=5):
    for i in range(count):
        asyncio.run(journal.append(order_factory(
            customer_name=f"Customer {i}",
            timestamp=datetime(2026, 10, 18, 8, i, 0),
        )))


def test_malformed_entry_is_skipped_and_counted(journal, projection, order_factory):
    fill_journal(journal, order_factory, count=2)
    journal.append_raw(datetime(2026, 10, 18, 9, 0, 0), Customer(name="Broken"), "[{not json")
    fill_journal(journal, order_factory, count=2)

    report = asyncio.run(rebuild_projection(journal, projection))

    assert report.total_entries == 5
    assert report.replayed == 4
    assert report.skipped == 1
    assert report.skipped_entry_ids == [3]
    assert report.summary == "Replayed 4 of 5 journal entries (1 skipped)"
    assert len(projection.rows()) == 4
    assert "Broken" not in [row["name"] for row in projection.rows()]


def test_rows_follow_journal_order_and_timestamps(journal, projection, order_factory):
    fill_journal(journal, order_factory, count=3)

    asyncio.run(rebuild_projection(journal, projection))

    rows = projection.rows()
    assert [row["name"] for row in rows] == ["Customer 0", "Customer 1", "Customer 2"]
    assert [row["date"] for row in rows] == [
        "2026-10-18 08:00:00",
        "2026-10-18 08:01:00",
        "2026-10-18 08:02:00",
    ]


def test_totals_row_written_once_after_replay(journal, projection, order_factory):
    fill_journal(journal, order_factory, count=2)

    report = asyncio.run(rebuild_projection(journal, projection))

    totals = projection.totals_row()
    assert totals == report.totals
    assert totals["breakfast sandwich"] == 6
    assert totals["breakfast sandwich - options"] == "4x(egg, croissant), 2x(no egg, muffin)"


def test_rebuild_is_idempotent(journal, columns, order_factory):
    fill_journal(journal, order_factory, count=4)
    first = MemoryProjectionStore(headers=headers(columns))
    second = MemoryProjectionStore(headers=headers(columns))

    asyncio.run(rebuild_projection(journal, first))
    asyncio.run(rebuild_projection(journal, second))
    asyncio.run(rebuild_projection(journal, second))

    assert first.rows() == second.rows()
    assert first.totals_row() == second.totals_row()
    assert first.columns() == second.columns()


def test_rebuild_discards_existing_rows_but_keeps_headers(journal, projection, order_factory):
    projection.append_row({"name": "stale row"})
    fill_journal(journal, order_factory, count=1)
    before = projection.columns()

    asyncio.run(rebuild_projection(journal, projection))

    assert projection.columns() == before
    assert [row["name"] for row in projection.rows()] == ["Customer 0"]


def test_rebuild_with_catalog_refreshes_schema(journal, order_factory):
    projection = MemoryProjectionStore(headers=["date", "name", "phone", "delivery", "email"])
    fill_journal(journal, order_factory, count=1)

    report = asyncio.run(rebuild_projection(journal, projection))
    assert report.unmatched_items == ["breakfast sandwich"]

    catalog = Catalog.from_records([{"name": "breakfast sandwich", "options": "egg/no egg|croissant/muffin"}])
    report = asyncio.run(rebuild_projection(journal, projection, catalog=catalog))

    assert report.unmatched_items == []
    assert projection.rows()[0]["breakfast sandwich"] == 3


def test_refresh_schema_rekeys_existing_rows(projection):
    projection.append_row({"name": "Jane", "fruit cup": 2, "coffee": 1})

    refresh_schema(Catalog.from_records([{"name": "fruit cup"}, {"name": "bagel"}]), projection)

    assert projection.columns()[5:] == ["fruit cup", "bagel"]
    assert projection.rows() == [{
        "date": "", "name": "Jane", "phone": "", "delivery": "", "email": "",
        "fruit cup": 2, "bagel": 0,
    }]


def test_empty_journal_gives_empty_projection(journal, projection):
    report = asyncio.run(rebuild_projection(journal, projection))

    assert report.summary == "Replayed 0 of 0 journal entries"
    assert projection.rows() == []
    assert projection.totals_row()["breakfast sandwich"] == 0


def test_order_during_rebuild_is_not_lost(projection, order_factory, delayed_journal):
    journal = delayed_journal(read_delay=0.05)
    asyncio.run(journal.append(order_factory(customer_name="A")))

    async def rebuild_while_ordering():
        await asyncio.gather(
            rebuild_projection(journal, projection),
            ingest_order(order_factory(customer_name="B"), journal, projection),
        )

    asyncio.run(rebuild_while_ordering())

    assert [row["name"] for row in projection.rows()] == ["A", "B"]
    assert projection.totals_row()["breakfast sandwich"] == 6


def test_rebuild_waits_for_an_order_in_flight(projection, order_factory, delayed_journal):
    journal = delayed_journal(append_delays={"B": 0.05})
    asyncio.run(journal.append(order_factory(customer_name="A")))

    async def order_then_rebuild():
        _, report = await asyncio.gather(
            ingest_order(order_factory(customer_name="B"), journal, projection),
            rebuild_projection(journal, projection),
        )
        return report

    report = asyncio.run(order_then_rebuild())

    assert report.replayed == 2
    assert [row["name"] for row in projection.rows()] == ["A", "B"]
