"""
Shared fixtures: a small breakfast menu and order builders.
"""

import asyncio
from datetime import datetime

import pytest

from kitchen_sheet.engine.catalog import Catalog
from kitchen_sheet.engine.columns import build_columns, headers
from kitchen_sheet.engine.orders import Customer, LineItem, OrderRecord, make_instances
from kitchen_sheet.services.journal.memory import MemoryJournalStore
from kitchen_sheet.services.projection.memory import MemoryProjectionStore

MENU = [
    {
        "name": "breakfast sandwich",
        "price": 6.5,
        "category": "breakfast",
        "options": "egg/no egg|croissant/muffin",
    },
    {
        "name": "fruit cup",
        "price": 3.0,
    },
    {
        "name": "coffee",
        "price": 2.5,
        "options": "hot/iced",
    },
]


@pytest.fixture
def catalog() -> Catalog:
    return Catalog.from_records(MENU)


@pytest.fixture
def columns(catalog):
    return build_columns(catalog)


@pytest.fixture
def journal() -> MemoryJournalStore:
    return MemoryJournalStore()


@pytest.fixture
def projection(columns) -> MemoryProjectionStore:
    return MemoryProjectionStore(headers=headers(columns))


def make_order(
    customer_name: str = "Jane Doe",
    items: dict = None,
    timestamp: datetime = None,
) -> OrderRecord:
    """Build an order from {item name: [[options], ...]}."""
    items = items if items is not None else {
        "breakfast sandwich": [["egg", "croissant"], ["egg", "croissant"], ["no egg", "muffin"]],
    }
    return OrderRecord(
        timestamp=timestamp or datetime(2026, 10, 18, 8, 30, 0),
        customer=Customer(
            name=customer_name,
            phone="555-123-4567",
            delivery="pickup",
            email="jane@example.com",
        ),
        line_items=tuple(
            LineItem(item_name=name, instances=make_instances(opts)) for name, opts in items.items()
        ),
    )


@pytest.fixture
def order_factory():
    return make_order


class DelayedJournal(MemoryJournalStore):
    """
    Memory journal that yields like a database round trip.

    ``append_delays`` maps a customer name to the seconds ``append`` waits
    after the entry has its journal position; ``read_delay`` is how long
    ``read_all`` waits after reading.
    """

    def __init__(self, append_delays: dict = None, read_delay: float = 0):
        super().__init__()
        self.append_delays = append_delays or {}
        self.read_delay = read_delay

    async def append(self, record: OrderRecord):
        entry = await super().append(record)
        await asyncio.sleep(self.append_delays.get(record.customer.name, 0))
        return entry

    async def read_all(self):
        entries = await super().read_all()
        await asyncio.sleep(self.read_delay)
        return entries


@pytest.fixture
def delayed_journal():
    return DelayedJournal
