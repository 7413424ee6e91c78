"""
In-memory journal store, used by tests and demos.
"""

import logging
from typing import Any, Optional

from kitchen_sheet.engine.orders import Customer, OrderRecord, dump_line_items
from kitchen_sheet.services.journal.base import BaseJournalStore, JournalEntry

logger = logging.getLogger(__name__)


class MemoryJournalStore(BaseJournalStore):
    """Journal kept in a Python list for the lifetime of the process."""

    def __init__(self, entries: Optional[list[JournalEntry]] = None):
        self._entries: list[JournalEntry] = list(entries or [])

    @property
    def provider_name(self) -> str:
        return "memory"

    async def append(self, record: OrderRecord) -> JournalEntry:
        return self.append_raw(record.timestamp, record.customer, dump_line_items(record.line_items))

    def append_raw(self, timestamp, customer: Customer, items: Any) -> JournalEntry:
        """Store an entry with an arbitrary item payload as-is."""
        entry = JournalEntry(
            entry_id=len(self._entries) + 1,
            timestamp=timestamp,
            customer=customer,
            items=items,
        )
        self._entries.append(entry)
        logger.debug(f"Journal entry #{entry.entry_id} appended")
        return entry

    async def read_all(self) -> list[JournalEntry]:
        return list(self._entries)

    async def count(self) -> int:
        return len(self._entries)
