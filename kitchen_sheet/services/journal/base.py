"""
Journal Store Abstract Base Class

The journal is the append-only source of truth for every submitted order.
The kitchen projection can always be regenerated from it.

Contract:
    - append() returns only after the entry is durable
    - read_all() returns entries oldest first, in append order
    - entries are never rewritten

Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from kitchen_sheet.engine.orders import Customer, LineItem, OrderRecord, parse_line_items


@dataclass(frozen=True)
class JournalEntry:
    """
    One stored order.

    The item payload is kept as the stored JSON text and parsed on demand,
    so a damaged entry can be skipped during replay instead of breaking
    the whole read.

    Attributes:
        entry_id: Position in the journal (monotonic)
        timestamp: When the order was placed
        customer: Customer fields
        items: Raw item payload as stored
    """
    entry_id: int
    timestamp: datetime
    customer: Customer
    items: Any

    def line_items(self) -> tuple[LineItem, ...]:
        """
        Parse the stored payload.

        Raises:
            MalformedPayloadError: If the payload cannot be parsed
        """
        return parse_line_items(self.items)

    def to_record(self) -> OrderRecord:
        return OrderRecord(
            timestamp=self.timestamp,
            customer=self.customer,
            line_items=self.line_items(),
        )


class BaseJournalStore(ABC):
    """Abstract base class for journal stores."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def append(self, record: OrderRecord) -> JournalEntry:
        """Durably append one order and return the stored entry."""
        pass

    @abstractmethod
    async def read_all(self) -> list[JournalEntry]:
        """Return every entry, oldest first."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of entries in the journal."""
        pass

    async def health_check(self) -> bool:
        """Check store connectivity."""
        try:
            await self.count()
            return True
        except Exception:
            return False
