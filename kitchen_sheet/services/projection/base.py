"""
Projection Store Abstract Base Class

Defines the interface for the kitchen projection: a header row, one data
row per journaled order (in journal order) and a separate totals row.

Mutations are grouped with ``transaction()``, a synchronous load/modify/save
cycle meant to run in a worker thread. Work that must keep the projection
in journal order (ingestion, rebuild) runs inside ``exclusive()``, which is
held from the journal read or append until the projection is written.

Version: 1.0.0
"""

import asyncio
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager, asynccontextmanager
from typing import Any, AsyncIterator, Iterable, Mapping, Optional

from kitchen_sheet.engine.columns import ColumnKind, columns_from_headers
from kitchen_sheet.engine.rows import ProjectionRow


class BaseProjectionStore(ABC):
    """Abstract base class for projection stores."""

    def __init__(self):
        self._order_lock: Optional[asyncio.Lock] = None
        self._order_lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Group several operations into one load/modify/save cycle."""
        pass

    @abstractmethod
    def columns(self) -> list[str]:
        """Current header names."""
        pass

    @abstractmethod
    def set_columns(self, headers: list[str]) -> None:
        """Replace the headers; existing rows are re-keyed to them."""
        pass

    @abstractmethod
    def rows(self) -> list[ProjectionRow]:
        """Data rows in journal order, totals row excluded."""
        pass

    @abstractmethod
    def append_row(self, row: ProjectionRow) -> None:
        pass

    @abstractmethod
    def clear_rows(self) -> None:
        """Drop every data row and the totals row; headers stay."""
        pass

    @abstractmethod
    def totals_row(self) -> Optional[ProjectionRow]:
        pass

    @abstractmethod
    def replace_totals_row(self, row: ProjectionRow) -> None:
        pass

    # =========================================================================
    # JOURNAL-ORDERED SECTIONS
    # =========================================================================

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator["BaseProjectionStore"]:
        """
        Serialize ingestion and rebuild on this projection.

        Holds a lock for the running event loop and, for stores shared with
        other processes, the store's cross-process lock. Only one ingestion
        or rebuild is inside at a time.

        Raises:
            ProjectionStoreError: If the cross-process lock times out
        """
        async with self._loop_lock():
            await self._acquire_shared()
            try:
                yield self
            finally:
                await self._release_shared()

    def _loop_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._order_lock is None or self._order_lock_loop is not loop:
            self._order_lock = asyncio.Lock()
            self._order_lock_loop = loop
        return self._order_lock

    async def _acquire_shared(self) -> None:
        """Take the cross-process lock, if the store has one."""
        pass

    async def _release_shared(self) -> None:
        pass

    def health_check(self) -> bool:
        """Check the projection can be read."""
        try:
            self.columns()
            return True
        except Exception:
            return False


def normalize_row(raw: Mapping[str, Any], headers: Iterable[str]) -> ProjectionRow:
    """
    Re-key a row to ``headers`` and coerce cell values.

    Count cells become ints (0 when blank), everything else becomes text.
    Values for headers the row does not have take the neutral value.
    """
    row: ProjectionRow = {}
    for column in columns_from_headers(headers):
        value = raw.get(column.name)
        if column.kind == ColumnKind.COUNT:
            row[column.name] = _to_int(value)
        else:
            row[column.name] = _to_text(value)
    return row


def _to_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def _to_text(value: Any) -> str:
    # Blank spreadsheet cells come back as NaN floats
    if value is None or (isinstance(value, float) and value != value):
        return ""
    return str(value)
