"""
Excel Projection Store with Concurrency Control

Keeps the kitchen projection in an .xlsx workbook:

    Orders sheet:  header row, one row per order, trailing TOTAL row
    Kitchen sheet: shorthand summary derived from the TOTAL row

Every transaction holds a file lock for the whole load-modify-save cycle,
so the API process and the Celery worker never interleave writes. Saves go
to a temporary file that replaces the workbook in one step.

Transactions are synchronous and run in worker threads. Threads in one
process share the store through a re-entrant lock; ``exclusive()`` holds
the file lock across the await points of an ingestion or rebuild.

Text cells that a spreadsheet would evaluate as a formula are written with
a leading apostrophe and read back without it.

Version: 1.0.0
"""

import asyncio
import logging
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

import pandas as pd
from filelock import FileLock, Timeout

from kitchen_sheet.core.exceptions import ProjectionStoreError
from kitchen_sheet.engine.aggregator import TOTALS_LABEL
from kitchen_sheet.engine.columns import columns_from_headers
from kitchen_sheet.engine.rows import ProjectionRow
from kitchen_sheet.engine.shorthand import kitchen_summary
from kitchen_sheet.services.projection.base import BaseProjectionStore, normalize_row

logger = logging.getLogger(__name__)

KITCHEN_COLUMNS = ["item", "count", "options"]

FORMULA_PREFIXES = ("=", "+", "-", "@")
TEXT_MARKER = "'"


def escape_cell(value: Any) -> Any:
    """Keep text that looks like a formula from being evaluated."""
    if isinstance(value, str) and (value.startswith(FORMULA_PREFIXES) or value.startswith(TEXT_MARKER)):
        return TEXT_MARKER + value
    return value


def unescape_cell(value: Any) -> Any:
    if isinstance(value, str) and value.startswith(TEXT_MARKER):
        return value[len(TEXT_MARKER):]
    return value


@dataclass
class _Workbook:
    headers: list[str] = field(default_factory=list)
    rows: list[ProjectionRow] = field(default_factory=list)
    totals: Optional[ProjectionRow] = None


class ExcelProjectionStore(BaseProjectionStore):
    """
    Workbook-backed projection store.

    Attributes:
        path: Workbook location
        lock_timeout: Seconds to wait for the file lock
        orders_sheet: Name of the per-order sheet
        kitchen_sheet: Name of the shorthand summary sheet
    """

    def __init__(
        self,
        path: Path,
        lock_timeout: float = 30,
        orders_sheet: str = "Orders",
        kitchen_sheet: str = "Kitchen",
    ):
        super().__init__()
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self.lock_timeout = lock_timeout
        self.orders_sheet = orders_sheet
        self.kitchen_sheet = kitchen_sheet

        # Not thread-local: exclusive() acquires and releases from different
        # worker threads, and transactions inside it re-enter the same lock
        self._file_lock = FileLock(str(self.lock_path), timeout=lock_timeout, thread_local=False)
        self._state_lock = threading.RLock()

        self._workbook: Optional[_Workbook] = None
        self._dirty = False
        self._depth = 0

    @property
    def provider_name(self) -> str:
        return "excel"

    # =========================================================================
    # LOCKING
    # =========================================================================

    def _acquire_file_lock(self) -> None:
        self._ensure_data_dir()
        with self._state_lock:
            try:
                self._file_lock.acquire()
            except Timeout as e:
                logger.error(f"Lock timeout on {self.path}")
                raise ProjectionStoreError(f"Lock timeout ({self.lock_timeout}s)") from e

    def _release_file_lock(self) -> None:
        with self._state_lock:
            self._file_lock.release()

    async def _acquire_shared(self) -> None:
        await asyncio.to_thread(self._acquire_file_lock)
        logger.debug(f"Exclusive section entered for {self.path}")

    async def _release_shared(self) -> None:
        await asyncio.to_thread(self._release_file_lock)
        logger.debug(f"Exclusive section left for {self.path}")

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    @contextmanager
    def transaction(self) -> Iterator["ExcelProjectionStore"]:
        with self._state_lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            self._acquire_file_lock()
            logger.debug(f"Lock acquired for {self.path}")
            try:
                self._workbook = self._load()
                self._dirty = False
                self._depth = 1
                yield self
                if self._dirty:
                    self._save(self._workbook)
            finally:
                self._depth = 0
                self._workbook = None
                self._dirty = False
                self._release_file_lock()
                logger.debug(f"Lock released for {self.path}")

    def _read(self, fn: Callable[[_Workbook], Any]) -> Any:
        with self.transaction():
            return fn(self._workbook)

    def _write(self, fn: Callable[[_Workbook], None]) -> None:
        with self.transaction():
            fn(self._workbook)
            self._dirty = True

    # =========================================================================
    # STORE OPERATIONS
    # =========================================================================

    def columns(self) -> list[str]:
        return self._read(lambda wb: list(wb.headers))

    def set_columns(self, headers: list[str]) -> None:
        def apply(wb: _Workbook) -> None:
            wb.headers = list(headers)
            wb.rows = [normalize_row(row, wb.headers) for row in wb.rows]
            if wb.totals is not None:
                wb.totals = normalize_row(wb.totals, wb.headers)

        self._write(apply)

    def rows(self) -> list[ProjectionRow]:
        return self._read(lambda wb: [dict(row) for row in wb.rows])

    def append_row(self, row: ProjectionRow) -> None:
        self._write(lambda wb: wb.rows.append(normalize_row(row, wb.headers)))

    def clear_rows(self) -> None:
        def apply(wb: _Workbook) -> None:
            wb.rows = []
            wb.totals = None

        self._write(apply)

    def totals_row(self) -> Optional[ProjectionRow]:
        return self._read(lambda wb: dict(wb.totals) if wb.totals is not None else None)

    def replace_totals_row(self, row: ProjectionRow) -> None:
        def apply(wb: _Workbook) -> None:
            wb.totals = normalize_row(row, wb.headers)

        self._write(apply)

    # =========================================================================
    # FILE I/O
    # =========================================================================

    def _ensure_data_dir(self) -> None:
        """Create data directory if needed."""
        if not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {self.path.parent}")

    def _load(self) -> _Workbook:
        """Load the workbook or start an empty one."""
        if not self.path.exists():
            return _Workbook()

        try:
            df = pd.read_excel(
                self.path,
                sheet_name=self.orders_sheet,
                engine="openpyxl",
                dtype=object,
                na_filter=False,
            )
        except Exception as e:
            logger.exception(f"Error reading {self.path}")
            raise ProjectionStoreError(f"Could not read {self.path}: {e}") from e

        headers = [str(c) for c in df.columns]
        rows = []
        totals = None
        for record in df.to_dict("records"):
            row = normalize_row({k: unescape_cell(v) for k, v in record.items()}, headers)
            if row.get("date") == TOTALS_LABEL:
                totals = row
            else:
                rows.append(row)

        return _Workbook(headers=headers, rows=rows, totals=totals)

    def _save(self, wb: _Workbook) -> None:
        records = list(wb.rows)
        if wb.totals is not None:
            records.append(wb.totals)
        records = [_escape_row(row) for row in records]
        orders_df = pd.DataFrame(records, columns=wb.headers)

        summary = []
        if wb.totals is not None:
            lines = kitchen_summary(wb.totals, columns_from_headers(wb.headers))
            summary = [_escape_row(line.to_dict()) for line in lines]
        kitchen_df = pd.DataFrame(summary, columns=KITCHEN_COLUMNS)

        tmp_path = self.path.with_name(f".{self.path.stem}.tmp{self.path.suffix}")
        try:
            with pd.ExcelWriter(tmp_path, engine="openpyxl") as writer:
                orders_df.to_excel(writer, sheet_name=self.orders_sheet, index=False)
                kitchen_df.to_excel(writer, sheet_name=self.kitchen_sheet, index=False)
            os.replace(tmp_path, self.path)
        except Exception as e:
            logger.exception(f"Error writing {self.path}")
            raise ProjectionStoreError(f"Could not write {self.path}: {e}") from e

        logger.info(f"Projection saved: {len(wb.rows)} rows → {self.path}")


def _escape_row(row: dict[str, Any]) -> dict[str, Any]:
    return {key: escape_cell(value) for key, value in row.items()}
