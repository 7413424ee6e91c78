"""
In-memory projection store, used by tests and demos.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from kitchen_sheet.engine.rows import ProjectionRow
from kitchen_sheet.services.projection.base import BaseProjectionStore, normalize_row


class MemoryProjectionStore(BaseProjectionStore):
    """Projection held in plain lists and dicts."""

    def __init__(self, headers: Optional[list[str]] = None):
        super().__init__()
        self._headers: list[str] = list(headers or [])
        self._rows: list[ProjectionRow] = []
        self._totals: Optional[ProjectionRow] = None

    @property
    def provider_name(self) -> str:
        return "memory"

    @contextmanager
    def transaction(self) -> Iterator["MemoryProjectionStore"]:
        yield self

    def columns(self) -> list[str]:
        return list(self._headers)

    def set_columns(self, headers: list[str]) -> None:
        self._headers = list(headers)
        self._rows = [normalize_row(row, self._headers) for row in self._rows]
        if self._totals is not None:
            self._totals = normalize_row(self._totals, self._headers)

    def rows(self) -> list[ProjectionRow]:
        return [dict(row) for row in self._rows]

    def append_row(self, row: ProjectionRow) -> None:
        self._rows.append(normalize_row(row, self._headers))

    def clear_rows(self) -> None:
        self._rows = []
        self._totals = None

    def totals_row(self) -> Optional[ProjectionRow]:
        return dict(self._totals) if self._totals is not None else None

    def replace_totals_row(self, row: ProjectionRow) -> None:
        self._totals = normalize_row(row, self._headers)
