"""
Column Schema Builder

Derives the ordered projection columns from a Catalog:

    date | name | phone | delivery | email |
    <item> | <item> - options | <item without options> | ...

The result is a pure function of the catalog. Stored header lists can be
classified back into columns with ``columns_from_headers``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from kitchen_sheet.engine.catalog import Catalog

BASE_COLUMNS = ("date", "name", "phone", "delivery", "email")
OPTIONS_SUFFIX = " - options"


class ColumnKind(str, Enum):
    BASE = "base"
    COUNT = "count"
    OPTIONS = "options"


@dataclass(frozen=True)
class ProjectionColumn:
    """One projection column header and what it holds."""
    name: str
    kind: ColumnKind
    item_name: Optional[str] = None

    @property
    def is_count(self) -> bool:
        return self.kind == ColumnKind.COUNT

    @property
    def is_options(self) -> bool:
        return self.kind == ColumnKind.OPTIONS


def options_column_name(item_name: str) -> str:
    return f"{item_name}{OPTIONS_SUFFIX}"


def base_columns() -> list[ProjectionColumn]:
    return [ProjectionColumn(name=name, kind=ColumnKind.BASE) for name in BASE_COLUMNS]


def build_columns(catalog: Catalog) -> list[ProjectionColumn]:
    """
    Build the ordered column list for a catalog.

    Items with an empty name are skipped. Items with option groups get a
    paired options column right after their count column.
    """
    columns = base_columns()

    for item in catalog:
        if not item.name:
            continue
        columns.append(ProjectionColumn(name=item.name, kind=ColumnKind.COUNT, item_name=item.name))
        if item.option_groups:
            columns.append(
                ProjectionColumn(
                    name=options_column_name(item.name),
                    kind=ColumnKind.OPTIONS,
                    item_name=item.name,
                )
            )

    return columns


def headers(columns: Iterable[ProjectionColumn]) -> list[str]:
    return [column.name for column in columns]


def columns_from_headers(names: Iterable[str]) -> list[ProjectionColumn]:
    """Classify stored header names back into projection columns."""
    columns = []
    for name in names:
        name = str(name)
        if name in BASE_COLUMNS:
            columns.append(ProjectionColumn(name=name, kind=ColumnKind.BASE))
        elif name.endswith(OPTIONS_SUFFIX):
            columns.append(
                ProjectionColumn(
                    name=name,
                    kind=ColumnKind.OPTIONS,
                    item_name=name[: -len(OPTIONS_SUFFIX)],
                )
            )
        elif name:
            columns.append(ProjectionColumn(name=name, kind=ColumnKind.COUNT, item_name=name))
    return columns
