"""
Aggregator

Rolls the per-order tuple strings of one options column up into a ranked
totals string:

    ["(egg, croissant), (egg, croissant)", "(no egg, muffin)"]
        -> "2x(egg, croissant), 1x(no egg, muffin)"

Tuples are counted by exact text. "(egg, croissant)" and "(Egg, Croissant)"
are different keys.
"""

from collections import Counter
from typing import Any, Iterable, Sequence

from kitchen_sheet.engine.codec import decode
from kitchen_sheet.engine.columns import ColumnKind, ProjectionColumn
from kitchen_sheet.engine.rows import ProjectionRow, empty_row

TOTALS_LABEL = "TOTAL"
SEGMENT_SEPARATOR = ", "


def tally_tuples(values: Iterable[Any]) -> Counter:
    """Tuple occurrence counts in first-seen order."""
    counts: Counter = Counter()
    for value in values:
        for item in decode(value):
            counts[item] += 1
    return counts


def rank(counts: Counter) -> list[tuple[str, int]]:
    """Sort by count descending; equal counts keep first-seen order."""
    return sorted(counts.items(), key=lambda entry: entry[1], reverse=True)


def aggregate(values: Iterable[Any]) -> str:
    """
    Aggregate one options column across all data rows.

    Args:
        values: The column's cell values, totals row excluded

    Returns:
        str: "<count>x<tuple>" segments joined by ", ", or "" if no tuples
    """
    return SEGMENT_SEPARATOR.join(f"{count}x{item}" for item, count in rank(tally_tuples(values)))


def build_totals_row(
    rows: Sequence[ProjectionRow],
    columns: Sequence[ProjectionColumn],
) -> ProjectionRow:
    """
    Build the synthetic totals row from all data rows (full rescan).

    Count columns are summed, options columns aggregated, and the date
    column carries the TOTAL label.
    """
    totals = empty_row(columns)

    for column in columns:
        if column.kind == ColumnKind.COUNT:
            totals[column.name] = sum(_as_int(row.get(column.name)) for row in rows)
        elif column.kind == ColumnKind.OPTIONS:
            totals[column.name] = aggregate(row.get(column.name) for row in rows)

    if "date" in totals:
        totals["date"] = TOTALS_LABEL
    return totals


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0
