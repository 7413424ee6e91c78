"""
Projection Rebuilder

Regenerates the whole kitchen projection from the journal:

    1. drop every data row (headers stay)
    2. replay each journal entry in order through the shared row builder,
       using the entry's own timestamp
    3. skip and count entries whose item payload cannot be parsed
    4. aggregate once and write the totals row

The journal is read inside ``projection.exclusive()``, so no ingestion can
slip in between the read and the replay.

Replaying the same journal against the same headers always yields the same
projection.

Version: 1.0.0
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from kitchen_sheet.core.exceptions import MalformedPayloadError
from kitchen_sheet.engine.aggregator import build_totals_row
from kitchen_sheet.engine.catalog import Catalog
from kitchen_sheet.engine.columns import build_columns, columns_from_headers, headers
from kitchen_sheet.engine.rows import ProjectionRow, build_row
from kitchen_sheet.services.journal.base import BaseJournalStore, JournalEntry
from kitchen_sheet.services.projection.base import BaseProjectionStore

logger = logging.getLogger(__name__)


@dataclass
class RebuildReport:
    """
    Outcome of a rebuild.

    Attributes:
        total_entries: Journal entries read
        replayed: Entries turned into projection rows
        skipped: Entries whose item payload could not be parsed
        skipped_entry_ids: Journal positions of the skipped entries
        unmatched_items: Item names with no column in the schema
        totals: The totals row that was written
    """
    total_entries: int = 0
    replayed: int = 0
    skipped: int = 0
    skipped_entry_ids: list[int] = field(default_factory=list)
    unmatched_items: list[str] = field(default_factory=list)
    totals: Optional[ProjectionRow] = None

    @property
    def summary(self) -> str:
        text = f"Replayed {self.replayed} of {self.total_entries} journal entries"
        if self.skipped:
            text += f" ({self.skipped} skipped)"
        return text

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_entries": self.total_entries,
            "replayed": self.replayed,
            "skipped": self.skipped,
            "skipped_entry_ids": list(self.skipped_entry_ids),
            "unmatched_items": list(self.unmatched_items),
            "summary": self.summary,
        }


def refresh_schema(catalog: Catalog, projection: BaseProjectionStore) -> list[str]:
    """Rewrite the projection headers from the live catalog."""
    names = headers(build_columns(catalog))
    projection.set_columns(names)
    logger.info(f"Projection schema refreshed: {len(names)} columns")
    return names


def replay(entries: list[JournalEntry], projection: BaseProjectionStore) -> RebuildReport:
    """
    Replay journal entries into the projection.

    Must be called inside ``projection.transaction()`` when several stores
    may share the projection.
    """
    columns = columns_from_headers(projection.columns())
    report = RebuildReport(total_entries=len(entries))
    rows: list[ProjectionRow] = []

    projection.clear_rows()

    for entry in entries:
        try:
            line_items = entry.line_items()
        except MalformedPayloadError as e:
            report.skipped += 1
            report.skipped_entry_ids.append(entry.entry_id)
            logger.warning(f"Skipping journal entry #{entry.entry_id}: {e}")
            continue

        built = build_row(entry.timestamp, entry.customer, line_items, columns)
        for name in built.unmatched:
            if name not in report.unmatched_items:
                report.unmatched_items.append(name)

        projection.append_row(built.values)
        rows.append(built.values)
        report.replayed += 1

    report.totals = build_totals_row(rows, columns)
    projection.replace_totals_row(report.totals)

    if report.unmatched_items:
        logger.warning(f"Items without projection columns dropped: {report.unmatched_items}")
    logger.info(report.summary)
    return report


async def rebuild_projection(
    journal: BaseJournalStore,
    projection: BaseProjectionStore,
    catalog: Optional[Catalog] = None,
) -> RebuildReport:
    """
    Rebuild the projection from the full journal.

    Args:
        journal: Source of truth
        projection: Store to regenerate
        catalog: When given, the headers are rebuilt from it first

    Returns:
        RebuildReport: Counts of replayed and skipped entries
    """
    # No order may be journaled between the read and the replay
    async with projection.exclusive():
        entries = await journal.read_all()
        logger.info(f"Rebuilding projection from {len(entries)} journal entries")
        return await asyncio.to_thread(_apply, entries, projection, catalog)


def _apply(
    entries: list[JournalEntry],
    projection: BaseProjectionStore,
    catalog: Optional[Catalog],
) -> RebuildReport:
    with projection.transaction():
        if catalog is not None:
            refresh_schema(catalog, projection)
        return replay(entries, projection)
