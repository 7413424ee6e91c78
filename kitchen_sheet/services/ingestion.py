"""
Live Ingestion Path

Handles one incoming order without a full rebuild:

    0. refuse when ordering is paused
    1. append the order to the journal (durable before anything else)
    2. build its projection row and append it
    3. recompute the totals row over all data rows

Steps 1 to 3 run inside ``projection.exclusive()`` so that concurrent
submissions land in the projection in journal order, and never between the
journal read and the replay of a rebuild.

If the projection update fails the order is still journaled; the failure
is logged and reported so that an operator can run a rebuild.

Version: 1.0.0
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from kitchen_sheet.core.exceptions import KitchenSheetError
from kitchen_sheet.engine.aggregator import build_totals_row
from kitchen_sheet.engine.columns import columns_from_headers
from kitchen_sheet.engine.orders import OrderRecord
from kitchen_sheet.engine.rows import ProjectionRow, build_record_row
from kitchen_sheet.services.journal.base import BaseJournalStore
from kitchen_sheet.services.projection.base import BaseProjectionStore
from kitchen_sheet.services.status import OrderingStatus

logger = logging.getLogger(__name__)


class IngestionOutcome(str, Enum):
    ACCEPTED = "accepted"
    UNAVAILABLE = "unavailable"


@dataclass
class IngestionResult:
    """
    Result of ingesting one order.

    Attributes:
        outcome: accepted, or unavailable when ordering is paused
        entry_id: Journal position of the stored order
        projected: Whether the projection row and totals were written
        row: The projection row that was appended
        unmatched_items: Item names with no column in the schema
        error_message: Why the projection update failed
    """
    outcome: IngestionOutcome
    entry_id: Optional[int] = None
    projected: bool = False
    row: Optional[ProjectionRow] = None
    unmatched_items: tuple[str, ...] = ()
    error_message: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.outcome == IngestionOutcome.ACCEPTED

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "entry_id": self.entry_id,
            "projected": self.projected,
            "unmatched_items": list(self.unmatched_items),
            "error_message": self.error_message,
        }


def project_record(record: OrderRecord, projection: BaseProjectionStore) -> tuple[ProjectionRow, tuple[str, ...]]:
    """Append one order's row and recompute the totals row."""
    with projection.transaction():
        columns = columns_from_headers(projection.columns())
        built = build_record_row(record, columns)
        projection.append_row(built.values)
        projection.replace_totals_row(build_totals_row(projection.rows(), columns))
    return built.values, built.unmatched


async def ingest_order(
    record: OrderRecord,
    journal: BaseJournalStore,
    projection: BaseProjectionStore,
    status: OrderingStatus = OrderingStatus.PUBLISHED,
) -> IngestionResult:
    """
    Journal one order and add it to the projection.

    Args:
        record: Validated order, timestamped at submission
        journal: Journal store (append must be durable)
        projection: Projection store
        status: Current ordering status

    Returns:
        IngestionResult: unavailable when paused, accepted otherwise

    Raises:
        ProjectionStoreError: If the projection lock cannot be taken; the
            order is not journaled in that case
    """
    if status == OrderingStatus.PAUSED:
        logger.info(f"Order from {record.customer.name} refused: ordering paused")
        return IngestionResult(outcome=IngestionOutcome.UNAVAILABLE)

    # Journal position and projection row are taken under the same lock
    async with projection.exclusive():
        entry = await journal.append(record)
        result = IngestionResult(outcome=IngestionOutcome.ACCEPTED, entry_id=entry.entry_id)

        try:
            row, unmatched = await asyncio.to_thread(project_record, record, projection)
        except KitchenSheetError as e:
            logger.error(f"Order #{entry.entry_id} journaled but not projected: {e}")
            result.error_message = str(e)
            return result
        except Exception as e:
            logger.exception(f"Order #{entry.entry_id} journaled but not projected")
            result.error_message = str(e)
            return result

    if unmatched:
        logger.warning(f"Order #{entry.entry_id}: items without projection columns dropped: {list(unmatched)}")

    result.projected = True
    result.row = row
    result.unmatched_items = unmatched
    logger.info(f"Order #{entry.entry_id} projected for {record.customer.name}")
    return result
