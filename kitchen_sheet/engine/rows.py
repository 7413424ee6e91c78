"""
Projection row builder.

The single piece of logic that turns one order into one projection row.
Live ingestion and journal replay both go through ``build_row`` so that a
replayed row is identical to the row written when the order came in.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Sequence, Union

from kitchen_sheet.engine.codec import TUPLE_SEPARATOR, encode
from kitchen_sheet.engine.columns import ColumnKind, ProjectionColumn
from kitchen_sheet.engine.orders import Customer, LineItem, OrderRecord

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

ProjectionRow = dict[str, Any]


@dataclass(frozen=True)
class BuiltRow:
    """
    A freshly built row plus the item names it could not place.

    ``unmatched`` lists line items whose name has no count column in the
    schema; their quantities and options are left out of ``values``.
    """
    values: ProjectionRow
    unmatched: tuple[str, ...] = ()


def format_timestamp(timestamp: Union[datetime, str, None]) -> str:
    if isinstance(timestamp, datetime):
        return timestamp.strftime(TIMESTAMP_FORMAT)
    return str(timestamp or "")


def empty_row(columns: Iterable[ProjectionColumn]) -> ProjectionRow:
    """A row with every column at its neutral value."""
    row: ProjectionRow = {}
    for column in columns:
        row[column.name] = 0 if column.kind == ColumnKind.COUNT else ""
    return row


def build_row(
    timestamp: Union[datetime, str],
    customer: Customer,
    line_items: Sequence[LineItem],
    columns: Sequence[ProjectionColumn],
) -> BuiltRow:
    """
    Build the projection row for one order.

    Args:
        timestamp: When the order was placed (never the replay time)
        customer: Base customer fields
        line_items: Normalized line items
        columns: Current projection schema

    Returns:
        BuiltRow: Row values keyed by header, plus unmatched item names
    """
    row = empty_row(columns)

    base_values = {
        "date": format_timestamp(timestamp),
        "name": customer.name,
        "phone": customer.phone,
        "delivery": customer.delivery,
        "email": customer.email,
    }
    for column in columns:
        if column.kind == ColumnKind.BASE:
            row[column.name] = base_values.get(column.name, "") or ""

    count_columns = {c.item_name: c.name for c in columns if c.is_count}
    options_columns = {c.item_name: c.name for c in columns if c.is_options}
    unmatched = []

    for item in line_items:
        count_column = count_columns.get(item.item_name)
        if count_column is None:
            unmatched.append(item.item_name)
            continue

        row[count_column] += item.quantity

        encoded = encode(item.instances)
        if not encoded:
            continue

        options_column = options_columns.get(item.item_name)
        if options_column is None:
            logger.debug(f"No options column for '{item.item_name}', selections dropped")
            continue

        existing = row[options_column]
        row[options_column] = f"{existing}{TUPLE_SEPARATOR}{encoded}" if existing else encoded

    return BuiltRow(values=row, unmatched=tuple(unmatched))


def build_record_row(record: OrderRecord, columns: Sequence[ProjectionColumn]) -> BuiltRow:
    """Build the row for an order record using its own timestamp."""
    return build_row(record.timestamp, record.customer, record.line_items, columns)
