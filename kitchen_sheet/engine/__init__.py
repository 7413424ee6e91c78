"""
Order aggregation & projection engine.

Pure, synchronous transformations: catalog → columns, orders → rows,
rows → totals, totals → kitchen shorthand. Storage lives in
``kitchen_sheet.services``.
"""

from kitchen_sheet.engine.aggregator import aggregate, build_totals_row, TOTALS_LABEL
from kitchen_sheet.engine.catalog import Catalog, MenuItem, OptionGroup, parse_option_groups
from kitchen_sheet.engine.codec import count_tuples, decode, encode
from kitchen_sheet.engine.columns import (
    BASE_COLUMNS,
    ColumnKind,
    ProjectionColumn,
    build_columns,
    columns_from_headers,
    headers,
)
from kitchen_sheet.engine.orders import (
    Customer,
    Instance,
    LineItem,
    OrderRecord,
    normalize_line_item,
    parse_line_items,
)
from kitchen_sheet.engine.rows import BuiltRow, ProjectionRow, build_row
from kitchen_sheet.engine.shorthand import KitchenLine, abbreviate, kitchen_summary, to_shorthand

__all__ = [
    "aggregate",
    "build_totals_row",
    "TOTALS_LABEL",
    "Catalog",
    "MenuItem",
    "OptionGroup",
    "parse_option_groups",
    "count_tuples",
    "decode",
    "encode",
    "BASE_COLUMNS",
    "ColumnKind",
    "ProjectionColumn",
    "build_columns",
    "columns_from_headers",
    "headers",
    "Customer",
    "Instance",
    "LineItem",
    "OrderRecord",
    "normalize_line_item",
    "parse_line_items",
    "BuiltRow",
    "ProjectionRow",
    "build_row",
    "KitchenLine",
    "abbreviate",
    "kitchen_summary",
    "to_shorthand",
]
