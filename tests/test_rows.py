from datetime import datetime

from kitchen_sheet.engine.catalog import Catalog
from kitchen_sheet.engine.columns import build_columns
from kitchen_sheet.engine.rows import build_record_row, build_row


def test_breakfast_sandwich_row(columns, order_factory):
    built = build_record_row(order_factory(), columns)

    assert built.values["breakfast sandwich"] == 3
    assert built.values["breakfast sandwich - options"] == (
        "(egg, croissant), (egg, croissant), (no egg, muffin)"
    )
    assert built.values["fruit cup"] == 0
    assert built.values["coffee - options"] == ""
    assert built.unmatched == ()


def test_base_fields_use_the_order_timestamp(columns, order_factory):
    built = build_record_row(order_factory(timestamp=datetime(2026, 1, 2, 3, 4, 5)), columns)

    assert built.values["date"] == "2026-01-02 03:04:05"
    assert built.values["name"] == "Jane Doe"
    assert built.values["phone"] == "555-123-4567"
    assert built.values["delivery"] == "pickup"
    assert built.values["email"] == "jane@example.com"


def test_row_keys_follow_column_order(columns, order_factory):
    built = build_record_row(order_factory(), columns)
    assert list(built.values) == [c.name for c in columns]


def test_instance_without_options_counts_but_adds_no_tuple(columns, order_factory):
    built = build_record_row(
        order_factory(items={"breakfast sandwich": [["egg", "croissant"], [None, None]]}),
        columns,
    )
    assert built.values["breakfast sandwich"] == 2
    assert built.values["breakfast sandwich - options"] == "(egg, croissant)"


def test_unknown_items_are_dropped_and_reported(columns, order_factory):
    built = build_record_row(
        order_factory(items={"waffle": [["syrup"]], "fruit cup": [[]]}),
        columns,
    )
    assert "waffle" not in built.values
    assert built.values["fruit cup"] == 1
    assert built.unmatched == ("waffle",)


def test_stale_schema_without_options_column_drops_selections(order_factory):
    stale = build_columns(Catalog.from_records([{"name": "breakfast sandwich"}]))
    built = build_record_row(order_factory(), stale)

    assert built.values["breakfast sandwich"] == 3
    assert "breakfast sandwich - options" not in built.values


def test_repeated_line_items_accumulate(columns, order_factory):
    record = order_factory()
    doubled = record.line_items + record.line_items
    built = build_row(record.timestamp, record.customer, doubled, columns)

    assert built.values["breakfast sandwich"] == 6
    assert built.values["breakfast sandwich - options"].count("(") == 6
