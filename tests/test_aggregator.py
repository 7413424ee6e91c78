from kitchen_sheet.engine.aggregator import TOTALS_LABEL, aggregate, build_totals_row, tally_tuples
from kitchen_sheet.engine.rows import build_record_row


def test_breakfast_sandwich_totals():
    assert aggregate(["(egg, croissant), (egg, croissant), (no egg, muffin)"]) == (
        "2x(egg, croissant), 1x(no egg, muffin)"
    )


def test_sorted_by_count_descending_across_rows():
    values = ["(a)", "(b), (b)", "(c), (b)", "(c)", "(c)"]
    assert aggregate(values) == "3x(b), 3x(c), 1x(a)"


def test_ties_keep_first_seen_order():
    assert aggregate(["(z)", "(y)", "(x)"]) == "1x(z), 1x(y), 1x(x)"
    assert aggregate(["(y), (z)", "(z), (y)"]) == "2x(y), 2x(z)"


def test_no_normalization_of_tuple_text():
    assert aggregate(["(egg, croissant)", "(Egg, Croissant)"]) == "1x(egg, croissant), 1x(Egg, Croissant)"


def test_tally_counts_tuples_across_cells():
    counts = tally_tuples(["(egg), (egg)", "(muffin)", "", None])
    assert counts == {"(egg)": 2, "(muffin)": 1}
    assert list(counts) == ["(egg)", "(muffin)"]


def test_empty_input_gives_empty_string():
    assert aggregate([]) == ""
    assert aggregate(["", None, ""]) == ""


def test_totals_row_sums_counts_and_aggregates_options(columns, order_factory):
    rows = [
        build_record_row(order_factory(), columns).values,
        build_record_row(
            order_factory(items={
                "breakfast sandwich": [["egg", "croissant"]],
                "fruit cup": [[], []],
                "coffee": [["iced"]],
            }),
            columns,
        ).values,
    ]

    totals = build_totals_row(rows, columns)

    assert totals["date"] == TOTALS_LABEL
    assert totals["name"] == ""
    assert totals["breakfast sandwich"] == 4
    assert totals["breakfast sandwich - options"] == "3x(egg, croissant), 1x(no egg, muffin)"
    assert totals["fruit cup"] == 2
    assert totals["coffee"] == 1
    assert totals["coffee - options"] == "1x(iced)"


def test_totals_row_of_no_rows(columns):
    totals = build_totals_row([], columns)
    assert totals["breakfast sandwich"] == 0
    assert totals["breakfast sandwich - options"] == ""
