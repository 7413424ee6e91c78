from kitchen_sheet.engine.aggregator import build_totals_row
from kitchen_sheet.engine.shorthand import (
    ABBREVIATIONS,
    NO_OPTIONS_MARKER,
    abbreviate,
    kitchen_summary,
    split_segments,
    to_shorthand,
)
from kitchen_sheet.engine.rows import build_record_row


def test_breakfast_sandwich_shorthand():
    assert to_shorthand("2x(egg, croissant), 1x(no egg, muffin)") == "2x(E,CR), 1x(NE,MF)"


def test_dictionary_lookup_is_case_insensitive():
    assert abbreviate("No Egg") == "NE"
    assert abbreviate("CROISSANT") == "CR"


def test_every_dictionary_entry_maps_to_its_code():
    for text, code in ABBREVIATIONS.items():
        assert abbreviate(text) == code
        assert abbreviate(text.upper()) == code


def test_fallback_short_text_is_uppercased_whole():
    assert abbreviate("oj") == "OJ"
    assert abbreviate("tea") == "TEA"


def test_fallback_long_text_takes_first_two_characters():
    assert abbreviate("avocado") == "AV"
    assert abbreviate("spinach") == "SP"


def test_abbreviate_never_raises():
    for value in ["", " ", "x", 12, None, "(weird)"]:
        assert isinstance(abbreviate(value), str)


def test_malformed_segments_pass_through():
    assert to_shorthand("2x(egg, croissant), garbage, x(muffin)") == "2x(E,CR), garbage, x(muffin)"


def test_split_segments_respects_parentheses():
    assert split_segments("2x(a, b), 1x(c)") == ["2x(a, b)", "1x(c)"]


def test_empty_aggregation_gives_empty_shorthand():
    assert to_shorthand("") == ""
    assert to_shorthand(None) == ""


def test_kitchen_summary_lines(columns, order_factory):
    rows = [build_record_row(order_factory(items={
        "breakfast sandwich": [["egg", "croissant"], ["no egg", "muffin"]],
        "fruit cup": [[]],
        "coffee": [[None]],
    }), columns).values]
    totals = build_totals_row(rows, columns)

    lines = [line.to_dict() for line in kitchen_summary(totals, columns)]

    assert lines == [
        {"item": "breakfast sandwich", "count": 2, "options": "1x(E,CR), 1x(NE,MF)"},
        {"item": "fruit cup", "count": 1, "options": ""},
        {"item": "coffee", "count": 1, "options": NO_OPTIONS_MARKER},
    ]
