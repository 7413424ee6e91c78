import json

import pytest

from kitchen_sheet.core.exceptions import MalformedPayloadError
from kitchen_sheet.engine.catalog import Catalog, OptionGroup, parse_option_groups
from kitchen_sheet.engine.orders import (
    Instance,
    dump_line_items,
    normalize_line_item,
    parse_line_items,
)


class TestNormalizeLineItem:

    def test_current_shape(self):
        item = normalize_line_item({
            "name": "breakfast sandwich",
            "qty": 2,
            "price": 6.5,
            "instances": [{"options": ["egg", "croissant"]}, {"options": ["no egg", None]}],
        })
        assert item.item_name == "breakfast sandwich"
        assert item.quantity == 2
        assert item.instances[1] == Instance(options=("no egg", None))

    def test_legacy_shape_repeats_shared_options(self):
        item = normalize_line_item({
            "name": "breakfast sandwich",
            "quantity": 3,
            "selectedOptions": ["egg", "muffin"],
        })
        assert item.quantity == 3
        assert all(i.options == ("egg", "muffin") for i in item.instances)

    def test_legacy_shape_without_options(self):
        item = normalize_line_item({"name": "fruit cup", "qty": 2})
        assert item.quantity == 2
        assert all(i.selected == [] for i in item.instances)

    def test_instances_take_precedence_over_qty(self):
        item = normalize_line_item({"name": "coffee", "qty": 5, "instances": [{"options": ["hot"]}]})
        assert item.quantity == 1

    def test_non_mapping_is_rejected(self):
        with pytest.raises(MalformedPayloadError):
            normalize_line_item(["coffee"])

    def test_bad_quantity_is_rejected(self):
        with pytest.raises(MalformedPayloadError):
            normalize_line_item({"name": "coffee", "quantity": "lots"})


class TestParseLineItems:

    def test_invalid_json(self):
        with pytest.raises(MalformedPayloadError):
            parse_line_items("{not json")

    def test_not_a_list(self):
        with pytest.raises(MalformedPayloadError):
            parse_line_items(json.dumps({"name": "coffee"}))

    def test_dump_then_parse_keeps_instances(self):
        items = parse_line_items(json.dumps([
            {"name": "coffee", "instances": [{"options": ["iced"]}, {"options": [None]}]},
        ]))
        assert parse_line_items(dump_line_items(items)) == items


class TestCatalog:

    def test_parse_option_groups(self):
        assert parse_option_groups("egg/no egg|croissant/muffin") == (
            OptionGroup(choices=("egg", "no egg")),
            OptionGroup(choices=("croissant", "muffin")),
        )

    def test_parse_option_groups_trims_and_drops_empties(self):
        assert parse_option_groups(" hot / iced || ") == (OptionGroup(choices=("hot", "iced")),)
        assert parse_option_groups("") == ()
        assert parse_option_groups(None) == ()

    def test_definition_round_trip(self, catalog):
        assert catalog.find("breakfast sandwich").options_definition == "egg/no egg|croissant/muffin"
        assert catalog.find("fruit cup").options_definition == ""

    def test_from_records_skips_blank_and_duplicate_names(self):
        catalog = Catalog.from_records([
            {"name": "toast", "price": "2"},
            {"name": "  "},
            {"name": float("nan")},
            {"name": "toast", "price": 9},
        ])
        assert catalog.names == ["toast"]
        assert catalog.find("toast").price == 2.0

    def test_bad_prices_fall_back_to_zero(self):
        catalog = Catalog.from_records([{"name": "a", "price": "free"}, {"name": "b", "price": -1}])
        assert [item.price for item in catalog] == [0.0, 0.0]

    def test_empty_option_group_is_invalid(self):
        with pytest.raises(ValueError):
            OptionGroup(choices=())
