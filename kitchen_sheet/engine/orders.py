"""
Order records and the payload normalization adapter.

Two item payload shapes exist in the journal:

    current:  {"name": "breakfast sandwich", "qty": 2, "price": 6.5,
               "instances": [{"options": ["egg", "croissant"]},
                             {"options": ["no egg", "muffin"]}]}

    legacy:   {"name": "breakfast sandwich", "quantity": 2,
               "selectedOptions": ["egg", "croissant"]}

The legacy shape means ``quantity`` instances all sharing the same options.
``normalize_line_item`` is the only place that knows about both shapes;
everything downstream works on ``LineItem`` / ``Instance``.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from kitchen_sheet.core.exceptions import MalformedPayloadError


@dataclass(frozen=True)
class Customer:
    """Who placed the order and how it is fulfilled."""
    name: str = ""
    phone: str = ""
    delivery: str = ""
    email: str = ""
    buddy: Optional[str] = None
    comments: Optional[str] = None


@dataclass(frozen=True)
class Instance:
    """
    One concrete unit of an ordered item.

    ``options`` holds one slot per option group of the item. Falsy slots
    mean "no selection".
    """
    options: tuple[Optional[str], ...] = ()

    @property
    def selected(self) -> list[str]:
        """Non-empty selections in slot order."""
        return [str(opt) for opt in self.options if opt]


@dataclass(frozen=True)
class LineItem:
    """All instances of one menu item within an order."""
    item_name: str
    instances: tuple[Instance, ...] = ()

    @property
    def quantity(self) -> int:
        return len(self.instances)

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.item_name,
            "qty": self.quantity,
            "instances": [{"options": list(i.options)} for i in self.instances],
        }


@dataclass(frozen=True)
class OrderRecord:
    """An order as written to the journal. Immutable once written."""
    timestamp: datetime
    customer: Customer
    line_items: tuple[LineItem, ...] = field(default_factory=tuple)


# =============================================================================
# NORMALIZATION ADAPTER
# =============================================================================

def normalize_line_item(raw: Mapping[str, Any]) -> LineItem:
    """
    Normalize one submitted item into a LineItem.

    Args:
        raw: Item payload in either the current or the legacy shape

    Returns:
        LineItem: Item with one Instance per ordered unit

    Raises:
        MalformedPayloadError: If the payload is not a mapping or its
            quantity/instances cannot be interpreted
    """
    if not isinstance(raw, Mapping):
        raise MalformedPayloadError(f"Item payload must be an object, got {type(raw).__name__}")

    name = str(raw.get("name") or "").strip()

    instances = raw.get("instances")
    if instances is not None:
        if not isinstance(instances, list):
            raise MalformedPayloadError(f"'instances' for '{name}' must be a list")
        return LineItem(item_name=name, instances=tuple(_to_instance(i, name) for i in instances))

    # Legacy shape: quantity + one shared options list
    quantity = _parse_quantity(raw.get("quantity", raw.get("qty", 0)), name)
    shared = raw.get("selectedOptions", raw.get("options")) or []
    if isinstance(shared, str):
        shared = [shared]
    if not isinstance(shared, list):
        raise MalformedPayloadError(f"'selectedOptions' for '{name}' must be a list")

    instance = Instance(options=tuple(shared))
    return LineItem(item_name=name, instances=tuple(instance for _ in range(quantity)))


def parse_line_items(payload: Any) -> tuple[LineItem, ...]:
    """
    Parse a stored items payload (JSON text or already decoded list).

    Raises:
        MalformedPayloadError: If the payload is not valid JSON, not a list,
            or contains an item that cannot be normalized
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except (TypeError, ValueError) as e:
            raise MalformedPayloadError(f"Items payload is not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise MalformedPayloadError(f"Items payload must be a list, got {type(payload).__name__}")

    return tuple(normalize_line_item(raw) for raw in payload)


def dump_line_items(line_items: Iterable[LineItem]) -> str:
    """Serialize line items for the journal in the current shape."""
    return json.dumps([item.to_payload() for item in line_items])


def _to_instance(raw: Any, name: str) -> Instance:
    if isinstance(raw, Mapping):
        options = raw.get("options") or []
    elif isinstance(raw, (list, tuple)):
        options = raw
    else:
        raise MalformedPayloadError(f"Instance of '{name}' must be an object or list")

    if not isinstance(options, (list, tuple)):
        raise MalformedPayloadError(f"Options of '{name}' must be a list")
    return Instance(options=tuple(options))


def _parse_quantity(value: Any, name: str) -> int:
    try:
        quantity = int(value or 0)
    except (TypeError, ValueError) as e:
        raise MalformedPayloadError(f"Invalid quantity {value!r} for '{name}'") from e
    return max(quantity, 0)


def make_instances(options: Sequence[Sequence[Optional[str]]]) -> tuple[Instance, ...]:
    """Shorthand for building instances from nested option lists."""
    return tuple(Instance(options=tuple(opts)) for opts in options)
