"""
Catalog Model

Immutable in-memory representation of the menu for one build cycle.
A Catalog is rebuilt wholesale whenever the menu changes; nothing in it
can be mutated after construction.

Options definition format (shared with the ordering page):
    "egg/no egg|croissant/muffin"
    '/' separates choices within one group, '|' separates groups.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional

logger = logging.getLogger(__name__)

CHOICE_SEPARATOR = "/"
GROUP_SEPARATOR = "|"


@dataclass(frozen=True)
class OptionGroup:
    """Ordered choices for one option slot of a menu item."""
    choices: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.choices:
            raise ValueError("An option group needs at least one choice")

    def to_definition(self) -> str:
        return CHOICE_SEPARATOR.join(self.choices)


@dataclass(frozen=True)
class MenuItem:
    """
    One orderable menu item.

    Attributes:
        name: Unique item name, also the count column header
        price: Unit price (non-negative)
        category: Optional label, unused by the projection
        description: Optional text, unused by the projection
        option_groups: Ordered option groups; position matches the slot
            position of the selections submitted for each instance
    """
    name: str
    price: float = 0.0
    category: Optional[str] = None
    description: Optional[str] = None
    option_groups: tuple[OptionGroup, ...] = field(default_factory=tuple)

    @property
    def has_options(self) -> bool:
        return bool(self.option_groups)

    @property
    def options_definition(self) -> str:
        return format_option_groups(self.option_groups)


@dataclass(frozen=True)
class Catalog:
    """Ordered menu items; authoring order determines column order."""
    items: tuple[MenuItem, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[MenuItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def find(self, name: str) -> Optional[MenuItem]:
        """Look up an item by exact name."""
        for item in self.items:
            if item.name == name:
                return item
        return None

    @property
    def names(self) -> list[str]:
        return [item.name for item in self.items]

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "Catalog":
        """
        Build a catalog from loosely typed menu rows.

        Each record may carry ``name``, ``price``, ``category``,
        ``description`` and ``options`` (definition string). Rows without a
        name are skipped, and a repeated name keeps its first definition.

        Args:
            records: Menu rows in authoring order

        Returns:
            Catalog: Validated, immutable catalog
        """
        items: list[MenuItem] = []
        seen: set[str] = set()

        for record in records:
            name = _clean_text(record.get("name"))
            if not name:
                continue
            if name in seen:
                logger.warning(f"Duplicate menu item '{name}' ignored")
                continue
            seen.add(name)

            items.append(
                MenuItem(
                    name=name,
                    price=_parse_price(record.get("price"), name),
                    category=_clean_text(record.get("category")) or None,
                    description=_clean_text(record.get("description")) or None,
                    option_groups=parse_option_groups(_clean_text(record.get("options"))),
                )
            )

        return cls(items=tuple(items))


def parse_option_groups(definition: Optional[str]) -> tuple[OptionGroup, ...]:
    """
    Parse an options definition string into option groups.

    Empty choices and empty groups are discarded.

    Example:
        >>> parse_option_groups("egg/no egg|croissant/muffin")
        (OptionGroup(choices=('egg', 'no egg')), OptionGroup(choices=('croissant', 'muffin')))
    """
    if not definition:
        return ()

    groups = []
    for raw_group in definition.split(GROUP_SEPARATOR):
        choices = tuple(c.strip() for c in raw_group.split(CHOICE_SEPARATOR) if c.strip())
        if choices:
            groups.append(OptionGroup(choices=choices))
    return tuple(groups)


def format_option_groups(groups: Iterable[OptionGroup]) -> str:
    """Render option groups back into the definition format."""
    return GROUP_SEPARATOR.join(group.to_definition() for group in groups)


def _clean_text(value: Any) -> str:
    # Spreadsheet readers hand back NaN floats for blank cells
    if value is None or (isinstance(value, float) and value != value):
        return ""
    return str(value).strip()


def _parse_price(value: Any, name: str) -> float:
    text = _clean_text(value).lstrip("$")
    if not text:
        return 0.0
    try:
        price = float(text)
    except ValueError:
        logger.warning(f"Invalid price {value!r} for '{name}', using 0.0")
        return 0.0
    if price < 0:
        logger.warning(f"Negative price {price} for '{name}', using 0.0")
        return 0.0
    return price
