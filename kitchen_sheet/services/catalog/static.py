"""
Static catalog source: a menu defined in code or handed in by tests.
"""

from typing import Any, Iterable, Mapping, Optional, Union

from kitchen_sheet.engine.catalog import Catalog
from kitchen_sheet.services.catalog.base import BaseCatalogSource

DEFAULT_MENU = [
    {
        "name": "breakfast sandwich",
        "price": 6.50,
        "category": "breakfast",
        "description": "Egg and cheese on your choice of bread",
        "options": "egg/no egg|croissant/muffin",
    },
    {
        "name": "coffee",
        "price": 2.50,
        "category": "drinks",
        "options": "hot/iced|whole milk/oat milk/no milk",
    },
    {
        "name": "fruit cup",
        "price": 3.00,
        "category": "sides",
    },
]


class StaticCatalogSource(BaseCatalogSource):
    """Serves a fixed catalog."""

    def __init__(self, menu: Optional[Union[Catalog, Iterable[Mapping[str, Any]]]] = None):
        if isinstance(menu, Catalog):
            self._catalog = menu
        else:
            self._catalog = Catalog.from_records(DEFAULT_MENU if menu is None else menu)

    @property
    def provider_name(self) -> str:
        return "static"

    def load(self) -> Catalog:
        return self._catalog
