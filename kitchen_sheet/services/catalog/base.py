"""
Catalog Source Abstract Base Class

A catalog source returns the current menu. It is called once per schema
build and never mutated by the caller.
"""

from abc import ABC, abstractmethod

from kitchen_sheet.engine.catalog import Catalog


class BaseCatalogSource(ABC):
    """Abstract base class for menu sources."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    def load(self) -> Catalog:
        """Return the current catalog in authoring order."""
        pass
