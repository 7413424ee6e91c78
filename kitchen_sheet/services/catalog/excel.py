"""
Excel Catalog Source

Reads the menu from a workbook maintained by the staff. The first sheet is
expected to have the columns:

    name | price | category | description | options

``options`` uses the definition format "egg/no egg|croissant/muffin".
Column names are matched case-insensitively; missing optional columns are
treated as blank.
"""

import logging
from pathlib import Path

import pandas as pd

from kitchen_sheet.engine.catalog import Catalog
from kitchen_sheet.services.catalog.base import BaseCatalogSource

logger = logging.getLogger(__name__)


class ExcelCatalogSource(BaseCatalogSource):
    """Menu workbook reader."""

    def __init__(self, path: Path, sheet_name=0):
        self.path = Path(path)
        self.sheet_name = sheet_name

    @property
    def provider_name(self) -> str:
        return "excel"

    def load(self) -> Catalog:
        """
        Read the menu workbook.

        Returns:
            Catalog: Parsed menu, empty if the workbook does not exist
        """
        if not self.path.exists():
            logger.warning(f"Menu workbook not found: {self.path}")
            return Catalog()

        df = pd.read_excel(self.path, sheet_name=self.sheet_name, engine="openpyxl", dtype=object)
        df.columns = [str(c).strip().lower() for c in df.columns]

        catalog = Catalog.from_records(df.to_dict("records"))
        logger.info(f"Loaded {len(catalog)} menu items from {self.path}")
        return catalog

    @staticmethod
    def write(path: Path, catalog: Catalog) -> None:
        """Write a catalog out as a menu workbook (seeding, tests)."""
        records = [
            {
                "name": item.name,
                "price": item.price,
                "category": item.category or "",
                "description": item.description or "",
                "options": item.options_definition,
            }
            for item in catalog
        ]
        df = pd.DataFrame(records, columns=["name", "price", "category", "description", "options"])
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        df.to_excel(path, index=False, engine="openpyxl")
