"""
Catalog Source Factory

Returns the menu workbook reader or the static menu based on CATALOG_BACKEND.
"""

import logging
from functools import lru_cache

from kitchen_sheet.core.config import CatalogBackend, get_settings
from kitchen_sheet.services.catalog.base import BaseCatalogSource
from kitchen_sheet.services.catalog.excel import ExcelCatalogSource
from kitchen_sheet.services.catalog.static import StaticCatalogSource

logger = logging.getLogger(__name__)


@lru_cache()
def get_catalog_source() -> BaseCatalogSource:
    """Get the configured catalog source."""
    settings = get_settings()

    if settings.catalog_backend == CatalogBackend.STATIC:
        logger.info("Catalog Source: Using StaticCatalogSource")
        return StaticCatalogSource()

    logger.info(f"Catalog Source: Using ExcelCatalogSource ({settings.menu_path})")
    return ExcelCatalogSource(settings.menu_path)


__all__ = [
    "get_catalog_source",
    "BaseCatalogSource",
    "ExcelCatalogSource",
    "StaticCatalogSource",
]
