"""
Projection Store Factory

Returns the Excel or in-memory projection store based on PROJECTION_BACKEND.
"""

import logging
from functools import lru_cache

from kitchen_sheet.core.config import ProjectionBackend, get_settings
from kitchen_sheet.services.projection.base import BaseProjectionStore, normalize_row
from kitchen_sheet.services.projection.excel import ExcelProjectionStore
from kitchen_sheet.services.projection.memory import MemoryProjectionStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_projection_store() -> BaseProjectionStore:
    """Get the configured projection store."""
    settings = get_settings()

    if settings.projection_backend == ProjectionBackend.MEMORY:
        logger.info("Projection Store: Using MemoryProjectionStore")
        return MemoryProjectionStore()

    logger.info(f"Projection Store: Using ExcelProjectionStore ({settings.projection_path})")
    return ExcelProjectionStore(
        path=settings.projection_path,
        lock_timeout=settings.excel_lock_timeout,
        orders_sheet=settings.orders_sheet_name,
        kitchen_sheet=settings.kitchen_sheet_name,
    )


__all__ = [
    "get_projection_store",
    "BaseProjectionStore",
    "ExcelProjectionStore",
    "MemoryProjectionStore",
    "normalize_row",
]
