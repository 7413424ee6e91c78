"""
Core module initialization.
Exports configuration, logging utilities and the exception hierarchy.
"""

from kitchen_sheet.core.config import get_settings, setup_logging, Settings, EnvironmentMode
from kitchen_sheet.core.exceptions import (
    KitchenSheetError,
    MalformedPayloadError,
    ProjectionStoreError,
)

__all__ = [
    "get_settings",
    "setup_logging",
    "Settings",
    "EnvironmentMode",
    "KitchenSheetError",
    "MalformedPayloadError",
    "ProjectionStoreError",
]
