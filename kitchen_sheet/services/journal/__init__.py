"""
Journal Store Factory

Returns the memory or SQL journal based on JOURNAL_BACKEND.
"""

import logging
from functools import lru_cache

from kitchen_sheet.core.config import JournalBackend, get_settings
from kitchen_sheet.services.journal.base import BaseJournalStore, JournalEntry
from kitchen_sheet.services.journal.memory import MemoryJournalStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_journal_store() -> BaseJournalStore:
    """Get the configured journal store."""
    settings = get_settings()

    if settings.journal_backend == JournalBackend.MEMORY:
        logger.info("Journal Store: Using MemoryJournalStore")
        return MemoryJournalStore()

    from kitchen_sheet.services.journal.sql import SqlJournalStore

    logger.info("Journal Store: Using SqlJournalStore")
    return SqlJournalStore()


__all__ = [
    "get_journal_store",
    "BaseJournalStore",
    "JournalEntry",
    "MemoryJournalStore",
]
