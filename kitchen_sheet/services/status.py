"""
Ordering Status Store

Holds the published/paused switch that staff flip to stop taking orders.
The status is read by the host and passed explicitly into ingestion; the
engine never looks it up itself.
"""

import json
import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path

from filelock import FileLock

from kitchen_sheet.core.config import get_settings

logger = logging.getLogger(__name__)


class OrderingStatus(str, Enum):
    PUBLISHED = "published"
    PAUSED = "paused"


class StatusStore:
    """
    File-backed ordering status.

    A missing or unreadable file means the menu is published.
    """

    def __init__(self, path: Path, lock_timeout: float = 10):
        self.path = Path(path)
        self.lock = FileLock(str(self.path.with_name(self.path.name + ".lock")), timeout=lock_timeout)

    def get(self) -> OrderingStatus:
        if not self.path.exists():
            return OrderingStatus.PUBLISHED
        with self.lock:
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
                return OrderingStatus(data.get("status", OrderingStatus.PUBLISHED.value))
            except (ValueError, AttributeError) as e:
                logger.warning(f"Unreadable status file {self.path}: {e}")
                return OrderingStatus.PUBLISHED

    def set(self, status: OrderingStatus) -> OrderingStatus:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.lock:
            self.path.write_text(json.dumps({"status": status.value}), encoding="utf-8")
        logger.info(f"Ordering status set to {status.value}")
        return status


@lru_cache()
def get_status_store() -> StatusStore:
    settings = get_settings()
    return StatusStore(settings.status_path, lock_timeout=settings.excel_lock_timeout)
