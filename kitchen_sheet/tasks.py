"""
Celery Tasks
Background jobs for regenerating the kitchen projection.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Optional

from kitchen_sheet.celery_worker import celery_app
from kitchen_sheet.core.config import JournalBackend, get_settings
from kitchen_sheet.core.exceptions import ProjectionStoreError
from kitchen_sheet.engine.catalog import Catalog
from kitchen_sheet.services.catalog import get_catalog_source
from kitchen_sheet.services.journal import get_journal_store
from kitchen_sheet.services.projection import get_projection_store
from kitchen_sheet.services.rebuilder import RebuildReport, rebuild_projection as run_rebuild

logger = logging.getLogger(__name__)


async def _rebuild(catalog: Optional[Catalog]) -> RebuildReport:
    try:
        return await run_rebuild(get_journal_store(), get_projection_store(), catalog=catalog)
    finally:
        # Pooled connections belong to this event loop; the next task gets a new one
        if get_settings().journal_backend == JournalBackend.DATABASE:
            from kitchen_sheet.database import get_engine

            await get_engine().dispose()


@celery_app.task(
    bind=True,
    max_retries=3,
    default_retry_delay=5,
    autoretry_for=(ProjectionStoreError,),
    retry_backoff=True,
)
def rebuild_projection(self, refresh: bool = True) -> dict:
    """
    Replay the whole journal into the projection.

    Args:
        refresh: Rebuild the column schema from the current menu first

    Returns:
        dict: Rebuild report plus task timing
    """
    task_id = self.request.id
    logger.info(f"Task {task_id}: rebuilding projection (refresh={refresh})")
    start_time = time.time()

    catalog = get_catalog_source().load() if refresh else None
    report = asyncio.run(_rebuild(catalog))

    elapsed = round(time.time() - start_time, 3)
    result = report.to_dict()
    result["task_id"] = task_id
    result["processing_time_seconds"] = elapsed

    logger.info(f"Task {task_id}: {report.summary} in {elapsed}s")
    return result


@celery_app.task
def health_check() -> dict:
    """
    Simple health check task to verify Celery is working.
    """
    return {
        "status": "healthy",
        "worker": "celery",
        "timestamp": datetime.now().isoformat(),
    }
