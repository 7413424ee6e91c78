"""
Projection Rebuild Script

Discards every row of the kitchen projection and replays the journal.
Run from project root: python scripts/rebuild.py [--keep-schema] [--background]

Version: 1.0.0
"""

import argparse
import asyncio
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kitchen_sheet.core.config import setup_logging
from kitchen_sheet.services.catalog import get_catalog_source
from kitchen_sheet.services.journal import get_journal_store
from kitchen_sheet.services.projection import get_projection_store
from kitchen_sheet.services.rebuilder import rebuild_projection


async def main(refresh: bool) -> int:
    catalog = get_catalog_source().load() if refresh else None
    report = await rebuild_projection(get_journal_store(), get_projection_store(), catalog=catalog)

    print("=" * 60)
    print(f"✅ {report.summary}")
    if report.skipped_entry_ids:
        print(f"⚠️ Skipped entries: {report.skipped_entry_ids}")
    if report.unmatched_items:
        print(f"⚠️ Items not on the menu: {report.unmatched_items}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Rebuild the kitchen projection from the journal")
    parser.add_argument("--keep-schema", action="store_true", help="Keep the current headers")
    parser.add_argument("--background", action="store_true", help="Queue the rebuild on the Celery worker")
    args = parser.parse_args()

    setup_logging()

    if args.background:
        from kitchen_sheet.tasks import rebuild_projection as rebuild_task

        result = rebuild_task.delay(refresh=not args.keep_schema)
        print(f"📋 Rebuild queued as task {result.id}")
        sys.exit(0)

    sys.exit(asyncio.run(main(refresh=not args.keep_schema)))
