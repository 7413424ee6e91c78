"""
Projection Verification Script

Checks the kitchen workbook against the journal:
    - header row matches the current menu
    - TOTAL row matches a fresh aggregation of the data rows
    - data rows match what a replay of the journal would produce
Run from project root: python scripts/verify.py

Version: 1.0.0
"""

import asyncio
import os
import sys
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kitchen_sheet.core.config import get_settings
from kitchen_sheet.engine.aggregator import build_totals_row
from kitchen_sheet.engine.columns import build_columns, columns_from_headers, headers
from kitchen_sheet.services.catalog import get_catalog_source
from kitchen_sheet.services.journal import get_journal_store
from kitchen_sheet.services.projection import MemoryProjectionStore, get_projection_store
from kitchen_sheet.services.rebuilder import replay


async def verify_projection() -> bool:
    """Verify workbook integrity."""
    settings = get_settings()

    print("=" * 60)
    print("🔍 PROJECTION VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"📄 File: {settings.projection_path}")
    print("=" * 60)

    projection = get_projection_store()
    with projection.transaction():
        names = projection.columns()
        rows = projection.rows()
        totals = projection.totals_row()

    if not names:
        print("\n❌ Projection has no headers. Start the API or run scripts/rebuild.py first.")
        return False

    ok = True
    columns = columns_from_headers(names)

    print("\n📊 STATISTICS:")
    print(f"   Orders: {len(rows)}")
    print(f"   Columns: {len(names)}")

    # Schema vs menu
    expected = headers(build_columns(get_catalog_source().load()))
    if expected != names:
        missing = [n for n in expected if n not in names]
        stale = [n for n in names if n not in expected]
        print("\n⚠️ Schema differs from the current menu")
        print(f"   Missing columns: {missing}")
        print(f"   Stale columns: {stale}")
        ok = False
    else:
        print("\n✅ Schema matches the current menu")

    # Totals vs rows
    if totals is None and not rows:
        print("✅ No orders yet")
    elif totals != build_totals_row(rows, columns):
        print("⚠️ TOTAL row does not match the data rows")
        ok = False
    else:
        print("✅ TOTAL row matches the data rows")

    # Rows vs journal replay
    entries = await get_journal_store().read_all()
    scratch = MemoryProjectionStore(headers=names)
    report = replay(entries, scratch)
    print(f"\n📒 JOURNAL: {report.summary}")
    if scratch.rows() != rows:
        print("⚠️ Rows differ from a journal replay. Run scripts/rebuild.py")
        ok = False
    else:
        print("✅ Rows match a journal replay")

    print("\n" + "=" * 60)
    print("✅ VERIFICATION COMPLETE" if ok else "❌ VERIFICATION FOUND PROBLEMS")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    sys.exit(0 if asyncio.run(verify_projection()) else 1)
