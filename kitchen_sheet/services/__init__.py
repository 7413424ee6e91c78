"""
                        Services Module

Storage adapters and the two operations that mutate the projection.
Each store has an in-memory implementation and a real one, picked by a
cached factory from the settings.

Services:
    - catalog: menu sources (static, menu workbook)
    - journal: order journal (memory, SQL)
    - projection: kitchen projection (memory, Excel workbook)
    - status: published/paused switch
    - ingestion: live order path
    - rebuilder: journal replay
"""

from kitchen_sheet.services.ingestion import IngestionOutcome, IngestionResult, ingest_order
from kitchen_sheet.services.rebuilder import RebuildReport, rebuild_projection, refresh_schema

__all__ = [
    "IngestionOutcome",
    "IngestionResult",
    "ingest_order",
    "RebuildReport",
    "rebuild_projection",
    "refresh_schema",
]
