"""
SQL Journal Store

Stores the order journal in a relational database through the SQLAlchemy
async ORM. PostgreSQL (psycopg) in production, SQLite (aiosqlite) locally.

Every append commits before returning, which is what makes the journal
safe to rebuild the projection from.

Version: 1.0.0
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kitchen_sheet.database import get_session_maker
from kitchen_sheet.engine.orders import Customer, OrderRecord, dump_line_items
from kitchen_sheet.models import JournalRecord
from kitchen_sheet.services.journal.base import BaseJournalStore, JournalEntry

logger = logging.getLogger(__name__)


class SqlJournalStore(BaseJournalStore):
    """
    Journal store backed by the ``order_journal`` table.

    Attributes:
        session_maker: Async session factory (defaults to the configured one)
    """

    def __init__(self, session_maker: Optional[async_sessionmaker[AsyncSession]] = None):
        self.session_maker = session_maker or get_session_maker()

    @property
    def provider_name(self) -> str:
        return "sql"

    async def append(self, record: OrderRecord) -> JournalEntry:
        customer = record.customer
        row = JournalRecord(
            placed_at=record.timestamp,
            customer_name=customer.name,
            customer_phone=customer.phone,
            delivery=customer.delivery,
            customer_email=customer.email,
            buddy=customer.buddy,
            comments=customer.comments,
            items=dump_line_items(record.line_items),
        )

        async with self.session_maker() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)

        logger.info(f"Journal entry #{row.id} stored for {customer.name}")
        return _to_entry(row)

    async def read_all(self) -> list[JournalEntry]:
        async with self.session_maker() as session:
            result = await session.execute(select(JournalRecord).order_by(JournalRecord.id))
            return [_to_entry(row) for row in result.scalars().all()]

    async def count(self) -> int:
        async with self.session_maker() as session:
            result = await session.execute(select(func.count(JournalRecord.id)))
            return result.scalar() or 0


def _to_entry(row: JournalRecord) -> JournalEntry:
    return JournalEntry(
        entry_id=row.id,
        timestamp=row.placed_at,
        customer=Customer(
            name=row.customer_name,
            phone=row.customer_phone or "",
            delivery=row.delivery or "",
            email=row.customer_email or "",
            buddy=row.buddy,
            comments=row.comments,
        ),
        items=row.items,
    )
