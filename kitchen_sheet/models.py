"""
SQLAlchemy Database Models

The order journal: one row per submitted order, never updated after insert.
The autoincrement primary key is the journal order.

Version: 1.0.0
"""

from sqlalchemy import Column, DateTime, Integer, String, Text

from kitchen_sheet.database import Base


class JournalRecord(Base):
    """
    Order journal table - the append-only source of truth.

    Items are stored exactly as the normalized JSON payload so the
    projection can be rebuilt from this table alone.
    """
    __tablename__ = "order_journal"

    # Primary Key (journal position)
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # =========================================================================
    # ORDER TIME
    # =========================================================================
    placed_at = Column(DateTime, nullable=False, index=True)

    # =========================================================================
    # CUSTOMER INFORMATION
    # =========================================================================
    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(30), nullable=False, default="")
    delivery = Column(String(100), nullable=False, default="")
    customer_email = Column(String(255), nullable=False, default="")
    buddy = Column(String(100), nullable=True)
    comments = Column(Text, nullable=True)

    # =========================================================================
    # ORDER DETAILS
    # =========================================================================
    items = Column(Text, nullable=False)  # JSON string of line items

    def __repr__(self):
        return f"<JournalRecord #{self.id} - {self.customer_name} - {self.placed_at}>"
