"""Invoice ORM - one row per invoice, line items embedded as a JSON array.

Invariants:
    - id is the opaque string id of the core entity (primary key)
    - items holds item_to_dict() output; quantities/rates as decimal strings
    - subtotal/tax/total are stored for querying but recomputed on load

Design Decisions:
    - JSON column for items: items have no lifecycle outside their invoice
    - created_at is set on INSERT only and orders the startup load (newest first)
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import String, Text, Date, DateTime, Numeric, JSON
from sqlalchemy.orm import Mapped, mapped_column

from invoice_desk.db.base import Base


class InvoiceRecord(Base):
    __tablename__ = "invoices"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    invoice_number: Mapped[str] = mapped_column(String(64), nullable=False)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    client_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    client_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    due_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Draft")
    subtotal: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    tax: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(dt.timezone.utc),
    )
