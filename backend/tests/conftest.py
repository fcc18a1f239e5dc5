"""Root conftest - shared test configuration and entity builders."""

import os
from datetime import date
from decimal import Decimal

import pytest

# Never reach real services from tests
os.environ.setdefault("ANTHROPIC_API_KEY", "")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STORAGE_BACKEND", "database")
os.environ.setdefault("LOG_FORMAT", "text")

from invoice_desk.core.domain_types import InvoiceStatus  # noqa: E402
from invoice_desk.core.entities import Invoice, InvoiceItem  # noqa: E402
from invoice_desk.core.invoice_totals import with_computed_totals  # noqa: E402


def build_invoice(
    invoice_id: str = "inv-1",
    *,
    number: str = "INV-2024-001",
    on: date = date(2024, 5, 10),
    status: InvoiceStatus = InvoiceStatus.DRAFT,
    items: list[tuple[str, str]] | None = None,
    client_name: str = "Acme Resort",
    client_email: str = "billing@acme.test",
) -> Invoice:
    """Invoice with totals computed; items given as (quantity, rate) strings."""
    pairs = items if items is not None else [("2", "4500"), ("1", "3000")]
    return with_computed_totals(Invoice(
        id=invoice_id,
        invoice_number=number,
        client_name=client_name,
        client_email=client_email,
        client_address="1 Beach Road",
        date=on,
        due_date=on,
        items=tuple(
            InvoiceItem(id=f"{invoice_id}-item-{i}", description=f"Line {i}",
                        quantity=Decimal(q), rate=Decimal(r))
            for i, (q, r) in enumerate(pairs)
        ),
        notes=None,
        status=status,
    ))


@pytest.fixture
def make_invoice():
    return build_invoice
