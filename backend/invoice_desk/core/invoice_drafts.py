"""Invoice Drafts - templates for new invoices and customer-to-client field copying.

Invariants:
    - A new draft has status Draft, date = today, due date = today + due_days,
      exactly one blank line item (quantity 1, rate 0) and zero totals
    - Invoice numbers look like INV-<year>-<NNN> (NNN zero-padded, 000-999)
    - Client fields are copied from a customer at selection time; later customer
      edits never touch existing invoices

Design Decisions:
    - Ids and the number suffix are passed in, keeping this module deterministic
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from invoice_desk.core.domain_types import InvoiceId, ItemId, InvoiceStatus
from invoice_desk.core.entities import Customer, Invoice, InvoiceItem
from invoice_desk.core.invoice_totals import with_computed_totals

DEFAULT_DUE_DAYS = 14


@dataclass(frozen=True)
class ClientFields:
    """Snapshot of customer details stored on an invoice."""
    client_name: str
    client_email: str
    client_address: str


def format_invoice_number(year: int, suffix: int) -> str:
    return f"INV-{year}-{suffix % 1000:03d}"


def new_invoice_draft(
    today: date,
    *,
    invoice_id: InvoiceId,
    item_id: ItemId,
    number_suffix: int,
    due_days: int = DEFAULT_DUE_DAYS,
) -> Invoice:
    """Blank invoice ready for editing."""
    draft = Invoice(
        id=invoice_id,
        invoice_number=format_invoice_number(today.year, number_suffix),
        client_name="",
        client_email="",
        client_address="",
        date=today,
        due_date=today + timedelta(days=due_days),
        items=(InvoiceItem(id=item_id, description="", quantity=Decimal("1"), rate=Decimal("0")),),
        notes="",
        status=InvoiceStatus.DRAFT,
    )
    return with_computed_totals(draft)


def client_fields_from_customer(customer: Customer) -> ClientFields:
    """'Company (Name)' when the customer has a company, else just the name."""
    if customer.company_name:
        name = f"{customer.company_name} ({customer.name})"
    else:
        name = customer.name
    return ClientFields(
        client_name=name,
        client_email=customer.email,
        client_address=customer.address,
    )
