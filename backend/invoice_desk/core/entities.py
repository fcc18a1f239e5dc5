"""Domain Entities - immutable records for invoices, customers, users and settings.

Invariants:
    - Entities are replaced whole, never mutated in place (frozen dataclasses)
    - Monetary amounts and quantities are Decimal
    - Invoice subtotal/tax/total are derived; only core/invoice_totals.py sets them
    - Customers are referenced by invoices through copied client fields, never by id

Design Decisions:
    - Dataclasses, not ORM models or pydantic: core stays free of IO and validation libs
    - items stored as a tuple: a frozen Invoice cannot have lines appended in place
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from invoice_desk.core.domain_types import (
    InvoiceId, CustomerId, UserId, ItemId, InvoiceStatus, UserRole, ZERO,
)


@dataclass(frozen=True)
class InvoiceItem:
    """One billable line on an invoice."""
    id: ItemId
    description: str = ""
    quantity: Decimal = Decimal("1")
    rate: Decimal = ZERO


@dataclass(frozen=True)
class Invoice:
    """Invoice aggregate. Owns its items; totals derived from them."""
    id: InvoiceId
    invoice_number: str
    client_name: str
    client_email: str
    date: date
    due_date: date
    items: tuple[InvoiceItem, ...] = ()
    client_address: str | None = None
    notes: str | None = None
    status: InvoiceStatus = InvoiceStatus.DRAFT
    subtotal: Decimal = ZERO
    tax: Decimal = ZERO
    total: Decimal = ZERO


@dataclass(frozen=True)
class Customer:
    """Customer directory entry."""
    id: CustomerId
    name: str
    company_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""


@dataclass(frozen=True)
class User:
    """Application user."""
    id: UserId
    name: str
    email: str
    role: UserRole = UserRole.VIEWER


@dataclass(frozen=True)
class BusinessSettings:
    """Singleton business profile printed on invoices."""
    business_name: str = ""
    business_subtitle: str = ""
    address: str = ""
    email: str = ""
    phone: str = ""
    gst_tin: str = ""
    logo_url: str | None = None
