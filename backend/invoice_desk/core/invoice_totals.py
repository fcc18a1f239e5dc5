"""Invoice Totals - pure money arithmetic from line items to subtotal, tax and total.

Invariants:
    - subtotal = sum(quantity * rate), rounded half-up to cents
    - tax = round(subtotal * TAX_RATE, 2)
    - total = subtotal + tax
    - Empty items -> all three values are zero
    - Negative quantities/rates are accepted and computed consistently
    - Idempotent: recomputing on unchanged items yields identical values

Design Decisions:
    - Decimal throughout: no binary float accumulation on money
    - Round the subtotal once after summing, not per line
"""

from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from invoice_desk.core.domain_types import CENT, TAX_RATE, ZERO
from invoice_desk.core.entities import Invoice, InvoiceItem


@dataclass(frozen=True)
class InvoiceTotals:
    """Derived money fields of an invoice."""
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_amount(item: InvoiceItem) -> Decimal:
    """Unrounded quantity * rate for one line."""
    return Decimal(item.quantity) * Decimal(item.rate)


def compute_totals(items: Iterable[InvoiceItem]) -> InvoiceTotals:
    """Compute subtotal, tax and total for a sequence of line items. Pure."""
    subtotal = quantize_money(sum((line_amount(i) for i in items), ZERO))
    tax = quantize_money(subtotal * TAX_RATE)
    return InvoiceTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)


def with_computed_totals(invoice: Invoice) -> Invoice:
    """Return a replacement invoice whose derived fields match its items."""
    totals = compute_totals(invoice.items)
    return replace(
        invoice,
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
    )
