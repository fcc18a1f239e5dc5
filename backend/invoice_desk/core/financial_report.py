"""Financial Report - date-ranged totals by status, tax collected and per-status counts.

Invariants:
    - Range is inclusive on both ends; invoice dates are calendar dates, so an
      invoice dated on `end` is inside the range for the whole of that day
    - Filtered invoices sorted ascending by date (stable for equal dates)
    - total_pending counts Pending AND Overdue; total_received counts Paid only
    - status_counts has an entry for every InvoiceStatus (zero-filled)
    - Empty filtered set -> zero sums and an empty list, never an error

Design Decisions:
    - Same sum helper as the dashboard (dashboard_stats.sum_totals)
    - start > end is not rejected here; the API boundary raises InvalidDateRangeError
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Sequence

from invoice_desk.core.dashboard_stats import sum_totals
from invoice_desk.core.domain_types import InvoiceStatus, ZERO
from invoice_desk.core.entities import Invoice


@dataclass(frozen=True)
class FinancialReport:
    start: date
    end: date
    invoices: list[Invoice]
    total_invoiced: Decimal
    total_received: Decimal
    total_pending: Decimal
    total_tax: Decimal
    status_counts: dict[InvoiceStatus, int]


def default_report_range(today: date) -> tuple[date, date]:
    """Month-to-date: first day of today's month through today."""
    return today.replace(day=1), today


def filter_by_date_range(
    invoices: Sequence[Invoice], start: date, end: date,
) -> list[Invoice]:
    """Invoices dated within [start, end], sorted ascending by date."""
    in_range = [inv for inv in invoices if start <= inv.date <= end]
    return sorted(in_range, key=lambda inv: inv.date)


def build_financial_report(
    invoices: Sequence[Invoice], start: date, end: date,
) -> FinancialReport:
    """Aggregate the invoices dated in the inclusive range. Pure."""
    filtered = filter_by_date_range(invoices, start, end)

    status_counts = {status: 0 for status in InvoiceStatus}
    for inv in filtered:
        status_counts[inv.status] += 1

    return FinancialReport(
        start=start,
        end=end,
        invoices=filtered,
        total_invoiced=sum_totals(filtered),
        total_received=sum_totals(filtered, InvoiceStatus.PAID),
        total_pending=sum_totals(
            filtered, InvoiceStatus.PENDING, InvoiceStatus.OVERDUE,
        ),
        total_tax=sum((inv.tax for inv in filtered), ZERO),
        status_counts=status_counts,
    )
