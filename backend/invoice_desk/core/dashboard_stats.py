"""Dashboard Stats - pure revenue/pending summaries and the trailing monthly trend.

Invariants:
    - total_revenue counts Paid invoices only; pending_amount counts Pending only
    - Monthly trend always has TREND_MONTHS entries, oldest first, current month last
    - Months without paid invoices report amount 0, never absence
    - No IO, no clock reads: `today` is always passed in
"""

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Sequence

from invoice_desk.core.domain_types import (
    InvoiceStatus, RECENT_INVOICES_LIMIT, TREND_MONTHS, ZERO,
)
from invoice_desk.core.entities import Invoice


@dataclass(frozen=True)
class DashboardStats:
    total_revenue: Decimal
    pending_amount: Decimal
    invoice_count: int


@dataclass(frozen=True)
class MonthlyRevenue:
    year: int
    month: int
    label: str
    amount: Decimal


def sum_totals(invoices: Sequence[Invoice], *statuses: InvoiceStatus) -> Decimal:
    """Sum invoice totals, optionally restricted to the given statuses."""
    return sum(
        (inv.total for inv in invoices if not statuses or inv.status in statuses),
        ZERO,
    )


def compute_dashboard_stats(invoices: Sequence[Invoice]) -> DashboardStats:
    """Headline figures for the dashboard. Pure."""
    return DashboardStats(
        total_revenue=sum_totals(invoices, InvoiceStatus.PAID),
        pending_amount=sum_totals(invoices, InvoiceStatus.PENDING),
        invoice_count=len(invoices),
    )


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def compute_monthly_trend(
    invoices: Sequence[Invoice], today: date, months: int = TREND_MONTHS,
) -> list[MonthlyRevenue]:
    """Paid revenue per calendar month for the trailing window ending at `today`."""
    window = [
        _shift_month(today.year, today.month, -offset)
        for offset in range(months - 1, -1, -1)
    ]
    amounts = {key: ZERO for key in window}
    for inv in invoices:
        if inv.status != InvoiceStatus.PAID:
            continue
        key = (inv.date.year, inv.date.month)
        if key in amounts:
            amounts[key] += inv.total

    return [
        MonthlyRevenue(
            year=year, month=month,
            label=calendar.month_abbr[month],
            amount=amounts[(year, month)],
        )
        for year, month in window
    ]


def recent_invoices(
    invoices: Sequence[Invoice], limit: int = RECENT_INVOICES_LIMIT,
) -> list[Invoice]:
    """First `limit` invoices in collection order (newest first in the store)."""
    return list(invoices[:limit])
