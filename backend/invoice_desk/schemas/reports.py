"""Report Schemas - dashboard and financial report response shapes.

Invariants:
    - status_counts always lists every InvoiceStatus
    - trend is oldest month first
"""

import datetime as dt

from pydantic import BaseModel

from invoice_desk.core.dashboard_stats import DashboardStats, MonthlyRevenue
from invoice_desk.core.entities import Invoice
from invoice_desk.core.financial_report import FinancialReport
from invoice_desk.schemas.invoice import InvoiceSummary, Money


class DashboardStatsResponse(BaseModel):
    total_revenue: Money
    pending_amount: Money
    invoice_count: int


class MonthlyRevenueResponse(BaseModel):
    year: int
    month: int
    label: str
    amount: Money


class DashboardResponse(BaseModel):
    stats: DashboardStatsResponse
    trend: list[MonthlyRevenueResponse]
    recent: list[InvoiceSummary]

    @classmethod
    def build(
        cls,
        stats: DashboardStats,
        trend: list[MonthlyRevenue],
        recent: list[Invoice],
    ) -> "DashboardResponse":
        return cls(
            stats=DashboardStatsResponse(
                total_revenue=stats.total_revenue,
                pending_amount=stats.pending_amount,
                invoice_count=stats.invoice_count,
            ),
            trend=[
                MonthlyRevenueResponse(
                    year=m.year, month=m.month, label=m.label, amount=m.amount,
                )
                for m in trend
            ],
            recent=[InvoiceSummary.from_entity(inv) for inv in recent],
        )


class FinancialReportResponse(BaseModel):
    start: dt.date
    end: dt.date
    invoices: list[InvoiceSummary]
    total_invoiced: Money
    total_received: Money
    total_pending: Money
    total_tax: Money
    status_counts: dict[str, int]

    @classmethod
    def from_report(cls, report: FinancialReport) -> "FinancialReportResponse":
        return cls(
            start=report.start,
            end=report.end,
            invoices=[InvoiceSummary.from_entity(inv) for inv in report.invoices],
            total_invoiced=report.total_invoiced,
            total_received=report.total_received,
            total_pending=report.total_pending,
            total_tax=report.total_tax,
            status_counts={s.value: n for s, n in report.status_counts.items()},
        )
