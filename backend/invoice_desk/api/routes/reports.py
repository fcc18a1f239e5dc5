"""Report Routes - dashboard summary and date-ranged financial report.

Invariants:
    - Both reports read the in-memory store only (no persistence IO)
    - Missing start/end default to month-to-date; start > end -> 400
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from invoice_desk.api.dependencies import get_sync, get_today
from invoice_desk.core.dashboard_stats import (
    compute_dashboard_stats, compute_monthly_trend, recent_invoices,
)
from invoice_desk.core.errors import InvalidDateRangeError
from invoice_desk.core.financial_report import build_financial_report, default_report_range
from invoice_desk.schemas.reports import DashboardResponse, FinancialReportResponse
from invoice_desk.services.entity_sync import EntitySync

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    sync: EntitySync = Depends(get_sync),
    today: date = Depends(get_today),
):
    invoices = sync.store.invoices.all()
    return DashboardResponse.build(
        compute_dashboard_stats(invoices),
        compute_monthly_trend(invoices, today),
        recent_invoices(invoices),
    )


@router.get("/financial", response_model=FinancialReportResponse)
async def financial_report(
    start: date | None = Query(None),
    end: date | None = Query(None),
    sync: EntitySync = Depends(get_sync),
    today: date = Depends(get_today),
):
    default_start, default_end = default_report_range(today)
    start = start or default_start
    end = end or default_end
    if start > end:
        raise InvalidDateRangeError(start, end)
    report = build_financial_report(sync.store.invoices.all(), start, end)
    return FinancialReportResponse.from_report(report)
