"""Report and audit log routes. All read-only."""

import datetime as dt

from fastapi import APIRouter, Depends, Query

from venueledger.core.dependencies import get_ledger
from venueledger.models import AuditLog
from venueledger.services import reports
from venueledger.services.reports import Dashboard, FinancialSummary, VenueUtilization
from venueledger.services.session import LedgerSession

router = APIRouter(tags=["reports"])


@router.get("/reports/dashboard", response_model=Dashboard)
async def dashboard(ledger: LedgerSession = Depends(get_ledger)):
    async with ledger:
        return reports.get_dashboard(ledger.snapshot, ledger.ctx.clock.today())


@router.get("/reports/financial", response_model=FinancialSummary)
async def financial_summary(
    start: dt.date = Query(...),
    end: dt.date = Query(...),
    ledger: LedgerSession = Depends(get_ledger),
):
    async with ledger:
        return reports.get_financial_summary(ledger.snapshot, start, end)


@router.get("/reports/venues/{venue_id}/utilization", response_model=VenueUtilization)
async def venue_utilization(
    venue_id: str,
    start: dt.date = Query(...),
    end: dt.date = Query(...),
    ledger: LedgerSession = Depends(get_ledger),
):
    async with ledger:
        return reports.get_venue_utilization(ledger.snapshot, venue_id, start, end)


@router.get("/audit-logs", response_model=list[AuditLog])
async def audit_logs(
    action: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    ledger: LedgerSession = Depends(get_ledger),
):
    """Most recent entries first."""
    async with ledger:
        entries = ledger.snapshot.audit_logs
    if action is not None:
        entries = [e for e in entries if e.action == action]
    return list(reversed(entries))[:limit]
