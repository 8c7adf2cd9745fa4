"""Ledger API endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status

from carbon_ledger.api.ledger_models import (
    ActivityRequest,
    EnergyUsageRequest,
    ProductScanRequest,
)
from carbon_ledger.domain.dates import get_date_string
from carbon_ledger.services.energy import build_energy_draft

if TYPE_CHECKING:
    from carbon_ledger.containers import AppContainer
    from carbon_ledger.services.ledger import LedgerService

router = APIRouter(prefix="/ledger", tags=["ledger"])


def _ledger(request: Request) -> LedgerService:
    container: AppContainer = request.app.state.container
    return container.ledger_service


def _day_view(ledger: LedgerService, day: date) -> dict[str, object]:
    return {
        "log": ledger.get_log_for_date(day),
        "budget": ledger.budget_status(day),
        "budget_with_baseline": ledger.budget_status(day, include_baseline=True),
        "total_with_baseline": ledger.total_with_baseline(day),
    }


@router.get("/today")
async def today(request: Request) -> dict[str, object]:
    """Return today's log with its budget status."""
    ledger = _ledger(request)
    return _day_view(ledger, ledger.today())


@router.get("/days/{day}")
async def day_detail(day: date, request: Request) -> dict[str, object]:
    """Return the log for one date, zero-filled when nothing was logged."""
    return _day_view(_ledger(request), day)


@router.get("/week")
async def week(request: Request, include_baseline: bool = False) -> dict[str, object]:
    """Return the summary of the week containing today."""
    return {"summary": _ledger(request).weekly_summary(include_baseline)}


@router.get("/range")
async def date_range(start: date, end: date, request: Request) -> dict[str, object]:
    """Return stored logs between two dates, inclusive."""
    if end < start:
        raise HTTPException(
            status_code=422,
            detail="end must not be before start",
        )
    return {"logs": _ledger(request).logs_for_range(start, end)}


@router.get("/streak")
async def streak(request: Request) -> dict[str, int]:
    """Return the number of consecutive days with at least one activity."""
    return {"streak": _ledger(request).current_streak()}


@router.post("/activities", status_code=status.HTTP_201_CREATED)
async def add_activity(payload: ActivityRequest, request: Request) -> dict[str, object]:
    """Log an activity on the given date, or today."""
    ledger = _ledger(request)
    activity = await ledger.add_activity(payload.to_draft(), payload.day)
    date_key = get_date_string(payload.day or ledger.today())
    return {"activity": activity, "log": ledger.get_log_for_date(date_key)}


@router.delete("/days/{day}/activities/{activity_id}")
async def remove_activity(
    day: date, activity_id: str, request: Request
) -> dict[str, object]:
    """Delete one activity from a day's log."""
    ledger = _ledger(request)
    removed = await ledger.remove_activity(activity_id, day)
    if removed is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Activity {activity_id} not found on {get_date_string(day)}",
        )
    return {"removed": removed, "log": ledger.get_log_for_date(day)}


@router.post("/scans", status_code=status.HTTP_201_CREATED)
async def add_scan(payload: ProductScanRequest, request: Request) -> dict[str, object]:
    """Log scanned objects as one product activity."""
    objects = [obj.to_domain() for obj in payload.objects]
    activity = await _ledger(request).add_product_scan(objects, payload.day)
    return {"activity": activity}


@router.get("/days/{day}/scans")
async def day_scans(day: date, request: Request) -> dict[str, object]:
    """Return scan records taken on one date."""
    return {"scans": _ledger(request).get_scans_for_date(day)}


@router.get("/scans/summary")
async def scan_summary(request: Request) -> dict[str, object]:
    """Return totals and most frequent objects across the scan history."""
    return {"summary": _ledger(request).scan_history_summary()}


@router.post("/energy", status_code=status.HTTP_201_CREATED)
async def add_energy(payload: EnergyUsageRequest, request: Request) -> dict[str, str]:
    """Log a utility reading as today's energy activity."""
    draft = build_energy_draft(payload.energy_type, payload.amount, payload.period)
    activity_id = await _ledger(request).add_energy_activity(draft)
    return {"id": activity_id}
