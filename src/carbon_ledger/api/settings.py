"""Settings API endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request

from carbon_ledger.api.ledger_models import BaselineRequest, SettingsPatch
from carbon_ledger.domain.settings import EnergyType  # noqa: TC001

if TYPE_CHECKING:
    from carbon_ledger.containers import AppContainer

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("")
async def get_settings(request: Request) -> dict[str, object]:
    """Return the budget goal, lifetime stats and energy baselines."""
    container: AppContainer = request.app.state.container
    return {"settings": container.settings_service.settings}


@router.patch("")
async def update_settings(
    payload: SettingsPatch, request: Request
) -> dict[str, object]:
    """Apply the fields present in the request as one saved change."""
    container: AppContainer = request.app.state.container
    changes = payload.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(status_code=422, detail="No settings to update")
    settings = await container.settings_service.update_settings(**changes)
    return {"settings": settings}


@router.put("/baselines/{energy_type}")
async def update_baseline(
    energy_type: EnergyType, payload: BaselineRequest, request: Request
) -> dict[str, object]:
    """Recompute one energy baseline from a monthly utility amount."""
    container: AppContainer = request.app.state.container
    baselines = await container.settings_service.update_baseline(
        energy_type, payload.monthly_amount, payload.days_in_period
    )
    return {"baselines": baselines}
