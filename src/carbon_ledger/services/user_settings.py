"""User settings and lifetime stats service."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Protocol

from carbon_ledger.domain.errors import PersistenceError
from carbon_ledger.domain.settings import EnergyBaselines, EnergyType, UserSettings
from carbon_ledger.services.baselines import (
    DEFAULT_DAYS_IN_PERIOD,
    apply_baseline,
    compute_baseline,
)

_logger = logging.getLogger(__name__)


class SettingsRepository(Protocol):
    """Persistence interface for user settings."""

    async def get_user_settings(self) -> UserSettings | None:
        """Return stored settings, or None when nothing was saved yet."""

    async def save_user_settings(self, settings: UserSettings) -> None:
        """Persist the full settings object."""


@dataclass
class SettingsService:
    """Holds the budget goal, lifetime stats and energy baselines.

    Changes are applied one at a time: each change is computed from the
    current settings, persisted as one object, and only then replaces the
    in-memory settings. A failed save leaves the previous settings in place.
    """

    repository: SettingsRepository
    settings: UserSettings = field(default_factory=UserSettings)
    _lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, init=False, repr=False, compare=False
    )

    async def load(self) -> UserSettings:
        """Read settings once at startup, keeping the defaults when none exist."""
        stored = await self.repository.get_user_settings()
        self.settings = stored or self.settings
        return self.settings

    @property
    def daily_budget_kg(self) -> float:
        return self.settings.daily_budget_kg

    @property
    def weekly_target_kg(self) -> float:
        return self.settings.weekly_target_kg

    @property
    def energy_baselines(self) -> EnergyBaselines:
        return self.settings.energy_baselines

    async def update_settings(self, **changes: object) -> UserSettings:
        """Merge field changes and persist them as one unit."""
        return await self._commit(
            lambda current: replace(current, **changes), "update_settings"
        )

    async def set_daily_budget(self, budget_kg: float) -> UserSettings:
        """Change the daily budget goal."""
        return await self.update_settings(daily_budget_kg=budget_kg)

    async def set_occupants(self, occupants: int) -> UserSettings:
        """Change the household size."""
        if occupants < 1:
            raise ValueError("occupants must be at least 1")
        return await self.update_settings(occupants=occupants)

    async def record_activity_added(self, carbon_kg: float) -> UserSettings:
        """Count a new activity in the lifetime stats."""
        return await self._commit(
            lambda current: replace(
                current,
                total_scans=current.total_scans + 1,
                total_carbon_tracked=current.total_carbon_tracked + carbon_kg,
            ),
            "record_activity_added",
        )

    async def record_activity_removed(self, carbon_kg: float) -> UserSettings:
        """Take a removed activity out of the lifetime carbon, never below zero."""
        return await self._commit(
            lambda current: replace(
                current,
                total_carbon_tracked=max(0.0, current.total_carbon_tracked - carbon_kg),
            ),
            "record_activity_removed",
        )

    async def update_baseline(
        self,
        energy_type: EnergyType,
        monthly_amount: float,
        days_in_period: int = DEFAULT_DAYS_IN_PERIOD,
        now: datetime | None = None,
    ) -> EnergyBaselines:
        """Recompute one energy baseline and persist the settings."""
        baseline = compute_baseline(energy_type, monthly_amount, days_in_period, now)
        updated = await self._commit(
            lambda current: replace(
                current,
                energy_baselines=apply_baseline(current.energy_baselines, baseline),
            ),
            "update_baseline",
        )
        _logger.info(
            "Baseline %s set to %s/month (%.2f kg/day total)",
            energy_type,
            monthly_amount,
            updated.energy_baselines.total_daily_carbon_kg,
        )
        return updated.energy_baselines

    async def _commit(
        self, change: Callable[[UserSettings], UserSettings], operation: str
    ) -> UserSettings:
        async with self._lock:
            updated = change(self.settings)
            try:
                await self.repository.save_user_settings(updated)
            except Exception as exc:
                _logger.warning("Settings save failed during %s: %s", operation, exc)
                raise PersistenceError(operation) from exc
            self.settings = updated
            return updated
