"""Supabase repository for user settings."""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from carbon_ledger.domain.settings import (
    EnergyBaseline,
    EnergyBaselines,
    EnergyType,
    UserSettings,
)
from carbon_ledger.services.baselines import UNITS, total_daily_carbon
from carbon_ledger.services.user_settings import SettingsRepository


@dataclass
class SupabaseUserSettingsRepository(SettingsRepository):
    """Supabase implementation for user settings stored as one JSON document."""

    client: Client
    user_id: str

    async def get_user_settings(self) -> UserSettings | None:
        """Return the stored settings for the user."""
        return await asyncio.to_thread(self._select)

    async def save_user_settings(self, settings: UserSettings) -> None:
        """Upsert the full settings document."""
        await asyncio.to_thread(self._upsert, settings)

    def _select(self) -> UserSettings | None:
        response = (
            self.client.table("user_settings")
            .select("settings")
            .eq("user_id", self.user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_settings(response.data[0].get("settings") or {})

    def _upsert(self, settings: UserSettings) -> None:
        self.client.table("user_settings").upsert(
            {
                "user_id": self.user_id,
                "settings": _dump_settings(settings),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()


def _dump_settings(settings: UserSettings) -> dict[str, object]:
    return {
        "daily_budget_kg": settings.daily_budget_kg,
        "weekly_target_kg": settings.weekly_target_kg,
        "total_scans": settings.total_scans,
        "total_carbon_tracked": settings.total_carbon_tracked,
        "occupants": settings.occupants,
        "energy_baselines": {
            str(energy_type): {
                "enabled": baseline.enabled,
                "monthly_amount": baseline.monthly_amount,
                "unit": baseline.unit,
                "daily_average": baseline.daily_average,
                "daily_carbon_kg": baseline.daily_carbon_kg,
                "last_updated": (
                    baseline.last_updated.isoformat() if baseline.last_updated else None
                ),
            }
            for energy_type, baseline in settings.energy_baselines.baselines.items()
        },
    }


def _parse_settings(raw: dict[str, object]) -> UserSettings:
    defaults = UserSettings()
    return UserSettings(
        daily_budget_kg=float(raw.get("daily_budget_kg", defaults.daily_budget_kg)),
        weekly_target_kg=float(raw.get("weekly_target_kg", defaults.weekly_target_kg)),
        total_scans=int(raw.get("total_scans", 0)),
        total_carbon_tracked=float(raw.get("total_carbon_tracked", 0.0)),
        occupants=int(raw.get("occupants", defaults.occupants)),
        energy_baselines=_parse_baselines(raw.get("energy_baselines") or {}),
    )


def _parse_baselines(raw: dict[str, dict[str, object]]) -> EnergyBaselines:
    baselines = {}
    for energy_type in EnergyType:
        item = raw.get(str(energy_type)) or {}
        last_updated = item.get("last_updated")
        baselines[energy_type] = EnergyBaseline(
            energy_type=energy_type,
            unit=str(item.get("unit", UNITS[energy_type])),
            enabled=bool(item.get("enabled", False)),
            monthly_amount=float(item.get("monthly_amount", 0.0)),
            daily_average=float(item.get("daily_average", 0.0)),
            daily_carbon_kg=float(item.get("daily_carbon_kg", 0.0)),
            last_updated=(
                datetime.fromisoformat(last_updated)
                if isinstance(last_updated, str) and last_updated
                else None
            ),
        )
    return EnergyBaselines(
        baselines=baselines, total_daily_carbon_kg=total_daily_carbon(baselines)
    )
