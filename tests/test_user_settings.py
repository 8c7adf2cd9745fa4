"""Tests for the settings service."""

import asyncio
from datetime import UTC, datetime

import pytest

from carbon_ledger.domain.errors import PersistenceError
from carbon_ledger.domain.settings import EnergyType, UserSettings
from carbon_ledger.services.user_settings import SettingsService
from tests.conftest import InMemorySettingsRepository


def test_load_keeps_defaults_when_nothing_stored(
    settings_service: SettingsService,
) -> None:
    loaded = asyncio.run(settings_service.load())

    assert loaded == UserSettings()


def test_load_uses_stored_settings(
    settings_repository: InMemorySettingsRepository,
    settings_service: SettingsService,
) -> None:
    settings_repository.stored = UserSettings(daily_budget_kg=4.0, occupants=3)

    asyncio.run(settings_service.load())

    assert settings_service.daily_budget_kg == 4.0
    assert settings_service.settings.occupants == 3


def test_update_settings_persists_changes(
    settings_repository: InMemorySettingsRepository,
    settings_service: SettingsService,
) -> None:
    asyncio.run(settings_service.update_settings(daily_budget_kg=6.0, occupants=4))

    assert settings_repository.stored is not None
    assert settings_repository.stored.daily_budget_kg == 6.0
    assert settings_service.settings.occupants == 4


def test_failed_save_keeps_previous_settings(
    settings_repository: InMemorySettingsRepository,
    settings_service: SettingsService,
) -> None:
    settings_repository.fail_on.add("save_user_settings")

    with pytest.raises(PersistenceError) as excinfo:
        asyncio.run(settings_service.set_daily_budget(3.0))

    assert excinfo.value.operation == "update_settings"
    assert settings_service.daily_budget_kg == 8.0


def test_occupants_must_be_positive(settings_service: SettingsService) -> None:
    with pytest.raises(ValueError):
        asyncio.run(settings_service.set_occupants(0))


def test_activity_stats_track_and_clamp(settings_service: SettingsService) -> None:
    async def run() -> None:
        await settings_service.record_activity_added(2.0)
        await settings_service.record_activity_added(1.0)
        await settings_service.record_activity_removed(5.0)

    asyncio.run(run())

    assert settings_service.settings.total_scans == 2
    assert settings_service.settings.total_carbon_tracked == 0


def test_update_baseline_persists(
    settings_repository: InMemorySettingsRepository,
    settings_service: SettingsService,
) -> None:
    now = datetime(2024, 3, 13, tzinfo=UTC)

    baselines = asyncio.run(
        settings_service.update_baseline(EnergyType.ELECTRICITY, 600, 30, now=now)
    )

    assert baselines.total_daily_carbon_kg == pytest.approx(8.0)
    assert settings_repository.stored is not None
    stored = settings_repository.stored.energy_baselines.get(EnergyType.ELECTRICITY)
    assert stored.enabled is True
    assert stored.last_updated == now


def test_interleaved_changes_build_on_each_other(
    settings_repository: InMemorySettingsRepository,
    settings_service: SettingsService,
) -> None:
    settings_repository.yield_on_save = True

    async def run() -> None:
        await asyncio.gather(
            settings_service.record_activity_added(1.0),
            settings_service.update_settings(daily_budget_kg=5.0),
            settings_service.record_activity_added(2.0),
        )

    asyncio.run(run())

    assert settings_service.settings == UserSettings(
        daily_budget_kg=5.0, total_scans=2, total_carbon_tracked=3.0
    )
    assert settings_repository.stored == settings_service.settings
    assert settings_repository.saves == 3
