"""Tests for the energy baseline calculator."""

from datetime import UTC, datetime

import pytest

from carbon_ledger.domain.settings import EnergyType, UserSettings
from carbon_ledger.services.baselines import (
    apply_baseline,
    compute_baseline,
    total_daily_carbon,
)

NOW = datetime(2024, 3, 13, tzinfo=UTC)


def test_electricity_baseline() -> None:
    baseline = compute_baseline(EnergyType.ELECTRICITY, 600, 30, now=NOW)

    assert baseline.enabled is True
    assert baseline.daily_average == 20
    assert baseline.daily_carbon_kg == pytest.approx(8.0)
    assert baseline.unit == "kWh"
    assert baseline.last_updated == NOW


def test_zero_amount_disables_baseline() -> None:
    baseline = compute_baseline(EnergyType.NATURAL_GAS, 0, now=NOW)

    assert baseline.enabled is False
    assert baseline.daily_carbon_kg == 0


def test_invalid_period_is_rejected() -> None:
    with pytest.raises(ValueError):
        compute_baseline(EnergyType.HEATING_OIL, 100, 0)


def test_total_counts_enabled_baselines_only() -> None:
    baselines = UserSettings().energy_baselines
    baselines = apply_baseline(
        baselines, compute_baseline(EnergyType.ELECTRICITY, 600, 30, now=NOW)
    )

    assert baselines.total_daily_carbon_kg == pytest.approx(8.0)

    baselines = apply_baseline(
        baselines, compute_baseline(EnergyType.NATURAL_GAS, 30, 30, now=NOW)
    )
    assert baselines.total_daily_carbon_kg == pytest.approx(10.0)

    baselines = apply_baseline(
        baselines, compute_baseline(EnergyType.ELECTRICITY, 0, 30, now=NOW)
    )
    assert baselines.total_daily_carbon_kg == pytest.approx(2.0)
    assert total_daily_carbon(baselines.baselines) == pytest.approx(2.0)


def test_apply_baseline_does_not_mutate_previous() -> None:
    original = UserSettings().energy_baselines

    apply_baseline(original, compute_baseline(EnergyType.ELECTRICITY, 600, now=NOW))

    assert original.get(EnergyType.ELECTRICITY).enabled is False
    assert original.total_daily_carbon_kg == 0
