"""Energy usage entries logged as ledger activities."""

from enum import StrEnum

from carbon_ledger.domain.activities import (
    ActivityCategory,
    ActivityDraft,
    EnergyDetails,
)
from carbon_ledger.domain.settings import EnergyType
from carbon_ledger.services.baselines import EMISSION_FACTORS, UNITS

# Average household daily usage, per unit.
DAILY_BENCHMARKS = {
    EnergyType.ELECTRICITY: 30.0,
    EnergyType.NATURAL_GAS: 3.5,
    EnergyType.HEATING_OIL: 3.3,
}

LABELS = {
    EnergyType.ELECTRICITY: "Electricity",
    EnergyType.NATURAL_GAS: "Natural Gas",
    EnergyType.HEATING_OIL: "Heating Oil",
}

# Rough kWh per m³ / liter, used to express non-electric usage in kWh.
_KWH_PER_UNIT = 10.0


class UsagePeriod(StrEnum):
    """Period a usage reading covers."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


PERIOD_DAYS = {
    UsagePeriod.DAILY: 1,
    UsagePeriod.WEEKLY: 7,
    UsagePeriod.MONTHLY: 30,
}


def energy_carbon_kg(energy_type: EnergyType, amount: float) -> float:
    """Return carbon for a usage amount, rounded to two decimals."""
    return round(amount * EMISSION_FACTORS[energy_type], 2)


def eco_score(energy_type: EnergyType, daily_usage: float) -> int:
    """Score daily usage against the household benchmark.

    Half the benchmark scores 100 and each further half step costs 25 points.
    """
    ratio = daily_usage / DAILY_BENCHMARKS[energy_type]
    score = round(100 - (ratio - 0.5) * 50)
    return max(0, min(100, score))


def build_energy_draft(
    energy_type: EnergyType, amount: float, period: UsagePeriod
) -> ActivityDraft:
    """Turn a usage reading into an activity carrying its daily equivalent."""
    days = PERIOD_DAYS[period]
    unit = UNITS[energy_type]
    label = LABELS[energy_type]
    daily_usage = amount / days
    daily_carbon_kg = energy_carbon_kg(energy_type, amount) / days
    if energy_type == EnergyType.ELECTRICITY:
        energy_kwh = daily_usage
    else:
        energy_kwh = daily_usage * _KWH_PER_UNIT
    is_daily = period == UsagePeriod.DAILY
    return ActivityDraft(
        category=ActivityCategory.ENERGY,
        name=label if is_daily else f"{label} ({period} avg)",
        carbon_kg=daily_carbon_kg,
        quantity=daily_usage,
        unit=f"{unit}/day",
        eco_score=eco_score(energy_type, daily_usage),
        details=EnergyDetails(
            energy_type=str(energy_type),
            energy_kwh=energy_kwh,
            period=str(period),
            is_estimated=not is_daily,
        ),
        notes=None if is_daily else f"Based on {amount:g} {unit} {period}",
    )
