"""Energy baseline calculator.

A baseline turns a monthly utility bill into a constant daily emission that is
added to every day's total, whichever date is being viewed.
"""

from datetime import UTC, datetime

from carbon_ledger.domain.settings import EnergyBaseline, EnergyBaselines, EnergyType

DEFAULT_DAYS_IN_PERIOD = 30

# kg CO2e per unit
EMISSION_FACTORS = {
    EnergyType.ELECTRICITY: 0.4,
    EnergyType.NATURAL_GAS: 2.0,
    EnergyType.HEATING_OIL: 2.68,
}

UNITS = {
    EnergyType.ELECTRICITY: "kWh",
    EnergyType.NATURAL_GAS: "m³",
    EnergyType.HEATING_OIL: "liters",
}


def compute_baseline(
    energy_type: EnergyType,
    monthly_amount: float,
    days_in_period: int = DEFAULT_DAYS_IN_PERIOD,
    now: datetime | None = None,
) -> EnergyBaseline:
    """Return the baseline for a monthly usage amount.

    A zero amount disables the baseline.
    """
    if days_in_period <= 0:
        raise ValueError("days_in_period must be positive")
    daily_average = monthly_amount / days_in_period
    return EnergyBaseline(
        energy_type=energy_type,
        unit=UNITS[energy_type],
        enabled=monthly_amount > 0,
        monthly_amount=monthly_amount,
        daily_average=daily_average,
        daily_carbon_kg=daily_average * EMISSION_FACTORS[energy_type],
        last_updated=now or datetime.now(tz=UTC),
    )


def total_daily_carbon(baselines: dict[EnergyType, EnergyBaseline]) -> float:
    """Sum daily carbon over enabled baselines only."""
    return sum(
        baseline.daily_carbon_kg for baseline in baselines.values() if baseline.enabled
    )


def apply_baseline(
    current: EnergyBaselines, baseline: EnergyBaseline
) -> EnergyBaselines:
    """Replace one baseline and recompute the combined total."""
    updated = dict(current.baselines)
    updated[baseline.energy_type] = baseline
    return EnergyBaselines(
        baselines=updated,
        total_daily_carbon_kg=total_daily_carbon(updated),
    )
