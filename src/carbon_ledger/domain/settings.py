"""User settings and energy baseline models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

DEFAULT_DAILY_BUDGET_KG = 8.0
DEFAULT_WEEKLY_TARGET_KG = 56.0
DEFAULT_OCCUPANTS = 2


class EnergyType(StrEnum):
    """Utilities that can carry a monthly baseline."""

    ELECTRICITY = "electricity"
    NATURAL_GAS = "natural_gas"
    HEATING_OIL = "heating_oil"


@dataclass(frozen=True)
class EnergyBaseline:
    """Continuous daily emission derived from a monthly utility bill."""

    energy_type: EnergyType
    unit: str
    enabled: bool = False
    monthly_amount: float = 0.0
    daily_average: float = 0.0
    daily_carbon_kg: float = 0.0
    last_updated: datetime | None = None


@dataclass(frozen=True)
class EnergyBaselines:
    """Baselines for every energy type and their combined daily carbon."""

    baselines: dict[EnergyType, EnergyBaseline]
    total_daily_carbon_kg: float = 0.0

    def get(self, energy_type: EnergyType) -> EnergyBaseline:
        """Return the baseline for an energy type."""
        return self.baselines[energy_type]


def _default_baselines() -> EnergyBaselines:
    units = {
        EnergyType.ELECTRICITY: "kWh",
        EnergyType.NATURAL_GAS: "m³",
        EnergyType.HEATING_OIL: "liters",
    }
    return EnergyBaselines(
        baselines={
            energy_type: EnergyBaseline(energy_type=energy_type, unit=unit)
            for energy_type, unit in units.items()
        }
    )


@dataclass(frozen=True)
class UserSettings:
    """Budget goal, lifetime stats and household energy setup."""

    daily_budget_kg: float = DEFAULT_DAILY_BUDGET_KG
    weekly_target_kg: float = DEFAULT_WEEKLY_TARGET_KG
    total_scans: int = 0
    total_carbon_tracked: float = 0.0
    occupants: int = DEFAULT_OCCUPANTS
    energy_baselines: EnergyBaselines = field(default_factory=_default_baselines)
