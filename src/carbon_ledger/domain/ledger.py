"""Aggregate views over the activity ledger."""

from dataclasses import dataclass, field
from datetime import datetime

from carbon_ledger.domain.activities import Activity, ActivityCategory, ScannedObject


def zero_category_totals() -> dict[ActivityCategory, float]:
    """Return a totals mapping with every category at zero."""
    return {category: 0.0 for category in ActivityCategory}


@dataclass(frozen=True)
class DailyLog:
    """All activities logged on one calendar date."""

    date: str
    activities: tuple[Activity, ...] = ()
    total_carbon_kg: float = 0.0
    budget_kg: float = 0.0
    category_totals: dict[ActivityCategory, float] = field(
        default_factory=zero_category_totals
    )

    @property
    def is_under_budget(self) -> bool:
        """Return True when the day's total is within its budget."""
        return self.total_carbon_kg <= self.budget_kg

    def find(self, activity_id: str) -> Activity | None:
        """Return the activity with the given id, if logged on this day."""
        for activity in self.activities:
            if activity.id == activity_id:
                return activity
        return None


@dataclass(frozen=True)
class WeekComparison:
    """Comparison against the previous week."""

    difference: float = 0.0
    percent_change: float = 0.0
    improved: bool = False


@dataclass(frozen=True)
class WeeklySummary:
    """Seven-day rollup for the calendar week containing today."""

    week_start: str
    dates: tuple[str, ...]
    daily_totals: tuple[float, ...]
    week_total: float
    category_totals: dict[ActivityCategory, float]
    days_under_budget: int
    weekly_target_kg: float
    is_under_weekly_target: bool
    vs_last_week: WeekComparison = field(default_factory=WeekComparison)


@dataclass(frozen=True)
class ScanRecord:
    """A camera scan with every detected object.

    ``date`` is the ledger day the scan was logged on, which can differ from
    the UTC day of ``timestamp``.
    """

    id: str
    timestamp: datetime
    date: str
    objects: tuple[ScannedObject, ...]
    total_carbon_kg: float


@dataclass(frozen=True)
class HistorySummary:
    """Aggregate statistics over the scan history."""

    total_scans: int
    total_objects: int
    total_carbon_kg: float
    object_counts: dict[str, int]
    top_object_types: list[str]
    average_carbon_per_scan: float
