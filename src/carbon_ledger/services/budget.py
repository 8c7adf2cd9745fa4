"""Budget and progress calculations over a single daily log."""

from dataclasses import dataclass

from carbon_ledger.domain.ledger import DailyLog


def remaining_budget(log: DailyLog) -> float:
    """Return how much budget is left, never below zero."""
    return max(0.0, log.budget_kg - log.total_carbon_kg)


def is_over_budget(log: DailyLog) -> bool:
    """Return True when the day's total exceeds its budget."""
    return log.total_carbon_kg > log.budget_kg


def budget_progress(log: DailyLog) -> float:
    """Return spent/budget clamped to [0, 1]; zero when there is no budget."""
    if log.budget_kg <= 0:
        return 0.0
    return min(log.total_carbon_kg / log.budget_kg, 1.0)


@dataclass(frozen=True)
class BudgetStatus:
    """Budget view of one day."""

    date: str
    total_carbon_kg: float
    budget_kg: float
    remaining_kg: float
    is_over_budget: bool
    progress: float


def budget_status(log: DailyLog, baseline_kg: float = 0.0) -> BudgetStatus:
    """Evaluate a day's budget, optionally including the energy baseline."""
    view = DailyLog(
        date=log.date,
        total_carbon_kg=log.total_carbon_kg + baseline_kg,
        budget_kg=log.budget_kg,
    )
    return BudgetStatus(
        date=log.date,
        total_carbon_kg=view.total_carbon_kg,
        budget_kg=view.budget_kg,
        remaining_kg=remaining_budget(view),
        is_over_budget=is_over_budget(view),
        progress=budget_progress(view),
    )
