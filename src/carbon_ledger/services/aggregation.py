"""Aggregation engine: per-day totals, weekly rollups and streaks."""

from collections.abc import Iterable, Mapping
from datetime import date, timedelta

from carbon_ledger.domain.activities import Activity, ActivityCategory
from carbon_ledger.domain.dates import (
    WEEK_DAYS,
    get_date_string,
    week_dates,
    week_start,
)
from carbon_ledger.domain.ledger import (
    DailyLog,
    WeekComparison,
    WeeklySummary,
    zero_category_totals,
)

STREAK_LOOKBACK_DAYS = 365


def empty_log(date_key: str, budget_kg: float) -> DailyLog:
    """Return the zero-valued log used for dates without activities."""
    return DailyLog(date=date_key, budget_kg=budget_kg)


def category_totals(
    activities: Iterable[Activity],
) -> dict[ActivityCategory, float]:
    """Sum carbon per category with a fresh filter+sum for each one."""
    items = list(activities)
    return {
        category: sum(a.carbon_kg for a in items if a.category == category)
        for category in ActivityCategory
    }


def recalculate_log(log: DailyLog, activities: Iterable[Activity]) -> DailyLog:
    """Return a copy of log holding activities with totals rebuilt from scratch."""
    items = tuple(activities)
    return DailyLog(
        date=log.date,
        activities=items,
        total_carbon_kg=sum(activity.carbon_kg for activity in items),
        budget_kg=log.budget_kg,
        category_totals=category_totals(items),
    )


def with_activity(log: DailyLog, activity: Activity) -> DailyLog:
    """Prepend an activity, newest first."""
    return recalculate_log(log, (activity, *log.activities))


def without_activity(log: DailyLog, activity_id: str) -> DailyLog:
    """Drop an activity by id."""
    return recalculate_log(
        log, (activity for activity in log.activities if activity.id != activity_id)
    )


def log_for_date(
    logs: Mapping[str, DailyLog], date_key: str, budget_kg: float
) -> DailyLog:
    """Return the stored log, or a zero log seeded with the current budget."""
    stored = logs.get(date_key)
    if stored is not None:
        return stored
    return empty_log(date_key, budget_kg)


def build_weekly_summary(
    logs: Mapping[str, DailyLog],
    today: date,
    budget_kg: float,
    baseline_kg: float = 0.0,
    weekly_target_kg: float | None = None,
) -> WeeklySummary:
    """Roll up the Sunday-aligned calendar week that contains today.

    A day counts as under budget only when it is not in the future, its total
    (plus ``baseline_kg``) is above zero, and that total is within budget_kg.
    The week is under target when its total is above zero and within
    ``weekly_target_kg``, which defaults to seven daily budgets.
    """
    if weekly_target_kg is None:
        weekly_target_kg = budget_kg * WEEK_DAYS
    start = week_start(today)
    dates = week_dates(start)
    today_key = get_date_string(today)
    daily_totals: list[float] = []
    totals = zero_category_totals()
    days_under_budget = 0

    for date_key in dates:
        log = logs.get(date_key)
        day_total = log.total_carbon_kg if log else 0.0
        daily_totals.append(day_total)
        if log:
            for category in ActivityCategory:
                totals[category] += log.category_totals.get(category, 0.0)
        counted = day_total + baseline_kg
        if date_key <= today_key and 0 < counted <= budget_kg:
            days_under_budget += 1

    week_total = sum(daily_totals)
    return WeeklySummary(
        week_start=get_date_string(start),
        dates=tuple(dates),
        daily_totals=tuple(daily_totals),
        week_total=week_total,
        category_totals=totals,
        days_under_budget=days_under_budget,
        weekly_target_kg=weekly_target_kg,
        is_under_weekly_target=0 < week_total <= weekly_target_kg,
        vs_last_week=WeekComparison(),
    )


def logs_in_range(
    logs: Mapping[str, DailyLog], start: date, end: date
) -> list[DailyLog]:
    """Return stored logs between start and end inclusive, oldest first."""
    result = []
    day = start
    while day <= end:
        log = logs.get(get_date_string(day))
        if log is not None:
            result.append(log)
        day += timedelta(days=1)
    return result


def current_streak(logs: Mapping[str, DailyLog], today: date) -> int:
    """Count consecutive days with activity ending today.

    An empty today does not break a streak that ran through yesterday.
    """
    streak = 0
    for offset in range(STREAK_LOOKBACK_DAYS):
        log = logs.get(get_date_string(today - timedelta(days=offset)))
        if log and log.activities:
            streak += 1
        elif offset > 0:
            break
    return streak
