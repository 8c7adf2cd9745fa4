"""Activity store and mutation API for the carbon ledger."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from typing import Protocol, TypeVar
from zoneinfo import ZoneInfo

from carbon_ledger.domain.activities import Activity, ActivityDraft, ScannedObject
from carbon_ledger.domain.dates import generate_id, get_date_string
from carbon_ledger.domain.errors import LoadError, PersistenceError
from carbon_ledger.domain.ledger import (
    DailyLog,
    HistorySummary,
    ScanRecord,
    WeeklySummary,
)
from carbon_ledger.domain.settings import EnergyBaselines
from carbon_ledger.services.aggregation import (
    build_weekly_summary,
    current_streak,
    log_for_date,
    logs_in_range,
    with_activity,
    without_activity,
)
from carbon_ledger.services.budget import BudgetStatus, budget_status
from carbon_ledger.services.scans import (
    DEFAULT_SCAN_HISTORY_LIMIT,
    build_product_draft,
    build_scan_record,
    scans_for_date,
    summarize_history,
)
from carbon_ledger.services.user_settings import SettingsService

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class LedgerRepository(Protocol):
    """Persistence interface for daily logs and scan history."""

    async def get_all_daily_logs(self) -> dict[str, DailyLog]:
        """Return every stored daily log keyed by date."""

    async def get_daily_log(self, date_key: str) -> DailyLog | None:
        """Return the stored log for a date, if any."""

    async def save_daily_log(self, log: DailyLog) -> None:
        """Insert or replace a daily log."""

    async def add_activity(
        self, draft: ActivityDraft, date_key: str, budget_kg: float
    ) -> Activity:
        """Assign id and timestamp, store the activity and return it."""

    async def remove_activity(self, activity_id: str, date_key: str) -> None:
        """Delete an activity from a date's log."""

    async def get_scan_history(self) -> list[ScanRecord]:
        """Return scan records, newest first."""

    async def save_scan_record(self, record: ScanRecord) -> None:
        """Store a scan record."""


@dataclass(frozen=True)
class LedgerState:
    """In-memory copy of the persisted ledger."""

    logs: dict[str, DailyLog] = field(default_factory=dict)
    scans: tuple[ScanRecord, ...] = ()


@dataclass(frozen=True)
class ActivityAdded:
    date_key: str
    activity: Activity
    budget_kg: float


@dataclass(frozen=True)
class ActivityRemoved:
    date_key: str
    activity_id: str


@dataclass(frozen=True)
class ScanRecorded:
    record: ScanRecord
    limit: int


@dataclass(frozen=True)
class LedgerLoaded:
    logs: dict[str, DailyLog]
    scans: tuple[ScanRecord, ...]


LedgerEvent = ActivityAdded | ActivityRemoved | ScanRecorded | LedgerLoaded


def reduce_ledger(state: LedgerState, event: LedgerEvent) -> LedgerState:
    """Return the state after a persisted event. Never mutates state."""
    match event:
        case ActivityAdded(date_key=date_key, activity=activity, budget_kg=budget):
            log = log_for_date(state.logs, date_key, budget)
            return replace(
                state, logs={**state.logs, date_key: with_activity(log, activity)}
            )
        case ActivityRemoved(date_key=date_key, activity_id=activity_id):
            log = state.logs.get(date_key)
            if log is None:
                return state
            return replace(
                state,
                logs={**state.logs, date_key: without_activity(log, activity_id)},
            )
        case ScanRecorded(record=record, limit=limit):
            return replace(state, scans=(record, *state.scans)[:limit])
        case LedgerLoaded(logs=logs, scans=scans):
            return LedgerState(logs=dict(logs), scans=scans)
    raise TypeError(f"Unknown ledger event: {type(event).__name__}")


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class LedgerService:
    """Owns the ledger state and exposes mutations and derived views.

    Mutations await the repository first and only then fold an event into the
    in-memory state. The reducer always runs against the state current at the
    time the write resolves; there is no per-date lock, so concurrent writes to
    the same date settle in completion order.
    """

    repository: LedgerRepository
    settings_service: SettingsService
    timezone: str = "UTC"
    scan_history_limit: int = DEFAULT_SCAN_HISTORY_LIMIT
    clock: Callable[[], datetime] = _utc_now
    state: LedgerState = field(default_factory=LedgerState)
    is_loading: bool = True
    selected_date: date | None = None

    async def load(self) -> None:
        """Fetch logs, settings and scans concurrently, defaulting failures."""
        self.is_loading = True
        try:
            logs, settings, scans = await asyncio.gather(
                self.repository.get_all_daily_logs(),
                self.settings_service.load(),
                self.repository.get_scan_history(),
                return_exceptions=True,
            )
            if isinstance(logs, BaseException):
                _log_load_failure("daily logs", logs)
                logs = {}
            if isinstance(settings, BaseException):
                _log_load_failure("settings", settings)
            if isinstance(scans, BaseException):
                _log_load_failure("scan history", scans)
                scans = []
            self.state = reduce_ledger(
                self.state, LedgerLoaded(logs=logs, scans=tuple(scans))
            )
        finally:
            self.is_loading = False
        _logger.info(
            "Ledger loaded: %s days, %s scans",
            len(self.state.logs),
            len(self.state.scans),
        )

    def today(self) -> date:
        """Return today's date in the configured timezone."""
        return self.clock().astimezone(ZoneInfo(self.timezone)).date()

    def today_key(self) -> str:
        return get_date_string(self.today())

    def _key(self, value: date | str | None) -> str:
        if value is None:
            return self.today_key()
        if isinstance(value, str):
            return value
        return get_date_string(value)

    # Mutations

    async def add_activity(
        self, draft: ActivityDraft, target_date: date | str | None = None
    ) -> Activity:
        """Persist an activity, then fold it into the date's log."""
        date_key = self._key(target_date)
        budget_kg = self.settings_service.daily_budget_kg
        activity = await self._run(
            "add_activity",
            self.repository.add_activity(draft, date_key, budget_kg),
            lambda stored: ActivityAdded(date_key, stored, budget_kg),
        )
        _logger.info(
            "Added %s activity %s (%.2f kg) on %s",
            activity.category,
            activity.id,
            activity.carbon_kg,
            date_key,
        )
        await self.settings_service.record_activity_added(activity.carbon_kg)
        return activity

    async def remove_activity(
        self, activity_id: str, target_date: date | str | None = None
    ) -> Activity | None:
        """Delete an activity and take it out of the lifetime stats."""
        date_key = self._key(target_date)
        removed = self.get_log_for_date(date_key).find(activity_id)
        await self._run(
            "remove_activity",
            self.repository.remove_activity(activity_id, date_key),
            lambda _: ActivityRemoved(date_key, activity_id),
        )
        if removed is None:
            _logger.info("Activity %s not found on %s", activity_id, date_key)
            return None
        _logger.info("Removed activity %s from %s", activity_id, date_key)
        await self.settings_service.record_activity_removed(removed.carbon_kg)
        return removed

    async def add_product_scan(
        self,
        objects: Sequence[ScannedObject],
        target_date: date | str | None = None,
    ) -> Activity:
        """Log a whole scan as one product activity and keep its scan record."""
        date_key = self._key(target_date)
        activity = await self.add_activity(build_product_draft(objects), date_key)
        record = build_scan_record(
            generate_id("scan"), self.clock(), date_key, objects
        )
        await self._run(
            "save_scan_record",
            self.repository.save_scan_record(record),
            lambda _: ScanRecorded(record, self.scan_history_limit),
        )
        return activity

    async def add_energy_activity(self, draft: ActivityDraft) -> str:
        """Log an energy entry for today and return its id."""
        activity = await self.add_activity(draft, self.today())
        return activity.id

    async def _run(
        self,
        operation: str,
        command: Awaitable[T],
        to_event: Callable[[T], LedgerEvent],
    ) -> T:
        """Await a persistence command, then reduce its event into the state.

        When the command fails the event is dropped and the state is left as
        it is at that moment.
        """
        try:
            result = await command
        except Exception as exc:
            _logger.warning("Ledger %s failed, event dropped: %s", operation, exc)
            raise PersistenceError(operation) from exc
        self.state = reduce_ledger(self.state, to_event(result))
        return result

    # Views

    @property
    def energy_baselines(self) -> EnergyBaselines:
        return self.settings_service.energy_baselines

    def get_log_for_date(self, target_date: date | str) -> DailyLog:
        """Return the stored log or a zero log seeded with the current budget."""
        return log_for_date(
            self.state.logs,
            self._key(target_date),
            self.settings_service.daily_budget_kg,
        )

    def today_log(self) -> DailyLog:
        return self.get_log_for_date(self.today())

    def selected_log(self) -> DailyLog:
        return self.get_log_for_date(self.selected_date or self.today())

    def weekly_summary(self, include_baseline: bool = False) -> WeeklySummary:
        """Summarize the calendar week containing today."""
        baseline = (
            self.energy_baselines.total_daily_carbon_kg if include_baseline else 0.0
        )
        return build_weekly_summary(
            self.state.logs,
            self.today(),
            self.settings_service.daily_budget_kg,
            baseline_kg=baseline,
            weekly_target_kg=self.settings_service.weekly_target_kg,
        )

    def total_with_baseline(self, target_date: date | str | None = None) -> float:
        """Return the day's total plus the ongoing energy baseline."""
        log = self.get_log_for_date(target_date or self.today())
        return log.total_carbon_kg + self.energy_baselines.total_daily_carbon_kg

    def budget_status(
        self, target_date: date | str | None = None, include_baseline: bool = False
    ) -> BudgetStatus:
        """Return remaining budget, over-budget flag and progress for a day."""
        log = self.get_log_for_date(target_date or self.today())
        baseline = (
            self.energy_baselines.total_daily_carbon_kg if include_baseline else 0.0
        )
        return budget_status(log, baseline_kg=baseline)

    def logs_for_range(self, start: date, end: date) -> list[DailyLog]:
        return logs_in_range(self.state.logs, start, end)

    def current_streak(self) -> int:
        return current_streak(self.state.logs, self.today())

    def get_scans_for_date(self, target_date: date | str) -> list[ScanRecord]:
        return scans_for_date(self.state.scans, self._key(target_date))

    def scan_history_summary(self) -> HistorySummary:
        return summarize_history(self.state.scans)


def _log_load_failure(part: str, exc: BaseException) -> None:
    _logger.error(str(LoadError(part)), exc_info=exc)
