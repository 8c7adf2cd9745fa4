"""Supabase repository for daily logs and scan history."""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from carbon_ledger.domain.activities import (
    Activity,
    ActivityCategory,
    ActivityDetails,
    ActivityDraft,
    EnergyDetails,
    FoodDetails,
    ProductDetails,
    ScannedObject,
    Severity,
    TransportDetails,
)
from carbon_ledger.domain.dates import generate_id, get_date_string
from carbon_ledger.domain.ledger import DailyLog, ScanRecord
from carbon_ledger.services.aggregation import (
    empty_log,
    with_activity,
    without_activity,
)
from carbon_ledger.services.ledger import LedgerRepository
from carbon_ledger.services.scans import DEFAULT_SCAN_HISTORY_LIMIT

_LOG_COLUMNS = "date, activities, total_carbon_kg, budget_kg, category_totals"
_SCAN_COLUMNS = "id, timestamp, date, objects, total_carbon_kg"


@dataclass
class SupabaseLedgerRepository(LedgerRepository):
    """Supabase implementation for the activity ledger.

    The Supabase client is synchronous, so every query runs in a worker thread.
    """

    client: Client
    user_id: str
    scan_history_limit: int = DEFAULT_SCAN_HISTORY_LIMIT

    async def get_all_daily_logs(self) -> dict[str, DailyLog]:
        """Return every daily log for the user keyed by date."""
        return await asyncio.to_thread(self._select_all_logs)

    async def get_daily_log(self, date_key: str) -> DailyLog | None:
        """Return the daily log for a date."""
        return await asyncio.to_thread(self._select_log, date_key)

    async def save_daily_log(self, log: DailyLog) -> None:
        """Upsert a daily log row."""
        await asyncio.to_thread(self._upsert_log, log)

    async def add_activity(
        self, draft: ActivityDraft, date_key: str, budget_kg: float
    ) -> Activity:
        """Stamp the draft, prepend it to the date's log and store the log."""
        activity = Activity.from_draft(
            draft, activity_id=generate_id("act"), timestamp=datetime.now(tz=UTC)
        )
        log = await self.get_daily_log(date_key) or empty_log(date_key, budget_kg)
        await self.save_daily_log(with_activity(log, activity))
        return activity

    async def remove_activity(self, activity_id: str, date_key: str) -> None:
        """Drop an activity from the date's log, if the log exists."""
        log = await self.get_daily_log(date_key)
        if log is None:
            return
        await self.save_daily_log(without_activity(log, activity_id))

    async def get_scan_history(self) -> list[ScanRecord]:
        """Return the most recent scans, newest first."""
        return await asyncio.to_thread(self._select_scans)

    async def save_scan_record(self, record: ScanRecord) -> None:
        """Insert a scan row."""
        await asyncio.to_thread(self._insert_scan, record)

    def _select_all_logs(self) -> dict[str, DailyLog]:
        response = (
            self.client.table("daily_logs")
            .select(_LOG_COLUMNS)
            .eq("user_id", self.user_id)
            .order("date", desc=False)
            .execute()
        )
        logs = [_parse_log(row) for row in response.data or []]
        return {log.date: log for log in logs}

    def _select_log(self, date_key: str) -> DailyLog | None:
        response = (
            self.client.table("daily_logs")
            .select(_LOG_COLUMNS)
            .eq("user_id", self.user_id)
            .eq("date", date_key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_log(response.data[0])

    def _upsert_log(self, log: DailyLog) -> None:
        self.client.table("daily_logs").upsert(
            {
                "user_id": self.user_id,
                "date": log.date,
                "activities": [_dump_activity(a) for a in log.activities],
                "total_carbon_kg": log.total_carbon_kg,
                "budget_kg": log.budget_kg,
                "category_totals": {
                    str(category): total
                    for category, total in log.category_totals.items()
                },
            },
            on_conflict="user_id,date",
        ).execute()

    def _select_scans(self) -> list[ScanRecord]:
        response = (
            self.client.table("scans")
            .select(_SCAN_COLUMNS)
            .eq("user_id", self.user_id)
            .order("timestamp", desc=True)
            .limit(self.scan_history_limit)
            .execute()
        )
        return [_parse_scan(row) for row in response.data or []]

    def _insert_scan(self, record: ScanRecord) -> None:
        response = (
            self.client.table("scans")
            .insert(
                {
                    "id": record.id,
                    "user_id": self.user_id,
                    "timestamp": record.timestamp.isoformat(),
                    "date": record.date,
                    "objects": [_dump_object(obj) for obj in record.objects],
                    "total_carbon_kg": record.total_carbon_kg,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create scan record")


def _parse_log(row: dict[str, object]) -> DailyLog:
    raw_totals = row.get("category_totals") or {}
    raw_activities = row.get("activities") or []
    return DailyLog(
        date=str(row["date"]),
        activities=tuple(_parse_activity(item) for item in raw_activities),
        total_carbon_kg=float(row.get("total_carbon_kg", 0.0)),
        budget_kg=float(row.get("budget_kg", 0.0)),
        category_totals={
            category: float(raw_totals.get(str(category), 0.0))
            for category in ActivityCategory
        },
    )


def _parse_scan(row: dict[str, object]) -> ScanRecord:
    timestamp = datetime.fromisoformat(str(row["timestamp"]))
    return ScanRecord(
        id=str(row["id"]),
        timestamp=timestamp,
        date=str(row.get("date") or get_date_string(timestamp)),
        objects=tuple(_parse_object(item) for item in row.get("objects") or []),
        total_carbon_kg=float(row.get("total_carbon_kg", 0.0)),
    )


def _dump_object(obj: ScannedObject) -> dict[str, object]:
    return {
        "id": obj.id,
        "name": obj.name,
        "carbon_kg": obj.carbon_kg,
        "severity": str(obj.severity),
        "description": obj.description,
    }


def _parse_object(item: dict[str, object]) -> ScannedObject:
    return ScannedObject(
        id=str(item["id"]),
        name=str(item.get("name", "")),
        carbon_kg=float(item.get("carbon_kg", 0.0)),
        severity=Severity(item.get("severity", Severity.LOW)),
        description=item.get("description"),
    )


def _dump_activity(activity: Activity) -> dict[str, object]:
    return {
        "id": activity.id,
        "timestamp": activity.timestamp.isoformat(),
        "category": str(activity.category),
        "name": activity.name,
        "carbon_kg": activity.carbon_kg,
        "quantity": activity.quantity,
        "unit": activity.unit,
        "eco_score": activity.eco_score,
        "notes": activity.notes,
        "details": _dump_details(activity.details),
    }


def _parse_activity(item: dict[str, object]) -> Activity:
    category = ActivityCategory(item["category"])
    return Activity(
        id=str(item["id"]),
        timestamp=datetime.fromisoformat(str(item["timestamp"])),
        category=category,
        name=str(item.get("name", "")),
        carbon_kg=float(item.get("carbon_kg", 0.0)),
        quantity=float(item.get("quantity", 1)),
        unit=str(item.get("unit", "")),
        eco_score=int(item.get("eco_score", 0)),
        notes=item.get("notes"),
        details=_parse_details(category, item.get("details")),
    )


def _dump_details(details: ActivityDetails | None) -> dict[str, object] | None:
    match details:
        case None:
            return None
        case ProductDetails(objects=objects, brand=brand, materials=materials):
            return {
                "objects": [_dump_object(obj) for obj in objects],
                "brand": brand,
                "materials": list(materials),
            }
        case FoodDetails(food_category=food_category, meal_type=meal_type):
            return {"food_category": food_category, "meal_type": meal_type}
        case TransportDetails():
            return {
                "mode": details.mode,
                "distance_km": details.distance_km,
                "duration_minutes": details.duration_minutes,
                "start_location": details.start_location,
                "end_location": details.end_location,
                "is_recurring": details.is_recurring,
            }
        case EnergyDetails():
            return {
                "energy_type": details.energy_type,
                "energy_kwh": details.energy_kwh,
                "period": details.period,
                "is_estimated": details.is_estimated,
            }
    raise TypeError(f"Unknown activity details: {type(details).__name__}")


def _parse_details(
    category: ActivityCategory, raw: dict[str, object] | None
) -> ActivityDetails | None:
    if not raw:
        return None
    match category:
        case ActivityCategory.PRODUCT:
            return ProductDetails(
                objects=tuple(_parse_object(obj) for obj in raw.get("objects") or []),
                brand=raw.get("brand"),
                materials=tuple(raw.get("materials") or ()),
            )
        case ActivityCategory.FOOD:
            return FoodDetails(
                food_category=str(raw.get("food_category", "")),
                meal_type=raw.get("meal_type"),
            )
        case ActivityCategory.TRANSPORT:
            return TransportDetails(
                mode=str(raw.get("mode", "")),
                distance_km=float(raw.get("distance_km", 0.0)),
                duration_minutes=raw.get("duration_minutes"),
                start_location=raw.get("start_location"),
                end_location=raw.get("end_location"),
                is_recurring=bool(raw.get("is_recurring", False)),
            )
        case ActivityCategory.ENERGY:
            return EnergyDetails(
                energy_type=str(raw.get("energy_type", "")),
                energy_kwh=float(raw.get("energy_kwh", 0.0)),
                period=str(raw.get("period", "daily")),
                is_estimated=bool(raw.get("is_estimated", False)),
            )
    raise ValueError(f"Unknown activity category: {category}")
