"""Product scans: folding detected objects into activities and scan history."""

from collections import Counter
from collections.abc import Sequence
from datetime import datetime

from carbon_ledger.domain.activities import (
    ActivityCategory,
    ActivityDraft,
    ProductDetails,
    ScannedObject,
)
from carbon_ledger.domain.ledger import HistorySummary, ScanRecord

DEFAULT_SCAN_HISTORY_LIMIT = 500
TOP_OBJECT_TYPES = 5
_NAMED_OBJECTS = 2


def scan_activity_name(objects: Sequence[ScannedObject]) -> str:
    """Name a scan after its first objects, e.g. ``Laptop, Mug +3 more``."""
    name = ", ".join(obj.name for obj in objects[:_NAMED_OBJECTS])
    if len(objects) > _NAMED_OBJECTS:
        name += f" +{len(objects) - _NAMED_OBJECTS} more"
    return name


def build_product_draft(objects: Sequence[ScannedObject]) -> ActivityDraft:
    """Aggregate every scanned object into one product activity."""
    total = sum(obj.carbon_kg for obj in objects)
    return ActivityDraft(
        category=ActivityCategory.PRODUCT,
        name=scan_activity_name(objects),
        carbon_kg=total,
        quantity=len(objects),
        unit="items",
        eco_score=max(0, 100 - round(total / 3)),
        details=ProductDetails(objects=tuple(objects)),
    )


def build_scan_record(
    scan_id: str,
    timestamp: datetime,
    date_key: str,
    objects: Sequence[ScannedObject],
) -> ScanRecord:
    """Return a history record for a scan logged on date_key."""
    return ScanRecord(
        id=scan_id,
        timestamp=timestamp,
        date=date_key,
        objects=tuple(objects),
        total_carbon_kg=sum(obj.carbon_kg for obj in objects),
    )


def scans_for_date(history: Sequence[ScanRecord], date_key: str) -> list[ScanRecord]:
    """Return scans logged on the date key."""
    return [scan for scan in history if scan.date == date_key]


def summarize_history(history: Sequence[ScanRecord]) -> HistorySummary:
    """Summarize scan counts, carbon and the most frequent objects."""
    if not history:
        return HistorySummary(
            total_scans=0,
            total_objects=0,
            total_carbon_kg=0.0,
            object_counts={},
            top_object_types=[],
            average_carbon_per_scan=0.0,
        )
    counts: Counter[str] = Counter()
    total_objects = 0
    total_carbon = 0.0
    for scan in history:
        total_objects += len(scan.objects)
        total_carbon += scan.total_carbon_kg
        counts.update(obj.name for obj in scan.objects)
    return HistorySummary(
        total_scans=len(history),
        total_objects=total_objects,
        total_carbon_kg=round(total_carbon, 2),
        object_counts=dict(counts),
        top_object_types=[name for name, _ in counts.most_common(TOP_OBJECT_TYPES)],
        average_carbon_per_scan=round(total_carbon / len(history), 2),
    )
