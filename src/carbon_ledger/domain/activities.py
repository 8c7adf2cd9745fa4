"""Domain models for logged carbon activities."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class ActivityCategory(StrEnum):
    """Ledger categories every activity belongs to."""

    FOOD = "food"
    TRANSPORT = "transport"
    PRODUCT = "product"
    ENERGY = "energy"


class Severity(StrEnum):
    """Carbon severity of a scanned object."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ScannedObject:
    """Single object detected in a product scan."""

    id: str
    name: str
    carbon_kg: float
    severity: Severity
    description: str | None = None


@dataclass(frozen=True)
class ProductDetails:
    """Scanned product payload."""

    objects: tuple[ScannedObject, ...] = ()
    brand: str | None = None
    materials: tuple[str, ...] = ()


@dataclass(frozen=True)
class FoodDetails:
    """Meal or grocery payload."""

    food_category: str
    meal_type: str | None = None


@dataclass(frozen=True)
class TransportDetails:
    """Trip payload."""

    mode: str
    distance_km: float
    duration_minutes: float | None = None
    start_location: str | None = None
    end_location: str | None = None
    is_recurring: bool = False


@dataclass(frozen=True)
class EnergyDetails:
    """Home energy usage payload."""

    energy_type: str
    energy_kwh: float
    period: str
    is_estimated: bool


ActivityDetails = ProductDetails | FoodDetails | TransportDetails | EnergyDetails


def details_category(details: ActivityDetails) -> ActivityCategory:
    """Return the category a details payload belongs to."""
    match details:
        case ProductDetails():
            return ActivityCategory.PRODUCT
        case FoodDetails():
            return ActivityCategory.FOOD
        case TransportDetails():
            return ActivityCategory.TRANSPORT
        case EnergyDetails():
            return ActivityCategory.ENERGY
    raise TypeError(f"Unknown activity details: {type(details).__name__}")


def _check_details(category: ActivityCategory, details: ActivityDetails | None) -> None:
    if details is None:
        return
    expected = details_category(details)
    if expected != category:
        raise ValueError(
            f"{type(details).__name__} cannot be attached to a {category} activity"
        )


@dataclass(frozen=True)
class ActivityDraft:
    """Activity submitted by a caller before it is persisted."""

    category: ActivityCategory
    name: str
    carbon_kg: float
    quantity: float = 1
    unit: str = ""
    eco_score: int = 0
    details: ActivityDetails | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        _check_details(self.category, self.details)


@dataclass(frozen=True)
class Activity:
    """Persisted activity. Never edited, only deleted."""

    id: str
    timestamp: datetime
    category: ActivityCategory
    name: str
    carbon_kg: float
    quantity: float = 1
    unit: str = ""
    eco_score: int = 0
    details: ActivityDetails | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        _check_details(self.category, self.details)

    @classmethod
    def from_draft(
        cls, draft: ActivityDraft, activity_id: str, timestamp: datetime
    ) -> "Activity":
        """Stamp a draft with its identity."""
        return cls(
            id=activity_id,
            timestamp=timestamp,
            category=draft.category,
            name=draft.name,
            carbon_kg=draft.carbon_kg,
            quantity=draft.quantity,
            unit=draft.unit,
            eco_score=draft.eco_score,
            details=draft.details,
            notes=draft.notes,
        )
