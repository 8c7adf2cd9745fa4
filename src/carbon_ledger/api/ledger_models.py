"""Pydantic models for ledger API requests."""

from datetime import date
from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator

from carbon_ledger.domain.activities import (
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
from carbon_ledger.domain.settings import EnergyType
from carbon_ledger.services.energy import UsagePeriod


class ScannedObjectPayload(BaseModel):
    """Object detected by an external scanner."""

    id: str
    name: str
    carbon_kg: float
    severity: Severity = Severity.LOW
    description: str | None = None

    def to_domain(self) -> ScannedObject:
        return ScannedObject(
            id=self.id,
            name=self.name,
            carbon_kg=self.carbon_kg,
            severity=self.severity,
            description=self.description,
        )


class ProductPayload(BaseModel):
    kind: Literal["product"] = "product"
    objects: list[ScannedObjectPayload] = Field(default_factory=list)
    brand: str | None = None
    materials: list[str] = Field(default_factory=list)


class FoodPayload(BaseModel):
    kind: Literal["food"] = "food"
    food_category: str
    meal_type: str | None = None


class TransportPayload(BaseModel):
    kind: Literal["transport"] = "transport"
    mode: str
    distance_km: float = Field(ge=0)
    duration_minutes: float | None = None
    start_location: str | None = None
    end_location: str | None = None
    is_recurring: bool = False


class EnergyPayload(BaseModel):
    kind: Literal["energy"] = "energy"
    energy_type: str
    energy_kwh: float
    period: UsagePeriod = UsagePeriod.DAILY
    is_estimated: bool = False


DetailsPayload = Annotated[
    ProductPayload | FoodPayload | TransportPayload | EnergyPayload,
    Field(discriminator="kind"),
]


class ActivityRequest(BaseModel):
    """Activity submitted for logging."""

    category: ActivityCategory
    name: str
    carbon_kg: float
    quantity: float = 1
    unit: str = ""
    eco_score: int = Field(default=0, ge=0, le=100)
    notes: str | None = None
    details: DetailsPayload | None = None
    day: date | None = None

    @model_validator(mode="after")
    def _details_match_category(self) -> "ActivityRequest":
        if self.details is not None and self.details.kind != self.category:
            raise ValueError(
                f"{self.details.kind} details cannot be attached to a "
                f"{self.category} activity"
            )
        return self

    def to_draft(self) -> ActivityDraft:
        return ActivityDraft(
            category=self.category,
            name=self.name,
            carbon_kg=self.carbon_kg,
            quantity=self.quantity,
            unit=self.unit,
            eco_score=self.eco_score,
            details=_details_to_domain(self.details),
            notes=self.notes,
        )


class ProductScanRequest(BaseModel):
    """Objects detected in one scan."""

    objects: list[ScannedObjectPayload] = Field(min_length=1)
    day: date | None = None


class EnergyUsageRequest(BaseModel):
    """Utility usage reading for an energy activity."""

    energy_type: EnergyType
    amount: float = Field(gt=0)
    period: UsagePeriod = UsagePeriod.MONTHLY


class BaselineRequest(BaseModel):
    """Monthly utility amount for an energy baseline; zero disables it."""

    monthly_amount: float = Field(ge=0)
    days_in_period: int = Field(default=30, gt=0)


class SettingsPatch(BaseModel):
    """Editable settings fields."""

    daily_budget_kg: float | None = Field(default=None, ge=0)
    weekly_target_kg: float | None = Field(default=None, ge=0)
    occupants: int | None = Field(default=None, ge=1)


def _details_to_domain(payload: DetailsPayload | None) -> ActivityDetails | None:
    match payload:
        case None:
            return None
        case ProductPayload():
            return ProductDetails(
                objects=tuple(obj.to_domain() for obj in payload.objects),
                brand=payload.brand,
                materials=tuple(payload.materials),
            )
        case FoodPayload():
            return FoodDetails(
                food_category=payload.food_category, meal_type=payload.meal_type
            )
        case TransportPayload():
            return TransportDetails(
                mode=payload.mode,
                distance_km=payload.distance_km,
                duration_minutes=payload.duration_minutes,
                start_location=payload.start_location,
                end_location=payload.end_location,
                is_recurring=payload.is_recurring,
            )
        case EnergyPayload():
            return EnergyDetails(
                energy_type=payload.energy_type,
                energy_kwh=payload.energy_kwh,
                period=str(payload.period),
                is_estimated=payload.is_estimated,
            )
    raise TypeError(f"Unknown details payload: {type(payload).__name__}")
