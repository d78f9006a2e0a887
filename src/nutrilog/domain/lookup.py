"""Models for remote catalog lookups."""

from dataclasses import dataclass

from nutrilog.domain.nutrition import NutritionalInfo


@dataclass(frozen=True)
class RemoteFoodSummary:
    """Search hit from FoodData Central."""

    fdc_id: int
    description: str
    brand_owner: str | None
    brand_name: str | None
    data_type: str | None


@dataclass(frozen=True)
class RemoteFoodDetails:
    """FoodData Central food with per-100g nutrients."""

    summary: RemoteFoodSummary
    nutrition_per_100g: NutritionalInfo
    serving_size_g: float | None
    barcode: str | None
