"""
Quote engine for the diagnostic checklist.

Turns a vendor's checklist answers into a labor-time estimate and a
preliminary price. Everything here is pure: callers load the catalog and the
hourly rate, this module only does arithmetic on them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Mapping, Optional

from ...config import DEFAULT_HOURLY_RATE

CENT = Decimal("0.01")
MINUTES_PER_HOUR = Decimal(60)


class VehicleType(str, Enum):
    BIKE = "bike"
    SCOOTER = "scooter"


class Applicability(str, Enum):
    BIKE = "bike"
    SCOOTER = "scooter"
    BOTH = "both"


class ChecklistVerdict(str, Enum):
    OK = "ok"
    NG = "ng"


@dataclass(frozen=True)
class CatalogItem:
    """Snapshot of a checklist item as seen by one intake session"""

    id: int
    category: str
    item_name: str
    estimated_labor_minutes: int
    estimated_parts_cost: Decimal
    order_index: int = 0
    vehicle_type: str = Applicability.BOTH.value
    tutorial_video_url: Optional[str] = None

    @classmethod
    def from_model(cls, item) -> "CatalogItem":
        return cls(
            id=item.id,
            category=item.category,
            item_name=item.item_name,
            estimated_labor_minutes=int(item.estimated_labor_minutes or 0),
            estimated_parts_cost=Decimal(str(item.estimated_parts_cost or 0)),
            order_index=item.order_index or 0,
            vehicle_type=item.vehicle_type,
            tutorial_video_url=item.tutorial_video_url,
        )


@dataclass(frozen=True)
class QuoteBreakdown:
    estimated_labor_minutes: int
    parts_cost: Decimal
    labor_cost: Decimal
    preliminary_quote: Decimal
    defect_count: int
    hourly_rate: Decimal


def _verdict(value) -> Optional[str]:
    if value is None:
        return None
    return value.value if isinstance(value, ChecklistVerdict) else str(value)


def applicable_items(catalog: Iterable, vehicle_type) -> list:
    """Items whose applicability is the selected vehicle type or 'both'"""
    selected = vehicle_type.value if isinstance(vehicle_type, Enum) else str(vehicle_type)
    return [
        item
        for item in catalog
        if item.vehicle_type in (selected, Applicability.BOTH.value)
    ]


def defective_items(items: Iterable, responses: Mapping) -> list:
    """Items answered 'ng', each item counted once"""
    seen = set()
    defects = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        if _verdict(responses.get(item.id)) == ChecklistVerdict.NG.value:
            defects.append(item)
    return defects


def compute_quote(
    items: Iterable,
    responses: Mapping,
    hourly_rate: Decimal = DEFAULT_HOURLY_RATE,
) -> QuoteBreakdown:
    """
    Compute the preliminary quote for a set of checklist answers.

    Args:
        items: Catalog items shown to the vendor (already filtered by vehicle type)
        responses: Mapping of item id -> 'ok' / 'ng'; missing items count as not defective
        hourly_rate: Labor rate per hour

    Returns:
        QuoteBreakdown with minutes, parts, labor and total (rounded to cents)
    """
    rate = Decimal(str(hourly_rate))
    defects = defective_items(items, responses)

    minutes = sum(int(item.estimated_labor_minutes or 0) for item in defects)
    parts_cost = sum(
        (Decimal(str(item.estimated_parts_cost or 0)) for item in defects), Decimal(0)
    )
    labor_cost = Decimal(minutes) * rate / MINUTES_PER_HOUR

    return QuoteBreakdown(
        estimated_labor_minutes=minutes,
        parts_cost=parts_cost.quantize(CENT, rounding=ROUND_HALF_UP),
        labor_cost=labor_cost.quantize(CENT, rounding=ROUND_HALF_UP),
        preliminary_quote=(parts_cost + labor_cost).quantize(CENT, rounding=ROUND_HALF_UP),
        defect_count=len(defects),
        hourly_rate=rate,
    )


def format_labor_time(minutes: int) -> str:
    """Shop display format: 45min, 2h, 1h30"""
    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins}min"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h{mins:02d}"


def format_amount(amount: Optional[Decimal]) -> str:
    """12.5 -> '12.50 €'"""
    value = Decimal(str(amount or 0)).quantize(CENT, rounding=ROUND_HALF_UP)
    return f"{value} €"
