"""Quote schemas - Pydantic models for live quoting and quote emails"""

from decimal import Decimal

from pydantic import BaseModel, Field

from ..clients.schemas import ClientIntake, VehicleIntake
from .engine import ChecklistVerdict, QuoteBreakdown, VehicleType, format_labor_time


class QuotePreviewRequest(BaseModel):
    vehicle_type: VehicleType = VehicleType.BIKE
    responses: dict[int, ChecklistVerdict] = Field(default_factory=dict)


class QuotePreviewResponse(BaseModel):
    estimated_labor_minutes: int
    labor_time: str
    parts_cost: Decimal
    labor_cost: Decimal
    preliminary_quote: Decimal
    defect_count: int
    hourly_rate: Decimal

    @classmethod
    def from_breakdown(cls, breakdown: QuoteBreakdown) -> "QuotePreviewResponse":
        return cls(
            estimated_labor_minutes=breakdown.estimated_labor_minutes,
            labor_time=format_labor_time(breakdown.estimated_labor_minutes),
            parts_cost=breakdown.parts_cost,
            labor_cost=breakdown.labor_cost,
            preliminary_quote=breakdown.preliminary_quote,
            defect_count=breakdown.defect_count,
            hourly_rate=breakdown.hourly_rate,
        )


class QuoteEmailRequest(BaseModel):
    """Form contents needed to email a preliminary quote before the repair is saved"""

    client: ClientIntake
    vehicle: VehicleIntake = Field(default_factory=VehicleIntake)
    responses: dict[int, ChecklistVerdict] = Field(default_factory=dict)


class QuoteEmailResponse(BaseModel):
    sent: bool
    quote: QuotePreviewResponse
