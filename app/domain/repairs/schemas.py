"""Repair domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import require_text
from ..clients.schemas import ClientIntake, ClientResponse, VehicleIntake, VehicleResponse
from ..quotes.engine import ChecklistVerdict
from .workflow import ClientDecision, RepairStatus


class IntakeRequest(BaseModel):
    """Everything the vendor captures for a new repair"""

    vendor_name: str
    client: ClientIntake
    vehicle: VehicleIntake = Field(default_factory=VehicleIntake)
    client_issue: str
    desired_return_date: Optional[date] = None
    # checklist item id -> ok / ng; unanswered items are simply absent
    responses: dict[int, ChecklistVerdict] = Field(default_factory=dict)
    client_decision: ClientDecision
    max_price: Optional[Decimal] = None

    @field_validator("vendor_name")
    @classmethod
    def validate_vendor_name(cls, v):
        return require_text(v, "Vendor name")

    @field_validator("client_issue")
    @classmethod
    def validate_client_issue(cls, v):
        return require_text(v, "Client issue")

    @model_validator(mode="after")
    def validate_max_price(self):
        if self.client_decision == ClientDecision.MAX_PRICE:
            if self.max_price is None or self.max_price <= 0:
                raise ValueError("A positive max_price is required when the client sets a maximum price")
        return self


class StatusUpdate(BaseModel):
    status: RepairStatus


class SaveRepairDetailsRequest(BaseModel):
    """Batch save of the technician's notes and the final quote"""

    # Required key; null clears the stored value
    final_quote: Optional[Decimal] = Field(..., ge=0)
    # checklist response id -> note text
    technician_notes: dict[int, str] = Field(default_factory=dict)


class ChecklistResponseDetail(BaseModel):
    id: int
    checklist_item_id: int
    status: str
    technician_notes: Optional[str] = None
    category: str
    item_name: str
    estimated_labor_minutes: int
    estimated_parts_cost: Decimal
    tutorial_video_url: Optional[str] = None


class RepairResponse(BaseModel):
    id: int
    vendor_name: str
    client_issue: str
    status: RepairStatus
    desired_return_date: Optional[date] = None
    estimated_labor_minutes: int
    preliminary_quote: Decimal
    client_decision: Optional[ClientDecision] = None
    max_price: Optional[Decimal] = None
    detailed_quote_fee: Decimal
    final_quote: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    client: ClientResponse
    vehicle: VehicleResponse

    class Config:
        from_attributes = True


class RepairDetailResponse(RepairResponse):
    defects: list[ChecklistResponseDetail] = []


class RepairListResponse(BaseModel):
    repairs: list[RepairResponse]
    total_active_minutes: int
    status_counts: dict[str, int]


class StatusChangeResponse(BaseModel):
    repair: RepairResponse
    previous_status: RepairStatus
    notifications: Optional[dict[str, Optional[bool]]] = None

