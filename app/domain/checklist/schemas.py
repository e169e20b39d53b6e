"""Checklist catalog schemas - Pydantic models for validation"""

from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import require_text

Applicability = Literal["bike", "scooter", "both"]


class ChecklistItemCreate(BaseModel):
    """Schema for creating a checklist item"""

    category: str
    item_name: str
    estimated_labor_minutes: int = Field(default=0, ge=0)
    estimated_parts_cost: Decimal = Field(default=Decimal("0"), ge=0)
    order_index: int = 0
    vehicle_type: Applicability = "both"
    tutorial_video_url: Optional[str] = None

    @field_validator("category", "item_name")
    @classmethod
    def validate_required_text(cls, v, info):
        return require_text(v, info.field_name.replace("_", " ").capitalize())


class ChecklistItemUpdate(BaseModel):
    """Schema for updating a checklist item; only provided fields change"""

    category: Optional[str] = None
    item_name: Optional[str] = None
    estimated_labor_minutes: Optional[int] = Field(default=None, ge=0)
    estimated_parts_cost: Optional[Decimal] = Field(default=None, ge=0)
    order_index: Optional[int] = None
    vehicle_type: Optional[Applicability] = None
    tutorial_video_url: Optional[str] = None


class ChecklistItemResponse(BaseModel):
    id: int
    category: str
    item_name: str
    estimated_labor_minutes: int
    estimated_parts_cost: Decimal
    order_index: int
    vehicle_type: str
    tutorial_video_url: Optional[str] = None

    class Config:
        from_attributes = True
