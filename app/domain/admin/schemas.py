"""Admin schemas - Pydantic models for shop settings and repair templates"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import require_text


class SettingsResponse(BaseModel):
    hourly_rate: Decimal
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SettingsUpdate(BaseModel):
    hourly_rate: Decimal = Field(gt=0)


class RepairTemplateCreate(BaseModel):
    name: str
    description: Optional[str] = None
    estimated_minutes: int = Field(default=0, ge=0)
    vehicle_type: Literal["bike", "scooter", "both"] = "both"
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return require_text(v, "Template name")


class RepairTemplateUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    estimated_minutes: Optional[int] = Field(default=None, ge=0)
    vehicle_type: Optional[Literal["bike", "scooter", "both"]] = None
    is_active: Optional[bool] = None


class RepairTemplateResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    estimated_minutes: int
    vehicle_type: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
