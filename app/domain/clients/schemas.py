"""Client domain schemas - Pydantic models for validation"""

from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import normalize_phone, require_text, validate_email


class ClientIntake(BaseModel):
    """Client facts collected at intake"""

    name: str
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return require_text(v, "Client name")

    @field_validator("email")
    @classmethod
    def validate_client_email(cls, v):
        if v is None or not v.strip():
            return None
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return normalize_phone(v)


class VehicleIntake(BaseModel):
    """Vehicle facts collected at intake"""

    type: Literal["bike", "scooter"] = "bike"
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None


class ClientResponse(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True


class VehicleResponse(BaseModel):
    id: int
    type: str
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None

    class Config:
        from_attributes = True
