"""Quote service - prices checklist answers against the stored catalog"""

import logging
from typing import Mapping

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...services.notification_service import send_preliminary_quote
from ..admin.service import get_hourly_rate
from ..checklist.service import ChecklistService
from .engine import CatalogItem, QuoteBreakdown, VehicleType, compute_quote
from .schemas import QuoteEmailRequest

logger = logging.getLogger(__name__)


class QuoteService:
    """Service layer for quoting"""

    def __init__(self, db: Session):
        self.db = db
        self.checklist = ChecklistService(db)

    def quote(
        self, vehicle_type: VehicleType, responses: Mapping
    ) -> tuple[list[CatalogItem], QuoteBreakdown]:
        """
        Price a response map for one vehicle type.

        Raises:
            HTTPException 400: when a response refers to an item that is unknown
                or not applicable to the vehicle type
        """
        catalog = self.checklist.load_catalog(vehicle_type)
        known_ids = {item.id for item in catalog}
        unknown = sorted(set(responses) - known_ids)
        if unknown:
            logger.warning(f"⚠️ Responses for items not applicable to {vehicle_type}: {unknown}")
            raise HTTPException(
                status_code=400,
                detail=f"Checklist items not applicable to this vehicle: {unknown}",
            )

        breakdown = compute_quote(catalog, responses, get_hourly_rate(self.db))
        return catalog, breakdown

    async def email_quote(self, session, data: QuoteEmailRequest) -> QuoteBreakdown:
        """Email the preliminary quote for the intake form contents"""
        if not data.client.email:
            raise HTTPException(status_code=400, detail="Client email is required to send the quote")

        _, breakdown = self.quote(data.vehicle.type, data.responses)

        sent = await send_preliminary_quote(
            session,
            to=data.client.email,
            client_name=data.client.name,
            vehicle_type=data.vehicle.type,
            vehicle_brand=data.vehicle.brand,
            vehicle_model=data.vehicle.model,
            breakdown=breakdown,
        )
        if not sent:
            raise HTTPException(
                status_code=502, detail="Unable to send the email. Please try again."
            )
        return breakdown
