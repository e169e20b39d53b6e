"""Repair service - intake, workflow transitions and technician saves"""

import logging
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import DETAILED_QUOTE_FEE
from ...models import Repair, RepairChecklist
from ...realtime import REPAIRS, change_feed
from ...services.notification_service import send_completion_notifications
from ..clients.service import ClientService
from ..quotes.service import QuoteService
from .repository import RepairRepository
from .schemas import IntakeRequest, SaveRepairDetailsRequest
from .workflow import (
    ActionInProgress,
    ClientDecision,
    RepairStatus,
    is_closed,
    is_completion_edge,
    repair_action_guard,
)

logger = logging.getLogger(__name__)

STATUS_CHANGE = "status_change"
SAVE_DETAILS = "save_details"


class RepairService:
    """Service layer for repair business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RepairRepository()
        self.clients = ClientService(db)
        self.quotes = QuoteService(db)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_repairs(self, status: Optional[RepairStatus] = None) -> dict:
        """Technician listing with the workload summary"""
        repairs = self.repo.get_repairs(self.db, status.value if status else None)
        return {
            "repairs": repairs,
            "total_active_minutes": self.repo.get_total_active_minutes(self.db),
            "status_counts": self.repo.get_status_counts(self.db),
        }

    def get_repair(self, repair_id: int) -> Repair:
        repair = self.repo.get_repair_by_id(self.db, repair_id)
        if not repair:
            raise HTTPException(status_code=404, detail="Repair not found")
        return repair

    def get_defects(self, repair_id: int) -> list[RepairChecklist]:
        return self.repo.get_defect_responses(self.db, repair_id)

    # ------------------------------------------------------------------
    # Intake
    # ------------------------------------------------------------------

    def create_repair(self, data: IntakeRequest) -> Repair:
        """
        Register a repair from the vendor intake.

        Client, vehicle, repair and checklist responses are written in a single
        transaction; nothing is kept if any step fails.
        """
        _, breakdown = self.quotes.quote(data.vehicle.type, data.responses)

        is_max_price = data.client_decision == ClientDecision.MAX_PRICE
        is_detailed = data.client_decision == ClientDecision.DETAILED_QUOTE

        try:
            client = self.clients.upsert_intake_client(
                name=data.client.name, phone=data.client.phone, email=data.client.email
            )
            vehicle = self.clients.register_vehicle(
                client,
                type=data.vehicle.type,
                brand=data.vehicle.brand,
                model=data.vehicle.model,
                serial_number=data.vehicle.serial_number,
            )
            repair = self.repo.create_repair(
                self.db,
                client_id=client.id,
                vehicle_id=vehicle.id,
                vendor_name=data.vendor_name,
                client_issue=data.client_issue,
                desired_return_date=data.desired_return_date,
                status=RepairStatus.INITIAL.value,
                estimated_labor_minutes=breakdown.estimated_labor_minutes,
                preliminary_quote=breakdown.preliminary_quote,
                client_decision=data.client_decision.value,
                max_price=data.max_price if is_max_price else None,
                detailed_quote_fee=DETAILED_QUOTE_FEE if is_detailed else Decimal(0),
            )
            self.repo.add_responses(
                self.db,
                repair,
                {item_id: verdict.value for item_id, verdict in data.responses.items()},
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to save intake for {data.client.name}: {e}")
            raise HTTPException(
                status_code=500, detail="Failed to save the repair. Please try again."
            ) from e

        self.db.refresh(repair)
        logger.info(
            f"🆕 Repair {repair.id} registered by {data.vendor_name}: "
            f"{breakdown.defect_count} defects, {breakdown.preliminary_quote} €"
        )
        change_feed.publish(REPAIRS, "INSERT")
        return repair

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    async def change_status(self, session, repair_id: int, new_status: RepairStatus) -> dict:
        """
        Move a repair to a new status and run the completion side effect on the
        edge into 'completed'.

        Raises:
            HTTPException 404: unknown repair
            HTTPException 409: a status change for this repair is already running
            HTTPException 500: the write failed; detail carries the stored status
        """
        try:
            with repair_action_guard.hold(STATUS_CHANGE, repair_id):
                return await self._change_status(session, repair_id, new_status)
        except ActionInProgress as e:
            raise HTTPException(
                status_code=409, detail="A status change is already in progress for this repair"
            ) from e

    async def _change_status(self, session, repair_id: int, new_status: RepairStatus) -> dict:
        repair = self.get_repair(repair_id)
        previous_status = RepairStatus(repair.status)

        if previous_status == new_status:
            logger.debug(f"Repair {repair_id} already {new_status.value}, nothing to do")
            return {"repair": repair, "previous_status": previous_status, "notifications": None}

        try:
            repair.status = new_status.value
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            stored_status = self.repo.get_status(self.db, repair_id)
            logger.error(
                f"❌ Failed to move repair {repair_id} to {new_status.value}: {e} "
                f"(stored status: {stored_status})"
            )
            raise HTTPException(
                status_code=500,
                detail={"message": "Failed to update the repair status", "status": stored_status},
            ) from e

        self.db.refresh(repair)
        logger.info(f"🔁 Repair {repair_id}: {previous_status.value} -> {new_status.value}")
        change_feed.publish(REPAIRS, "UPDATE")

        notifications = None
        if is_completion_edge(previous_status, new_status):
            notifications = await send_completion_notifications(session, repair)

        return {
            "repair": repair,
            "previous_status": previous_status,
            "notifications": notifications,
        }

    # ------------------------------------------------------------------
    # Technician notes and final quote
    # ------------------------------------------------------------------

    def save_details(self, repair_id: int, data: SaveRepairDetailsRequest) -> Repair:
        """
        Save the final quote and the technician notes of a repair.

        The final quote is always written (None clears it). Notes that are
        blank after trimming are ignored. Notes may only target 'ng' responses
        of this repair and only while the repair is open.
        """
        try:
            with repair_action_guard.hold(SAVE_DETAILS, repair_id):
                return self._save_details(repair_id, data)
        except ActionInProgress as e:
            raise HTTPException(
                status_code=409, detail="A save is already in progress for this repair"
            ) from e

    def _save_details(self, repair_id: int, data: SaveRepairDetailsRequest) -> Repair:
        repair = self.get_repair(repair_id)

        notes = {
            response_id: text.strip()
            for response_id, text in data.technician_notes.items()
            if text and text.strip()
        }

        if notes and is_closed(repair.status):
            raise HTTPException(
                status_code=409, detail="Notes can no longer be changed on a completed repair"
            )

        responses = self.repo.get_responses_by_ids(self.db, repair_id, list(notes))
        annotatable = {r.id: r for r in responses if r.status == "ng"}
        rejected = sorted(set(notes) - set(annotatable))
        if rejected:
            raise HTTPException(
                status_code=400,
                detail=f"Checklist responses not found among this repair's defects: {rejected}",
            )

        try:
            repair.final_quote = data.final_quote
            for response_id, text in notes.items():
                annotatable[response_id].technician_notes = text
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to save details of repair {repair_id}: {e}")
            raise HTTPException(
                status_code=500, detail="Failed to save the repair. Please try again."
            ) from e

        self.db.refresh(repair)
        logger.info(
            f"💾 Repair {repair_id} saved: final quote {repair.final_quote}, {len(notes)} notes"
        )
        change_feed.publish(REPAIRS, "UPDATE")
        return repair
