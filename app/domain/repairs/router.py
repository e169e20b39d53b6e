"""Repair router - FastAPI endpoints for intake and technician work"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ...auth import AuthSession, get_current_session, get_current_user
from ...database import get_db
from ...models import User
from ...realtime import REPAIRS, change_feed
from .schemas import (
    ChecklistResponseDetail,
    IntakeRequest,
    RepairDetailResponse,
    RepairListResponse,
    RepairResponse,
    SaveRepairDetailsRequest,
    StatusChangeResponse,
    StatusUpdate,
)
from .service import RepairService
from .workflow import RepairStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/repairs", tags=["Repairs"])


def get_repair_service(db: Session = Depends(get_db)) -> RepairService:
    """Dependency injection for RepairService"""
    return RepairService(db)


def build_detail_response(repair, defects) -> RepairDetailResponse:
    """Repair plus its 'ng' responses flattened with their catalog items"""
    base = RepairResponse.model_validate(repair)
    return RepairDetailResponse(
        **base.model_dump(),
        defects=[
            ChecklistResponseDetail(
                id=response.id,
                checklist_item_id=response.checklist_item_id,
                status=response.status,
                technician_notes=response.technician_notes,
                category=response.checklist_item.category,
                item_name=response.checklist_item.item_name,
                estimated_labor_minutes=response.checklist_item.estimated_labor_minutes,
                estimated_parts_cost=response.checklist_item.estimated_parts_cost,
                tutorial_video_url=response.checklist_item.tutorial_video_url,
            )
            for response in defects
        ],
    )


# ============================================================================
# TECHNICIAN VIEWS
# ============================================================================


@router.get("", response_model=RepairListResponse)
async def get_repairs(
    status: Optional[RepairStatus] = Query(None),
    current_user: User = Depends(get_current_user),
    service: RepairService = Depends(get_repair_service),
):
    """List repairs, soonest desired return date first"""
    listing = service.get_repairs(status)
    return RepairListResponse(
        repairs=[RepairResponse.model_validate(r) for r in listing["repairs"]],
        total_active_minutes=listing["total_active_minutes"],
        status_counts=listing["status_counts"],
    )


@router.get("/changes")
async def stream_repair_changes(
    request: Request,
    current_user: User = Depends(get_current_user),
):
    """Server-sent events: one message per repairs change, re-fetch on each"""
    user_email = current_user.email

    async def event_stream():
        logger.info(f"📡 {user_email} subscribed to repair changes")
        async for cue in change_feed.subscribe(REPAIRS):
            if await request.is_disconnected():
                break
            yield f"data: {json.dumps(cue)}\n\n"
        logger.info(f"📴 {user_email} left repair changes")

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.get("/{repair_id}", response_model=RepairDetailResponse)
async def get_repair(
    repair_id: int,
    current_user: User = Depends(get_current_user),
    service: RepairService = Depends(get_repair_service),
):
    """Repair with client, vehicle and the items to fix"""
    repair = service.get_repair(repair_id)
    return build_detail_response(repair, service.get_defects(repair_id))


# ============================================================================
# INTAKE
# ============================================================================


@router.post("", response_model=RepairDetailResponse, status_code=201)
async def create_repair(
    data: IntakeRequest,
    current_user: User = Depends(get_current_user),
    service: RepairService = Depends(get_repair_service),
):
    """Register a repair from the vendor diagnostic"""
    repair = service.create_repair(data)
    return build_detail_response(repair, service.get_defects(repair.id))


# ============================================================================
# WORKFLOW
# ============================================================================


@router.patch("/{repair_id}/status", response_model=StatusChangeResponse)
async def update_repair_status(
    repair_id: int,
    data: StatusUpdate,
    session: AuthSession = Depends(get_current_session),
    service: RepairService = Depends(get_repair_service),
):
    """Move a repair to another status; completing it notifies client and shop"""
    result = await service.change_status(session, repair_id, data.status)
    return StatusChangeResponse(
        repair=RepairResponse.model_validate(result["repair"]),
        previous_status=result["previous_status"],
        notifications=result["notifications"],
    )


@router.put("/{repair_id}/details", response_model=RepairDetailResponse)
async def save_repair_details(
    repair_id: int,
    data: SaveRepairDetailsRequest,
    current_user: User = Depends(get_current_user),
    service: RepairService = Depends(get_repair_service),
):
    """Save the final quote and technician notes in one go"""
    repair = service.save_details(repair_id, data)
    return build_detail_response(repair, service.get_defects(repair_id))
