"""Checklist router - catalog listing for intake and admin maintenance"""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ..quotes.engine import VehicleType
from .schemas import ChecklistItemCreate, ChecklistItemResponse, ChecklistItemUpdate
from .service import ChecklistService

router = APIRouter(prefix="/checklist-items", tags=["Checklist"])
admin_router = APIRouter(prefix="/admin/checklist-items", tags=["Admin"])


def get_checklist_service(db: Session = Depends(get_db)) -> ChecklistService:
    """Dependency injection for ChecklistService"""
    return ChecklistService(db)


@router.get("", response_model=list[ChecklistItemResponse])
async def get_checklist_items(
    vehicle_type: VehicleType = Query(VehicleType.BIKE),
    current_user: User = Depends(get_current_user),
    service: ChecklistService = Depends(get_checklist_service),
):
    """Items applicable to a vehicle type, ordered by category then position"""
    return service.get_items_for_vehicle_type(vehicle_type)


@admin_router.get("", response_model=list[ChecklistItemResponse])
async def get_all_checklist_items(
    current_user: User = Depends(get_current_user),
    service: ChecklistService = Depends(get_checklist_service),
):
    return service.get_items()


@admin_router.post("", response_model=ChecklistItemResponse, status_code=201)
async def create_checklist_item(
    data: ChecklistItemCreate,
    current_user: User = Depends(get_current_user),
    service: ChecklistService = Depends(get_checklist_service),
):
    return service.create_item(data)


@admin_router.patch("/{item_id}", response_model=ChecklistItemResponse)
async def update_checklist_item(
    item_id: int,
    data: ChecklistItemUpdate,
    current_user: User = Depends(get_current_user),
    service: ChecklistService = Depends(get_checklist_service),
):
    return service.update_item(item_id, data)


@admin_router.delete("/{item_id}", status_code=204)
async def delete_checklist_item(
    item_id: int,
    current_user: User = Depends(get_current_user),
    service: ChecklistService = Depends(get_checklist_service),
):
    service.delete_item(item_id)
    return Response(status_code=204)
