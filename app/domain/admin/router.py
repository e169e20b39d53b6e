"""Admin router - FastAPI endpoints for shop settings and repair templates"""

import logging

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import (
    RepairTemplateCreate,
    RepairTemplateResponse,
    RepairTemplateUpdate,
    SettingsResponse,
    SettingsUpdate,
)
from .service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


# ============================================================================
# SETTINGS
# ============================================================================


@router.get("/settings", response_model=SettingsResponse)
async def get_settings(
    current_user: User = Depends(get_current_user),
    service: AdminService = Depends(get_admin_service),
):
    """Get the shop settings (hourly labor rate)"""
    return service.get_settings()


@router.put("/settings", response_model=SettingsResponse)
async def update_settings(
    data: SettingsUpdate,
    current_user: User = Depends(get_current_user),
    service: AdminService = Depends(get_admin_service),
):
    """Update the hourly labor rate used by new quotes"""
    logger.info(f"⚙️ {current_user.email} updating hourly rate")
    return service.update_settings(data)


# ============================================================================
# REPAIR TEMPLATES
# ============================================================================


@router.get("/repair-templates", response_model=list[RepairTemplateResponse])
async def get_repair_templates(
    active_only: bool = Query(False),
    current_user: User = Depends(get_current_user),
    service: AdminService = Depends(get_admin_service),
):
    return service.get_templates(active_only)


@router.post("/repair-templates", response_model=RepairTemplateResponse, status_code=201)
async def create_repair_template(
    data: RepairTemplateCreate,
    current_user: User = Depends(get_current_user),
    service: AdminService = Depends(get_admin_service),
):
    return service.create_template(data)


@router.patch("/repair-templates/{template_id}", response_model=RepairTemplateResponse)
async def update_repair_template(
    template_id: int,
    data: RepairTemplateUpdate,
    current_user: User = Depends(get_current_user),
    service: AdminService = Depends(get_admin_service),
):
    return service.update_template(template_id, data)


@router.delete("/repair-templates/{template_id}", status_code=204)
async def delete_repair_template(
    template_id: int,
    current_user: User = Depends(get_current_user),
    service: AdminService = Depends(get_admin_service),
):
    service.delete_template(template_id)
    return Response(status_code=204)
