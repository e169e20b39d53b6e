"""Admin service - Business logic for shop settings and repair templates"""

import logging
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import DEFAULT_HOURLY_RATE
from ...models import AdminSettings, RepairTemplate
from .repository import AdminRepository
from .schemas import RepairTemplateCreate, RepairTemplateUpdate, SettingsUpdate

logger = logging.getLogger(__name__)


def get_hourly_rate(db: Session) -> Decimal:
    """Labor rate from the settings row, or the configured default when none exists"""
    settings = AdminRepository.get_settings(db)
    if settings is None or settings.hourly_rate is None:
        return DEFAULT_HOURLY_RATE
    return Decimal(str(settings.hourly_rate))


class AdminService:
    """Service layer for admin business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AdminRepository()

    def get_settings(self) -> AdminSettings:
        """Current settings; an unsaved default row when nothing was stored yet"""
        settings = self.repo.get_settings(self.db)
        if settings is None:
            return AdminSettings(hourly_rate=DEFAULT_HOURLY_RATE)
        return settings

    def update_settings(self, data: SettingsUpdate) -> AdminSettings:
        try:
            settings = self.repo.get_settings(self.db)
            if settings is None:
                settings = self.repo.create_settings(self.db, hourly_rate=data.hourly_rate)
            else:
                settings = self.repo.update_settings(
                    self.db, settings, hourly_rate=data.hourly_rate
                )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to save hourly rate: {e}")
            raise HTTPException(status_code=500, detail="Failed to save settings") from e

        logger.info(f"💶 Hourly rate set to {settings.hourly_rate}")
        return settings

    def get_templates(self, active_only: bool = False) -> list[RepairTemplate]:
        return self.repo.get_templates(self.db, active_only)

    def get_template(self, template_id: int) -> RepairTemplate:
        template = self.repo.get_template_by_id(self.db, template_id)
        if not template:
            raise HTTPException(status_code=404, detail="Repair template not found")
        return template

    def create_template(self, data: RepairTemplateCreate) -> RepairTemplate:
        try:
            template = self.repo.create_template(self.db, **data.model_dump())
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create repair template: {e}")
            raise HTTPException(status_code=500, detail="Failed to create repair template") from e
        logger.info(f"🆕 Created repair template {template.id}: {template.name}")
        return template

    def update_template(self, template_id: int, data: RepairTemplateUpdate) -> RepairTemplate:
        template = self.get_template(template_id)
        try:
            return self.repo.update_template(
                self.db, template, **data.model_dump(exclude_unset=True)
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update repair template {template_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update repair template") from e

    def delete_template(self, template_id: int) -> None:
        template = self.get_template(template_id)
        try:
            self.repo.delete_template(self.db, template)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete repair template {template_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete repair template") from e
        logger.info(f"🗑️ Deleted repair template {template_id}")
