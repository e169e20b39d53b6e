"""Admin repository - Database operations for shop settings and repair templates"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import AdminSettings, RepairTemplate


class AdminRepository:
    """Repository for admin settings and repair template operations"""

    @staticmethod
    def get_settings(db: Session) -> Optional[AdminSettings]:
        """The settings table holds a single row; the oldest wins if there are more"""
        return db.query(AdminSettings).order_by(AdminSettings.id.asc()).first()

    @staticmethod
    def create_settings(db: Session, **data) -> AdminSettings:
        settings = AdminSettings(**data)
        db.add(settings)
        db.commit()
        db.refresh(settings)
        return settings

    @staticmethod
    def update_settings(db: Session, settings: AdminSettings, **updates) -> AdminSettings:
        for key, value in updates.items():
            if value is not None and hasattr(settings, key):
                setattr(settings, key, value)
        db.commit()
        db.refresh(settings)
        return settings

    @staticmethod
    def get_templates(db: Session, active_only: bool = False) -> list[RepairTemplate]:
        query = db.query(RepairTemplate)
        if active_only:
            query = query.filter(RepairTemplate.is_active.is_(True))
        return query.order_by(RepairTemplate.name.asc()).all()

    @staticmethod
    def get_template_by_id(db: Session, template_id: int) -> Optional[RepairTemplate]:
        return db.query(RepairTemplate).filter(RepairTemplate.id == template_id).first()

    @staticmethod
    def create_template(db: Session, **data) -> RepairTemplate:
        template = RepairTemplate(**data)
        db.add(template)
        db.commit()
        db.refresh(template)
        return template

    @staticmethod
    def update_template(db: Session, template: RepairTemplate, **updates) -> RepairTemplate:
        for key, value in updates.items():
            if value is not None and hasattr(template, key):
                setattr(template, key, value)
        db.commit()
        db.refresh(template)
        return template

    @staticmethod
    def delete_template(db: Session, template: RepairTemplate) -> None:
        db.delete(template)
        db.commit()
