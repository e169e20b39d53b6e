"""Checklist service - Business logic for the diagnostic checklist catalog"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import ChecklistItem
from ...realtime import CHECKLIST_ITEMS, change_feed
from ..quotes.engine import CatalogItem, VehicleType, applicable_items
from .repository import ChecklistRepository
from .schemas import ChecklistItemCreate, ChecklistItemUpdate

logger = logging.getLogger(__name__)


class ChecklistService:
    """Service layer for checklist catalog business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ChecklistRepository()

    def get_items(self) -> list[ChecklistItem]:
        return self.repo.get_items(self.db)

    def get_items_for_vehicle_type(self, vehicle_type: VehicleType) -> list[ChecklistItem]:
        """Catalog shown to the vendor for one vehicle type"""
        return applicable_items(self.repo.get_items(self.db), VehicleType(vehicle_type))

    def load_catalog(self, vehicle_type: VehicleType) -> list[CatalogItem]:
        """Immutable snapshot of the applicable catalog, for quoting"""
        return [
            CatalogItem.from_model(item)
            for item in self.get_items_for_vehicle_type(vehicle_type)
        ]

    def get_item(self, item_id: int) -> ChecklistItem:
        item = self.repo.get_item_by_id(self.db, item_id)
        if not item:
            raise HTTPException(status_code=404, detail="Checklist item not found")
        return item

    def create_item(self, data: ChecklistItemCreate) -> ChecklistItem:
        try:
            item = self.repo.create_item(self.db, **data.model_dump())
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create checklist item: {e}")
            raise HTTPException(status_code=500, detail="Failed to create checklist item") from e

        logger.info(f"🆕 Created checklist item {item.id}: {item.category} / {item.item_name}")
        change_feed.publish(CHECKLIST_ITEMS, "INSERT")
        return item

    def update_item(self, item_id: int, data: ChecklistItemUpdate) -> ChecklistItem:
        item = self.get_item(item_id)
        try:
            item = self.repo.update_item(self.db, item, **data.model_dump(exclude_unset=True))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update checklist item {item_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update checklist item") from e

        change_feed.publish(CHECKLIST_ITEMS, "UPDATE")
        return item

    def delete_item(self, item_id: int) -> None:
        """Delete an item that no repair has answered yet"""
        item = self.get_item(item_id)
        if self.repo.is_item_in_use(self.db, item_id):
            raise HTTPException(
                status_code=409,
                detail="Checklist item is referenced by existing repairs and cannot be deleted",
            )
        try:
            self.repo.delete_item(self.db, item)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete checklist item {item_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete checklist item") from e

        logger.info(f"🗑️ Deleted checklist item {item_id}")
        change_feed.publish(CHECKLIST_ITEMS, "DELETE")
