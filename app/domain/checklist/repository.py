"""Checklist repository - Database operations for the checklist catalog"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import ChecklistItem, RepairChecklist


class ChecklistRepository:
    """Repository for checklist item database operations"""

    @staticmethod
    def get_items(db: Session) -> list[ChecklistItem]:
        """All items, ordered by category then order index"""
        return (
            db.query(ChecklistItem)
            .order_by(ChecklistItem.category.asc(), ChecklistItem.order_index.asc())
            .all()
        )

    @staticmethod
    def get_item_by_id(db: Session, item_id: int) -> Optional[ChecklistItem]:
        return db.query(ChecklistItem).filter(ChecklistItem.id == item_id).first()

    @staticmethod
    def create_item(db: Session, **item_data) -> ChecklistItem:
        item = ChecklistItem(**item_data)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def update_item(db: Session, item: ChecklistItem, **updates) -> ChecklistItem:
        """Update an item with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(item, key):
                setattr(item, key, value)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def is_item_in_use(db: Session, item_id: int) -> bool:
        return (
            db.query(RepairChecklist.id)
            .filter(RepairChecklist.checklist_item_id == item_id)
            .first()
            is not None
        )

    @staticmethod
    def delete_item(db: Session, item: ChecklistItem) -> None:
        db.delete(item)
        db.commit()
