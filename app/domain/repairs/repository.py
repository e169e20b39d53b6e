"""Repair repository - Database operations for repairs and their checklist responses"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import ChecklistItem, Repair, RepairChecklist


class RepairRepository:
    """Repository for repair database operations"""

    @staticmethod
    def get_repairs(db: Session, status: Optional[str] = None) -> list[Repair]:
        """
        Repairs with client and vehicle loaded, soonest desired return date
        first (repairs without one last), then newest first.
        """
        query = db.query(Repair).options(
            joinedload(Repair.client), joinedload(Repair.vehicle)
        )
        if status:
            query = query.filter(Repair.status == status)
        return query.order_by(
            Repair.desired_return_date.is_(None),
            Repair.desired_return_date.asc(),
            Repair.created_at.desc(),
            Repair.id.desc(),
        ).all()

    @staticmethod
    def get_repair_by_id(db: Session, repair_id: int) -> Optional[Repair]:
        return (
            db.query(Repair)
            .options(joinedload(Repair.client), joinedload(Repair.vehicle))
            .filter(Repair.id == repair_id)
            .first()
        )

    @staticmethod
    def get_status(db: Session, repair_id: int) -> Optional[str]:
        """Status as currently stored, bypassing the session's identity map"""
        row = db.query(Repair.status).filter(Repair.id == repair_id).first()
        return row[0] if row else None

    @staticmethod
    def get_defect_responses(db: Session, repair_id: int) -> list[RepairChecklist]:
        """'ng' responses of a repair with their catalog items, in catalog order"""
        return (
            db.query(RepairChecklist)
            .join(ChecklistItem, RepairChecklist.checklist_item_id == ChecklistItem.id)
            .options(joinedload(RepairChecklist.checklist_item))
            .filter(RepairChecklist.repair_id == repair_id, RepairChecklist.status == "ng")
            .order_by(ChecklistItem.category.asc(), ChecklistItem.order_index.asc())
            .all()
        )

    @staticmethod
    def get_responses_by_ids(
        db: Session, repair_id: int, response_ids: list[int]
    ) -> list[RepairChecklist]:
        return (
            db.query(RepairChecklist)
            .filter(
                RepairChecklist.repair_id == repair_id,
                RepairChecklist.id.in_(response_ids),
            )
            .all()
        )

    @staticmethod
    def get_total_active_minutes(db: Session) -> int:
        """Estimated labor minutes over every repair not yet completed"""
        total = (
            db.query(func.coalesce(func.sum(Repair.estimated_labor_minutes), 0))
            .filter(Repair.status != "completed")
            .scalar()
        )
        return int(total or 0)

    @staticmethod
    def get_status_counts(db: Session) -> dict[str, int]:
        rows = db.query(Repair.status, func.count(Repair.id)).group_by(Repair.status).all()
        return {status: count for status, count in rows}

    @staticmethod
    def create_repair(db: Session, **repair_data) -> Repair:
        """Add a repair to the current transaction (caller commits)"""
        repair = Repair(**repair_data)
        db.add(repair)
        db.flush()
        return repair

    @staticmethod
    def add_responses(db: Session, repair: Repair, responses: dict[int, str]) -> None:
        for item_id, status in responses.items():
            db.add(
                RepairChecklist(repair_id=repair.id, checklist_item_id=item_id, status=status)
            )
        db.flush()
