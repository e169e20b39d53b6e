from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Money columns keep two decimals and come back as Decimal
Money = Numeric(10, 2, asdecimal=True)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    # Natural dedup key at intake when present
    email = Column(String(255), index=True, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    vehicles = relationship("Vehicle", back_populates="client")
    repairs = relationship("Repair", back_populates="client")


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # bike, scooter
    brand = Column(String(255), nullable=True)
    model = Column(String(255), nullable=True)
    serial_number = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    client = relationship("Client", back_populates="vehicles")
    repairs = relationship("Repair", back_populates="vehicle")


class Repair(Base):
    __tablename__ = "repairs"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    vendor_name = Column(String(255), nullable=False)
    client_issue = Column(Text, nullable=False)
    # initial, pending_approval, parts_ordered, in_repair, completed
    status = Column(String(30), default="initial", nullable=False, index=True)
    desired_return_date = Column(Date, nullable=True)
    # Snapshot of the diagnostic, computed once at intake
    estimated_labor_minutes = Column(Integer, default=0, nullable=False)
    preliminary_quote = Column(Money, default=0, nullable=False)
    client_decision = Column(String(30), nullable=True)  # accepted, max_price, detailed_quote
    max_price = Column(Money, nullable=True)
    detailed_quote_fee = Column(Money, default=0, nullable=False)
    final_quote = Column(Money, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="repairs")
    vehicle = relationship("Vehicle", back_populates="repairs")
    checklist = relationship(
        "RepairChecklist", back_populates="repair", cascade="all, delete-orphan"
    )


class ChecklistItem(Base):
    __tablename__ = "checklist_items"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(100), nullable=False)
    item_name = Column(String(255), nullable=False)
    estimated_labor_minutes = Column(Integer, default=0, nullable=False)
    estimated_parts_cost = Column(Money, default=0, nullable=False)
    order_index = Column(Integer, default=0, nullable=False)
    vehicle_type = Column(String(20), default="both", nullable=False)  # bike, scooter, both
    tutorial_video_url = Column(String(500), nullable=True)

    responses = relationship("RepairChecklist", back_populates="checklist_item")


class RepairChecklist(Base):
    __tablename__ = "repair_checklist"
    __table_args__ = (
        UniqueConstraint("repair_id", "checklist_item_id", name="uq_repair_checklist_item"),
    )

    id = Column(Integer, primary_key=True, index=True)
    repair_id = Column(Integer, ForeignKey("repairs.id"), nullable=False, index=True)
    checklist_item_id = Column(Integer, ForeignKey("checklist_items.id"), nullable=False)
    status = Column(String(2), nullable=False)  # ok, ng
    technician_notes = Column(Text, nullable=True)

    repair = relationship("Repair", back_populates="checklist")
    checklist_item = relationship("ChecklistItem", back_populates="responses")


class AdminSettings(Base):
    __tablename__ = "admin_settings"

    id = Column(Integer, primary_key=True, index=True)
    hourly_rate = Column(Money, default=60, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class RepairTemplate(Base):
    __tablename__ = "repair_templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    estimated_minutes = Column(Integer, default=0, nullable=False)
    vehicle_type = Column(String(20), default="both", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
