"""
ManufacturingOrderRecord model for persisting manufacturing orders.

The record stores the order's scalar fields as columns and its owned
sub-structures (formula, process loss, yield, packaging plan, distribution,
costs, QC and process steps) as JSON. Conversion to and from the typed
ManufacturingOrder value goes through to_order() / apply_order(), so the
engine never sees raw JSON.
"""

from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import Concentration, ManufacturingType, OrderStatus

if TYPE_CHECKING:
    from perfumery.services.manufacturing.order import ManufacturingOrder


class ManufacturingOrderRecord(BaseModel):
    """
    Persistent manufacturing order.

    Attributes:
        order_number: MO-YYYYMMDD-NNN (unique)
        batch_code: BATCH-<epoch-ms>
        product_name: Finished product name
        manufacturing_type: INTERNAL or CONTRACT
        concentration: EDT_15, EDP_20, EXTRAIT_30 or OIL_100
        bottle_size_ml: Fill volume per bottle
        units_requested: Bottles ordered
        branch_id: FK to Branch (nullable; SET NULL when the branch is deleted)
        responsible_employee_id: Optional employee reference (not owned)
        manufacturing_date, expiry_date, due_at: Calendar dates
        maceration_days: Resting period before QC
        status: Lifecycle state
        formula ... distribution: JSON sub-structures
    """

    __tablename__ = "manufacturing_orders"

    order_number = Column(String(20), nullable=False, unique=True, index=True)
    batch_code = Column(String(40), nullable=False)
    product_name = Column(String(200), nullable=False)
    manufacturing_type = Column(
        String(20), nullable=False, default=ManufacturingType.INTERNAL.value
    )
    concentration = Column(String(20), nullable=False, default=Concentration.EDT_15.value)
    bottle_size_ml = Column(Float, nullable=False)
    units_requested = Column(Integer, nullable=False)
    branch_id = Column(
        Integer, ForeignKey("branches.id", ondelete="SET NULL"), nullable=True, index=True
    )
    responsible_employee_id = Column(Integer, nullable=True)
    manufacturing_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=True)
    due_at = Column(Date, nullable=True)
    maceration_days = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=OrderStatus.DRAFT.value)

    formula = Column(JSON, nullable=False, default=list)
    process_loss = Column(JSON, nullable=False, default=dict)
    chilling = Column(JSON, nullable=True)
    filtration = Column(JSON, nullable=True)
    qc = Column(JSON, nullable=True)
    packaging_items = Column(JSON, nullable=False, default=list)
    costs = Column(JSON, nullable=False, default=dict)
    order_yield = Column("yield_data", JSON, nullable=False, default=dict)
    distribution = Column(JSON, nullable=False, default=list)

    branch = relationship("Branch")

    __table_args__ = (
        Index("idx_manufacturing_order_status", "status"),
        Index("idx_manufacturing_order_date", "manufacturing_date"),
        CheckConstraint("bottle_size_ml > 0", name="ck_mo_bottle_size_positive"),
        CheckConstraint("units_requested > 0", name="ck_mo_units_positive"),
        CheckConstraint("maceration_days >= 0", name="ck_mo_maceration_non_negative"),
    )

    def to_order(self) -> "ManufacturingOrder":
        """Build the typed order value from this record."""
        from perfumery.services.manufacturing.order import ManufacturingOrder

        return ManufacturingOrder.from_dict(
            {
                "order_number": self.order_number,
                "batch_code": self.batch_code,
                "product_name": self.product_name,
                "manufacturing_type": self.manufacturing_type,
                "concentration": self.concentration,
                "bottle_size_ml": self.bottle_size_ml,
                "units_requested": self.units_requested,
                "branch_id": self.branch_id,
                "responsible_employee_id": self.responsible_employee_id,
                "manufacturing_date": self.manufacturing_date,
                "expiry_date": self.expiry_date,
                "due_at": self.due_at,
                "formula": self.formula,
                "process_loss": self.process_loss,
                "maceration_days": self.maceration_days,
                "chilling": self.chilling,
                "filtration": self.filtration,
                "qc": self.qc,
                "packaging_items": self.packaging_items,
                "costs": self.costs,
                "yield": self.order_yield,
                "distribution": self.distribution,
                "status": self.status,
            }
        )

    def apply_order(self, order: "ManufacturingOrder") -> None:
        """Copy every field of ``order`` onto this record.

        JSON columns are reassigned whole so SQLAlchemy sees the change.
        """
        data = order.to_dict()
        self.order_number = order.order_number
        self.batch_code = order.batch_code
        self.product_name = order.product_name
        self.manufacturing_type = data["manufacturing_type"]
        self.concentration = data["concentration"]
        self.bottle_size_ml = order.bottle_size_ml
        self.units_requested = order.units_requested
        # 0 and negative ids mean "no branch"
        self.branch_id = order.branch_id if order.branch_id and order.branch_id > 0 else None
        self.responsible_employee_id = order.responsible_employee_id
        self.manufacturing_date = order.manufacturing_date
        self.expiry_date = order.expiry_date
        self.due_at = order.due_at
        self.maceration_days = order.maceration_days
        self.status = data["status"]
        self.formula = data["formula"]
        self.process_loss = data["process_loss"]
        self.chilling = data["chilling"]
        self.filtration = data["filtration"]
        self.qc = data["qc"]
        self.packaging_items = data["packaging_items"]
        self.costs = data["costs"]
        self.order_yield = data["yield"]
        self.distribution = data["distribution"]

    def __repr__(self) -> str:
        return (
            f"ManufacturingOrderRecord(id={self.id}, order_number='{self.order_number}', "
            f"status={self.status})"
        )
