"""
InventoryItem model: on-hand quantity of one product at one branch.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class InventoryItem(BaseModel):
    """
    InventoryItem model.

    One row per (product, branch) pair. Quantity is expressed in the
    product's base unit.

    Attributes:
        product_id: FK to Product
        branch_id: FK to Branch
        quantity: On-hand quantity (never negative)
    """

    __tablename__ = "inventory_items"

    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    branch_id = Column(
        Integer, ForeignKey("branches.id", ondelete="CASCADE"), nullable=False, index=True
    )
    quantity = Column(Float, nullable=False, default=0.0)

    product = relationship("Product", back_populates="inventory_items")
    branch = relationship("Branch", back_populates="inventory_items")

    __table_args__ = (
        UniqueConstraint("product_id", "branch_id", name="uq_inventory_product_branch"),
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"InventoryItem(id={self.id}, product_id={self.product_id}, "
            f"branch_id={self.branch_id}, quantity={self.quantity})"
        )
