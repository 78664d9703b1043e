"""
Branch model.

A branch is a physical location that holds stock. The manufacturing engine
only needs a branch identifier; the row exists so inventory can reference it.
"""

from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class Branch(BaseModel):
    """
    Branch model.

    Attributes:
        name: Display name (unique)
        location: Optional address or area description
        is_active: Inactive branches are kept for history
    """

    __tablename__ = "branches"

    name = Column(String(200), nullable=False, unique=True)
    location = Column(String(200), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    inventory_items = relationship(
        "InventoryItem", back_populates="branch", cascade="all, delete-orphan"
    )
