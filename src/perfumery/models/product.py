"""
Product model for raw materials, packaging and finished goods.

Products are owned by the catalog; manufacturing orders only reference them
by id and copy the display fields they need at selection time.
"""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, Float, Index, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel
from perfumery.utils.constants import UNIT_PIECES


class Product(BaseModel):
    """
    Product model.

    Attributes:
        name: Display name
        sku: Stock keeping unit code
        category: "Raw Material", "Packaging" or "Finished Good"
        base_unit: Unit stock is counted in ("ml", "g" or "pcs")
        density: Grams per millilitre, when known
        unit_price: Cost of one base unit
        description: Optional notes
    """

    __tablename__ = "products"

    name = Column(String(200), nullable=False)
    sku = Column(String(100), nullable=True, index=True)
    category = Column(String(50), nullable=True)
    base_unit = Column(String(20), nullable=False, default=UNIT_PIECES)
    density = Column(Float, nullable=True)
    unit_price = Column(Numeric(12, 4), nullable=False, default=Decimal("0.0000"))
    description = Column(Text, nullable=True)

    inventory_items = relationship(
        "InventoryItem", back_populates="product", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_product_category", "category"),
        CheckConstraint("unit_price >= 0", name="ck_product_unit_price_non_negative"),
        CheckConstraint("density IS NULL OR density > 0", name="ck_product_density_positive"),
    )

    def to_dict(self) -> dict:
        """Convert product to dictionary with the price as a string."""
        result = super().to_dict()
        if self.unit_price is not None:
            result["unit_price"] = str(self.unit_price)
        return result
