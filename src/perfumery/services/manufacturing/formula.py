"""
Formula engine for manufacturing orders.

This module provides functions for:
- Scaling a percentage-by-volume formula to absolute volumes and masses
- Summing formula percentages
- Inferring an ingredient's kind from its material name
- Copying a selected material onto a formula line

Scaling never normalizes: each line uses its raw percentage, so a formula
that does not sum to 100 still produces numbers. The 100% rule is enforced
by the validator, not here.
"""

import math
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from perfumery.models.enums import FormulaKind
from perfumery.services.manufacturing.catalog import index_products
from perfumery.services.manufacturing.order import FormulaLine
from perfumery.utils.constants import DEFAULT_DENSITY, MATERIAL_KIND_KEYWORDS


@dataclass
class ScaledLine:
    """A formula line scaled to a batch volume.

    Attributes:
        line: The source formula line
        required_ml: Volume of this material in the batch
        required_g: Mass of this material (required_ml * density)
        density: Density actually used for the conversion
    """

    line: FormulaLine
    required_ml: float
    required_g: float
    density: float

    @property
    def material_id(self) -> Optional[int]:
        return self.line.material_id

    @property
    def material_name(self) -> str:
        return self.line.material_name


def resolve_density(line: FormulaLine, product=None) -> float:
    """Density used when converting a line's volume to mass.

    Order: the line's own density, then the product's density, then 1.0.
    Zero or missing values fall through to the next source.
    """
    if line.density:
        return float(line.density)
    product_density = getattr(product, "density", None) if product is not None else None
    if product_density:
        return float(product_density)
    return DEFAULT_DENSITY


def scale_formula(
    formula: Iterable[FormulaLine],
    total_volume_ml: float,
    products: Optional[Iterable] = None,
) -> List[ScaledLine]:
    """Convert a percentage formula into absolute volumes and masses.

    Transaction boundary: Pure computation (no database access).

    For each line: required_ml = percentage / 100 * total_volume_ml and
    required_g = required_ml * density. Zero or negative volumes are not
    special-cased; callers guard them.

    Args:
        formula: Formula lines in order
        total_volume_ml: Batch volume to scale to
        products: Optional product records used as a density fallback

    Returns:
        One ScaledLine per formula line, in the same order

    Example:
        >>> lines = [FormulaLine(id="1", percentage=10, density=0.9)]
        >>> scaled = scale_formula(lines, 1000)
        >>> scaled[0].required_ml, scaled[0].required_g
        (100.0, 90.0)
    """
    by_id = index_products(products)
    scaled = []
    for line in formula:
        density = resolve_density(line, by_id.get(line.material_id))
        required_ml = (float(line.percentage or 0.0) / 100.0) * float(total_volume_ml or 0.0)
        scaled.append(
            ScaledLine(
                line=line,
                required_ml=required_ml,
                required_g=required_ml * density,
                density=density,
            )
        )
    return scaled


def formula_total_percentage(formula: Iterable[FormulaLine]) -> float:
    """Sum of line percentages; missing or non-finite percentages count as 0."""
    total = 0.0
    for line in formula:
        percentage = float(line.percentage or 0.0)
        if math.isfinite(percentage):
            total += percentage
    return total


def classify_material_kind(material_name: Optional[str]) -> FormulaKind:
    """Infer a formula line's kind from its material name.

    Case-insensitive substring match against MATERIAL_KIND_KEYWORDS in
    declaration order; anything unmatched is ADDITIVE. This is only a
    default the user can override.

    Examples:
        >>> classify_material_kind("Rose Oil")
        <FormulaKind.AROMA_OIL: 'AROMA_OIL'>
        >>> classify_material_kind("Perfumer's Ethanol 96%")
        <FormulaKind.ETHANOL: 'ETHANOL'>
        >>> classify_material_kind("Glitter")
        <FormulaKind.ADDITIVE: 'ADDITIVE'>
    """
    if not material_name:
        return FormulaKind.ADDITIVE
    name = material_name.lower()
    for kind, keywords in MATERIAL_KIND_KEYWORDS.items():
        if any(keyword in name for keyword in keywords):
            return FormulaKind(kind)
    return FormulaKind.ADDITIVE


def apply_material_selection(line: FormulaLine, product) -> FormulaLine:
    """Return a copy of ``line`` bound to ``product``.

    Copies the id, name, SKU and density (when the product has one) and sets
    the inferred kind.
    """
    density = getattr(product, "density", None)
    return replace(
        line,
        material_id=product.id,
        material_name=product.name or "",
        material_sku=getattr(product, "sku", None) or "",
        density=float(density) if density else line.density,
        kind=classify_material_kind(product.name),
    )
