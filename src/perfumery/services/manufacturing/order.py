"""
Manufacturing order value types.

The manufacturing order is the aggregate root of the engine. It owns its
formula, process-loss settings, yield figures, packaging plan, distribution
plan (contract orders only), costs and QC record by value. Every
sub-structure is a dataclass with named optional fields so validation and
the lifecycle work against a fixed contract instead of an open dictionary.

The pure engine functions never mutate an order in place; they return new
values (``dataclasses.replace``) that the caller persists.
"""

import copy
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from perfumery.models.enums import (
    Clarity,
    Concentration,
    FormulaKind,
    ManufacturingType,
    OdorMatch,
    OrderStatus,
    QCResult,
)


@dataclass
class FormulaLine:
    """One ingredient in a fragrance formula.

    Attributes:
        id: Identifier unique within the formula
        material_id: Product id of the raw material (not owned)
        percentage: Share of total batch volume, 0-100
        material_name: Display copy taken when the material is selected
        material_sku: Display copy taken when the material is selected
        kind: Ingredient role; inferred from the name, user-overridable
        density: g/ml; None means "use the material's density, else 1.0"
    """

    id: str
    material_id: Optional[int] = None
    percentage: float = 0.0
    material_name: str = ""
    material_sku: str = ""
    kind: FormulaKind = FormulaKind.ADDITIVE
    density: Optional[float] = None


@dataclass
class ProcessLoss:
    """Percentage of volume lost at each sequential production stage."""

    mixing_loss_pct: float = 0.0
    filtration_loss_pct: float = 0.0
    filling_loss_pct: float = 0.0


@dataclass
class OrderYield:
    """Derived production volumes.

    theoretical_ml, expected_ml and expected_units are recomputed from the
    order; actual_ml and actual_units are entered after production.
    """

    theoretical_ml: float = 0.0
    expected_ml: float = 0.0
    expected_units: int = 0
    actual_ml: Optional[float] = None
    actual_units: Optional[int] = None
    yield_percentage: Optional[float] = None


@dataclass
class PackagingItem:
    """Packaging material consumed per finished bottle."""

    product_id: Optional[int] = None
    qty_per_unit: float = 1.0
    name: str = ""


@dataclass
class DistributionLine:
    """Units delivered to one location (contract manufacturing)."""

    id: str
    location_name: str = ""
    units: int = 0


@dataclass
class OrderCosts:
    """Cost roll-up for the batch. Monetary values are Decimals."""

    materials: Decimal = Decimal("0")
    labor: Decimal = Decimal("0")
    overhead: Decimal = Decimal("0")
    packaging: Decimal = Decimal("0")
    other: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    per_ml: Decimal = Decimal("0")
    per_bottle: Decimal = Decimal("0")
    suggested_retail: Decimal = Decimal("0")


@dataclass
class QCCheck:
    appearance: str = ""
    clarity: Clarity = Clarity.CLEAR
    odor_match: OdorMatch = OdorMatch.PASS
    result: QCResult = QCResult.APPROVED
    notes: str = ""


@dataclass
class ChillingStep:
    hours: float = 0.0
    temperature_c: float = 0.0


@dataclass
class FiltrationStep:
    stages: int = 0
    micron: float = 0.0


@dataclass
class ManufacturingOrder:
    """A perfume manufacturing order.

    Attributes:
        order_number: MO-YYYYMMDD-NNN, assigned when first saved
        batch_code: BATCH-<epoch-ms>, assigned when first saved
        product_name: Finished product name
        manufacturing_type: INTERNAL or CONTRACT
        concentration: Strength classification (informational)
        bottle_size_ml: Fill volume of one bottle
        units_requested: Number of bottles ordered
        branch_id: Branch whose stock the order draws on; None/0 means unset
        responsible_employee_id: Optional owner of the order
        manufacturing_date, expiry_date, due_at: Calendar dates
        formula: Ordered formula lines
        process_loss: Stage loss percentages
        maceration_days: Resting period before QC
        chilling, filtration, qc: Optional process records
        packaging_items: Packaging plan
        costs: Cost roll-up
        order_yield: Derived and recorded volumes
        distribution: Contract distribution plan
        status: Lifecycle state
    """

    order_number: Optional[str] = None
    batch_code: str = ""
    product_name: str = ""
    manufacturing_type: ManufacturingType = ManufacturingType.INTERNAL
    concentration: Concentration = Concentration.EDT_15
    bottle_size_ml: float = 0.0
    units_requested: int = 0
    branch_id: Optional[int] = None
    responsible_employee_id: Optional[int] = None
    manufacturing_date: Optional[date] = None
    expiry_date: Optional[date] = None
    due_at: Optional[date] = None
    formula: List[FormulaLine] = field(default_factory=list)
    process_loss: ProcessLoss = field(default_factory=ProcessLoss)
    maceration_days: int = 0
    chilling: Optional[ChillingStep] = None
    filtration: Optional[FiltrationStep] = None
    qc: Optional[QCCheck] = None
    packaging_items: List[PackagingItem] = field(default_factory=list)
    costs: OrderCosts = field(default_factory=OrderCosts)
    order_yield: OrderYield = field(default_factory=OrderYield)
    distribution: List[DistributionLine] = field(default_factory=list)
    status: OrderStatus = OrderStatus.DRAFT

    @property
    def is_contract(self) -> bool:
        return self.manufacturing_type == ManufacturingType.CONTRACT

    @property
    def is_closed(self) -> bool:
        return self.status == OrderStatus.CLOSED

    def to_dict(self) -> Dict[str, Any]:
        """Convert the order to a JSON-compatible dictionary."""
        return {
            "order_number": self.order_number,
            "batch_code": self.batch_code,
            "product_name": self.product_name,
            "manufacturing_type": self.manufacturing_type.value,
            "concentration": self.concentration.value,
            "bottle_size_ml": self.bottle_size_ml,
            "units_requested": self.units_requested,
            "branch_id": self.branch_id,
            "responsible_employee_id": self.responsible_employee_id,
            "manufacturing_date": _date_to_str(self.manufacturing_date),
            "expiry_date": _date_to_str(self.expiry_date),
            "due_at": _date_to_str(self.due_at),
            "formula": [formula_line_to_dict(line) for line in self.formula],
            "process_loss": process_loss_to_dict(self.process_loss),
            "maceration_days": self.maceration_days,
            "chilling": chilling_to_dict(self.chilling),
            "filtration": filtration_to_dict(self.filtration),
            "qc": qc_to_dict(self.qc),
            "packaging_items": [packaging_item_to_dict(item) for item in self.packaging_items],
            "costs": costs_to_dict(self.costs),
            "yield": yield_to_dict(self.order_yield),
            "distribution": [distribution_line_to_dict(d) for d in self.distribution],
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManufacturingOrder":
        """Build an order from a dictionary produced by ``to_dict``.

        Missing keys fall back to the DRAFT defaults.
        """
        return cls(
            order_number=data.get("order_number"),
            batch_code=data.get("batch_code") or "",
            product_name=data.get("product_name") or "",
            manufacturing_type=ManufacturingType(
                data.get("manufacturing_type") or ManufacturingType.INTERNAL.value
            ),
            concentration=Concentration(data.get("concentration") or Concentration.EDT_15.value),
            bottle_size_ml=float(data.get("bottle_size_ml") or 0.0),
            units_requested=int(data.get("units_requested") or 0),
            branch_id=data.get("branch_id"),
            responsible_employee_id=data.get("responsible_employee_id"),
            manufacturing_date=_str_to_date(data.get("manufacturing_date")),
            expiry_date=_str_to_date(data.get("expiry_date")),
            due_at=_str_to_date(data.get("due_at")),
            formula=[formula_line_from_dict(d) for d in data.get("formula") or []],
            process_loss=process_loss_from_dict(data.get("process_loss")),
            maceration_days=int(data.get("maceration_days") or 0),
            chilling=chilling_from_dict(data.get("chilling")),
            filtration=filtration_from_dict(data.get("filtration")),
            qc=qc_from_dict(data.get("qc")),
            packaging_items=[
                packaging_item_from_dict(d) for d in data.get("packaging_items") or []
            ],
            costs=costs_from_dict(data.get("costs")),
            order_yield=yield_from_dict(data.get("yield")),
            distribution=[distribution_line_from_dict(d) for d in data.get("distribution") or []],
            status=OrderStatus(data.get("status") or OrderStatus.DRAFT.value),
        )


def new_order(**fields: Any) -> ManufacturingOrder:
    """Create a DRAFT order with empty formula/packaging/distribution and zeroed yield.

    Keyword arguments override individual fields, except ``status``.

    Example:
        >>> order = new_order(product_name="Oud Noir", bottle_size_ml=50, units_requested=100)
        >>> order.status
        <OrderStatus.DRAFT: 'DRAFT'>
    """
    fields.pop("status", None)
    return replace(ManufacturingOrder(), **fields)


def copy_order(order: ManufacturingOrder, **changes: Any) -> ManufacturingOrder:
    """Deep copy of ``order`` with ``changes`` applied.

    The copy shares no lists or sub-structures with the original.
    """
    return replace(copy.deepcopy(order), **changes)


# ============================================================================
# Dictionary conversion helpers
# ============================================================================


def _date_to_str(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _str_to_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    # Accept full ISO timestamps by keeping the date part
    return date.fromisoformat(str(value)[:10])


def _to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def formula_line_to_dict(line: FormulaLine) -> Dict[str, Any]:
    return {
        "id": line.id,
        "material_id": line.material_id,
        "percentage": line.percentage,
        "material_name": line.material_name,
        "material_sku": line.material_sku,
        "kind": line.kind.value,
        "density": line.density,
    }


def formula_line_from_dict(data: Dict[str, Any]) -> FormulaLine:
    return FormulaLine(
        id=str(data.get("id") or ""),
        material_id=data.get("material_id"),
        percentage=float(data.get("percentage") or 0.0),
        material_name=data.get("material_name") or "",
        material_sku=data.get("material_sku") or "",
        kind=FormulaKind(data.get("kind") or FormulaKind.ADDITIVE.value),
        density=_optional_float(data.get("density")),
    )


def process_loss_to_dict(loss: ProcessLoss) -> Dict[str, float]:
    return {
        "mixing_loss_pct": loss.mixing_loss_pct,
        "filtration_loss_pct": loss.filtration_loss_pct,
        "filling_loss_pct": loss.filling_loss_pct,
    }


def process_loss_from_dict(data: Optional[Dict[str, Any]]) -> ProcessLoss:
    data = data or {}
    return ProcessLoss(
        mixing_loss_pct=float(data.get("mixing_loss_pct") or 0.0),
        filtration_loss_pct=float(data.get("filtration_loss_pct") or 0.0),
        filling_loss_pct=float(data.get("filling_loss_pct") or 0.0),
    )


def yield_to_dict(order_yield: OrderYield) -> Dict[str, Any]:
    return {
        "theoretical_ml": order_yield.theoretical_ml,
        "expected_ml": order_yield.expected_ml,
        "expected_units": order_yield.expected_units,
        "actual_ml": order_yield.actual_ml,
        "actual_units": order_yield.actual_units,
        "yield_percentage": order_yield.yield_percentage,
    }


def yield_from_dict(data: Optional[Dict[str, Any]]) -> OrderYield:
    data = data or {}
    return OrderYield(
        theoretical_ml=float(data.get("theoretical_ml") or 0.0),
        expected_ml=float(data.get("expected_ml") or 0.0),
        expected_units=int(data.get("expected_units") or 0),
        actual_ml=_optional_float(data.get("actual_ml")),
        actual_units=_optional_int(data.get("actual_units")),
        yield_percentage=_optional_float(data.get("yield_percentage")),
    )


def packaging_item_to_dict(item: PackagingItem) -> Dict[str, Any]:
    return {"product_id": item.product_id, "qty_per_unit": item.qty_per_unit, "name": item.name}


def packaging_item_from_dict(data: Dict[str, Any]) -> PackagingItem:
    return PackagingItem(
        product_id=data.get("product_id"),
        qty_per_unit=float(data.get("qty_per_unit") or 0.0),
        name=data.get("name") or "",
    )


def distribution_line_to_dict(line: DistributionLine) -> Dict[str, Any]:
    return {"id": line.id, "location_name": line.location_name, "units": line.units}


def distribution_line_from_dict(data: Dict[str, Any]) -> DistributionLine:
    return DistributionLine(
        id=str(data.get("id") or ""),
        location_name=data.get("location_name") or "",
        units=int(data.get("units") or 0),
    )


_COST_FIELDS = (
    "materials",
    "labor",
    "overhead",
    "packaging",
    "other",
    "total",
    "per_ml",
    "per_bottle",
    "suggested_retail",
)


def costs_to_dict(costs: OrderCosts) -> Dict[str, str]:
    # Decimals are stored as strings to keep them exact in JSON
    return {name: str(getattr(costs, name)) for name in _COST_FIELDS}


def costs_from_dict(data: Optional[Dict[str, Any]]) -> OrderCosts:
    data = data or {}
    return OrderCosts(**{name: _to_decimal(data.get(name)) for name in _COST_FIELDS})


def qc_to_dict(qc: Optional[QCCheck]) -> Optional[Dict[str, Any]]:
    if qc is None:
        return None
    return {
        "appearance": qc.appearance,
        "clarity": qc.clarity.value,
        "odor_match": qc.odor_match.value,
        "result": qc.result.value,
        "notes": qc.notes,
    }


def qc_from_dict(data: Optional[Dict[str, Any]]) -> Optional[QCCheck]:
    if not data:
        return None
    return QCCheck(
        appearance=data.get("appearance") or "",
        clarity=Clarity(data.get("clarity") or Clarity.CLEAR.value),
        odor_match=OdorMatch(data.get("odor_match") or OdorMatch.PASS.value),
        result=QCResult(data.get("result") or QCResult.APPROVED.value),
        notes=data.get("notes") or "",
    )


def chilling_to_dict(step: Optional[ChillingStep]) -> Optional[Dict[str, float]]:
    if step is None:
        return None
    return {"hours": step.hours, "temperature_c": step.temperature_c}


def chilling_from_dict(data: Optional[Dict[str, Any]]) -> Optional[ChillingStep]:
    if not data:
        return None
    return ChillingStep(
        hours=float(data.get("hours") or 0.0),
        temperature_c=float(data.get("temperature_c") or 0.0),
    )


def filtration_to_dict(step: Optional[FiltrationStep]) -> Optional[Dict[str, Any]]:
    if step is None:
        return None
    return {"stages": step.stages, "micron": step.micron}


def filtration_from_dict(data: Optional[Dict[str, Any]]) -> Optional[FiltrationStep]:
    if not data:
        return None
    return FiltrationStep(
        stages=int(data.get("stages") or 0),
        micron=float(data.get("micron") or 0.0),
    )
