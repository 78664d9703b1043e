"""
Manufacturing engine for perfume production orders.

This module provides pure computation (no database access) for:
- Formula scaling from percentages to volumes and masses
- Yield estimation with sequential process losses
- Raw material reservation checks against branch stock
- Packaging requirement checks
- Order validation
- The linear order lifecycle
- Cost roll-up

Usage:
    from perfumery.services.manufacturing import (
        new_order,
        scale_formula,
        recalculate_yield,
        check_reservation,
        check_packaging,
        validate_order,
        transition,
        calculate_costs,
    )
"""

from .order import (
    ChillingStep,
    DistributionLine,
    FiltrationStep,
    FormulaLine,
    ManufacturingOrder,
    OrderCosts,
    OrderYield,
    PackagingItem,
    ProcessLoss,
    QCCheck,
    copy_order,
    new_order,
)

from .catalog import (
    InventoryRecord,
    ProductRecord,
    index_products,
    normalize_branch_id,
)

from .formula import (
    ScaledLine,
    apply_material_selection,
    classify_material_kind,
    formula_total_percentage,
    resolve_density,
    scale_formula,
)

from .yield_calculation import (
    expected_units,
    expected_yield,
    recalculate_yield,
    theoretical_volume,
    with_recalculated_yield,
    yield_percentage,
)

from .material_reservation import (
    ReservationRow,
    check_reservation,
    find_available_quantity,
    has_shortage,
)

from .packaging_requirements import (
    PackagingRow,
    check_packaging,
)

from .validation import (
    ErrorMap,
    is_order_valid,
    validate_order,
)

from .lifecycle import (
    NEXT_ACTION_LABELS,
    NEXT_STATUS,
    RejectionReason,
    TransitionResult,
    next_status,
    transition,
)

from .costing import calculate_costs

__all__ = [
    # Order values
    "ChillingStep",
    "DistributionLine",
    "FiltrationStep",
    "FormulaLine",
    "ManufacturingOrder",
    "OrderCosts",
    "OrderYield",
    "PackagingItem",
    "ProcessLoss",
    "QCCheck",
    "copy_order",
    "new_order",
    # Catalog records
    "InventoryRecord",
    "ProductRecord",
    "index_products",
    "normalize_branch_id",
    # Formula
    "ScaledLine",
    "apply_material_selection",
    "classify_material_kind",
    "formula_total_percentage",
    "resolve_density",
    "scale_formula",
    # Yield
    "expected_units",
    "expected_yield",
    "recalculate_yield",
    "theoretical_volume",
    "with_recalculated_yield",
    "yield_percentage",
    # Reservation and packaging
    "ReservationRow",
    "check_reservation",
    "find_available_quantity",
    "has_shortage",
    "PackagingRow",
    "check_packaging",
    # Validation
    "ErrorMap",
    "is_order_valid",
    "validate_order",
    # Lifecycle
    "NEXT_ACTION_LABELS",
    "NEXT_STATUS",
    "RejectionReason",
    "TransitionResult",
    "next_status",
    "transition",
    # Costing
    "calculate_costs",
]
