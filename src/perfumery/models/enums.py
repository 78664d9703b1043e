"""
Enumerations for manufacturing orders.

This module contains enums used by the manufacturing-order engine and the
models that persist it:
- OrderStatus: Lifecycle state of a manufacturing order
- ManufacturingType: Internal production vs. contract manufacturing
- Concentration: Perfume strength classification
- FormulaKind: Role of an ingredient in a formula
- QCResult, Clarity, OdorMatch: Quality-control outcomes
"""

from enum import Enum


class OrderStatus(str, Enum):
    """
    Manufacturing order lifecycle status.

    Status transitions (strictly forward, one step at a time):
        DRAFT -> IN_PROGRESS -> MACERATING -> QC -> PACKAGING -> DONE -> CLOSED

    CLOSED is terminal.
    """

    DRAFT = "DRAFT"
    IN_PROGRESS = "IN_PROGRESS"
    MACERATING = "MACERATING"
    QC = "QC"
    PACKAGING = "PACKAGING"
    DONE = "DONE"
    CLOSED = "CLOSED"


class ManufacturingType(str, Enum):
    """
    Who the batch is produced for.

    Values:
        INTERNAL: Produced to meet the company's own demand
        CONTRACT: Produced for a client and distributed to named locations
    """

    INTERNAL = "INTERNAL"
    CONTRACT = "CONTRACT"


class Concentration(str, Enum):
    """Perfume strength classification (informational only)."""

    EDT_15 = "EDT_15"
    EDP_20 = "EDP_20"
    EXTRAIT_30 = "EXTRAIT_30"
    OIL_100 = "OIL_100"


class FormulaKind(str, Enum):
    """
    Role of an ingredient within a fragrance formula.

    Values:
        AROMA_OIL: Fragrance oil / concentrate
        ETHANOL: Perfumer's alcohol
        DI_WATER: Deionised water
        FIXATIVE: Fixative to slow evaporation
        COLOR: Colouring agent
        ADDITIVE: Catch-all; the default when nothing else matches
    """

    AROMA_OIL = "AROMA_OIL"
    ETHANOL = "ETHANOL"
    DI_WATER = "DI_WATER"
    FIXATIVE = "FIXATIVE"
    COLOR = "COLOR"
    ADDITIVE = "ADDITIVE"


class QCResult(str, Enum):
    """Final quality-control verdict for a batch."""

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    REWORK = "REWORK"


class Clarity(str, Enum):
    CLEAR = "Clear"
    SLIGHT_HAZE = "Slight Haze"
    HAZY = "Hazy"


class OdorMatch(str, Enum):
    PASS = "Pass"
    BORDERLINE = "Borderline"
    FAIL = "Fail"
