"""
Constants for the perfumery manufacturing tracker.

This module defines system-wide constants including:
- Application metadata
- Product categories used to pick formula and packaging materials
- Base units for stock quantities
- Formula and costing defaults
"""

from typing import Dict, List

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Perfumery Manufacturing Tracker"
APP_VERSION = "0.1.0"
DATABASE_VERSION = "1.0"
DATABASE_FILENAME = "perfumery_tracker.db"

# ============================================================================
# Product Categories
# ============================================================================

CATEGORY_RAW_MATERIAL = "Raw Material"
CATEGORY_PACKAGING = "Packaging"
CATEGORY_FINISHED_GOOD = "Finished Good"

PRODUCT_CATEGORIES: List[str] = [
    CATEGORY_RAW_MATERIAL,
    CATEGORY_PACKAGING,
    CATEGORY_FINISHED_GOOD,
]

# ============================================================================
# Units
# ============================================================================

UNIT_ML = "ml"
UNIT_G = "g"
UNIT_PIECES = "pcs"

# Unit reported for formula materials whose product has no base unit
DEFAULT_MATERIAL_UNIT = UNIT_G

BASE_UNITS: List[str] = [UNIT_ML, UNIT_G, UNIT_PIECES]

# ============================================================================
# Formula / Yield
# ============================================================================

# Formula percentages must sum to 100 within this tolerance
FORMULA_TOTAL_TOLERANCE = 0.01
FORMULA_TOTAL_TARGET = 100.0

DEFAULT_DENSITY = 1.0

# Order number: MO-YYYYMMDD-NNN
ORDER_NUMBER_PREFIX = "MO"
ORDER_SEQUENCE_WIDTH = 3
BATCH_CODE_PREFIX = "BATCH"

# ============================================================================
# Costing
# ============================================================================

DEFAULT_RETAIL_MARKUP = 3.0
COST_DECIMAL_PLACES = 3

# Name fragments used to infer a formula line's kind, checked in order.
MATERIAL_KIND_KEYWORDS: Dict[str, List[str]] = {
    "AROMA_OIL": ["oil"],
    "ETHANOL": ["ethanol", "alcohol"],
    "DI_WATER": ["water"],
    "FIXATIVE": ["fixative", "musk"],
    "COLOR": ["color", "colour", "dye"],
}

# ============================================================================
# Validation Limits and Messages
# ============================================================================

MAX_NAME_LENGTH = 200
MAX_SKU_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500

ERROR_REQUIRED_FIELD = "This field is required"
ERROR_INVALID_NUMBER = "Must be a valid number"
ERROR_INVALID_POSITIVE = "Must be greater than zero"
ERROR_INVALID_NON_NEGATIVE = "Must be zero or greater"
ERROR_INVALID_UNIT = f"Must be one of: {', '.join(BASE_UNITS)}"
ERROR_INVALID_CATEGORY = f"Must be one of: {', '.join(PRODUCT_CATEGORIES)}"
