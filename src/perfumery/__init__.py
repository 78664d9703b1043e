"""Perfumery manufacturing tracker.

Manufacturing-order yield and costing engine for a perfume/cosmetics ERP,
plus the small persistence layer that stores orders, products and
per-branch inventory.
"""

__version__ = "0.1.0"
