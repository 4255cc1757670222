"""
Utility modules for the macrovar package.

Data loading and validation, and the matrix utilities shared by the VAR
stages (design matrices, companion form, Wold multipliers, identification).
"""

from .data_handling import (
    load_canada,
    validate_panel,
    difference,
    table_print,
)
from .var import VARUtils

__all__ = [
    'load_canada',
    'validate_panel',
    'difference',
    'table_print',
    'VARUtils',
]
