"""
Core math modules для stablex

Математические примитивы и формулы штрафа с гарантией численной стабильности.
"""

# Numerical Safeguards
from stablex.core.math.numerical_safeguards import (
    # Epsilon constants
    BALANCE_SNAP_ULPS,
    EPS_BALANCE_SNAP,
    EPS_CALC,
    # Balance range
    MAX_BALANCE_UNITS,
    MIN_BALANCE_UNITS,
    # Checked arithmetic
    checked_exp,
    checked_mul,
    is_valid_float,
    # Balance units
    snap_tolerance,
    to_balance_units,
    # Validation
    validate_non_negative,
    validate_positive,
)

# Penalty formulas
from stablex.core.math.penalty import (
    PenaltyBreakdown,
    compute_penalty,
    delta_price,
    price_penalty,
    time_multiplier,
    time_penalty,
)

__all__ = [
    # Numerical Safeguards: Epsilon constants
    "BALANCE_SNAP_ULPS",
    "EPS_BALANCE_SNAP",
    "EPS_CALC",
    # Numerical Safeguards: Balance range
    "MAX_BALANCE_UNITS",
    "MIN_BALANCE_UNITS",
    # Numerical Safeguards: Checked arithmetic
    "checked_exp",
    "checked_mul",
    "is_valid_float",
    # Numerical Safeguards: Balance units
    "snap_tolerance",
    "to_balance_units",
    # Numerical Safeguards: Validation
    "validate_non_negative",
    "validate_positive",
    # Penalty: Types
    "PenaltyBreakdown",
    # Penalty: Functions
    "compute_penalty",
    "delta_price",
    "price_penalty",
    "time_multiplier",
    "time_penalty",
]
