"""
Domain models and value objects.

Contains the market and user records and the order evaluation result.
"""

from stablex.core.domain.market_state import (
    DEFAULT_PENALTY_COEFFICIENT,
    DEFAULT_TIME_SENSITIVITY_SEC,
    MarketState,
)
from stablex.core.domain.order import OrderResult
from stablex.core.domain.user_state import UserLifecycle, UserState

__all__ = [
    # Market model
    "DEFAULT_PENALTY_COEFFICIENT",
    "DEFAULT_TIME_SENSITIVITY_SEC",
    "MarketState",
    # User model
    "UserLifecycle",
    "UserState",
    # Order result
    "OrderResult",
]
