"""
Contract Validation Module

Модуль для валидации JSON контрактов market_state и user_state.
"""

from .validators import (
    MARKET_STATE_SCHEMA,
    SCHEMA_DIR,
    USER_STATE_SCHEMA,
    ContractViolationError,
    contract_errors,
    load_validator,
    validate_market_state,
    validate_user_state,
)

__all__ = [
    # Schemas
    "SCHEMA_DIR",
    "MARKET_STATE_SCHEMA",
    "USER_STATE_SCHEMA",
    # Errors
    "ContractViolationError",
    # Functions
    "load_validator",
    "contract_errors",
    "validate_market_state",
    "validate_user_state",
]
