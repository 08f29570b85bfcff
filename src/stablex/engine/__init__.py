"""Engine — расчёт и применение штрафов за ордера.

- OrderPenaltyEngine: stateless оценка ордера
- EngineConfig / BalancePolicy: политика баланса
- Таксономия ошибок (ConfigurationError, DegenerateTimeError, ...)
"""

from .exceptions import (
    ConfigurationError,
    DegenerateTimeError,
    InsufficientBalanceError,
    InvalidOrderError,
    OrderPenaltyError,
    PenaltyOverflowError,
)
from .order_penalty import BalancePolicy, EngineConfig, OrderPenaltyEngine

__all__ = [
    "OrderPenaltyEngine",
    "EngineConfig",
    "BalancePolicy",
    "OrderPenaltyError",
    "ConfigurationError",
    "InvalidOrderError",
    "DegenerateTimeError",
    "PenaltyOverflowError",
    "InsufficientBalanceError",
]
