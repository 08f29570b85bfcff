"""
MarketState — Модель состояния рынка

Immutable Pydantic модель, представляющая единственную рыночную запись:
референсную цену и параметры штрафа.
Полная совместимость с JSON Schema (contracts/schema/market_state.json).
"""

import math
from typing import Final, Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# DEFAULTS
# =============================================================================

# Коэффициент штрафа по умолчанию при инициализации рынка
DEFAULT_PENALTY_COEFFICIENT: Final[float] = 10.0

# Константа чувствительности ко времени по умолчанию (секунды)
DEFAULT_TIME_SENSITIVITY_SEC: Final[int] = 1000


# =============================================================================
# MARKET STATE MODEL
# =============================================================================


class MarketState(BaseModel):
    """
    Модель состояния рынка.

    Immutable модель (frozen=True). Рынок создаётся один раз через
    initialize(); во время оценки ордеров только читается.
    Обновление цены создаёт новый экземпляр (with_price).
    """

    market_id: str = Field(..., min_length=1, description="Идентификатор рынка")
    current_price: int = Field(
        ..., ge=0, description="Референсная цена (минимальные единицы)"
    )
    penalty_coefficient: float = Field(
        DEFAULT_PENALTY_COEFFICIENT,
        ge=0,
        description="Коэффициент штрафа за отклонение цены",
    )
    time_sensitivity: int = Field(
        DEFAULT_TIME_SENSITIVITY_SEC,
        gt=0,
        description="Константа чувствительности ко времени (секунды)",
    )
    authority: Optional[str] = Field(
        None,
        min_length=1,
        description="Идентификатор, которому разрешено обновлять цену (nullable)",
    )

    model_config = {"frozen": True}

    @field_validator("penalty_coefficient")
    @classmethod
    def validate_coefficient_finite(cls, v: float) -> float:
        """NaN/Inf коэффициент сделал бы любой штраф невалидным."""
        if not math.isfinite(v):
            raise ValueError(f"penalty_coefficient must be finite, got {v}")
        return v

    @classmethod
    def initialize(
        cls,
        market_id: str,
        price: int,
        penalty_coefficient: float = DEFAULT_PENALTY_COEFFICIENT,
        time_sensitivity: int = DEFAULT_TIME_SENSITIVITY_SEC,
        authority: Optional[str] = None,
    ) -> "MarketState":
        """
        Создание нового рынка.

        Args:
            market_id: Идентификатор рынка
            price: Начальная референсная цена (неотрицательное целое)
            penalty_coefficient: Коэффициент штрафа
            time_sensitivity: Константа чувствительности (секунды, > 0)
            authority: Кто может обновлять цену (None — цена фиксирована)

        Returns:
            Новый MarketState

        Raises:
            ValidationError: если параметры нарушают инварианты
        """
        return cls(
            market_id=market_id,
            current_price=price,
            penalty_coefficient=penalty_coefficient,
            time_sensitivity=time_sensitivity,
            authority=authority,
        )

    def with_price(self, new_price: int) -> "MarketState":
        """
        Копия рынка с новой референсной ценой.

        Валидация выполняется заново (model_validate), поэтому
        отрицательная цена отклоняется так же, как при создании.
        """
        data = self.model_dump()
        data["current_price"] = new_price
        return MarketState.model_validate(data)
