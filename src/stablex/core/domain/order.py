"""
OrderResult — Результат обработки ордера

Immutable Pydantic модель с итоговым балансом, новым временем сделки
и разложением штрафа. Используется для аудита; as_tuple() передаётся
в UserState.with_transaction() при коммите.
"""

from typing import Optional

from pydantic import BaseModel, Field


class OrderResult(BaseModel):
    """
    Результат оценки ордера движком штрафов.

    Immutable модель (frozen=True). Пара (new_balance, new_last_transaction)
    всегда согласована: new_last_transaction == now вызова.
    """

    # Идентификация
    market_id: str = Field(..., min_length=1, description="Идентификатор рынка")
    user_id: str = Field(..., min_length=1, description="Идентификатор пользователя")
    order_price: int = Field(..., ge=0, description="Цена ордера")

    # Разложение штрафа (float, без округления)
    delta_price: int = Field(..., ge=0, description="|order_price - current_price|")
    time_since_last: Optional[int] = Field(
        None, gt=0, description="Секунды с последней сделки (nullable для FRESH)"
    )
    price_penalty: float = Field(..., ge=0, description="Штраф за отклонение цены")
    time_penalty: float = Field(..., ge=0, description="Штраф за частоту торговли")
    total_penalty: float = Field(..., ge=0, description="Суммарный штраф (float)")

    # Применение
    penalty_charged: int = Field(
        ..., ge=0, description="Списанный штраф (целые единицы баланса)"
    )
    previous_balance: int = Field(..., description="Баланс до ордера")
    new_balance: int = Field(..., description="Баланс после ордера")
    new_last_transaction: int = Field(
        ..., ge=0, description="Новое время последней сделки (Unix секунды)"
    )

    model_config = {"frozen": True}

    def as_tuple(self) -> tuple[int, int]:
        """(new_balance, new_last_transaction)."""
        return (self.new_balance, self.new_last_transaction)
