"""
UserState — Модель состояния пользователя

Immutable Pydantic модель: баланс и время последней обработанной сделки.
Полная совместимость с JSON Schema (contracts/schema/user_state.json).

Жизненный цикл:
- FRESH: сделок ещё не было (last_transaction = None)
- ACTIVE: есть last_transaction
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class UserLifecycle(str, Enum):
    """Логическое состояние пользователя."""

    FRESH = "FRESH"
    ACTIVE = "ACTIVE"


# =============================================================================
# USER STATE MODEL
# =============================================================================


class UserState(BaseModel):
    """
    Модель состояния пользователя.

    Immutable модель (frozen=True). Venue.place_order коммитит каждый ордер
    как with_transaction(new_balance, now); старый экземпляр остаётся
    неизменным, поэтому ошибка на любом шаге не оставляет частичных изменений.
    """

    user_id: str = Field(..., min_length=1, description="Идентификатор пользователя")
    balance: int = Field(
        ..., description="Баланс (минимальные единицы, может быть отрицательным)"
    )
    last_transaction: Optional[int] = Field(
        None,
        ge=0,
        description="Время последней сделки (Unix секунды, nullable для FRESH)",
    )

    model_config = {"frozen": True}

    @classmethod
    def open(
        cls, user_id: str, balance: int, opened_at: Optional[int] = None
    ) -> "UserState":
        """
        Открытие счёта пользователя.

        Args:
            user_id: Идентификатор пользователя
            balance: Начальный баланс
            opened_at: Базовое время (None — пользователь FRESH)
        """
        return cls(user_id=user_id, balance=balance, last_transaction=opened_at)

    @property
    def lifecycle(self) -> UserLifecycle:
        if self.last_transaction is None:
            return UserLifecycle.FRESH
        return UserLifecycle.ACTIVE

    @property
    def is_fresh(self) -> bool:
        return self.last_transaction is None

    def time_since_last(self, now: int) -> Optional[int]:
        """
        Секунды с последней сделки.

        Returns:
            now - last_transaction, или None для FRESH пользователя.
            Значение может быть <= 0; проверка выполняется движком.
        """
        if self.last_transaction is None:
            return None
        return now - self.last_transaction

    def with_transaction(self, new_balance: int, now: int) -> "UserState":
        """
        Копия с применённой сделкой (баланс и время меняются вместе).

        Raises:
            ValueError: если now раньше last_transaction (монотонность)
        """
        if self.last_transaction is not None and now < self.last_transaction:
            raise ValueError(
                f"last_transaction must be non-decreasing: "
                f"{now} < {self.last_transaction}"
            )
        return UserState(
            user_id=self.user_id,
            balance=new_balance,
            last_transaction=now,
        )
