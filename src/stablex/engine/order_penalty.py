"""Order Penalty Engine — расчёт и применение штрафа за ордер.

Движок без состояния: читает снапшот MarketState и UserState, считает
штраф и возвращает OrderResult с новым балансом и временем сделки.
Входные модели не мутируются; коммит нового UserState выполняет вызывающий.

Порядок проверок (до любых вычислений):
1. Параметры рынка (time_sensitivity > 0, коэффициент finite >= 0)
2. Цена ордера (>= 0)
3. Время с последней сделки (> 0 для ACTIVE пользователя)

Алгоритм:
1. delta_price = |order_price - current_price|
2. price_penalty = coefficient × exp(delta_price)
3. time_penalty = price_penalty × (1 + time_sensitivity / time_since_last)
   (0 для FRESH пользователя)
4. total_penalty = price_penalty + time_penalty → целые единицы (snap/ceil)
5. new_balance = balance - penalty_charged (политика баланса из EngineConfig)
6. new_last_transaction = now
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum

from stablex.core.domain.market_state import MarketState
from stablex.core.domain.order import OrderResult
from stablex.core.domain.user_state import UserState
from stablex.core.math.numerical_safeguards import (
    MAX_BALANCE_UNITS,
    MIN_BALANCE_UNITS,
    to_balance_units,
)
from stablex.core.math.penalty import PenaltyBreakdown, compute_penalty
from stablex.engine.exceptions import (
    ConfigurationError,
    DegenerateTimeError,
    InsufficientBalanceError,
    InvalidOrderError,
    PenaltyOverflowError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


class BalancePolicy(str, Enum):
    """Политика применения штрафа к балансу."""

    # Штраф, превышающий баланс, отклоняет ордер
    BALANCE_FLOOR = "BALANCE_FLOOR"
    # Баланс может уйти в минус (долг)
    DEBT_ALLOWED = "DEBT_ALLOWED"


@dataclass(frozen=True)
class EngineConfig:
    """Конфигурация движка штрафов.

    - balance_policy: BALANCE_FLOOR (default) или DEBT_ALLOWED
    - max_penalty_units: верхняя граница списываемого штрафа
    """

    balance_policy: BalancePolicy = BalancePolicy.BALANCE_FLOOR
    max_penalty_units: int = MAX_BALANCE_UNITS

    def __post_init__(self):
        if self.max_penalty_units <= 0:
            raise ValueError(
                f"max_penalty_units must be positive, got {self.max_penalty_units}"
            )


# =============================================================================
# ENGINE
# =============================================================================


class OrderPenaltyEngine:
    """Движок штрафов за отклонение цены и частоту торговли.

    Stateless: один вызов evaluate_order затрагивает один рынок и одного
    пользователя. Сериализация ордеров одного пользователя — на стороне
    вызывающего (см. stablex.ledger.venue).
    """

    def __init__(self, config: EngineConfig | None = None):
        """
        Args:
            config: конфигурация движка (опционально, используется default)
        """
        self.config = config or EngineConfig()

    def evaluate_order(
        self,
        market: MarketState,
        user: UserState,
        order_price: int,
        now: int,
    ) -> OrderResult:
        """Оценка ордера: штраф, новый баланс и новое время сделки.

        Args:
            market: снапшот рынка (только чтение)
            user: текущее состояние пользователя (не мутируется)
            order_price: цена ордера (минимальные единицы)
            now: текущее время (Unix секунды) от доверенного источника

        Returns:
            OrderResult с new_balance и new_last_transaction == now

        Raises:
            ConfigurationError: невалидные параметры рынка
            InvalidOrderError: отрицательная цена ордера
            DegenerateTimeError: now <= user.last_transaction
            PenaltyOverflowError: переполнение штрафа или баланса
            InsufficientBalanceError: штраф > баланса (BALANCE_FLOOR)
        """
        # 1. Валидация до любых вычислений
        self._validate_market(market)

        if order_price < 0:
            raise InvalidOrderError(f"order_price must be non-negative, got {order_price}")

        time_since_last = user.time_since_last(now)
        if time_since_last is not None and time_since_last <= 0:
            logger.warning(
                "Order rejected: degenerate time user=%s now=%s last=%s",
                user.user_id,
                now,
                user.last_transaction,
            )
            raise DegenerateTimeError(time_since_last)

        # 2. Расчёт штрафа
        breakdown = self._compute(market, order_price, time_since_last)
        penalty_charged = self._to_units(breakdown)

        logger.debug(
            "Penalty breakdown market=%s user=%s delta=%d dt=%s "
            "price_penalty=%.6f time_penalty=%.6f charged=%d",
            market.market_id,
            user.user_id,
            breakdown.delta_price,
            time_since_last,
            breakdown.price_penalty,
            breakdown.time_penalty,
            penalty_charged,
        )

        # 3. Применение к балансу (stage, без коммита)
        new_balance = self._apply(user, penalty_charged)

        return OrderResult(
            market_id=market.market_id,
            user_id=user.user_id,
            order_price=order_price,
            delta_price=breakdown.delta_price,
            time_since_last=time_since_last,
            price_penalty=breakdown.price_penalty,
            time_penalty=breakdown.time_penalty,
            total_penalty=breakdown.total_penalty,
            penalty_charged=penalty_charged,
            previous_balance=user.balance,
            new_balance=new_balance,
            new_last_transaction=now,
        )

    def _validate_market(self, market: MarketState) -> None:
        # MarketState валидирует это при создании, но model_construct
        # или внешний снапшот могут обойти pydantic
        if market.time_sensitivity <= 0:
            raise ConfigurationError(
                f"time_sensitivity must be positive, got {market.time_sensitivity}"
            )
        coefficient = market.penalty_coefficient
        if not math.isfinite(coefficient) or coefficient < 0:
            raise ConfigurationError(
                f"penalty_coefficient must be finite and non-negative, got {coefficient}"
            )
        if market.current_price < 0:
            raise ConfigurationError(
                f"current_price must be non-negative, got {market.current_price}"
            )

    def _compute(
        self,
        market: MarketState,
        order_price: int,
        time_since_last: int | None,
    ) -> PenaltyBreakdown:
        try:
            return compute_penalty(
                order_price=order_price,
                current_price=market.current_price,
                penalty_coefficient=market.penalty_coefficient,
                time_sensitivity=market.time_sensitivity,
                time_since_last=time_since_last,
            )
        except OverflowError as e:
            logger.warning(
                "Order rejected: penalty overflow market=%s order_price=%d",
                market.market_id,
                order_price,
            )
            raise PenaltyOverflowError(str(e)) from e

    def _to_units(self, breakdown: PenaltyBreakdown) -> int:
        try:
            units = to_balance_units(breakdown.total_penalty)
        except OverflowError as e:
            raise PenaltyOverflowError(str(e)) from e

        if units > self.config.max_penalty_units:
            raise PenaltyOverflowError(
                f"penalty {units} exceeds max_penalty_units="
                f"{self.config.max_penalty_units}"
            )
        return units

    def _apply(self, user: UserState, penalty_charged: int) -> int:
        new_balance = user.balance - penalty_charged

        if self.config.balance_policy == BalancePolicy.BALANCE_FLOOR:
            if new_balance < 0:
                logger.warning(
                    "Order rejected: insufficient balance user=%s balance=%d penalty=%d",
                    user.user_id,
                    user.balance,
                    penalty_charged,
                )
                raise InsufficientBalanceError(user.balance, penalty_charged)
        elif new_balance < MIN_BALANCE_UNITS:
            raise PenaltyOverflowError(
                f"balance {new_balance} below MIN_BALANCE_UNITS={MIN_BALANCE_UNITS}"
            )

        return new_balance
