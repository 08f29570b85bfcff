"""Venue — сервис площадки: рынки, счета и обработка ордеров.

Связывает хранилище счетов, источник времени и движок штрафов.

Конкурентность:
- Ордера одного пользователя сериализуются per-user lock
  (защита от lost update: два ордера не читают один и тот же баланс)
- Чтение рынка при оценке ордера без блокировок (запись immutable)
- Коммит ордера: один put_user с UserState.with_transaction() (баланс и время вместе)
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional

from stablex.core.domain.market_state import (
    DEFAULT_PENALTY_COEFFICIENT,
    DEFAULT_TIME_SENSITIVITY_SEC,
    MarketState,
)
from stablex.core.domain.order import OrderResult
from stablex.core.domain.user_state import UserState
from stablex.engine.order_penalty import EngineConfig, OrderPenaltyEngine
from stablex.ledger.clock import Clock, SystemClock
from stablex.ledger.storage import AccountStorage, InMemoryAccountStorage

logger = logging.getLogger(__name__)


class UnauthorizedPriceUpdateError(PermissionError):
    """Обновление цены не от authority рынка."""

    pass


@dataclass(frozen=True)
class VenueConfig:
    """Конфигурация площадки.

    Параметры штрафа применяются к каждому новому рынку.
    """

    penalty_coefficient: float = DEFAULT_PENALTY_COEFFICIENT
    time_sensitivity: int = DEFAULT_TIME_SENSITIVITY_SEC
    engine: EngineConfig = field(default_factory=EngineConfig)


class Venue:
    """Площадка с единственной референсной ценой на рынок."""

    def __init__(
        self,
        storage: Optional[AccountStorage] = None,
        clock: Optional[Clock] = None,
        config: Optional[VenueConfig] = None,
    ):
        """
        Args:
            storage: хранилище счетов (default: InMemoryAccountStorage)
            clock: источник времени (default: SystemClock)
            config: конфигурация площадки
        """
        self.storage = storage or InMemoryAccountStorage()
        self.clock = clock or SystemClock()
        self.config = config or VenueConfig()
        self.engine = OrderPenaltyEngine(self.config.engine)

        self._user_locks: Dict[str, threading.Lock] = {}
        self._user_locks_guard = threading.Lock()

    # -------------------------------------------------------------------------
    # Markets
    # -------------------------------------------------------------------------

    def initialize_market(
        self,
        market_id: str,
        price: int,
        authority: Optional[str] = None,
    ) -> MarketState:
        """Создание рынка с параметрами штрафа из VenueConfig.

        Raises:
            ValidationError: невалидная цена или параметры
            MarketAlreadyInitializedError: рынок уже создан
        """
        market = MarketState.initialize(
            market_id=market_id,
            price=price,
            penalty_coefficient=self.config.penalty_coefficient,
            time_sensitivity=self.config.time_sensitivity,
            authority=authority,
        )
        self.storage.create_market(market)
        logger.info(
            "Market initialized id=%s price=%d coefficient=%s sensitivity=%ds",
            market.market_id,
            market.current_price,
            market.penalty_coefficient,
            market.time_sensitivity,
        )
        return market

    def get_market(self, market_id: str) -> MarketState:
        return self.storage.get_market(market_id)

    def update_market_price(
        self, market_id: str, new_price: int, authority: str
    ) -> MarketState:
        """Привилегированное обновление референсной цены.

        Raises:
            UnauthorizedPriceUpdateError: authority не совпадает с рыночным
                (или у рынка нет authority)
            ValidationError: отрицательная цена
        """
        market = self.storage.get_market(market_id)
        if market.authority is None or market.authority != authority:
            logger.warning(
                "Price update rejected market=%s authority=%s", market_id, authority
            )
            raise UnauthorizedPriceUpdateError(
                f"{authority!r} is not allowed to update price of {market_id}"
            )

        updated = market.with_price(new_price)
        self.storage.put_market(updated)
        logger.info(
            "Market price updated id=%s %d -> %d",
            market_id,
            market.current_price,
            updated.current_price,
        )
        return updated

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def open_account(self, user_id: str, balance: int) -> UserState:
        """Открытие счёта (пользователь в состоянии FRESH).

        Raises:
            AccountAlreadyExistsError: счёт уже открыт
        """
        user = UserState.open(user_id=user_id, balance=balance)
        self.storage.create_user(user)
        logger.info("Account opened user=%s balance=%d", user_id, balance)
        return user

    def get_user(self, user_id: str) -> UserState:
        return self.storage.get_user(user_id)

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    def place_order(self, market_id: str, user_id: str, order_price: int) -> OrderResult:
        """Обработка ордера: штраф, новый баланс, новое время сделки.

        Stage-then-commit: результат полностью вычисляется движком,
        затем один put_user с user.with_transaction(...). Любая ошибка
        поднимается до коммита, состояние пользователя в хранилище не меняется.

        Raises:
            AccountNotFoundError: нет рынка или пользователя
            OrderPenaltyError: любая ошибка движка
        """
        market = self.storage.get_market(market_id)
        # Счета не удаляются: lock создаётся только для существующего счёта
        self.storage.get_user(user_id)

        with self._lock_for(user_id):
            user = self.storage.get_user(user_id)
            now = self.clock.now()

            result = self.engine.evaluate_order(market, user, order_price, now)

            self.storage.put_user(user.with_transaction(*result.as_tuple()))

        logger.info(
            "Order committed market=%s user=%s price=%d penalty=%d balance=%d",
            market_id,
            user_id,
            order_price,
            result.penalty_charged,
            result.new_balance,
        )
        return result

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._user_locks_guard:
            lock = self._user_locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._user_locks[user_id] = lock
            return lock
