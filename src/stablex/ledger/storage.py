"""Account Storage — хранилище записей рынков и пользователей.

Интерфейс AccountStorage описывает синхронный create/read/write доступ
к MarketState и UserState по идентификатору. Записи — immutable модели,
поэтому put_* является атомарной заменой записи целиком.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from stablex.core.contracts import (
    MARKET_STATE_SCHEMA,
    USER_STATE_SCHEMA,
    ContractViolationError,
    contract_errors,
)
from stablex.core.domain.market_state import MarketState
from stablex.core.domain.user_state import UserState

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class AccountNotFoundError(KeyError):
    """Запись рынка или пользователя не найдена."""

    pass


class AccountAlreadyExistsError(Exception):
    """Запись с таким идентификатором уже создана."""

    pass


class MarketAlreadyInitializedError(AccountAlreadyExistsError):
    """Повторная инициализация существующего рынка."""

    pass


# =============================================================================
# INTERFACE
# =============================================================================


class AccountStorage(ABC):
    """Интерфейс хранилища счетов."""

    @abstractmethod
    def create_market(self, market: MarketState) -> None:
        """Raises: MarketAlreadyInitializedError"""

    @abstractmethod
    def get_market(self, market_id: str) -> MarketState:
        """Raises: AccountNotFoundError"""

    @abstractmethod
    def put_market(self, market: MarketState) -> None:
        """Замена существующей записи. Raises: AccountNotFoundError"""

    @abstractmethod
    def create_user(self, user: UserState) -> None:
        """Raises: AccountAlreadyExistsError"""

    @abstractmethod
    def get_user(self, user_id: str) -> UserState:
        """Raises: AccountNotFoundError"""

    @abstractmethod
    def put_user(self, user: UserState) -> None:
        """Замена существующей записи. Raises: AccountNotFoundError"""


# =============================================================================
# IN-MEMORY IMPLEMENTATION
# =============================================================================


class InMemoryAccountStorage(AccountStorage):
    """Потокобезопасное in-memory хранилище.

    Один lock защищает словари; сами записи immutable, поэтому чтение
    возвращает согласованный снапшот.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._markets: Dict[str, MarketState] = {}
        self._users: Dict[str, UserState] = {}

    @classmethod
    def from_records(
        cls,
        markets: Optional[Iterable[Dict[str, Any]]] = None,
        users: Optional[Iterable[Dict[str, Any]]] = None,
    ) -> "InMemoryAccountStorage":
        """Создание хранилища из JSON-совместимых записей.

        Сначала все записи проверяются против JSON Schema контрактов;
        если хоть одна не проходит, ContractViolationError перечисляет
        нарушения всех записей (например "users[1] balance: ...").

        Raises:
            ContractViolationError: записи не соответствуют контрактам
            AccountAlreadyExistsError: дублирующийся идентификатор
        """
        markets = list(markets or ())
        users = list(users or ())

        errors = []
        for i, payload in enumerate(markets):
            errors.extend(
                f"markets[{i}] {e}" for e in contract_errors(MARKET_STATE_SCHEMA, payload)
            )
        for i, payload in enumerate(users):
            errors.extend(
                f"users[{i}] {e}" for e in contract_errors(USER_STATE_SCHEMA, payload)
            )
        if errors:
            logger.warning(
                "Rejected %d records: %d contract violations",
                len(markets) + len(users),
                len(errors),
            )
            raise ContractViolationError("records", errors)

        storage = cls()
        for payload in markets:
            storage.create_market(MarketState.model_validate(payload))
        for payload in users:
            storage.create_user(UserState.model_validate(payload))
        return storage

    def create_market(self, market: MarketState) -> None:
        with self._lock:
            if market.market_id in self._markets:
                raise MarketAlreadyInitializedError(
                    f"market already initialized: {market.market_id}"
                )
            self._markets[market.market_id] = market
        logger.debug("Stored market %s", market.market_id)

    def get_market(self, market_id: str) -> MarketState:
        with self._lock:
            try:
                return self._markets[market_id]
            except KeyError:
                raise AccountNotFoundError(f"market not found: {market_id}") from None

    def put_market(self, market: MarketState) -> None:
        with self._lock:
            if market.market_id not in self._markets:
                raise AccountNotFoundError(f"market not found: {market.market_id}")
            self._markets[market.market_id] = market

    def create_user(self, user: UserState) -> None:
        with self._lock:
            if user.user_id in self._users:
                raise AccountAlreadyExistsError(f"user already exists: {user.user_id}")
            self._users[user.user_id] = user
        logger.debug("Stored user %s", user.user_id)

    def get_user(self, user_id: str) -> UserState:
        with self._lock:
            try:
                return self._users[user_id]
            except KeyError:
                raise AccountNotFoundError(f"user not found: {user_id}") from None

    def put_user(self, user: UserState) -> None:
        with self._lock:
            if user.user_id not in self._users:
                raise AccountNotFoundError(f"user not found: {user.user_id}")
            self._users[user.user_id] = user
