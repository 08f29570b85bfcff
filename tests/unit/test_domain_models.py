"""
Тесты для доменных моделей: MarketState, UserState, OrderResult

Проверяет:
1. Создание и валидацию моделей Pydantic
2. Инварианты (current_price >= 0, time_sensitivity > 0)
3. Immutability (frozen=True)
4. Жизненный цикл пользователя FRESH → ACTIVE
5. Монотонность last_transaction
"""

import pytest
from pydantic import ValidationError

from stablex.core.domain import (
    DEFAULT_PENALTY_COEFFICIENT,
    DEFAULT_TIME_SENSITIVITY_SEC,
    MarketState,
    OrderResult,
    UserLifecycle,
    UserState,
)


# =============================================================================
# MARKET STATE TESTS
# =============================================================================


class TestMarketState:
    """Тесты для модели MarketState"""

    def test_initialize_with_defaults(self):
        market = MarketState.initialize("SOL-USD", 100)

        assert market.market_id == "SOL-USD"
        assert market.current_price == 100
        assert market.penalty_coefficient == DEFAULT_PENALTY_COEFFICIENT
        assert market.time_sensitivity == DEFAULT_TIME_SENSITIVITY_SEC
        assert market.authority is None

    def test_default_constants(self):
        assert DEFAULT_PENALTY_COEFFICIENT == 10.0
        assert DEFAULT_TIME_SENSITIVITY_SEC == 1000

    def test_initialize_zero_price_allowed(self):
        assert MarketState.initialize("m", 0).current_price == 0

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            MarketState.initialize("m", -1)

    def test_zero_time_sensitivity_rejected(self):
        with pytest.raises(ValidationError):
            MarketState.initialize("m", 100, time_sensitivity=0)

    def test_negative_coefficient_rejected(self):
        with pytest.raises(ValidationError):
            MarketState.initialize("m", 100, penalty_coefficient=-0.1)

    def test_infinite_coefficient_rejected(self):
        with pytest.raises(ValidationError):
            MarketState.initialize("m", 100, penalty_coefficient=float("inf"))

    def test_fractional_coefficient(self):
        market = MarketState.initialize("m", 100, penalty_coefficient=0.25)
        assert market.penalty_coefficient == 0.25

    def test_empty_market_id_rejected(self):
        with pytest.raises(ValidationError):
            MarketState.initialize("", 100)

    def test_immutability(self):
        market = MarketState.initialize("m", 100)
        with pytest.raises(ValidationError):
            market.current_price = 200

    def test_with_price_returns_copy(self):
        market = MarketState.initialize("m", 100, authority="admin")
        updated = market.with_price(120)

        assert updated.current_price == 120
        assert updated.authority == "admin"
        assert updated.time_sensitivity == market.time_sensitivity
        assert market.current_price == 100

    def test_with_price_negative_rejected(self):
        market = MarketState.initialize("m", 100)
        with pytest.raises(ValidationError):
            market.with_price(-5)

    def test_json_roundtrip(self):
        market = MarketState.initialize("m", 100, penalty_coefficient=2.5, authority="admin")
        restored = MarketState.model_validate_json(market.model_dump_json())
        assert restored == market


# =============================================================================
# USER STATE TESTS
# =============================================================================


class TestUserState:
    """Тесты для модели UserState"""

    def test_open_fresh_user(self):
        user = UserState.open("alice", 1_000_000)

        assert user.balance == 1_000_000
        assert user.last_transaction is None
        assert user.is_fresh
        assert user.lifecycle == UserLifecycle.FRESH

    def test_open_with_baseline(self):
        user = UserState.open("alice", 1_000_000, opened_at=1_700_000_000)

        assert not user.is_fresh
        assert user.lifecycle == UserLifecycle.ACTIVE

    def test_negative_balance_representable(self):
        """Долг допустим на уровне модели; политика — в движке."""
        assert UserState.open("alice", -50).balance == -50

    def test_time_since_last(self):
        user = UserState.open("alice", 0, opened_at=1000)
        assert user.time_since_last(3000) == 2000
        assert user.time_since_last(1000) == 0
        assert UserState.open("bob", 0).time_since_last(3000) is None

    def test_with_transaction(self):
        user = UserState.open("alice", 1000)
        updated = user.with_transaction(new_balance=975, now=5000)

        assert updated.balance == 975
        assert updated.last_transaction == 5000
        assert updated.lifecycle == UserLifecycle.ACTIVE
        # Исходный экземпляр не изменён
        assert user.balance == 1000
        assert user.is_fresh

    def test_with_transaction_rejects_time_going_back(self):
        user = UserState.open("alice", 1000, opened_at=5000)
        with pytest.raises(ValueError, match="non-decreasing"):
            user.with_transaction(new_balance=900, now=4999)

    def test_immutability(self):
        user = UserState.open("alice", 1000)
        with pytest.raises(ValidationError):
            user.balance = 0


# =============================================================================
# ORDER RESULT TESTS
# =============================================================================


class TestOrderResult:
    """Тесты для модели OrderResult"""

    @pytest.fixture
    def result(self) -> OrderResult:
        return OrderResult(
            market_id="m",
            user_id="alice",
            order_price=100,
            delta_price=0,
            time_since_last=2000,
            price_penalty=10.0,
            time_penalty=15.0,
            total_penalty=25.0,
            penalty_charged=25,
            previous_balance=1_000_000,
            new_balance=999_975,
            new_last_transaction=1_700_002_000,
        )

    def test_commit_via_with_transaction(self, result: OrderResult):
        previous = UserState.open("alice", 1_000_000, opened_at=1_700_000_000)
        user = previous.with_transaction(*result.as_tuple())
        assert user.user_id == "alice"
        assert user.balance == 999_975
        assert user.last_transaction == 1_700_002_000
        assert previous.balance == 1_000_000

    def test_as_tuple(self, result: OrderResult):
        assert result.as_tuple() == (999_975, 1_700_002_000)

    def test_negative_penalty_rejected(self):
        with pytest.raises(ValidationError):
            OrderResult(
                market_id="m",
                user_id="alice",
                order_price=100,
                delta_price=0,
                time_since_last=None,
                price_penalty=10.0,
                time_penalty=0.0,
                total_penalty=10.0,
                penalty_charged=-1,
                previous_balance=0,
                new_balance=1,
                new_last_transaction=0,
            )
