"""
Исключения движка штрафов.

Ни одно исключение не перехватывается и не ретраится движком:
все поднимаются вызывающему до изменения состояния пользователя.
"""


class OrderPenaltyError(Exception):
    """Базовая ошибка оценки ордера."""

    pass


class ConfigurationError(OrderPenaltyError, ValueError):
    """Невалидные параметры рынка (например, time_sensitivity == 0)."""

    pass


class InvalidOrderError(OrderPenaltyError, ValueError):
    """Невалидный ордер (отрицательная цена)."""

    pass


class DegenerateTimeError(OrderPenaltyError):
    """
    Неположительное время с последней сделки (now <= last_transaction).

    Ордер отклоняется; деление на time_since_last не выполняется.
    """

    def __init__(self, time_since_last: int):
        self.time_since_last = time_since_last
        super().__init__(
            f"time since last transaction must be positive, got {time_since_last}s"
        )


class PenaltyOverflowError(OrderPenaltyError, OverflowError):
    """Штраф или новый баланс вне представимого диапазона."""

    pass


class InsufficientBalanceError(OrderPenaltyError):
    """Штраф превышает баланс (политика BALANCE_FLOOR)."""

    def __init__(self, balance: int, penalty: int):
        self.balance = balance
        self.penalty = penalty
        super().__init__(
            f"penalty {penalty} exceeds balance {balance}"
        )
