"""
Penalty — Формулы штрафа за ордер

Чистые функции расчёта штрафа за отклонение цены ордера от рыночной
и за частоту торговли относительно time_sensitivity.

ФОРМУЛЫ:
    delta_price     = |order_price - current_price|
    price_penalty   = penalty_coefficient × exp(delta_price)
    time_multiplier = 1 + time_sensitivity / time_since_last
    time_penalty    = price_penalty × time_multiplier
    total_penalty   = price_penalty + time_penalty

Для пользователя без предыдущих сделок (time_since_last = None)
time_penalty = 0, т.е. первый ордер платит только price_penalty.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. time_since_last <= 0 → ValueError (деление никогда не выполняется)
2. Переполнение exp/произведения → OverflowError (никогда inf)
3. penalty_coefficient == 0 → все компоненты 0, exp не вычисляется
4. total_penalty не убывает по delta_price при фиксированном time_since_last
"""

from typing import NamedTuple, Optional

from stablex.core.math.numerical_safeguards import (
    checked_exp,
    checked_mul,
    is_valid_float,
    validate_non_negative,
    validate_positive,
)


# =============================================================================
# TYPES
# =============================================================================


class PenaltyBreakdown(NamedTuple):
    """Разложение штрафа по компонентам (float, без округления)."""

    delta_price: int
    time_since_last: Optional[int]
    price_penalty: float
    time_multiplier: float
    time_penalty: float
    total_penalty: float


# =============================================================================
# COMPONENTS
# =============================================================================


def delta_price(order_price: int, current_price: int) -> int:
    """
    Абсолютное отклонение цены ордера от рыночной.

    Examples:
        >>> delta_price(105, 100)
        5
        >>> delta_price(95, 100)
        5
    """
    return abs(order_price - current_price)


def price_penalty(penalty_coefficient: float, delta: int) -> float:
    """
    Экспоненциальный штраф за отклонение цены.

    Args:
        penalty_coefficient: Коэффициент штрафа (>= 0)
        delta: Абсолютное отклонение цены (>= 0)

    Returns:
        penalty_coefficient × exp(delta)

    Raises:
        ValueError: если коэффициент отрицательный или NaN/Inf
        OverflowError: если результат не представим как finite float

    Examples:
        >>> price_penalty(10.0, 0)
        10.0
        >>> price_penalty(0.0, 10_000)
        0.0
    """
    validate_non_negative(penalty_coefficient, "penalty_coefficient")
    if delta < 0:
        raise ValueError(f"delta must be non-negative, got {delta}")

    # 0 × exp(большое) дало бы NaN через inf
    if penalty_coefficient == 0:
        return 0.0

    return checked_mul(penalty_coefficient, checked_exp(float(delta)))


def time_multiplier(time_sensitivity: int, time_since_last: Optional[int]) -> float:
    """
    Множитель частоты торговли: 1 + time_sensitivity / time_since_last.

    Чем недавнее предыдущая сделка, тем больше множитель; при росте
    time_since_last множитель стремится к 1.

    Args:
        time_sensitivity: Константа чувствительности (секунды, > 0)
        time_since_last: Секунды с последней сделки (> 0) или None (Fresh)

    Returns:
        Множитель; 0.0 для Fresh пользователя (time_penalty отсутствует)

    Raises:
        ValueError: если time_sensitivity <= 0 или time_since_last <= 0

    Examples:
        >>> time_multiplier(1000, 2000)
        1.5
        >>> time_multiplier(1000, None)
        0.0
    """
    validate_positive(time_sensitivity, "time_sensitivity")

    if time_since_last is None:
        return 0.0

    if time_since_last <= 0:
        raise ValueError(
            f"time_since_last must be positive, got {time_since_last}"
        )

    return 1.0 + time_sensitivity / time_since_last


def time_penalty(price_pen: float, multiplier: float) -> float:
    """
    Штраф за частоту: price_penalty × time_multiplier.

    Raises:
        OverflowError: если результат не представим как finite float
    """
    if price_pen == 0 or multiplier == 0:
        return 0.0
    return checked_mul(price_pen, multiplier)


# =============================================================================
# FULL BREAKDOWN
# =============================================================================


def compute_penalty(
    order_price: int,
    current_price: int,
    penalty_coefficient: float,
    time_sensitivity: int,
    time_since_last: Optional[int],
) -> PenaltyBreakdown:
    """
    Полный расчёт штрафа за ордер.

    Args:
        order_price: Цена ордера (минимальные единицы)
        current_price: Рыночная цена (минимальные единицы)
        penalty_coefficient: Коэффициент штрафа
        time_sensitivity: Константа чувствительности (секунды)
        time_since_last: Секунды с последней сделки или None (Fresh)

    Returns:
        PenaltyBreakdown со всеми компонентами

    Raises:
        ValueError: невалидные параметры (включая time_since_last <= 0)
        OverflowError: переполнение любого компонента

    Examples:
        >>> compute_penalty(100, 100, 10.0, 1000, 2000).total_penalty
        25.0
    """
    delta = delta_price(order_price, current_price)
    multiplier = time_multiplier(time_sensitivity, time_since_last)
    price_pen = price_penalty(penalty_coefficient, delta)
    time_pen = time_penalty(price_pen, multiplier)

    total = price_pen + time_pen
    if not is_valid_float(total):
        raise OverflowError(
            f"total penalty is not representable: {price_pen} + {time_pen}"
        )

    return PenaltyBreakdown(
        delta_price=delta,
        time_since_last=time_since_last,
        price_penalty=price_pen,
        time_multiplier=multiplier,
        time_penalty=time_pen,
        total_penalty=total,
    )
