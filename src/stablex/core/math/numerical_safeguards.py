"""
Numerical Safeguards — Safe Math Primitives

Модуль обеспечивает численную устойчивость расчёта штрафов:
- Проверка float на NaN/Inf
- Экспонента и умножение с явной ошибкой переполнения (вместо inf)
- Перевод float-штрафа в целые единицы баланса

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Переполнение никогда не маскируется: OverflowError вместо inf/wrap
2. NaN/Inf никогда не попадают в баланс
3. Штраф в единицах баланса никогда не меньше float-штрафа, кроме
   шума порядка EPS_BALANCE_SNAP или нескольких ulp
4. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для общих вычислений и сравнений
EPS_CALC: Final[float] = 1e-12

# Абсолютный порог float-шума при переводе штрафа в единицы баланса.
# Не масштабируется с величиной: дробная часть больше порога всегда
# округляется вверх
EPS_BALANCE_SNAP: Final[float] = 1e-9

# Для больших значений шум измеряется в ulp(value)
BALANCE_SNAP_ULPS: Final[int] = 4

# Максимальное значение баланса/штрафа в минимальных единицах (int64 леджера)
MAX_BALANCE_UNITS: Final[int] = 2**63 - 1

# Минимальное значение баланса (долг) в минимальных единицах
MIN_BALANCE_UNITS: Final[int] = -(2**63)


# =============================================================================
# NaN/Inf ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение валидное (finite), False если NaN или Inf
    """
    return math.isfinite(value)


# =============================================================================
# CHECKED ARITHMETIC
# =============================================================================


def checked_exp(x: float) -> float:
    """
    Экспонента с явной ошибкой переполнения.

    math.exp уже бросает OverflowError для x > ~709.78, но результат
    дополнительно проверяется на finite, чтобы inf никогда не ушёл дальше.

    Args:
        x: Показатель степени

    Returns:
        exp(x) (всегда finite)

    Raises:
        ValueError: если x содержит NaN/Inf
        OverflowError: если exp(x) не представим как finite float

    Examples:
        >>> checked_exp(0.0)
        1.0
        >>> checked_exp(1000.0)  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        OverflowError: exp(1000.0) is not representable
    """
    if not is_valid_float(x):
        raise ValueError(f"exp argument contains NaN/Inf: {x}")

    try:
        result = math.exp(x)
    except OverflowError:
        raise OverflowError(f"exp({x}) is not representable") from None

    if not is_valid_float(result):
        raise OverflowError(f"exp({x}) is not representable")

    return result


def checked_mul(a: float, b: float) -> float:
    """
    Умножение float с явной ошибкой переполнения.

    Raises:
        OverflowError: если произведение не finite
    """
    result = a * b
    if not is_valid_float(result):
        raise OverflowError(f"{a} * {b} is not representable")
    return result


# =============================================================================
# ПЕРЕВОД В ЕДИНИЦЫ БАЛАНСА
# =============================================================================


def snap_tolerance(value: float, eps: float = EPS_BALANCE_SNAP) -> float:
    """
    Допустимое отклонение от целого, которое считается float-шумом.

    max(eps, BALANCE_SNAP_ULPS × ulp(value)): абсолютный порог для обычных
    сумм, несколько ulp для сумм, где eps меньше шага float.

    Examples:
        >>> snap_tolerance(25.0)
        1e-09
    """
    return max(eps, math.ulp(value) * BALANCE_SNAP_ULPS)


def to_balance_units(value: float, eps: float = EPS_BALANCE_SNAP) -> int:
    """
    Перевод неотрицательной float-суммы в целые минимальные единицы баланса.

    Правило округления:
    - Если |value - round(value)| <= snap_tolerance(value) → это целое
      (гасит шум вида 25.000000000001)
    - Иначе → ceil(value) (штраф никогда не занижается)

    Порог абсолютный: 1_000_000_000.4 списывается как 1_000_000_001,
    а не округляется к ближайшему.

    Args:
        value: Неотрицательная сумма (float)
        eps: Абсолютный порог float-шума

    Returns:
        Целое число единиц

    Raises:
        ValueError: если value < 0 или NaN
        OverflowError: если value = inf или результат > MAX_BALANCE_UNITS

    Examples:
        >>> to_balance_units(25.0)
        25
        >>> to_balance_units(1484.1315910257660)
        1485
        >>> to_balance_units(1_000_000_000.4)
        1000000001
    """
    if math.isnan(value):
        raise ValueError("value must not be NaN")
    if math.isinf(value):
        raise OverflowError(f"value is not finite: {value}")
    if value < 0:
        raise ValueError(f"value must be non-negative, got {value}")

    nearest = round(value)
    if abs(value - nearest) <= snap_tolerance(value, eps):
        units = int(nearest)
    else:
        units = math.ceil(value)

    if units > MAX_BALANCE_UNITS:
        raise OverflowError(
            f"value {value:.6e} exceeds MAX_BALANCE_UNITS={MAX_BALANCE_UNITS}"
        )

    return units


# =============================================================================
# ВАЛИДАЦИЯ И ПРОВЕРКИ
# =============================================================================


def validate_positive(value: float, name: str, eps: float = EPS_CALC) -> None:
    """
    Валидация, что значение положительное.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)
        eps: Минимальный порог (default: EPS_CALC)

    Raises:
        ValueError: Если value <= eps или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value <= eps:
        raise ValueError(f"{name} must be positive (> {eps}), got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """
    Валидация, что значение неотрицательное.

    Raises:
        ValueError: Если value < 0 или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
