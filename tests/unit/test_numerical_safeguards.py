"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. NaN/Inf проверки
2. Порог float-шума при переводе в единицы баланса
3. Checked exp/mul (OverflowError вместо inf)
4. Перевод штрафа в целые единицы баланса
5. Валидацию параметров
"""

import math

import pytest

from stablex.core.math.numerical_safeguards import (
    EPS_BALANCE_SNAP,
    MAX_BALANCE_UNITS,
    MIN_BALANCE_UNITS,
    checked_exp,
    checked_mul,
    is_valid_float,
    snap_tolerance,
    to_balance_units,
    validate_non_negative,
    validate_positive,
)


# =============================================================================
# ТЕСТЫ NaN/Inf
# =============================================================================


class TestValidity:
    """Тесты is_valid_float и диапазона баланса"""

    def test_finite_values_valid(self) -> None:
        assert is_valid_float(0.0)
        assert is_valid_float(-1e300)
        assert is_valid_float(42)

    def test_nan_inf_invalid(self) -> None:
        assert not is_valid_float(float("nan"))
        assert not is_valid_float(float("inf"))
        assert not is_valid_float(float("-inf"))

    def test_balance_range(self) -> None:
        """Диапазон баланса совпадает с int64"""
        assert MAX_BALANCE_UNITS == 9_223_372_036_854_775_807
        assert MIN_BALANCE_UNITS == -MAX_BALANCE_UNITS - 1


# =============================================================================
# ТЕСТЫ CHECKED ARITHMETIC
# =============================================================================


class TestCheckedExp:
    """Тесты checked_exp"""

    def test_exp_zero(self) -> None:
        assert checked_exp(0.0) == 1.0

    def test_exp_matches_math(self) -> None:
        assert checked_exp(5.0) == math.exp(5.0)

    def test_exp_overflow_raises(self) -> None:
        """exp(710) не представим как float"""
        with pytest.raises(OverflowError):
            checked_exp(710.0)

    def test_exp_largest_finite(self) -> None:
        assert math.isfinite(checked_exp(709.0))

    def test_exp_nan_rejected(self) -> None:
        with pytest.raises(ValueError, match="NaN/Inf"):
            checked_exp(float("nan"))


class TestCheckedMul:
    """Тесты checked_mul"""

    def test_regular_product(self) -> None:
        assert checked_mul(10.0, 1.5) == 15.0

    def test_overflow_to_inf_raises(self) -> None:
        with pytest.raises(OverflowError):
            checked_mul(1e308, 10.0)


# =============================================================================
# ТЕСТЫ ПЕРЕВОДА В ЕДИНИЦЫ БАЛАНСА
# =============================================================================


class TestToBalanceUnits:
    """Тесты to_balance_units: snap к целому или ceil"""

    def test_exact_integer(self) -> None:
        assert to_balance_units(25.0) == 25
        assert to_balance_units(0.0) == 0

    def test_float_noise_snaps_to_integer(self) -> None:
        """Шум float в пределах толерантности не добавляет единицу"""
        assert to_balance_units(25.000000000001) == 25
        assert to_balance_units(24.9999999999) == 25

    def test_fraction_rounds_up(self) -> None:
        """Штраф никогда не занижается"""
        assert to_balance_units(1.2) == 2
        assert to_balance_units(1484.131591025766) == 1485

    def test_large_fraction_rounds_up(self) -> None:
        """Порог не растёт с величиной: дробная часть сверх 1e9 не теряется"""
        assert to_balance_units(1_000_000_000.4) == 1_000_000_001
        assert to_balance_units(1_000_000_000.000001) == 1_000_000_001
        assert to_balance_units(3_297_039_336.2080364) == 3_297_039_337

    def test_large_exact_integer(self) -> None:
        assert to_balance_units(1_000_000_000.0) == 1_000_000_000
        assert to_balance_units(2.0**60) == 2**60

    def test_snap_tolerance(self) -> None:
        """Абсолютный порог для обычных сумм, несколько ulp для огромных"""
        assert snap_tolerance(25.0) == EPS_BALANCE_SNAP
        assert snap_tolerance(1e9) < 1e-6
        assert snap_tolerance(2.0**60) == 4 * math.ulp(2.0**60)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            to_balance_units(-1.0)

    def test_nan_rejected(self) -> None:
        with pytest.raises(ValueError, match="NaN"):
            to_balance_units(float("nan"))

    def test_inf_overflow(self) -> None:
        with pytest.raises(OverflowError):
            to_balance_units(float("inf"))

    def test_above_int64_overflow(self) -> None:
        with pytest.raises(OverflowError, match="MAX_BALANCE_UNITS"):
            to_balance_units(1e30)


# =============================================================================
# ТЕСТЫ ВАЛИДАЦИИ
# =============================================================================


class TestValidation:
    """Тесты validate_positive / validate_non_negative"""

    def test_validate_positive(self) -> None:
        validate_positive(1000, "time_sensitivity")

        with pytest.raises(ValueError, match="time_sensitivity must be positive"):
            validate_positive(0, "time_sensitivity")

        with pytest.raises(ValueError, match="not NaN/Inf"):
            validate_positive(float("inf"), "time_sensitivity")

    def test_validate_non_negative(self) -> None:
        validate_non_negative(0.0, "penalty_coefficient")

        with pytest.raises(ValueError, match="must be non-negative"):
            validate_non_negative(-0.5, "penalty_coefficient")
