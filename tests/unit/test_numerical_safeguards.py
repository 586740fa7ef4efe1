"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. Валидацию EqualityTolerance (pydantic)
2. Сравнение с ненулевой и нулевой целью
3. Расстояние в ULP
4. Log Relative Error
5. Вспомогательные функции (absmax, sign, validate_max_iter)
6. IEEE-семантику safe_* функций
"""

import math

import pytest
from pydantic import ValidationError

from src.core.math.numerical_safeguards import (
    DEFAULT_TOLERANCE,
    LEAST_NORMAL,
    STRICT_TOLERANCE,
    ULP_OF_ONE,
    EqualityTolerance,
    absmax,
    is_approx,
    is_approx_zero,
    is_valid_float,
    is_within_ulp,
    log_relative_error,
    safe_divide,
    safe_exp,
    safe_gamma,
    safe_lgamma,
    safe_log,
    safe_pow,
    safe_sqrt,
    sign,
    ulp_dist,
    validate_max_iter,
)

# =============================================================================
# ТЕСТЫ EQUALITY TOLERANCE
# =============================================================================


class TestEqualityTolerance:
    """Тесты для EqualityTolerance"""

    def test_default_values(self) -> None:
        """Значения по умолчанию: r = √ulp, a = 8·least normal"""
        tol = EqualityTolerance.default()
        assert tol.relative == math.sqrt(ULP_OF_ONE)
        assert tol.absolute == 8 * LEAST_NORMAL

    def test_strict_values(self) -> None:
        """Строгая толерантность: r = 2·ulp"""
        assert STRICT_TOLERANCE.relative == 2 * ULP_OF_ONE
        assert STRICT_TOLERANCE.absolute == 8 * LEAST_NORMAL

    def test_negative_relative_rejected(self) -> None:
        """Отрицательная относительная толерантность отклоняется"""
        with pytest.raises(ValidationError):
            EqualityTolerance(relative=-1e-10)

    def test_nan_absolute_rejected(self) -> None:
        """NaN абсолютная толерантность отклоняется"""
        with pytest.raises(ValidationError):
            EqualityTolerance(absolute=float("nan"))

    def test_frozen(self) -> None:
        """Модель immutable"""
        with pytest.raises(ValidationError):
            DEFAULT_TOLERANCE.relative = 1.0  # type: ignore[misc]


# =============================================================================
# ТЕСТЫ ПРИБЛИЖЁННОГО СРАВНЕНИЯ
# =============================================================================


class TestIsApprox:
    """Тесты для is_approx и is_approx_zero"""

    def test_close_values(self) -> None:
        """Близкие значения равны при стандартной толерантности"""
        assert is_approx(1.0, 1.0 + 1e-12)
        assert is_approx(1e100, 1e100 * (1 + 1e-12))

    def test_distant_values(self) -> None:
        """Далёкие значения не равны"""
        assert not is_approx(1.0, 1.001)

    def test_strict_tolerance(self) -> None:
        """Строгая толерантность различает 1e-12"""
        assert not is_approx(1.0, 1.0 + 1e-12, tolerance=STRICT_TOLERANCE)
        assert is_approx(1.0, 1.0 + ULP_OF_ONE, tolerance=STRICT_TOLERANCE)

    def test_trusted_uses_target_scale(self) -> None:
        """trusted=True масштабирует ошибку по цели, а не по большему из двух"""
        tol = EqualityTolerance(relative=0.1, absolute=0.0)
        assert is_approx(2.0, 1.81, tolerance=tol)
        assert not is_approx(2.0, 1.81, tolerance=tol, trusted=True)

    def test_zero_without_scale(self) -> None:
        """Без масштаба работает только абсолютная толерантность"""
        assert is_approx_zero(0.0)
        assert is_approx_zero(LEAST_NORMAL)
        assert not is_approx_zero(1e-20)

    def test_zero_with_scale(self) -> None:
        """Масштаб делает сравнение с нулём относительным"""
        assert is_approx_zero(1e-20, scale=1.0)
        assert not is_approx_zero(1e-5, scale=1.0)


# =============================================================================
# ТЕСТЫ ULP И LRE
# =============================================================================


class TestUlpDist:
    """Тесты для ulp_dist"""

    def test_equal(self) -> None:
        """Равные числа на нулевом расстоянии"""
        assert ulp_dist(1.0, 1.0) == 0.0

    def test_adjacent(self) -> None:
        """Соседние float на расстоянии 1"""
        assert ulp_dist(1.0, math.nextafter(1.0, 2.0)) == 1.0
        assert ulp_dist(-1.0, math.nextafter(-1.0, -2.0)) == 1.0

    def test_across_binade(self) -> None:
        """Расстояние через границу степени двойки считается по шагам"""
        below = math.nextafter(2.0, 0.0)
        above = math.nextafter(2.0, 4.0)
        assert ulp_dist(below, above) == 2.0

    def test_symmetric(self) -> None:
        """Расстояние симметрично"""
        assert ulp_dist(1.0, 1.5) == ulp_dist(1.5, 1.0)

    def test_opposite_signs_far(self) -> None:
        """Числа разного знака считаются далёкими"""
        assert ulp_dist(-1.0, 1.0) == pytest.approx(1.7976931348623157e308)

    def test_within_ulp(self) -> None:
        """is_within_ulp для малых расстояний"""
        assert is_within_ulp(1.0, 1.0 + 4 * ULP_OF_ONE, n=5)
        assert not is_within_ulp(1.0, 1.0 + 4 * ULP_OF_ONE, n=4)


class TestLogRelativeError:
    """Тесты для log_relative_error"""

    def test_digits(self) -> None:
        """LRE примерно равен числу верных знаков"""
        assert log_relative_error(1.0001, 1.0) == pytest.approx(4.0, abs=1e-6)
        assert log_relative_error(123.456, 123.0) == pytest.approx(2.43, abs=0.01)

    def test_exact(self) -> None:
        """Точное совпадение даёт бесконечность"""
        assert log_relative_error(0.5, 0.5) == math.inf

    def test_nan(self) -> None:
        """NaN даёт ноль верных знаков"""
        assert log_relative_error(math.nan, 1.0) == 0.0

    def test_zero_reference(self) -> None:
        """Для нулевой референсной величины используется абсолютная ошибка"""
        assert log_relative_error(1e-10, 0.0) == pytest.approx(10.0)


# =============================================================================
# ТЕСТЫ ВСПОМОГАТЕЛЬНЫХ ФУНКЦИЙ
# =============================================================================


class TestHelpers:
    """Тесты для absmax, sign, is_valid_float, validate_max_iter"""

    def test_absmax(self) -> None:
        """absmax поднимает малые значения до минимума"""
        assert absmax(0.0, 1e-10) == 1e-10
        assert absmax(-1e-20, 1e-10) == 1e-10
        assert absmax(-2.0, 1e-10) == -2.0

    def test_sign(self) -> None:
        """sign возвращает -1, 0, 1"""
        assert sign(-3.0) == -1.0
        assert sign(0.0) == 0.0
        assert sign(7.0) == 1.0
        assert math.isnan(sign(math.nan))

    def test_is_valid_float(self) -> None:
        """NaN и Inf невалидны"""
        assert is_valid_float(1.0)
        assert not is_valid_float(math.nan)
        assert not is_valid_float(math.inf)

    def test_validate_max_iter(self) -> None:
        """max_iter < 1 отклоняется"""
        assert validate_max_iter(5) == 5
        with pytest.raises(ValueError, match="max_iter must be at least 1"):
            validate_max_iter(0)


# =============================================================================
# ТЕСТЫ IEEE-БЕЗОПАСНЫХ ФУНКЦИЙ
# =============================================================================


class TestSafeMath:
    """Тесты для safe_divide, safe_exp, safe_log, safe_sqrt, safe_pow, safe_gamma"""

    def test_safe_divide(self) -> None:
        """Деление на ноль по IEEE"""
        assert safe_divide(1.0, 0.0) == math.inf
        assert safe_divide(-1.0, 0.0) == -math.inf
        assert safe_divide(1.0, -0.0) == -math.inf
        assert math.isnan(safe_divide(0.0, 0.0))
        assert safe_divide(6.0, 3.0) == 2.0

    def test_safe_exp_overflow(self) -> None:
        """Переполнение в +inf вместо OverflowError"""
        assert safe_exp(1000.0) == math.inf
        assert safe_exp(-1000.0) == 0.0

    def test_safe_log(self) -> None:
        """log(0) = -inf, log(x < 0) = NaN"""
        assert safe_log(0.0) == -math.inf
        assert math.isnan(safe_log(-1.0))
        assert safe_log(math.e) == pytest.approx(1.0, rel=1e-15)

    def test_safe_sqrt(self) -> None:
        """√(x < 0) = NaN"""
        assert math.isnan(safe_sqrt(-4.0))
        assert safe_sqrt(4.0) == 2.0

    def test_safe_pow(self) -> None:
        """Переполнение и нулевое основание"""
        assert safe_pow(10.0, 400.0) == math.inf
        assert safe_pow(0.0, -1.0) == math.inf
        assert math.isnan(safe_pow(-2.0, 0.5))
        assert safe_pow(2.0, 10.0) == 1024.0

    def test_safe_gamma(self) -> None:
        """Полюса и переполнение Γ"""
        assert safe_gamma(200.0) == math.inf
        assert math.isnan(safe_gamma(-1.0))
        assert safe_lgamma(0.0) == math.inf
        assert safe_gamma(5.0) == pytest.approx(24.0, rel=1e-15)
