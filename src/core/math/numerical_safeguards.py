"""
Numerical Safeguards — Approximate Equality & Float Utilities

Модуль задаёт правила сравнения float для всех итерационных алгоритмов
(ряды, цепные дроби, поиск корней, квадратуры):
- EqualityTolerance: гибридная толерантность ε < r·|x| + a
- is_approx / is_approx_zero: сравнение с ненулевой и с нулевой целью
- ulp_dist: расстояние между float в дискретных шагах (ULP)
- log_relative_error (LRE): число верных десятичных знаков

Сравнение с нулём нельзя делать относительно самого нуля, поэтому для
нулевой цели масштаб задаётся явно (scale), а при его отсутствии
используется только абсолютная толерантность.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Толерантности неотрицательны и конечны (валидируются pydantic)
2. is_approx симметричен при trusted=False
3. ulp_dist(a, b) == 0 ⇔ a == b
4. Все функции детерминированы и не имеют состояния
"""

import math
import struct
import sys
from typing import Final

from pydantic import BaseModel, Field

# =============================================================================
# МАШИННЫЕ КОНСТАНТЫ (IEEE-754 binary64)
# =============================================================================

# Расстояние от 1.0 до следующего представимого float (2⁻⁵²)
ULP_OF_ONE: Final[float] = sys.float_info.epsilon

# Наименьшее положительное нормализованное число
LEAST_NORMAL: Final[float] = sys.float_info.min

# Наибольшее конечное число
GREATEST_FINITE: Final[float] = sys.float_info.max

# Число бит мантиссы без неявной единицы
SIGNIFICAND_BITS: Final[int] = sys.float_info.mant_dig - 1


# =============================================================================
# EQUALITY TOLERANCE
# =============================================================================


class EqualityTolerance(BaseModel):
    """
    Толерантность для приближённого сравнения float.

    Допустимая ошибка считается по гибридной формуле ε < r·scale + a,
    где r = relative, a = absolute. Относительная часть работает, когда
    масштаб известен; абсолютная страхует сравнение с нулём.

    Immutable модель (frozen=True).
    """

    relative: float = Field(
        default=math.sqrt(ULP_OF_ONE),
        ge=0,
        allow_inf_nan=False,
        description="Относительная толерантность r",
    )
    absolute: float = Field(
        default=8 * LEAST_NORMAL,
        ge=0,
        allow_inf_nan=False,
        description="Абсолютная толерантность a",
    )

    model_config = {"frozen": True}

    @classmethod
    def default(cls) -> "EqualityTolerance":
        """Толерантность общего назначения: r = √ulp."""
        return cls()

    @classmethod
    def strict(cls) -> "EqualityTolerance":
        """Строгая толерантность для сходимости численных методов: r = 2·ulp."""
        return cls(relative=2 * ULP_OF_ONE)


DEFAULT_TOLERANCE: Final[EqualityTolerance] = EqualityTolerance.default()
STRICT_TOLERANCE: Final[EqualityTolerance] = EqualityTolerance.strict()


# =============================================================================
# ПРИБЛИЖЁННОЕ СРАВНЕНИЕ
# =============================================================================


def is_approx(
    value: float,
    target: float,
    tolerance: EqualityTolerance = DEFAULT_TOLERANCE,
    trusted: bool = False,
) -> bool:
    """
    Проверка |value - target| < r·scale + a для цели, которая может быть ненулевой.

    Args:
        value: Проверяемое значение
        target: Цель сравнения
        tolerance: Толерантность (default: DEFAULT_TOLERANCE)
        trusted: Если True, масштаб = |target|; иначе max(|value|, |target|)

    Returns:
        True если value в пределах толерантности от target

    Examples:
        >>> is_approx(1.0, 1.0 + 1e-12)
        True
        >>> is_approx(1.0, 1.001)
        False
    """
    scale = abs(target) if trusted else max(abs(value), abs(target))
    return abs(value - target) < tolerance.relative * scale + tolerance.absolute


def is_approx_zero(
    value: float,
    tolerance: EqualityTolerance = DEFAULT_TOLERANCE,
    scale: float = 0.0,
) -> bool:
    """
    Проверка |value| < r·scale + a для цели, заведомо равной нулю.

    Типичный случай: ноль получен вычитанием f(x) - c, тогда c задаёт масштаб.
    При scale == 0 работает только абсолютная толерантность.

    Examples:
        >>> is_approx_zero(1e-20, scale=1.0)
        True
        >>> is_approx_zero(1e-20)
        False
    """
    return abs(value) < tolerance.relative * scale + tolerance.absolute


# =============================================================================
# ULP И LRE
# =============================================================================


def _ordinal(x: float) -> int:
    """Порядковый номер неотрицательного float среди всех представимых."""
    return struct.unpack("<q", struct.pack("<d", x))[0]


def ulp_dist(a: float, b: float) -> float:
    """
    Расстояние между a и b в числе представимых float между ними.

    Для чисел разного знака возвращает GREATEST_FINITE ("далеко").

    Examples:
        >>> ulp_dist(1.0, 1.0)
        0.0
        >>> ulp_dist(1.0, math.nextafter(1.0, 2.0))
        1.0
    """
    if a == b:
        return 0.0
    if math.isnan(a) or math.isnan(b):
        return math.nan
    if math.copysign(1.0, a) != math.copysign(1.0, b):
        return GREATEST_FINITE
    return float(abs(_ordinal(abs(a)) - _ordinal(abs(b))))


def is_within_ulp(value: float, reference: float, n: int = 1024) -> bool:
    """Проверка, что value не дальше n дискретных шагов от reference."""
    return ulp_dist(value, reference) < n


def log_relative_error(value: float, reference: float) -> float:
    """
    Log Relative Error: -log10(|value - reference| / |reference|).

    Приблизительно равно числу совпадающих значащих десятичных знаков.
    Для reference == 0 используется абсолютная ошибка.

    Returns:
        LRE; math.inf при точном совпадении, 0.0 для NaN

    Examples:
        >>> round(log_relative_error(1.0001, 1.0), 1)
        4.0
    """
    if math.isnan(value) or math.isnan(reference):
        return 0.0
    if value == reference:
        return math.inf
    error = abs(value - reference)
    if reference != 0:
        error /= abs(reference)
    return max(0.0, -math.log10(error))


# =============================================================================
# IEEE-754 ОПЕРАЦИИ
# =============================================================================
#
# Модуль math бросает исключения там, где IEEE-754 возвращает ±inf или NaN
# (log(0), exp(1000), 1/0, lgamma(0)). Асимптотические ветви специальных
# функций опираются на IEEE-семантику: переполнение обнаруживается явно по
# результату и превращается в NaN-сигнал, а не в исключение.


def safe_divide(numerator: float, denominator: float) -> float:
    """
    Деление с IEEE-семантикой: x/0 = ±inf, 0/0 = NaN.

    Examples:
        >>> safe_divide(1.0, 0.0)
        inf
        >>> safe_divide(-1.0, 0.0)
        -inf
    """
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def safe_exp(x: float) -> float:
    """eˣ с переполнением в +inf."""
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def safe_log(x: float) -> float:
    """
    Натуральный логарифм: log(0) = -inf, log(x < 0) = NaN.

    Examples:
        >>> safe_log(0.0)
        -inf
    """
    if x > 0:
        return math.log(x)
    if x == 0:
        return -math.inf
    return math.nan


def safe_sqrt(x: float) -> float:
    """Квадратный корень: √(x < 0) = NaN."""
    if x >= 0:
        return math.sqrt(x)
    return math.nan


def safe_pow(x: float, y: float) -> float:
    """
    xʸ с IEEE-семантикой: переполнение в inf, 0^(y < 0) = inf,
    отрицательное основание с дробной степенью = NaN.
    """
    try:
        return math.pow(x, y)
    except OverflowError:
        return math.inf if x > 0 or float(y).is_integer() and y % 2 == 0 else -math.inf
    except ValueError:
        if x == 0:
            return math.inf
        return math.nan


def safe_lgamma(x: float) -> float:
    """log|Γ(x)| с полюсами в +inf."""
    try:
        return math.lgamma(x)
    except (ValueError, OverflowError):
        return math.inf


def safe_gamma(x: float) -> float:
    """Γ(x) с переполнением в +inf и NaN в полюсах."""
    try:
        return math.gamma(x)
    except OverflowError:
        return math.inf
    except ValueError:
        return math.nan


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Examples:
        >>> is_valid_float(1.0)
        True
        >>> is_valid_float(float('nan'))
        False
    """
    return math.isfinite(value)


def absmax(x: float, minimum: float = LEAST_NORMAL) -> float:
    """
    Ограничение модуля снизу: minimum если |x| < minimum, иначе x.

    Используется в форме Лентца для цепных дробей.
    """
    return minimum if abs(x) < minimum else x


def sign(x: float) -> float:
    """Знак числа: -1.0, 0.0 или 1.0 (NaN для NaN)."""
    if math.isnan(x):
        return math.nan
    if x == 0:
        return 0.0
    return math.copysign(1.0, x)


def validate_max_iter(max_iter: int) -> int:
    """
    Валидация лимита итераций.

    Raises:
        ValueError: если max_iter < 1
    """
    if max_iter < 1:
        raise ValueError(f"max_iter must be at least 1, got {max_iter}")
    return max_iter
