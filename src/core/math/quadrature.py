"""
Quadrature — Trapezoidal & Romberg Integration

Численное интегрирование функции на отрезке [a, b].

Составная формула трапеций с последовательным делением шага пополам,
без повторного вычисления f в уже использованных узлах:

    I₀ = Δx₀ (f(a) + f(b)) / 2
    Iⱼ = Iⱼ₋₁ / 2 + Δxⱼ Σ_{i нечётн.} f(a + i·Δxⱼ),   Δxⱼ = Δxⱼ₋₁ / 2

Хорошо подходит для периодических функций на полном периоде и для
пиков с быстро убывающими хвостами (экспоненциальная сходимость).

Метод Ромберга добавляет экстраполяцию Ричардсона:

    Rⱼᵢ = (4ⁱ Rⱼ,ᵢ₋₁ - Rⱼ₋₁,ᵢ₋₁) / (4ⁱ - 1)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Число делений шага ограничено max_iter
2. Результат несёт число вычислений функции и статус сходимости
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Final

from src.core.math.convergence import IterationStatus
from src.core.math.counted_function import CountedFunction
from src.core.math.numerical_safeguards import (
    STRICT_TOLERANCE,
    EqualityTolerance,
    is_approx,
    validate_max_iter,
)
from src.core.math.summation import sum_kbn

logger = logging.getLogger(__name__)

# Лимит делений шага по умолчанию
QUADRATURE_MAX_ITER_DEFAULT: Final[int] = 10

# Минимум делений шага для Ромберга до проверки сходимости
ROMBERG_MIN_ITER: Final[int] = 3

# Минимум делений шага для формулы трапеций: на симметричной периодической
# функции первые середины могут совпасть со значениями на концах
TRAPEZOIDAL_MIN_ITER: Final[int] = 3

# Критерий остановки формулы трапеций: относительное изменение оценки < 1e-10
TRAPEZOIDAL_TOLERANCE: Final[EqualityTolerance] = EqualityTolerance(relative=1e-10)


class QuadratureMethod(str, Enum):
    """Метод численного интегрирования"""

    TRAPEZOIDAL = "trapezoidal"
    ROMBERG = "romberg"


@dataclass(frozen=True)
class QuadratureResult:
    """
    Результат численного интегрирования.

    Attributes:
        status: Состояние выхода (CONVERGED / EXCEEDED_MAX)
        evaluations: Число вычислений подынтегральной функции
        value: Оценка интеграла
    """

    status: IterationStatus
    evaluations: int
    value: float

    @property
    def converged(self) -> bool:
        return self.status == IterationStatus.CONVERGED


# =============================================================================
# ФОРМУЛА ТРАПЕЦИЙ
# =============================================================================


def trapezoidal(
    f: Callable[[float], float],
    a: float,
    b: float,
    max_iter: int = QUADRATURE_MAX_ITER_DEFAULT,
    min_iter: int = TRAPEZOIDAL_MIN_ITER,
) -> QuadratureResult:
    """
    Интеграл ∫ₐᵇ f(x) dx составной формулой трапеций.

    Остановка когда относительное изменение оценки меньше 1e-10
    (не раньше min_iter делений).

    Args:
        f: Подынтегральная функция
        a: Нижний предел
        b: Верхний предел
        max_iter: Лимит делений шага
        min_iter: Минимум делений шага до проверки сходимости

    Returns:
        QuadratureResult

    Examples:
        >>> r = trapezoidal(lambda x: x, 0.0, 5000.0)
        >>> r.value
        12500000.0
    """
    validate_max_iter(max_iter)
    counted = CountedFunction(f)
    dx = b - a
    estimate = 0.5 * dx * (counted(a) + counted(b))
    n = 1
    for j in range(1, max_iter + 1):
        # Узлы, вложенные в середины интервалов предыдущего шага
        total = sum_kbn(counted(a + (i + 0.5) * dx) for i in range(n))
        previous = estimate
        estimate = 0.5 * (previous + total * dx)
        dx *= 0.5
        n *= 2
        if j >= min_iter and is_approx(estimate, previous, tolerance=TRAPEZOIDAL_TOLERANCE):
            return QuadratureResult(IterationStatus.CONVERGED, counted.count, estimate)
    logger.debug("trapezoidal: no convergence after %d evaluations", counted.count)
    return QuadratureResult(IterationStatus.EXCEEDED_MAX, counted.count, estimate)


# =============================================================================
# МЕТОД РОМБЕРГА
# =============================================================================


def romberg(
    f: Callable[[float], float],
    a: float,
    b: float,
    max_iter: int = QUADRATURE_MAX_ITER_DEFAULT,
    min_iter: int = ROMBERG_MIN_ITER,
) -> QuadratureResult:
    """
    Интеграл ∫ₐᵇ f(x) dx методом Ромберга.

    Остановка когда последний элемент строки экстраполяции совпадает с
    предыдущим в строгой толерантности (не раньше min_iter делений).

    Examples:
        >>> r = romberg(lambda t: 4 / (1 + t * t), 0.0, 1.0)
        >>> abs(r.value - 3.141592653589793) < 1e-13
        True
    """
    validate_max_iter(max_iter)
    counted = CountedFunction(f)
    dx = b - a
    row = [0.5 * dx * (counted(a) + counted(b))]
    n = 1
    for j in range(1, max_iter + 1):
        dx *= 0.5
        total = sum_kbn(counted(a + (2 * i - 1) * dx) for i in range(1, n + 1))
        n *= 2
        new_row = [dx * total + 0.5 * row[0]]
        power = 1.0
        for previous in row:
            power *= 4.0
            new_row.append((power * new_row[-1] - previous) / (power - 1))
        converged = j >= min_iter and is_approx(new_row[-1], row[-1], tolerance=STRICT_TOLERANCE)
        row = new_row
        if converged:
            return QuadratureResult(IterationStatus.CONVERGED, counted.count, row[-1])
    logger.debug("romberg: no convergence after %d evaluations", counted.count)
    return QuadratureResult(IterationStatus.EXCEEDED_MAX, counted.count, row[-1])


def integrate(
    f: Callable[[float], float],
    a: float,
    b: float,
    method: QuadratureMethod = QuadratureMethod.ROMBERG,
    max_iter: int = QUADRATURE_MAX_ITER_DEFAULT,
) -> QuadratureResult:
    """
    Интеграл ∫ₐᵇ f(x) dx выбранным методом (по умолчанию Ромберг).

    Args:
        f: Подынтегральная функция
        a: Нижний предел
        b: Верхний предел
        method: TRAPEZOIDAL или ROMBERG
        max_iter: Лимит делений шага
    """
    if method == QuadratureMethod.TRAPEZOIDAL:
        return trapezoidal(f, a, b, max_iter=max_iter)
    return romberg(f, a, b, max_iter=max_iter)
