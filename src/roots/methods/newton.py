"""
Newton & Halley — Derivative-Based Iteration

Методы без отрезка: итерация шага от начального приближения.

    Ньютон:  xᵢ₊₁ = xᵢ - f/f'
    Галлей:  xᵢ₊₁ = xᵢ - 2f / (2f' - f·f''/f')
           = xᵢ - u / (1 - t/2),   u = f/f',  t = u·f''/f'

Вариант Галлея с отношением f''/f' полезен, когда это отношение имеет
более простую замкнутую форму, чем сама f'' (так у неполных гамма- и
бета-функций). t ограничивается сверху единицей, чтобы знаменатель
не подходил к нулю.

Шаг, выходящий за границы [xmin, xmax], заменяется половиной пути до
границы. Сходимость: |xᵢ₊₁ - xᵢ| < xtol (абсолютная).

Numerical Recipes §9.4, §9.4.2.
"""

import logging
import math
from collections.abc import Callable, Iterator
from typing import Final, Optional

from src.core.math.convergence import IterationStatus, until_pairwise
from src.core.math.numerical_safeguards import safe_divide
from src.roots.estimates import RootResult, RootStatus

logger = logging.getLogger(__name__)

# Лимит итераций метода Ньютона
NEWTON_MAX_ITER: Final[int] = 10

# Лимит итераций метода Галлея
HALLEY_MAX_ITER: Final[int] = 100

# Абсолютный порог шага для остановки
STEP_TOLERANCE: Final[float] = 1e-10


# =============================================================================
# ШАГИ
# =============================================================================


def newton_step(x: float, f: Callable[[float], float], f1: Callable[[float], float]) -> float:
    """xᵢ₊₁ = xᵢ - f(xᵢ)/f'(xᵢ)."""
    return x - safe_divide(f(x), f1(x))


def halley_step(
    x: float,
    f: Callable[[float], float],
    f1: Callable[[float], float],
    f2: Callable[[float], float],
) -> float:
    """xᵢ₊₁ = xᵢ - 2f / (2f' - f·f''/f')."""
    fx = f(x)
    f1x = f1(x)
    return x - safe_divide(2 * fx, 2 * f1x - fx * safe_divide(f2(x), f1x))


def halley_ratio_step(
    x: float,
    f: Callable[[float], float],
    f1: Callable[[float], float],
    f2f1: Callable[[float], float],
) -> float:
    """xᵢ₊₁ = xᵢ - u/(1 - t/2), u = f/f', t = min(1, u·f''/f')."""
    u = safe_divide(f(x), f1(x))
    t = min(1.0, u * f2f1(x))
    return x - u / (1 - 0.5 * t)


# =============================================================================
# ИТЕРАЦИЯ С ГРАНИЦАМИ
# =============================================================================


def _bounded_iterates(
    guess: float,
    step: Callable[[float], float],
    xmin: Optional[float],
    xmax: Optional[float],
) -> Iterator[float]:
    x = guess
    while math.isfinite(x):
        yield x
        x1 = step(x)
        if xmin is not None and x1 < xmin:
            x1 = 0.5 * (x + xmin)
        elif xmax is not None and x1 > xmax:
            x1 = 0.5 * (x + xmax)
        x = x1


def stepper(
    guess: float,
    step: Callable[[float], float],
    xmin: Optional[float] = None,
    xmax: Optional[float] = None,
    max_iter: int = HALLEY_MAX_ITER,
    xtol: float = STEP_TOLERANCE,
) -> RootResult:
    """
    Итерация произвольного шага с откатом к границам.

    Args:
        guess: Начальное приближение
        step: Отображение xᵢ → xᵢ₊₁
        xmin: Нижняя граница (опционально)
        xmax: Верхняя граница (опционально)
        max_iter: Лимит итераций
        xtol: Абсолютный порог |xᵢ₊₁ - xᵢ|

    Returns:
        RootResult: SUCCESS, NO_CONVERGE или ERROR (шаг дал inf/NaN)
    """
    iteration = until_pairwise(
        _bounded_iterates(guess, step, xmin, xmax),
        lambda x0, x1: abs(x1 - x0) < xtol,
        max_iter=max_iter,
    )
    if iteration is None:
        logger.debug("stepper: non-finite initial guess %r", guess)
        return RootResult(RootStatus.ERROR, 0, math.nan)
    if iteration.status == IterationStatus.EXHAUSTED_INPUT:
        logger.debug("stepper: non-finite step after %d iterations", iteration.iterations)
        return RootResult(RootStatus.ERROR, iteration.iterations, iteration.value)
    if iteration.status == IterationStatus.EXCEEDED_MAX:
        return RootResult(RootStatus.NO_CONVERGE, iteration.iterations, iteration.value)
    return RootResult(RootStatus.SUCCESS, iteration.iterations, iteration.value)


# =============================================================================
# МЕТОДЫ
# =============================================================================


def newton_root(
    f: Callable[[float], float],
    f1: Callable[[float], float],
    guess: float,
    xmin: Optional[float] = None,
    xmax: Optional[float] = None,
    max_iter: int = NEWTON_MAX_ITER,
    xtol: float = STEP_TOLERANCE,
) -> RootResult:
    """
    Метод Ньютона-Рафсона.

    Examples:
        >>> import math
        >>> r = newton_root(lambda x: math.exp(x) - 5, math.exp, 2.0)
        >>> abs(r.value - math.log(5)) < 1e-15
        True
    """
    return stepper(guess, lambda x: newton_step(x, f, f1), xmin, xmax, max_iter, xtol)


def halley_root(
    f: Callable[[float], float],
    f1: Callable[[float], float],
    guess: float,
    f2: Optional[Callable[[float], float]] = None,
    f2f1: Optional[Callable[[float], float]] = None,
    xmin: Optional[float] = None,
    xmax: Optional[float] = None,
    max_iter: int = HALLEY_MAX_ITER,
    xtol: float = STEP_TOLERANCE,
) -> RootResult:
    """
    Метод Галлея с второй производной f2 или отношением f2f1 = f''/f'.

    Ровно один из f2, f2f1 должен быть задан.

    Raises:
        ValueError: если не задан ни один или заданы оба варианта
    """
    if (f2 is None) == (f2f1 is None):
        raise ValueError("halley_root requires exactly one of f2 or f2f1")
    if f2 is not None:
        step = lambda x: halley_step(x, f, f1, f2)  # noqa: E731
    else:
        step = lambda x: halley_ratio_step(x, f, f1, f2f1)  # noqa: E731
    return stepper(guess, step, xmin, xmax, max_iter, xtol)
