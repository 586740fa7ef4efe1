"""
Bisection — Midpoint Halving

Шаг в середину отрезка, затем выбор той половины, на концах которой
функция по-прежнему меняет знак. Сходимость линейная (один бит за шаг),
но гарантированная.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. fa·fb ≤ 0 после каждого шага
2. Ширина отрезка ровно делится пополам за шаг
"""

from collections.abc import Callable
from typing import Final

from src.core.math.convergence import until
from src.core.math.counted_function import CountedFunction
from src.core.math.numerical_safeguards import STRICT_TOLERANCE, EqualityTolerance
from src.roots.estimates import BracketedRootEstimate, BracketedRootResult
from src.roots.methods.base import has_converged, same_sign, shifted, to_result

# Лимит шагов: 53 бита мантиссы плюс запас на порядок ширины отрезка
BISECTION_MAX_ITER: Final[int] = 100


def bisect(a: float, b: float) -> float:
    """Середина отрезка [a, b]."""
    return (a + b) / 2


def bisection_step(estimate: BracketedRootEstimate, f: CountedFunction) -> BracketedRootEstimate:
    """Один шаг бисекции с сохранением смены знака."""
    x = bisect(estimate.a, estimate.b)
    fx = f(x)
    if same_sign(fx, estimate.fa):
        return BracketedRootEstimate(x, estimate.b, fx, estimate.fb)
    return BracketedRootEstimate(estimate.a, x, estimate.fa, fx)


def bisection_root(
    f: Callable[[float], float],
    bracket: BracketedRootEstimate,
    tolerance: EqualityTolerance = STRICT_TOLERANCE,
    intercept: float = 0.0,
    max_iter: int = BISECTION_MAX_ITER,
) -> BracketedRootResult:
    """
    Метод бисекции на отрезке.

    Args:
        f: Функция
        bracket: Отрезок со сменой знака f - intercept
        tolerance: Толерантность сходимости
        intercept: Решаем f(x) = intercept
        max_iter: Лимит шагов

    Returns:
        BracketedRootResult (SUCCESS / NO_CONVERGE)

    Examples:
        >>> import math
        >>> br = BracketedRootEstimate(0.0, 5.0, -4.0, math.exp(5) - 5)
        >>> r = bisection_root(lambda x: math.exp(x) - 5, br)
        >>> abs(r.value - math.log(5)) < 1e-14
        True
    """
    counted = shifted(f, intercept)

    def steps():
        state = bracket
        while True:
            yield state
            state = bisection_step(state, counted)

    iteration = until(
        steps(),
        lambda s: has_converged(s.a, s.b, s.fb, tolerance, intercept),
        max_iter=max_iter,
    )
    return to_result("bisection", iteration, counted, lambda s: s)
