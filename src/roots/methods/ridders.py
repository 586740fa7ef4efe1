"""
Ridders — Exponential Regula Falsi

Ложное положение на точках f(a), f(m)·e^Q, f(b)·e^{2Q}, где m — середина
отрезка, а e^Q — решение квадратного уравнения
f(a) - 2f(m)e^Q + f(b)e^{2Q} = 0. Итоговая формула:

    x' = m + (m - a)·sign[f(a) - f(b)]·f(m) / √(f(m)² - f(a)f(b))

Два вычисления функции за шаг, сходимость квадратичная.
C. J. F. Ridders (1979), Numerical Recipes §9.2.1.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. x' всегда внутри [a, b] (√(f(m)² - f(a)f(b)) ≥ |f(m)| при fa·fb ≤ 0)
2. После перегруппировки fa·fb ≤ 0 и |fb| ≤ |fa|
"""

from collections.abc import Callable
from typing import Final

from src.core.math.convergence import until
from src.core.math.counted_function import CountedFunction
from src.core.math.numerical_safeguards import STRICT_TOLERANCE, EqualityTolerance, safe_sqrt, sign
from src.roots.estimates import BracketedRootEstimate, BracketedRootResult
from src.roots.methods.base import has_converged, same_sign, shifted, to_result
from src.roots.methods.bisection import bisect

# Лимит шагов метода Риддерса
RIDDERS_MAX_ITER: Final[int] = 30


def ridders_step(estimate: BracketedRootEstimate, f: CountedFunction) -> BracketedRootEstimate:
    """Один шаг Риддерса: середина, экспоненциальная поправка, перегруппировка."""
    a, b, fa, fb = estimate.a, estimate.b, estimate.fa, estimate.fb
    m = bisect(a, b)
    fm = f(m)

    s = safe_sqrt(fm * fm - fa * fb)
    if s == 0:
        # fm == 0 и один из концов: точный корень
        return BracketedRootEstimate.exact(m, fm)
    x = m + (m - a) * (sign(fa - fb) * fm / s)
    fx = f(x)

    if not same_sign(fx, fm):
        a1, b1, fa1, fb1 = m, x, fm, fx
    elif not same_sign(fx, fa):
        a1, b1, fa1, fb1 = a, x, fa, fx
    else:
        a1, b1, fa1, fb1 = x, b, fx, fb

    if abs(fa1) < abs(fb1):
        return BracketedRootEstimate(b1, a1, fb1, fa1)
    return BracketedRootEstimate(a1, b1, fa1, fb1)


def ridders_root(
    f: Callable[[float], float],
    bracket: BracketedRootEstimate,
    tolerance: EqualityTolerance = STRICT_TOLERANCE,
    intercept: float = 0.0,
    max_iter: int = RIDDERS_MAX_ITER,
) -> BracketedRootResult:
    """
    Метод Риддерса на отрезке.

    Args:
        f: Функция
        bracket: Отрезок со сменой знака f - intercept
        tolerance: Толерантность сходимости
        intercept: Решаем f(x) = intercept
        max_iter: Лимит шагов

    Returns:
        BracketedRootResult; конец b — лучшая оценка

    Examples:
        >>> import math
        >>> br = BracketedRootEstimate(0.0, 5.0, -4.0, math.exp(5) - 5)
        >>> ridders_root(lambda x: math.exp(x) - 5, br).converged
        True
    """
    counted = shifted(f, intercept)

    def steps():
        state = bracket
        while True:
            yield state
            state = ridders_step(state, counted)

    iteration = until(
        steps(),
        lambda s: has_converged(s.a, s.b, s.fb, tolerance, intercept),
        max_iter=max_iter,
    )
    return to_result("ridders", iteration, counted, lambda s: s)
