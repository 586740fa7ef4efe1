"""
Brent — Van Wijngaarden-Dekker-Brent Method

Обратная квадратичная интерполяция по трём точкам (a, b, c) с откатом
на секущую и бисекцию. История шагов (d — последний шаг, e — предыдущий)
решает, принимать ли интерполяцию:

    2p < min(3·xm·q - |tol₁·q|, |e·q|)

иначе шаг бисекции xm = (c - b)/2. Гарантированная сходимость.

R. P. Brent, "An algorithm with guaranteed convergence for finding a zero
of a function", The Computer Journal (1971). Numerical Recipes §9.3.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. b и c всегда по разные стороны от корня (fb·fc ≤ 0)
2. |fb| ≤ |fc| после бухгалтерии: b — лучшая оценка
3. Минимальный шаг tol₁ = 2·ulp·|b| + tolerance.absolute/2
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Final

from src.core.math.convergence import until
from src.core.math.counted_function import CountedFunction
from src.core.math.numerical_safeguards import ULP_OF_ONE, STRICT_TOLERANCE, EqualityTolerance
from src.roots.estimates import BracketedRootEstimate, BracketedRootResult
from src.roots.methods.base import has_converged, shifted, to_result

# Лимит шагов метода Брента
BRENT_MAX_ITER: Final[int] = 50

# Начальный "предыдущий шаг" e, заведомо разрешающий интерполяцию
BRENT_INITIAL_STEP: Final[float] = 9999.0


@dataclass(frozen=True)
class BrentState:
    """Три точки a, b, c, история шагов d, e и производные xm, tol₁."""

    a: float
    b: float
    c: float
    fa: float
    fb: float
    fc: float
    d: float
    e: float
    xm: float = 0.0
    tol1: float = 0.0


def brent_bookkeeping(state: BrentState, tol: float) -> BrentState:
    """
    Восстановление инвариантов: fb·fc ≤ 0, |fb| ≤ |fc|; пересчёт xm и tol₁.
    """
    a, b, c, fa, fb, fc, d, e = (
        state.a, state.b, state.c, state.fa, state.fb, state.fc, state.d, state.e
    )
    if (fb > 0 and fc > 0) or (fb < 0 and fc < 0):
        c, fc = a, fa
        d = e = b - a
    if abs(fc) < abs(fb):
        a, b, c = b, c, b
        fa, fb, fc = fb, fc, fb
    xm = 0.5 * (c - b)
    tol1 = 2 * ULP_OF_ONE * abs(b) + 0.5 * tol
    return BrentState(a, b, c, fa, fb, fc, d, e, xm, tol1)


def brent_step(state: BrentState, f: CountedFunction) -> BrentState:
    """Один шаг: интерполяция, если она сужает отрезок достаточно, иначе бисекция."""
    a, b, c, fa, fb, fc = state.a, state.b, state.c, state.fa, state.fb, state.fc
    xm, tol1, e = state.xm, state.tol1, state.e

    d1, e1 = xm, xm
    if abs(e) >= tol1 and abs(fa) > abs(fb):
        s = fb / fa
        if a == c:
            # секущая
            p = 2 * xm * s
            q = 1 - s
        else:
            # обратная квадратичная интерполяция
            t = fa / fc
            r = fb / fc
            p = s * (2 * xm * t * (t - r) - (b - a) * (r - 1))
            q = (t - 1) * (r - 1) * (s - 1)
        if p > 0:
            q = -q
        p = abs(p)
        if 2 * p < min(3 * xm * q - abs(tol1 * q), abs(e * q)):
            d1, e1 = p / q, state.d

    b1 = b + d1 if abs(d1) > tol1 else b + math.copysign(tol1, xm)
    return replace(state, a=b, b=b1, fa=fb, fb=f(b1), d=d1, e=e1)


def brent_root(
    f: Callable[[float], float],
    bracket: BracketedRootEstimate,
    tolerance: EqualityTolerance = STRICT_TOLERANCE,
    intercept: float = 0.0,
    max_iter: int = BRENT_MAX_ITER,
) -> BracketedRootResult:
    """
    Метод Брента на отрезке.

    Args:
        f: Функция
        bracket: Отрезок со сменой знака f - intercept
        tolerance: Толерантность сходимости (absolute задаёт минимальный шаг)
        intercept: Решаем f(x) = intercept
        max_iter: Лимит шагов

    Returns:
        BracketedRootResult; оценка — последний шаг (a — предыдущее b)
    """
    counted = shifted(f, intercept)
    tol = tolerance.absolute
    start = BrentState(
        bracket.a, bracket.b, bracket.b, bracket.fa, bracket.fb, bracket.fb, 0.0, BRENT_INITIAL_STEP
    )

    def steps():
        state = brent_bookkeeping(start, tol)
        while True:
            yield state
            state = brent_bookkeeping(brent_step(state, counted), tol)

    iteration = until(
        steps(),
        lambda s: has_converged(s.a, s.b, s.fb, tolerance, intercept, trusted=True),
        max_iter=max_iter,
    )
    return to_result(
        "brent",
        iteration,
        counted,
        lambda s: BracketedRootEstimate(s.c, s.b, s.fc, s.fb),
    )
