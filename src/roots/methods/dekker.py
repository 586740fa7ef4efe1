"""
Dekker — Secant Guarded by Bisection

На каждом шаге считаются два кандидата:
- m: середина отрезка [a, b]
- s: шаг секущей через два последних приближения b₀, b₁

Секущая принимается, только если s лежит строго между b₁ и m; иначе шаг
бисекции. Второй конец a всегда выбирается с противоположным знаком f,
а b — конец с меньшим |f|.

Сходимость: последние два приближения b₀, b₁ совпадают в пределах
толерантности или |f(b₁) - intercept| ≈ 0. Ширина отрезка не подходит:
при быстрой сходимости секущей дальний конец a может не двигаться.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from src.core.math.convergence import until
from src.core.math.counted_function import CountedFunction
from src.core.math.numerical_safeguards import STRICT_TOLERANCE, EqualityTolerance
from src.roots.estimates import BracketedRootEstimate, BracketedRootResult, secant_step
from src.roots.methods.base import has_converged, same_sign, shifted, to_result
from src.roots.methods.bisection import bisect

# Лимит шагов метода Деккера
DEKKER_MAX_ITER: Final[int] = 50


@dataclass(frozen=True)
class DekkerState:
    """Отрезок [a₁, b₁] и предыдущее приближение b₀."""

    a1: float
    b0: float
    b1: float
    fa1: float
    fb0: float
    fb1: float


def dekker_step(a1: float, b0: float, b1: float, fb0: float, fb1: float) -> float:
    """Следующее приближение: секущая, если она между b₁ и серединой, иначе середина."""
    m = bisect(a1, b1)
    s = m if fb0 == fb1 else secant_step(b0, b1, fb0, fb1)
    return s if not same_sign(s - b1, s - m) else m


def _advance(state: DekkerState, f: CountedFunction) -> DekkerState:
    b2 = dekker_step(state.a1, state.b0, state.b1, state.fb0, state.fb1)
    fb2 = f(b2)
    if not same_sign(fb2, state.fa1):
        a2, fa2 = state.a1, state.fa1
    else:
        a2, fa2 = state.b1, state.fb1
    if abs(fa2) < abs(fb2):
        # Лучшей оценкой становится a₂, предыдущим приближением становится только что
        # вычисленная b₂, иначе при a₂ = b₁ получилось бы b₀ = b₁
        return DekkerState(b2, b2, a2, fb2, fb2, fa2)
    return DekkerState(a2, state.b1, b2, fa2, state.fb1, fb2)


def dekker_root(
    f: Callable[[float], float],
    bracket: BracketedRootEstimate,
    tolerance: EqualityTolerance = STRICT_TOLERANCE,
    intercept: float = 0.0,
    max_iter: int = DEKKER_MAX_ITER,
) -> BracketedRootResult:
    """
    Метод Деккера на отрезке.

    Args:
        f: Функция
        bracket: Отрезок со сменой знака f - intercept
        tolerance: Толерантность сходимости
        intercept: Решаем f(x) = intercept
        max_iter: Лимит шагов

    Returns:
        BracketedRootResult; оценка — отрезок [a₁, b₁]
    """
    counted = shifted(f, intercept)
    a, b, fa, fb = bracket.a, bracket.b, bracket.fa, bracket.fb
    if abs(fb) > abs(fa):
        a, b, fa, fb = b, a, fb, fa

    def steps():
        state = DekkerState(a, a, b, fa, fa, fb)
        while True:
            yield state
            state = _advance(state, counted)

    iteration = until(
        steps(),
        lambda s: has_converged(s.b0, s.b1, s.fb1, tolerance, intercept),
        max_iter=max_iter,
    )
    return to_result(
        "dekker",
        iteration,
        counted,
        lambda s: BracketedRootEstimate(s.a1, s.b1, s.fa1, s.fb1),
    )
