"""
Secant — Linear Interpolation Through the Last Two Iterates

Следующее приближение — пересечение с нулём прямой через (x₀, y₀) и (x₁, y₁):

    x₂ = x₀ - y₀·(x₁ - x₀)/(y₁ - y₀)

Numerical Recipes §9.2.

ОГРАНИЧЕНИЕ: метод не поддерживает отрезок со сменой знака. На плоских
участках функции шаг может уйти далеко от корня (результат NO_CONVERGE).
Возвращаемая оценка (x₀, x₁) не обязана удовлетворять fa·fb ≤ 0.
"""

from collections.abc import Callable
from typing import Final

from src.core.math.convergence import until
from src.core.math.numerical_safeguards import STRICT_TOLERANCE, EqualityTolerance
from src.roots.estimates import BracketedRootEstimate, BracketedRootResult, secant_step
from src.roots.methods.base import has_converged, shifted, to_result

# Лимит шагов метода секущих
SECANT_MAX_ITER: Final[int] = 30


def secant_root(
    f: Callable[[float], float],
    bracket: BracketedRootEstimate,
    tolerance: EqualityTolerance = STRICT_TOLERANCE,
    intercept: float = 0.0,
    max_iter: int = SECANT_MAX_ITER,
) -> BracketedRootResult:
    """
    Метод секущих, стартующий с концов отрезка.

    Последним приближением (x₁) выбирается конец с меньшим |f|.
    Сходимость: соседние приближения совпадают в пределах толерантности
    или |f(x₁) - intercept| ≈ 0.
    """
    counted = shifted(f, intercept)
    if abs(bracket.fa) < abs(bracket.fb):
        start = BracketedRootEstimate(bracket.b, bracket.a, bracket.fb, bracket.fa)
    else:
        start = bracket

    def steps():
        state = start
        while True:
            yield state
            x = secant_step(state.a, state.b, state.fa, state.fb)
            state = BracketedRootEstimate(state.b, x, state.fb, counted(x))

    iteration = until(
        steps(),
        lambda s: has_converged(s.a, s.b, s.fb, tolerance, intercept),
        max_iter=max_iter,
    )
    return to_result("secant", iteration, counted, lambda s: s)
