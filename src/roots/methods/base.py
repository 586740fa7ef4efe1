"""
Bracketed Method Plumbing — Shared Contract of Interval Methods

Общая часть всех методов на отрезке:
- целевая функция f(x) - intercept со счётчиком вычислений
- критерий сходимости: ширина отрезка в пределах толерантности
  ИЛИ |f(b) - intercept| ≈ 0 с масштабом |intercept|
- перевод IterationResult в BracketedRootResult

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. EXHAUSTED_INPUT невозможен для бесконечной последовательности шагов,
   но если случился — это ERROR, а не исключение
2. evaluations считает только вычисления внутри метода
"""

import logging
import math
from collections.abc import Callable
from typing import Optional

from src.core.math.convergence import IterationResult, IterationStatus
from src.core.math.counted_function import CountedFunction
from src.core.math.numerical_safeguards import EqualityTolerance, is_approx, is_approx_zero
from src.roots.estimates import BracketedRootEstimate, BracketedRootResult, RootStatus

logger = logging.getLogger(__name__)


def shifted(f: Callable[[float], float], intercept: float) -> CountedFunction:
    """Счётчик над f(x) - intercept (над самой f при intercept == 0)."""
    if intercept == 0:
        return CountedFunction(f)
    return CountedFunction(lambda x: f(x) - intercept)


def same_sign(x: float, y: float) -> bool:
    """Совпадение знаковых битов (+0 считается положительным)."""
    return math.copysign(1.0, x) == math.copysign(1.0, y)


def has_converged(
    a: float,
    b: float,
    fb: float,
    tolerance: EqualityTolerance,
    intercept: float,
    trusted: bool = False,
) -> bool:
    """
    Критерий остановки метода на отрезке.

    Args:
        a: Второй конец (или предыдущее приближение)
        b: Текущая лучшая оценка
        fb: f(b) - intercept
        tolerance: Толерантность
        intercept: Уровень, задающий масштаб для |fb|
        trusted: Масштаб сравнения a и b берётся по |b|
    """
    return is_approx(a, b, tolerance, trusted=trusted) or is_approx_zero(
        fb, tolerance, scale=abs(intercept)
    )


def to_result(
    name: str,
    iteration: Optional[IterationResult],
    counted: CountedFunction,
    estimate: Callable[[object], BracketedRootEstimate],
) -> BracketedRootResult:
    """
    Перевод результата until в BracketedRootResult.

    Args:
        name: Имя метода для лога
        iteration: Результат until по состояниям метода
        counted: Счётчик вычислений функции
        estimate: Извлечение отрезка из состояния метода
    """
    if iteration is None or iteration.status == IterationStatus.EXHAUSTED_INPUT:
        logger.debug("%s: iteration ended without a state", name)
        return BracketedRootResult(RootStatus.ERROR, counted.count, BracketedRootEstimate.nan())
    if iteration.status == IterationStatus.EXCEEDED_MAX:
        logger.debug("%s: no convergence after %d steps", name, iteration.iterations)
        return BracketedRootResult(RootStatus.NO_CONVERGE, counted.count, estimate(iteration.value))
    return BracketedRootResult(RootStatus.SUCCESS, counted.count, estimate(iteration.value))
