"""
Series — Truncated Infinite Sums and Products

Вычисление бесконечных рядов и произведений, члены которых задаются
индексом и (опционально) состоянием, переносимым от члена к члену:

    S = initial + Σ_{i ≥ start} tᵢ,     (tᵢ, stateᵢ) = update(i, stateᵢ₋₁)
    P = initial · Π_{i ≥ start} tᵢ

Критерии остановки:
- series: член пренебрежимо мал относительно текущей суммы (строгая толерантность)
- product: член пренебрежимо отличается от 1
- stop: произвольное условие на (член, сумма), например |tᵢ / S| < 1e-10

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Число членов ограничено max_iter
2. Неудача сходимости возвращается статусом, значение — последняя частичная сумма
"""

import itertools
import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Final, Optional, TypeVar

from src.core.math.convergence import DEFAULT_MAX_ITER, IterationResult, IterationStatus, until
from src.core.math.numerical_safeguards import (
    STRICT_TOLERANCE,
    EqualityTolerance,
    is_approx,
    is_approx_zero,
)

logger = logging.getLogger(__name__)

S = TypeVar("S")

# Порог относительного вклада члена для рекурсивных сумм
SERIES_RELATIVE_STOP: Final[float] = 1e-10


def relative_term_below(term: float, total: float, threshold: float = SERIES_RELATIVE_STOP) -> bool:
    """Условие остановки |term / total| < threshold."""
    return abs(term) < threshold * abs(total)


def _indices(start: int, indices: Optional[Iterable[int]]) -> Iterable[int]:
    return itertools.count(start) if indices is None else indices


def _accumulate(
    update: Callable[[int, S], tuple[float, S]],
    state0: S,
    initial: float,
    indices: Iterable[int],
    combine: Callable[[float, float], float],
) -> Iterator[tuple[float, float]]:
    total = initial
    state = state0
    for i in indices:
        term, state = update(i, state)
        total = combine(total, term)
        yield term, total


def series(
    update: Callable[[int, S], tuple[float, S]],
    state0: S,
    initial: float = 0.0,
    start: int = 1,
    max_iter: int = DEFAULT_MAX_ITER,
    tolerance: EqualityTolerance = STRICT_TOLERANCE,
    stop: Optional[Callable[[float, float], bool]] = None,
    indices: Optional[Iterable[int]] = None,
) -> IterationResult[float]:
    """
    Усечённый бесконечный ряд.

    Args:
        update: (i, state) → (tᵢ, state) — i-й член и новое состояние
        state0: Начальное состояние
        initial: Начальное значение суммы
        start: Первый индекс
        max_iter: Лимит числа членов
        tolerance: Толерантность для критерия "член ≈ 0 относительно суммы"
        stop: Альтернативный критерий остановки на (член, сумма)
        indices: Конечная последовательность индексов вместо start, start + 1, ...

    Returns:
        IterationResult с частичной суммой и числом членов

    Examples:
        >>> r = series(lambda i, t: (t / i, t / i), 1.0, initial=1.0)
        >>> abs(r.value - 2.718281828459045) < 1e-15
        True
    """
    if stop is None:
        def stop(term: float, total: float) -> bool:
            return is_approx_zero(term, tolerance=tolerance, scale=abs(total))

    result = until(
        _accumulate(update, state0, initial, _indices(start, indices), lambda s, t: s + t),
        lambda step: stop(step[0], step[1]),
        max_iter=max_iter,
    )
    if result is None:
        return IterationResult(IterationStatus.EXHAUSTED_INPUT, 0, initial)
    if result.status == IterationStatus.EXCEEDED_MAX:
        logger.debug("series: no convergence after %d terms", result.iterations)
    return IterationResult(result.status, result.iterations, result.value[1])


def product(
    update: Callable[[int, S], tuple[float, S]],
    state0: S,
    initial: float = 1.0,
    start: int = 1,
    max_iter: int = DEFAULT_MAX_ITER,
    tolerance: EqualityTolerance = STRICT_TOLERANCE,
    indices: Optional[Iterable[int]] = None,
) -> IterationResult[float]:
    """
    Усечённое бесконечное произведение, остановка когда tᵢ ≈ 1.

    Examples:
        >>> r = product(lambda i, s: (1 - 1 / (4 * i * i), s), None, max_iter=100000)
        >>> abs(r.value - 2 / 3.141592653589793) < 1e-5
        True
    """
    result = until(
        _accumulate(update, state0, initial, _indices(start, indices), lambda p, t: p * t),
        lambda step: is_approx(step[0], 1.0, tolerance=tolerance, trusted=True),
        max_iter=max_iter,
    )
    if result is None:
        return IterationResult(IterationStatus.EXHAUSTED_INPUT, 0, initial)
    if result.status == IterationStatus.EXCEEDED_MAX:
        logger.debug("product: no convergence after %d terms", result.iterations)
    return IterationResult(result.status, result.iterations, result.value[1])


def recursive_sum(
    update: Callable[[int, S], tuple[float, S]],
    state0: S,
    initial: float = 0.0,
    start: int = 1,
    max_iter: int = DEFAULT_MAX_ITER,
    indices: Optional[Iterable[int]] = None,
) -> IterationResult[float]:
    """
    Ряд с остановкой по относительному вкладу |tᵢ / S| < 1e-10.

    Используется для рекурсивно построенных рядов (Marcum Q), где члены
    вычисляются из состояния предыдущего шага.
    """
    return series(
        update,
        state0,
        initial=initial,
        start=start,
        max_iter=max_iter,
        stop=relative_term_below,
        indices=indices,
    )
