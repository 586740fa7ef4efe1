"""
Convergence — Bounded Iteration Primitive

Общий примитив для всех итерационных алгоритмов пакета: берёт
последовательность кандидатов и условие остановки, возвращает последний
вычисленный элемент и состояние выхода.

Состояния выхода:
- CONVERGED: условие выполнено
- EXCEEDED_MAX: достигнут лимит итераций
- EXHAUSTED_INPUT: последовательность закончилась раньше

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Из последовательности берётся не больше max_iter элементов (зависание невозможно)
2. Неудача сходимости — значение результата, а не исключение
3. Пустая последовательность → None
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Final, Generic, Optional, TypeVar

from src.core.math.numerical_safeguards import validate_max_iter

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Лимит итераций по умолчанию для рядов, дробей и рекурсий
DEFAULT_MAX_ITER: Final[int] = 100


# =============================================================================
# РЕЗУЛЬТАТ ИТЕРАЦИИ
# =============================================================================


class IterationStatus(str, Enum):
    """Состояние выхода итерационного процесса"""

    CONVERGED = "converged"
    EXCEEDED_MAX = "exceeded_max"
    EXHAUSTED_INPUT = "exhausted_input"


@dataclass(frozen=True)
class IterationResult(Generic[T]):
    """
    Результат итерационного процесса.

    Attributes:
        status: Состояние выхода
        iterations: Число выполненных итераций
        value: Последнее значение на момент выхода
    """

    status: IterationStatus
    iterations: int
    value: T

    @property
    def converged(self) -> bool:
        return self.status == IterationStatus.CONVERGED


# =============================================================================
# UNTIL
# =============================================================================


def until(
    values: Iterable[T],
    predicate: Callable[[T], bool],
    max_iter: int = DEFAULT_MAX_ITER,
    min_iter: int = 0,
) -> Optional[IterationResult[T]]:
    """
    Первый элемент последовательности, удовлетворяющий predicate.

    Args:
        values: Последовательность кандидатов (может быть бесконечной)
        predicate: Условие остановки на одном элементе
        max_iter: Лимит числа взятых элементов
        min_iter: Минимум элементов до проверки условия

    Returns:
        IterationResult (iterations — число взятых элементов) или None
        для пустой последовательности

    Examples:
        >>> import itertools
        >>> until(itertools.count(), lambda n: n * n > 50).value
        8
    """
    validate_max_iter(max_iter)
    count = 0
    last = None
    for element in values:
        if count >= min_iter and predicate(element):
            return IterationResult(IterationStatus.CONVERGED, count + 1, element)
        last = element
        count += 1
        if count >= max_iter:
            logger.debug("until: no convergence after %d iterations", count)
            return IterationResult(IterationStatus.EXCEEDED_MAX, count, element)
    if count == 0:
        return None
    logger.debug("until: input exhausted after %d iterations", count)
    return IterationResult(IterationStatus.EXHAUSTED_INPUT, count, last)


def until_pairwise(
    values: Iterable[T],
    predicate: Callable[[T, T], bool],
    max_iter: int = DEFAULT_MAX_ITER,
    min_iter: int = 0,
) -> Optional[IterationResult[T]]:
    """
    Первый элемент, который вместе с предыдущим удовлетворяет predicate.

    Args:
        values: Последовательность кандидатов
        predicate: Условие остановки на паре (предыдущий, текущий)
        max_iter: Лимит числа взятых элементов
        min_iter: Минимум элементов до проверки условия

    Returns:
        IterationResult (iterations — число взятых элементов) или None
        для пустой последовательности
    """
    validate_max_iter(max_iter)
    count = 0
    last = None
    for element in values:
        if count > 0 and count >= min_iter and predicate(last, element):
            return IterationResult(IterationStatus.CONVERGED, count + 1, element)
        last = element
        count += 1
        if count >= max_iter:
            logger.debug("until_pairwise: no convergence after %d iterations", count)
            return IterationResult(IterationStatus.EXCEEDED_MAX, count, element)
    if count == 0:
        return None
    logger.debug("until_pairwise: input exhausted after %d iterations", count)
    return IterationResult(IterationStatus.EXHAUSTED_INPUT, count, last)
