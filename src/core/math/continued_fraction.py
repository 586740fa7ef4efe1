"""
Continued Fraction — Modified Lentz Evaluation

Вычисление цепной дроби вида

    f = b₀ + a₁ / (b₁ + a₂ / (b₂ + a₃ / (b₃ + ...)))

модифицированным методом Лентца (Thompson & Barnett, 1986) без пересчёта
от хвоста дроби:

    C₀ = f₀ = b₀ (tiny если |b₀| мал),  D₀ = 0
    Cᵢ = bᵢ + aᵢ / Cᵢ₋₁
    Dᵢ = 1 / (bᵢ + aᵢ · Dᵢ₋₁)
    fᵢ = fᵢ₋₁ · Cᵢ · Dᵢ

Остановка когда Cᵢ·Dᵢ ≈ 1 с относительной толерантностью 8·ulp.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль исключено: |Cᵢ|, |знаменатель Dᵢ| ≥ tiny
2. Число членов ограничено max_iter
3. Пустая последовательность коэффициентов даёт b₀, а не исключение
"""

import itertools
import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Final

from src.core.math.convergence import (
    DEFAULT_MAX_ITER,
    IterationResult,
    IterationStatus,
    until,
)
from src.core.math.numerical_safeguards import (
    LEAST_NORMAL,
    ULP_OF_ONE,
    EqualityTolerance,
    absmax,
    is_approx,
)

logger = logging.getLogger(__name__)

# Порог, заменяющий нулевые промежуточные знаменатели
LENTZ_TINY: Final[float] = 10 * LEAST_NORMAL

# Критерий сходимости |C·D - 1| < 8·ulp
LENTZ_TOLERANCE: Final[EqualityTolerance] = EqualityTolerance(relative=8 * ULP_OF_ONE, absolute=0.0)


def _lentz_steps(b0: float, coefficients: Iterable[tuple[float, float]]) -> Iterator[tuple[float, float, int]]:
    c = absmax(b0, LENTZ_TINY)
    d = 0.0
    frac = c
    for i, (a_i, b_i) in enumerate(coefficients, start=1):
        c = absmax(b_i + a_i / c, LENTZ_TINY)
        d = 1.0 / absmax(b_i + a_i * d, LENTZ_TINY)
        frac *= c * d
        yield c * d, frac, i


def continued_fraction_terms(
    b0: float,
    coefficients: Iterable[tuple[float, float]],
    max_iter: int = DEFAULT_MAX_ITER,
) -> IterationResult[float]:
    """
    Значение цепной дроби по последовательности пар (aᵢ, bᵢ), i = 1, 2, ...

    Конечная последовательность даёт подходящую дробь со статусом
    EXHAUSTED_INPUT; пустая — само b₀.

    Examples:
        >>> abs(continued_fraction_terms(1.0, [(1.0, 2.0), (1.0, 2.0)]).value - 1.4) < 1e-15
        True
    """
    result = until(
        _lentz_steps(b0, coefficients),
        lambda step: is_approx(step[0], 1.0, tolerance=LENTZ_TOLERANCE, trusted=True),
        max_iter=max_iter,
    )
    if result is None:
        return IterationResult(IterationStatus.EXHAUSTED_INPUT, 0, b0)
    _, frac, terms = result.value
    if result.status == IterationStatus.EXCEEDED_MAX:
        logger.debug("continued_fraction: no convergence after %d terms", terms)
    return IterationResult(result.status, terms, frac)


def continued_fraction(
    b0: float,
    a: Callable[[int], float],
    b: Callable[[int], float],
    max_iter: int = DEFAULT_MAX_ITER,
) -> IterationResult[float]:
    """
    Значение цепной дроби b₀ + a₁/(b₁ + a₂/(b₂ + ...)).

    Args:
        b0: Начальный член b₀
        a: i-й числитель aᵢ как функция i = 1, 2, 3, ...
        b: i-й знаменатель bᵢ как функция i = 1, 2, 3, ...
        max_iter: Лимит числа членов

    Returns:
        IterationResult со значением дроби и числом членов; при отсутствии
        сходимости — последнее приближение со статусом EXCEEDED_MAX

    Examples:
        >>> r = continued_fraction(1.0, lambda i: 1.0, lambda i: 2.0)
        >>> abs(r.value - 2 ** 0.5) < 1e-15
        True
    """
    return continued_fraction_terms(b0, ((a(i), b(i)) for i in itertools.count(1)), max_iter=max_iter)
