"""
Bracketing — Geometric Search for a Sign Change

Поиск отрезка, на концах которого функция меняет знак (Numerical Recipes §9.1
с поддержкой границ домена).

Алгоритм:
1. Второй конец b = guess·factor; при заданных xmin/xmax шаг к границе
   асимптотический: b = x_lim - (x_lim - guess)/factor
2. Пока fa·fb ≥ 0: сдвигаем тот конец, где |f| меньше, от другого конца
   на factor·(ширина отрезка) (или асимптотически к границе)
3. Остановка при fa·fb < 0 или после max_iter шагов

ОГРАНИЧЕНИЕ: для немонотонной функции и плохого начального приближения
отрезок может не найтись (NO_BRACKET). Это свойство метода, а не ошибка.
"""

import logging
from collections.abc import Callable
from typing import Final, Optional

from src.core.math.counted_function import CountedFunction
from src.roots.estimates import BracketedRootEstimate, BracketResult, BracketStatus

logger = logging.getLogger(__name__)

# Геометрический множитель расширения отрезка
BRACKET_FACTOR_DEFAULT: Final[float] = 1.6

# Лимит шагов расширения
BRACKET_MAX_ITER_DEFAULT: Final[int] = 30


def _step_away(
    moving: float,
    anchor: float,
    factor: float,
    xmin: Optional[float],
    xmax: Optional[float],
) -> float:
    if xmin is not None and moving < anchor:
        return xmin - (xmin - moving) / factor
    if xmax is not None and moving > anchor:
        return xmax - (xmax - moving) / factor
    return moving + factor * (moving - anchor)


def bracket(
    f: Callable[[float], float],
    guess: float,
    xmin: Optional[float] = None,
    xmax: Optional[float] = None,
    factor: float = BRACKET_FACTOR_DEFAULT,
    max_iter: int = BRACKET_MAX_ITER_DEFAULT,
) -> BracketResult:
    """
    Поиск отрезка со сменой знака, начиная с guess.

    Args:
        f: Функция
        guess: Начальное приближение (первый конец отрезка)
        xmin: Нижняя граница домена (опционально)
        xmax: Верхняя граница домена (опционально)
        factor: Геометрический множитель шага (> 1)
        max_iter: Лимит шагов расширения

    Returns:
        BracketResult с отрезком и числом вычислений функции

    Examples:
        >>> import math
        >>> r = bracket(lambda x: math.exp(x) - 5, 2.0)
        >>> r.found and r.estimate.fa * r.estimate.fb < 0
        True
    """
    counted = CountedFunction(f)
    a = guess
    b = a * factor
    if xmin is not None and b < a:
        b = xmin - (xmin - a) / factor
    elif xmax is not None and b > a:
        b = xmax - (xmax - a) / factor

    if b == a:
        # guess == 0: мультипликативный шаг вырожден
        b = a + (factor - 1)

    fa = counted(a)
    fb = counted(b)
    if fa * fb < 0:
        return BracketResult(BracketStatus.BRACKET, counted.count, BracketedRootEstimate(a, b, fa, fb))
    for _ in range(max_iter):
        if abs(fa) < abs(fb):
            a = _step_away(a, b, factor, xmin, xmax)
            fa = counted(a)
        else:
            b = _step_away(b, a, factor, xmin, xmax)
            fb = counted(b)
        if fa * fb < 0:
            return BracketResult(BracketStatus.BRACKET, counted.count, BracketedRootEstimate(a, b, fa, fb))

    logger.debug("bracket: no sign change from guess %r after %d evaluations", guess, counted.count)
    return BracketResult(BracketStatus.NO_BRACKET, counted.count)
