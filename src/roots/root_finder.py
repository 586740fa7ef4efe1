"""
Root Finder — Bracket, Then Solve

Композитный поиск корня скалярной функции:
1. bracket() от начального приближения (с учётом границ домена)
2. Диспетчеризация на выбранный метод на отрезке

Диспетчер bracketed_root сначала проверяет концы отрезка: если один из
концов уже корень в пределах tolerance.absolute — успех без вычислений;
если концы одного знака — ERROR (отрезок не содержит корня).

Результат объединяет число вычислений функции в обеих фазах. Неудача
поиска отрезка — отдельный исход NO_BRACKET.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Final, Optional

from src.core.math.numerical_safeguards import ULP_OF_ONE, EqualityTolerance
from src.roots.bracketing import BRACKET_FACTOR_DEFAULT, bracket
from src.roots.estimates import (
    BracketAndRootResult,
    BracketedRootEstimate,
    BracketedRootResult,
    RootStatus,
)
from src.roots.methods import (
    bisection_root,
    brent_root,
    dekker_root,
    ridders_root,
    secant_root,
    toms748_root,
)

logger = logging.getLogger(__name__)

# Толерантность root() по умолчанию: строгая по x, |f| < 1e-14 по значению
ROOT_TOLERANCE_DEFAULT: Final[EqualityTolerance] = EqualityTolerance(relative=2 * ULP_OF_ONE, absolute=1e-14)


class RootMethod(str, Enum):
    """Метод поиска корня на отрезке"""

    BISECTION = "bisection"
    SECANT = "secant"
    DEKKER = "dekker"
    RIDDERS = "ridders"
    BRENT = "brent"
    TOMS748 = "toms748"


_METHODS: Final[dict] = {
    RootMethod.BISECTION: bisection_root,
    RootMethod.SECANT: secant_root,
    RootMethod.DEKKER: dekker_root,
    RootMethod.RIDDERS: ridders_root,
    RootMethod.BRENT: brent_root,
    RootMethod.TOMS748: toms748_root,
}


def bracketed_root(
    f: Callable[[float], float],
    bracket_estimate: BracketedRootEstimate,
    tolerance: EqualityTolerance = ROOT_TOLERANCE_DEFAULT,
    intercept: float = 0.0,
    method: RootMethod = RootMethod.RIDDERS,
) -> BracketedRootResult:
    """
    Метод на готовом отрезке с проверкой концов.

    Значения fa, fb отрезка — значения f - intercept.

    Returns:
        SUCCESS с нулём вычислений, если конец — корень;
        ERROR, если концы одного знака; иначе результат метода
    """
    fa, fb = bracket_estimate.fa, bracket_estimate.fb
    eps = tolerance.absolute
    if abs(fa) <= eps:
        return BracketedRootResult(RootStatus.SUCCESS, 0, BracketedRootEstimate.exact(bracket_estimate.a, fa))
    if abs(fb) <= eps:
        return BracketedRootResult(RootStatus.SUCCESS, 0, BracketedRootEstimate.exact(bracket_estimate.b, fb))
    if (fa < 0 and fb < 0) or (fa > 0 and fb > 0):
        logger.debug("bracketed_root: endpoints %r and %r do not bracket a root", fa, fb)
        return BracketedRootResult(RootStatus.ERROR, 0, bracket_estimate)
    return _METHODS[RootMethod(method)](f, bracket_estimate, tolerance, intercept)


def root(
    f: Callable[[float], float],
    guess: float,
    xmin: Optional[float] = None,
    xmax: Optional[float] = None,
    tolerance: EqualityTolerance = ROOT_TOLERANCE_DEFAULT,
    intercept: float = 0.0,
    bracket_factor: float = BRACKET_FACTOR_DEFAULT,
    method: RootMethod = RootMethod.RIDDERS,
) -> BracketAndRootResult:
    """
    Поиск корня f(x) = intercept от начального приближения.

    Успех зависит от качества guess, особенно для немонотонных функций.
    Если доступны производные, обычно выгоднее newton_root / halley_root.

    Args:
        f: Функция
        guess: Начальное приближение
        xmin: Нижняя граница корня (опционально)
        xmax: Верхняя граница корня (опционально)
        tolerance: Толерантность (absolute — порог |f| для концов отрезка)
        intercept: Уровень, на котором ищется корень
        bracket_factor: Геометрический множитель поиска отрезка
        method: Метод на отрезке (по умолчанию Риддерс)

    Returns:
        BracketAndRootResult с раздельным учётом вычислений

    Examples:
        >>> import math
        >>> r = root(lambda x: math.exp(x) - 5, 2.0)
        >>> abs(r.value - math.log(5)) < 1e-14
        True
    """
    if intercept == 0:
        target = f
    else:
        target = lambda x: f(x) - intercept  # noqa: E731

    found = bracket(target, guess, xmin=xmin, xmax=xmax, factor=bracket_factor)
    if not found.found:
        logger.debug("root: no bracket from guess %r", guess)
        return BracketAndRootResult(RootStatus.NO_BRACKET, found.evaluations)

    result = bracketed_root(f, found.estimate, tolerance, intercept, method)
    if result.status == RootStatus.ERROR:
        return BracketAndRootResult(RootStatus.ERROR, found.evaluations)
    return BracketAndRootResult(result.status, found.evaluations, result.evaluations, result.estimate)
