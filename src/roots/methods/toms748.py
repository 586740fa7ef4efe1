"""
TOMS 748 — Alefeld, Potra & Shi Enclosing Method

Алгоритм 4.2 из G. E. Alefeld, F. A. Potra, Y. Shi, "Algorithm 748:
Enclosing Zeros of Continuous Functions", ACM TOMS 21(3), 1995.

Каждая внешняя итерация:
1. Обратная кубическая интерполяция по (a, b, d, e); если значения f
   в этих точках не попарно различны или результат вне (a, b) —
   шаг Newton-Quadratic (k = 2)
2. Перегруппировка отрезка (bracket), проверка остановки
3. Вторая интерполяция (Newton-Quadratic с k = 3 при откате)
4. Двойной шаг секущей от лучшего конца, не дальше половины ширины
5. Если отрезок не сжался в µ = 0.5 раза за итерацию — бисекция

Хранится история из четырёх точек: a, b (текущий отрезок), d (конец,
отброшенный последним), e (значение d на предыдущей итерации).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. a < b и fa·fb ≤ 0 на протяжении всех итераций
2. Каждое новое вычисление f — строго внутри (a, b), не ближе 2δ к концам
3. Асимптотическая эффективность 1.66 (три вычисления f на итерацию)
"""

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from src.core.math.convergence import until
from src.core.math.counted_function import CountedFunction
from src.core.math.numerical_safeguards import ULP_OF_ONE, STRICT_TOLERANCE, EqualityTolerance
from src.roots.estimates import BracketedRootEstimate, BracketedRootResult, secant_step
from src.roots.methods.base import shifted, to_result

# Лимит внешних итераций TOMS 748
TOMS748_MAX_ITER: Final[int] = 30

# Минимальное сжатие отрезка за итерацию, иначе бисекция
TOMS748_MU: Final[float] = 0.5

# Доля толерантности, определяющая минимальный отступ от концов
TOMS748_LAMBDA: Final[float] = 0.7


# =============================================================================
# ИНТЕРПОЛЯЦИЯ
# =============================================================================


def inverse_cubic_interpolation(
    a: float,
    b: float,
    c: float,
    d: float,
    fa: float,
    fb: float,
    fc: float,
    fd: float,
) -> float:
    """
    Корень обратного интерполяционного кубического полинома по четырём точкам.

    Модифицированная схема Эйткена-Невилла (подпрограмма ipzero из
    TOMS 748, раздел 3). Значения fa, fb, fc, fd должны быть попарно различны.

    Examples:
        >>> f = lambda x: x - 1.5
        >>> inverse_cubic_interpolation(1.0, 2.0, 3.0, 4.0, f(1.0), f(2.0), f(3.0), f(4.0))
        1.5
    """
    q11 = (c - d) * fc / (fd - fc)
    q21 = (b - c) * fb / (fc - fb)
    q31 = (a - b) * fa / (fb - fa)
    d21 = (b - c) * fc / (fc - fb)
    d31 = (a - b) * fb / (fb - fa)
    q22 = (d21 - q11) * fb / (fd - fb)
    q32 = (d31 - q21) * fa / (fc - fa)
    d32 = (d31 - q21) * fc / (fc - fa)
    q33 = (d32 - q22) * fa / (fd - fa)
    return a + q31 + q32 + q33


def newton_quadratic_step(
    a: float,
    b: float,
    d: float,
    fa: float,
    fb: float,
    fd: float,
    k: int,
) -> float:
    """
    k шагов Ньютона к корню квадратичного полинома через (a, fa), (b, fb), (d, fd).

        P(x)  = f(a) + f[a,b](x - a) + f[a,b,d](x - a)(x - b)
        P'(x) = f[a,b] + f[a,b,d](2x - a - b)

    Подпрограмма Newton-Quadratic(a, b, d, r, k) из TOMS 748, раздел 2.
    При f[a,b,d] == 0 полином вырождается в прямую: шаг секущей.
    """
    fab = (fb - fa) / (b - a)
    fbd = (fd - fb) / (d - b)
    fabd = (fbd - fab) / (d - a)
    if fabd == 0:
        return a - fa / fab
    r = a if fa * fabd > 0 else b
    for _ in range(k):
        p = fa + (r - a) * (fab + (r - b) * fabd)
        dp = fab + fabd * (2 * r - a - b)
        if dp == 0:
            break
        r -= p / dp
    return r


def _all_distinct(fa: float, fb: float, fd: float, fe: float) -> bool:
    return (fa - fb) * (fa - fd) * (fa - fe) * (fb - fd) * (fb - fe) * (fd - fe) != 0


def _interpolate(
    a: float, b: float, d: float, e: float, fa: float, fb: float, fd: float, fe: float, k: int, cubic: bool
) -> float:
    if cubic and _all_distinct(fa, fb, fd, fe):
        c = inverse_cubic_interpolation(a, b, d, e, fa, fb, fd, fe)
        if (c - a) * (c - b) < 0:
            return c
    c = newton_quadratic_step(a, b, d, fa, fb, fd, k)
    if not math.isfinite(c):
        return 0.5 * (a + b)
    return c


# =============================================================================
# ПЕРЕГРУППИРОВКА ОТРЕЗКА
# =============================================================================


@dataclass(frozen=True)
class Toms748State:
    """Отрезок [a, b], отброшенная точка d и её предыдущее значение e."""

    a: float
    b: float
    d: float
    e: float
    fa: float
    fb: float
    fd: float
    fe: float


def tole(a: float, b: float, fa: float, fb: float, tolerance: float) -> float:
    """Допуск TOMS 748 (уравнение 25): 2·|u|·ulp + tolerance, u — лучший конец."""
    u = a if abs(fa) < abs(fb) else b
    return 2 * abs(u) * ULP_OF_ONE + tolerance


def toms748_bracket(
    f: CountedFunction,
    a: float,
    b: float,
    c: float,
    fa: float,
    fb: float,
    tolerance: float,
) -> tuple[float, float, float, float, float, float]:
    """
    Вычисление f(c) и сужение [a, b] до отрезка со сменой знака.

    c сдвигается внутрь не ближе 2δ к концам, δ = 0.7·tole; при ширине
    ≤ 4δ берётся середина.

    Returns:
        (a, b, d, fa, fb, fd), где d — отброшенный конец
    """
    delta = TOMS748_LAMBDA * tole(a, b, fa, fb, tolerance)
    if b - a <= 4 * delta:
        c = 0.5 * (a + b)
    elif c <= a + 2 * delta:
        c = a + 2 * delta
    elif c >= b - 2 * delta:
        c = b - 2 * delta
    fc = f(c)

    if fc == 0:
        return c, b, c, fc, fb, fc
    if fc * fa < 0:
        return a, c, b, fa, fc, fb
    return c, b, a, fc, fb, fa


# =============================================================================
# МЕТОД
# =============================================================================


def _iterate(state: Toms748State, i: int, f: CountedFunction, tol: float) -> Toms748State:
    a, b, d, e, fa, fb, fd, fe = state.a, state.b, state.d, state.e, state.fa, state.fb, state.fd, state.fe
    width = b - a

    # 4.2.3 кубическая интерполяция (на первой итерации истории для неё нет)
    c = _interpolate(a, b, d, e, fa, fb, fd, fe, k=2, cubic=i > 2)

    # 4.2.4
    e, fe = d, fd
    a, b, d, fa, fb, fd = toms748_bracket(f, a, b, c, fa, fb, tol)
    if fa == 0 or b - a < 2 * tole(a, b, fa, fb, tol):
        return Toms748State(a, b, d, e, fa, fb, fd, fe)

    # 4.2.5
    c = _interpolate(a, b, d, e, fa, fb, fd, fe, k=3, cubic=True)

    # 4.2.6
    a, b, d, fa, fb, fd = toms748_bracket(f, a, b, c, fa, fb, tol)
    if fa == 0 or b - a < tole(a, b, fa, fb, tol):
        return Toms748State(a, b, d, e, fa, fb, fd, fe)

    # 4.2.7-4.2.8 двойной шаг секущей от лучшего конца
    u, fu = (a, fa) if abs(fa) < abs(fb) else (b, fb)
    c = u - 2 * (b - a) / (fb - fa) * fu
    if abs(c - u) > 0.5 * (b - a):
        c = 0.5 * (a + b)
    d_bar, fd_bar = d, fd
    a, b, d, fa, fb, fd = toms748_bracket(f, a, b, c, fa, fb, tol)

    # 4.2.9 принимаем шаг, если отрезок сжался в µ раз; иначе бисекция
    if b - a < TOMS748_MU * width:
        return Toms748State(a, b, d, d_bar, fa, fb, fd, fd_bar)
    e, fe = d, fd
    a, b, d, fa, fb, fd = toms748_bracket(f, a, b, 0.5 * (a + b), fa, fb, tol)
    return Toms748State(a, b, d, e, fa, fb, fd, fe)


def toms748_root(
    f: Callable[[float], float],
    bracket: BracketedRootEstimate,
    tolerance: EqualityTolerance = STRICT_TOLERANCE,
    intercept: float = 0.0,
    max_iter: int = TOMS748_MAX_ITER,
) -> BracketedRootResult:
    """
    Метод TOMS 748 на отрезке.

    Останавливается, когда fa == 0 или b - a ≤ 2·tole, где tole строится
    из tolerance.absolute и 2·ulp лучшего конца.

    Args:
        f: Функция
        bracket: Отрезок со сменой знака f - intercept (порядок концов любой)
        tolerance: Толерантность сходимости
        intercept: Решаем f(x) = intercept
        max_iter: Лимит внешних итераций

    Returns:
        BracketedRootResult с отрезком a < b

    Examples:
        >>> br = BracketedRootEstimate(2.0, 3.2, -1.0, 21.368)
        >>> r = toms748_root(lambda x: x**3 - 2 * x - 5, br)
        >>> abs(r.value - 2.0945514815423266) < 1e-14
        True
    """
    counted = shifted(f, intercept)
    tol = tolerance.absolute
    a, b, fa, fb = bracket.a, bracket.b, bracket.fa, bracket.fb
    if a > b:
        a, b, fa, fb = b, a, fb, fa

    # 4.1.1-4.1.2 начальный шаг секущей
    c = secant_step(a, b, fa, fb)
    a, b, d, fa, fb, fd = toms748_bracket(counted, a, b, c, fa, fb, tol)
    start = Toms748State(a, b, d, 1.0, fa, fb, fd, 1e5)

    def steps():
        state = start
        i = 2
        while True:
            yield state
            state = _iterate(state, i, counted, tol)
            i += 1

    iteration = until(
        steps(),
        lambda s: s.fa == 0 or s.b - s.a <= 2 * tole(s.a, s.b, s.fa, s.fb, tol),
        max_iter=max_iter,
    )
    return to_result(
        "toms748",
        iteration,
        counted,
        lambda s: BracketedRootEstimate(s.a, s.b, s.fa, s.fb),
    )
