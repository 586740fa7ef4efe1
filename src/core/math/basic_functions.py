"""
Basic Functions — Cancellation-Free Elementary Combinations

Функции, которые при малых x теряют все значащие цифры в наивной записи:

    expm1mx(x) = eˣ - 1 - x
    log1pmx(x) = log(1 + x) - x
    xmsin(x)   = x - sin(x)

Для expm1mx используются гиперболические тождества с одним вызовом sinh(x/2):

    eˣ - 1 - x = 2·sinh²(x/2) + 2·sinh(x/2)·√(1 + sinh²(x/2)) - x

log1pmx сводится к expm1mx:

    log(1 + x) - x = -(e^{log(1+x)} - 1 - log(1+x))

xmsin при |x| < 2 считается рядом Тейлора x³/3! - x⁵/5! + x⁷/7! - ...
"""

import math
from typing import Final

from src.core.math.series import series

# Порог |x|, выше которого expm1(x) - x не теряет точность
EXPM1MX_DIRECT_THRESHOLD: Final[float] = 0.95

# Порог |x|, ниже которого x - sin(x) считается рядом Тейлора
XMSIN_SERIES_THRESHOLD: Final[float] = 2.0


def expm1mx(x: float) -> float:
    """
    eˣ - 1 - x с полной точностью при малых x.

    Examples:
        >>> abs(expm1mx(1e-10) - 5.000000000166667e-21) < 1e-30
        True
    """
    if abs(x) >= EXPM1MX_DIRECT_THRESHOLD:
        return math.expm1(x) - x
    shx2 = math.sinh(x / 2)
    sh2x2 = shx2 * shx2
    return 2 * sh2x2 + (2 * shx2 * math.sqrt(1 + sh2x2) - x)


def log1pmx(x: float) -> float:
    """
    log(1 + x) - x с полной точностью при малых x.

    Returns:
        NaN для x < -1, -inf для x == -1

    Examples:
        >>> log1pmx(-1.0)
        -inf
    """
    if x < -1:
        return math.nan
    if x == -1:
        return -math.inf
    if x < EXPM1MX_DIRECT_THRESHOLD:
        return -expm1mx(math.log1p(x))
    return math.log1p(x) - x


def xmsin(x: float) -> float:
    """
    x - sin(x) с полной точностью при малых x.

    Examples:
        >>> xmsin(0.0)
        0.0
    """
    if x == 0 or abs(x) >= XMSIN_SERIES_THRESHOLD:
        return x - math.sin(x)
    x2 = x * x

    def update(k: int, term: float) -> tuple[float, float]:
        # tₖ = -tₖ₋₁ · x² / ((2k + 2)(2k + 3)),  t₀ = x³/6
        nxt = -term * x2 / ((2 * k + 2) * (2 * k + 3))
        return nxt, nxt

    first = x * x2 / 6
    return series(update, first, initial=first, start=1).value
