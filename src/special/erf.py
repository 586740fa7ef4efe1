"""
Error Function Inverse — erf⁻¹ and erfc⁻¹

Обратные функции ошибок, используемые как строительный блок начальных
приближений для неполной гамма-функции и Marcum Q.

Алгоритм (Numerical Recipes 3rd ed., §6.2.2):
1. Приближение квантиля нормального распределения (A&S 26.2.22),
   точность ~1e-3:

       x = t - (a₀ + a₁t)/(1 + b₁t + b₂t²),  t = √(-2 log p)

2. Два шага Галлея на erfc(x) - p с

       erfc'(x)  = -2/√π·e^{-x²}
       erfc''/erfc' = -2x

Для p > 1 используется симметрия erfc⁻¹(p) = -erfc⁻¹(2 - p).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. erfc⁻¹(0) = +inf, erfc⁻¹(2) = -inf, вне [0, 2] — NaN
2. erfc⁻¹(1) = 0
"""

import math
from typing import Final

from src.roots.methods.newton import halley_root

# Коэффициенты A&S 26.2.22
QAPPROX_A0: Final[float] = 2.30753
QAPPROX_A1: Final[float] = 0.27061
QAPPROX_B1: Final[float] = 0.99229
QAPPROX_B2: Final[float] = 0.04481

# sin(π/4): перевод квантиля нормального распределения в аргумент erfc
SIN_PI_4: Final[float] = 0.70711

# 2/√π
TWO_OVER_SQRT_PI: Final[float] = 1.12837916709551257

# Число шагов Галлея после приближения 26.2.22
INV_ERFC_HALLEY_STEPS: Final[int] = 2


def qapprox(p: float) -> float:
    """
    Приближение квантиля нормального распределения для верхнего хвоста.

    Handbook of Mathematical Functions, §26.2.22. Точность ~1e-3.

    Args:
        p: Вероятность верхнего хвоста, 0 < p ≤ 1/2

    Returns:
        x такое, что Q(x) ≈ p; NaN вне домена

    Examples:
        >>> round(qapprox(0.5), 2)
        0.0
    """
    if not 0 < p <= 0.5:
        return math.nan
    t = math.sqrt(-2 * math.log(p))
    return t - (QAPPROX_A0 + t * QAPPROX_A1) / (1 + t * (QAPPROX_B1 + t * QAPPROX_B2))


def inv_erfc(p: float) -> float:
    """
    Обратная дополнительная функция ошибок: erfc(x) = p.

    Args:
        p: Значение из [0, 2]

    Returns:
        x; ±inf на концах, NaN вне домена

    Examples:
        >>> inv_erfc(1.0)
        0.0
        >>> abs(inv_erfc(math.erfc(0.5)) - 0.5) < 1e-15
        True
    """
    if math.isnan(p) or p < 0 or p > 2:
        return math.nan
    if p == 0:
        return math.inf
    if p == 2:
        return -math.inf
    if p == 1:
        return 0.0

    pp = p if p <= 1 else 2 - p
    guess = SIN_PI_4 * qapprox(0.5 * pp)
    x = halley_root(
        lambda x: math.erfc(x) - pp,
        lambda x: -TWO_OVER_SQRT_PI * math.exp(-x * x),
        guess,
        f2f1=lambda x: -2 * x,
        max_iter=INV_ERFC_HALLEY_STEPS,
    ).value
    return x if p <= 1 else -x


def inv_erf(p: float) -> float:
    """
    Обратная функция ошибок: erf(x) = p, p ∈ [-1, 1].

    Examples:
        >>> abs(inv_erf(math.erf(1.2345)) - 1.2345) < 1e-14
        True
    """
    return inv_erfc(1 - p)
