"""
Polynomial — Horner & Clenshaw Evaluation

Вычисление полиномов по таблицам коэффициентов (порядок по возрастанию степени):

    p(z) = c₀ + c₁z + c₂z² + ... + c_n zⁿ
         = c₀ + z(c₁ + z(c₂ + ... + z(c_{n-1} + z·c_n)))      (схема Горнера)

Отношение полиномов при z > 1 и равной длине числителя и знаменателя
вычисляется в 1/z с обращёнными коэффициентами (деление на zⁿ), что
исключает переполнение для больших z.

Ряд Чебышёва на [a, b] вычисляется рекурсией Кленшоу:

    f(x) = c₀/2 + Σ_{i=1}^{N-1} cᵢ Tᵢ(y),   y = (2x - (b + a)) / (b - a)
    dᵢ = 2y·dᵢ₊₁ - dᵢ₊₂ + cᵢ,   f = c₀/2 + y·d₁ - d₂
"""

import math
from collections.abc import Sequence
from typing import Optional


def polynomial(coeffs: Sequence[float], z: float) -> float:
    """
    Значение полинома в точке z по схеме Горнера.

    Args:
        coeffs: Коэффициенты по возрастанию степени
        z: Точка вычисления

    Returns:
        p(z); 0.0 для пустого списка коэффициентов

    Examples:
        >>> polynomial([1.0, 2.0, 3.0], 2.0)
        17.0
        >>> polynomial([], 5.0)
        0.0
    """
    if not coeffs:
        return 0.0
    result = coeffs[-1]
    for c in reversed(coeffs[:-1]):
        result = result * z + c
    return result


def polynomial_ratio(num: Sequence[float], denom: Sequence[float], z: float) -> float:
    """
    Отношение двух полиномов num(z) / denom(z).

    Examples:
        >>> polynomial_ratio([1.0, 1.0], [1.0, 2.0], 3.0)
        0.5714285714285714
    """
    if len(num) == len(denom) and z > 1:
        w = 1.0 / z
        return polynomial(num[::-1], w) / polynomial(denom[::-1], w)
    return polynomial(num, z) / polynomial(denom, z)


def chebyshev(
    coeffs: Sequence[float],
    z: float,
    interval: tuple[float, float] = (-1.0, 1.0),
    m: Optional[int] = None,
) -> float:
    """
    Значение ряда Чебышёва c₀/2 + Σ cᵢTᵢ в точке z.

    Args:
        coeffs: Коэффициенты c₀, c₁, ...
        z: Точка вычисления внутри interval
        interval: Отрезок аппроксимации [a, b]
        m: Использовать только первые m коэффициентов

    Returns:
        Значение ряда; NaN вне отрезка; 0.0 для пустого списка

    Examples:
        >>> chebyshev([2.0, 0.0, 1.0], 0.5)  # 1 + T₂(0.5) = 1 + (2·0.25 - 1)
        0.5
    """
    if not coeffs:
        return 0.0
    a, b = interval
    if not a <= z <= b:
        return math.nan
    count = len(coeffs) if m is None else min(m, len(coeffs))
    y = z if (a, b) == (-1.0, 1.0) else (2 * z - b - a) / (b - a)
    d1 = 0.0
    d2 = 0.0
    for c in reversed(coeffs[1:count]):
        d1, d2 = 2 * y * d1 - d2 + c, d1
    return coeffs[0] / 2 + y * d1 - d2
