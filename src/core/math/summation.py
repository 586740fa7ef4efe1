"""
Summation — Accurate Finite Sums

Суммирование конечных последовательностей float с контролем ошибки
округления:

- sum_naive:    Σ aᵢ (накапливает ошибку округления)
- sum_kahan:    компенсированная сумма Кэхэна (1965)
- sum_kbn:      Кэхэн–Бабушка–Ноймайер: компенсация с учётом того, что
                точность теряется то на стороне суммы, то на стороне члена
- sum_pairwise: рекурсивное деление пополам, наивная сумма для блоков < N

Формулы KBN (Neumaier 1974, Eq. 2.IV):

    sᵢ = sᵢ₋₁ + aᵢ
    wᵢ = wᵢ₋₁ + ((sᵢ₋₁ - sᵢ) + aᵢ),   |aᵢ| ≤ |sᵢ₋₁|
    wᵢ = wᵢ₋₁ + ((aᵢ - sᵢ) + sᵢ₋₁),   |aᵢ| > |sᵢ₋₁|
    Σ = s_n + w_n
"""

from collections.abc import Iterable, Sequence
from typing import Final

# Размер блока, ниже которого pairwise переходит на наивную сумму
PAIRWISE_BLOCK_SIZE: Final[int] = 100


def sum_naive(values: Iterable[float]) -> float:
    """Наивная сумма слева направо."""
    total = 0.0
    for value in values:
        total += value
    return total


def sum_kahan(values: Iterable[float]) -> float:
    """
    Компенсированная сумма Кэхэна.

    s2 хранит оценку ошибки последнего округления s. Вариант Ноймайера
    (sum_kbn) точнее при той же стоимости.
    """
    s = 0.0
    s2 = 0.0
    for y in values:
        s2py = s2 + y
        s_new = s + s2py
        s2 = (s - s_new) + s2py
        s = s_new
    return s


def sum_kbn(values: Iterable[float]) -> float:
    """
    Сумма Кэхэна–Бабушки–Ноймайера.

    Examples:
        >>> sum_kbn([1.0, 1e100, 1.0, -1e100])
        2.0
    """
    s = 0.0
    w = 0.0
    for a in values:
        s_new = s + a
        if abs(a) <= abs(s):
            w += (s - s_new) + a
        else:
            w += (a - s_new) + s
        s = s_new
    return s + w


def sum_pairwise(values: Sequence[float], block_size: int = PAIRWISE_BLOCK_SIZE) -> float:
    """
    Попарная сумма: делим пополам и суммируем половины рекурсивно.

    Ошибка растёт как O(log n) вместо O(n) у наивной суммы.
    """
    if len(values) < max(block_size, 2):
        return sum_naive(values)
    mid = len(values) // 2
    return sum_pairwise(values[:mid], block_size) + sum_pairwise(values[mid:], block_size)
