"""
Probability — Precision-Preserving Probability Value

Вероятность из [0, 1], хранящаяся либо как p, либо как дополнение q = 1 - p:
храним ту величину, которая мала, чтобы не терять точность около 0 и 1.
Оба значения доступны как производные свойства.

    Probability.from_p(1e-300).q == 1.0           (p хранится точно)
    Probability.from_q(1e-300).q == 1e-300        (q хранится точно)

Разность двух вероятностей вычисляется через меньшие из p/q, без
катастрофического сокращения около 1:

    lhs - rhs = rhs.q - lhs.q,   если lhs.p ≥ ½ и rhs.p ≥ ½
    lhs - rhs = lhs.p - rhs.p,   иначе

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. p + q == 1 по построению (никогда не корректируется в runtime)
2. Immutable (frozen dataclass)
3. NaN-вероятность — сигнал ошибки домена, не исключение
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Probability:
    """
    Вероятность, хранящая p или q = 1 - p.

    Attributes:
        value: Хранимое значение (p если is_complement=False, иначе q)
        is_complement: True если хранится q
    """

    value: float
    is_complement: bool = False

    # =========================================================================
    # КОНСТРУКТОРЫ
    # =========================================================================

    @classmethod
    def from_p(cls, p: float) -> "Probability":
        """Вероятность, заданная нижним хвостом p."""
        return cls(p, False)

    @classmethod
    def from_q(cls, q: float) -> "Probability":
        """Вероятность, заданная верхним хвостом q."""
        return cls(q, True)

    @classmethod
    def nan(cls) -> "Probability":
        """Сигнальное значение для аргументов вне домена."""
        return cls(math.nan, False)

    # =========================================================================
    # ПРОИЗВОДНЫЕ ЗНАЧЕНИЯ
    # =========================================================================

    @property
    def p(self) -> float:
        return 1 - self.value if self.is_complement else self.value

    @property
    def q(self) -> float:
        return self.value if self.is_complement else 1 - self.value

    @property
    def complement(self) -> "Probability":
        """Дополнение: p и q меняются местами."""
        return Probability(self.value, not self.is_complement)

    @property
    def is_nan(self) -> bool:
        return math.isnan(self.value)

    # =========================================================================
    # АРИФМЕТИКА И ПОРЯДОК
    # =========================================================================

    def __sub__(self, other: "Probability") -> float:
        if self.p >= 0.5 and other.p >= 0.5:
            return other.q - self.q
        return self.p - other.p

    def __lt__(self, other: "Probability") -> bool:
        return self - other < 0

    def __le__(self, other: "Probability") -> bool:
        return self - other <= 0

    def __gt__(self, other: "Probability") -> bool:
        return self - other > 0

    def __ge__(self, other: "Probability") -> bool:
        return self - other >= 0

    def __str__(self) -> str:
        return f"p: {self.p}, q: {self.q}"
