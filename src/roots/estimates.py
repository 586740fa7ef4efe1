"""
Root Estimates & Outcomes — Bracketed Estimates and Tagged Results

Данные, общие для всех методов поиска корня:

- BracketedRootEstimate: отрезок [a, b] и значения f(a), f(b) с инвариантом
  f(a)·f(b) ≤ 0. Вырожденная форма a == b кодирует точный корень.
- BracketResult: результат поиска отрезка (найден / не найден)
- BracketedRootResult: результат метода на отрезке (сошёлся / не сошёлся / ошибка)
- RootResult: результат методов с производными (Ньютон, Галлей)
- BracketAndRootResult: комбинированный результат root() с раздельным
  учётом вычислений функции на обеих фазах

Неудача — значение результата с тегом, а не исключение: вызывающий код
обязан проверить status.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. fa·fb ≤ 0 для любого отрезка, возвращённого методом
2. value никогда не бросает исключение (0/0 → середина отрезка)
3. Все результаты immutable
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

# =============================================================================
# ОЦЕНКА КОРНЯ
# =============================================================================


def secant_step(x0: float, x1: float, y0: float, y1: float) -> float:
    """
    Корень прямой через (x0, y0) и (x1, y1).

    Returns:
        x0 - y0·(x1 - x0)/(y1 - y0); середина отрезка если y0 == y1
    """
    if y1 == y0:
        return 0.5 * (x0 + x1)
    return x0 - y0 * (x1 - x0) / (y1 - y0)


@dataclass(frozen=True)
class BracketedRootEstimate:
    """
    Отрезок, содержащий корень, со значениями функции на концах.

    Attributes:
        a: Первый конец отрезка
        b: Второй конец отрезка (обычно лучшая оценка)
        fa: f(a)
        fb: f(b)
    """

    a: float
    b: float
    fa: float
    fb: float

    @classmethod
    def exact(cls, x: float, fx: float) -> "BracketedRootEstimate":
        """Вырожденный отрезок a == b (точный или достаточно точный корень)."""
        return cls(x, x, fx, fx)

    @classmethod
    def nan(cls) -> "BracketedRootEstimate":
        return cls.exact(math.nan, math.nan)

    @property
    def value(self) -> float:
        """Лучшая оценка корня: конец с f == 0, иначе секущая через концы."""
        if self.fa == 0 or self.a == self.b:
            return self.a
        if self.fb == 0:
            return self.b
        return secant_step(self.a, self.b, self.fa, self.fb)

    @property
    def is_bracketing(self) -> bool:
        """Инвариант отрезка: fa·fb ≤ 0."""
        return self.fa * self.fb <= 0


# =============================================================================
# РЕЗУЛЬТАТЫ
# =============================================================================


class BracketStatus(str, Enum):
    """Результат поиска отрезка"""

    BRACKET = "bracket"
    NO_BRACKET = "no_bracket"


class RootStatus(str, Enum):
    """Результат поиска корня"""

    SUCCESS = "success"
    NO_CONVERGE = "no_converge"
    NO_BRACKET = "no_bracket"
    ERROR = "error"


@dataclass(frozen=True)
class BracketResult:
    """
    Результат bracket().

    Attributes:
        status: BRACKET или NO_BRACKET
        evaluations: Число вычислений функции
        estimate: Найденный отрезок (None если не найден)
    """

    status: BracketStatus
    evaluations: int
    estimate: Optional[BracketedRootEstimate] = None

    @property
    def found(self) -> bool:
        return self.status == BracketStatus.BRACKET


@dataclass(frozen=True)
class BracketedRootResult:
    """
    Результат метода поиска корня на отрезке.

    Attributes:
        status: SUCCESS, NO_CONVERGE или ERROR (концы одного знака)
        evaluations: Число вычислений функции
        estimate: Последний отрезок
    """

    status: RootStatus
    evaluations: int
    estimate: BracketedRootEstimate

    @property
    def value(self) -> float:
        if self.status == RootStatus.ERROR:
            return math.nan
        return self.estimate.value

    @property
    def converged(self) -> bool:
        return self.status == RootStatus.SUCCESS


@dataclass(frozen=True)
class RootResult:
    """
    Результат методов Ньютона и Галлея.

    Attributes:
        status: SUCCESS или NO_CONVERGE
        evaluations: Число итераций
        estimate: Последнее приближение
    """

    status: RootStatus
    evaluations: int
    estimate: float

    @property
    def value(self) -> float:
        return self.estimate

    @property
    def converged(self) -> bool:
        return self.status == RootStatus.SUCCESS


@dataclass(frozen=True)
class BracketAndRootResult:
    """
    Результат root(): поиск отрезка, затем метод на отрезке.

    Attributes:
        status: SUCCESS, NO_CONVERGE, NO_BRACKET или ERROR
        bracket_evaluations: Вычисления функции при поиске отрезка
        root_evaluations: Вычисления функции методом на отрезке
        estimate: Итоговый отрезок (None если отрезок не найден)
    """

    status: RootStatus
    bracket_evaluations: int
    root_evaluations: int = 0
    estimate: Optional[BracketedRootEstimate] = None

    @property
    def value(self) -> float:
        if self.estimate is None or self.status == RootStatus.ERROR:
            return math.nan
        return self.estimate.value

    @property
    def evaluations(self) -> int:
        return self.bracket_evaluations + self.root_evaluations

    @property
    def converged(self) -> bool:
        return self.status == RootStatus.SUCCESS
