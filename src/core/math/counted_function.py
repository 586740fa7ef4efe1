"""
Counted Function — Evaluation Counter

Обёртка над скалярной функцией, считающая число вызовов. Используется
для отчёта о стоимости (число вычислений функции) в поиске корней и
квадратурах. Время жизни обёртки — один вызов алгоритма.
"""

from collections.abc import Callable


class CountedFunction:
    """
    Функция со счётчиком вызовов.

    Examples:
        >>> f = CountedFunction(lambda x: x * x)
        >>> f(3.0)
        9.0
        >>> f.count
        1
    """

    def __init__(self, f: Callable[[float], float]) -> None:
        self._f = f
        self.count = 0

    def __call__(self, x: float) -> float:
        self.count += 1
        return self._f(x)
