"""Roots — поиск корней скалярных функций.

- bracket: поиск отрезка со сменой знака
- root: отрезок + метод на отрезке (по умолчанию Риддерс)
- newton_root / halley_root: методы с производными
"""

from .bracketing import bracket
from .estimates import (
    BracketAndRootResult,
    BracketedRootEstimate,
    BracketedRootResult,
    BracketResult,
    BracketStatus,
    RootResult,
    RootStatus,
)
from .methods import halley_root, newton_root
from .root_finder import ROOT_TOLERANCE_DEFAULT, RootMethod, bracketed_root, root

__all__ = [
    # Оценки и результаты
    "BracketedRootEstimate",
    "BracketResult",
    "BracketStatus",
    "BracketedRootResult",
    "BracketAndRootResult",
    "RootResult",
    "RootStatus",
    # Поиск
    "bracket",
    "bracketed_root",
    "root",
    "RootMethod",
    "ROOT_TOLERANCE_DEFAULT",
    "newton_root",
    "halley_root",
]
