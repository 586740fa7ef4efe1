"""Methods — взаимозаменяемые методы поиска корня.

Методы на отрезке (общий контракт f, bracket, tolerance, intercept, max_iter):
- bisection, secant, dekker, ridders, brent, toms748

Методы с производными (от начального приближения):
- newton, halley
"""

from .bisection import bisection_root
from .brent import brent_root
from .dekker import dekker_root
from .newton import halley_root, newton_root, stepper
from .ridders import ridders_root
from .secant import secant_root
from .toms748 import inverse_cubic_interpolation, newton_quadratic_step, toms748_root

__all__ = [
    # На отрезке
    "bisection_root",
    "secant_root",
    "dekker_root",
    "ridders_root",
    "brent_root",
    "toms748_root",
    # Building blocks TOMS 748
    "inverse_cubic_interpolation",
    "newton_quadratic_step",
    # С производными
    "newton_root",
    "halley_root",
    "stepper",
]
