"""
Core math modules

Численные примитивы, на которых строятся поиск корней и специальные функции.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Константы
    DEFAULT_TOLERANCE,
    LEAST_NORMAL,
    STRICT_TOLERANCE,
    ULP_OF_ONE,
    # Толерантность
    EqualityTolerance,
    # Сравнение
    is_approx,
    is_approx_zero,
    is_within_ulp,
    log_relative_error,
    ulp_dist,
    # IEEE-безопасные функции
    safe_divide,
    safe_exp,
    safe_gamma,
    safe_lgamma,
    safe_log,
    safe_pow,
    safe_sqrt,
    # Вспомогательные
    absmax,
    is_valid_float,
    sign,
    validate_max_iter,
)

# Итерация и суммирование
from src.core.math.convergence import DEFAULT_MAX_ITER, IterationResult, IterationStatus, until, until_pairwise
from src.core.math.counted_function import CountedFunction
from src.core.math.summation import sum_kahan, sum_kbn, sum_naive, sum_pairwise
from src.core.math.series import SERIES_RELATIVE_STOP, product, recursive_sum, relative_term_below, series

# Элементарные функции, дроби, многочлены, квадратуры
from src.core.math.basic_functions import expm1mx, log1pmx, xmsin
from src.core.math.continued_fraction import continued_fraction, continued_fraction_terms
from src.core.math.polynomial import chebyshev, polynomial, polynomial_ratio
from src.core.math.quadrature import QuadratureMethod, QuadratureResult, integrate, romberg, trapezoidal

__all__ = [
    # Numerical Safeguards — Константы
    "DEFAULT_TOLERANCE",
    "LEAST_NORMAL",
    "STRICT_TOLERANCE",
    "ULP_OF_ONE",
    # Numerical Safeguards — Толерантность и сравнение
    "EqualityTolerance",
    "is_approx",
    "is_approx_zero",
    "is_within_ulp",
    "log_relative_error",
    "ulp_dist",
    # Numerical Safeguards — IEEE-безопасные функции
    "safe_divide",
    "safe_exp",
    "safe_gamma",
    "safe_lgamma",
    "safe_log",
    "safe_pow",
    "safe_sqrt",
    # Numerical Safeguards — Вспомогательные
    "absmax",
    "is_valid_float",
    "sign",
    "validate_max_iter",
    # Итерация
    "DEFAULT_MAX_ITER",
    "IterationResult",
    "IterationStatus",
    "until",
    "until_pairwise",
    "CountedFunction",
    # Суммирование и ряды
    "sum_kahan",
    "sum_kbn",
    "sum_naive",
    "sum_pairwise",
    "SERIES_RELATIVE_STOP",
    "product",
    "recursive_sum",
    "relative_term_below",
    "series",
    # Элементарные функции
    "expm1mx",
    "log1pmx",
    "xmsin",
    # Дроби и многочлены
    "continued_fraction",
    "continued_fraction_terms",
    "chebyshev",
    "polynomial",
    "polynomial_ratio",
    # Квадратуры
    "QuadratureMethod",
    "QuadratureResult",
    "integrate",
    "romberg",
    "trapezoidal",
]
