"""
Тесты для итерационных инструментов

Проверяет:
1. until / until_pairwise: состояния выхода и число итераций
2. Цепные дроби (модифицированный Лентц): √2, e, π
3. Ряды и произведения
4. Точное суммирование (naive, Kahan, KBN, pairwise)
5. Полиномы (Горнер) и ряды Чебышёва (Кленшоу)
"""

import itertools
import math

import pytest

from src.core.math.continued_fraction import continued_fraction, continued_fraction_terms
from src.core.math.convergence import IterationStatus, until, until_pairwise
from src.core.math.numerical_safeguards import log_relative_error
from src.core.math.polynomial import chebyshev, polynomial, polynomial_ratio
from src.core.math.series import product, recursive_sum, relative_term_below, series
from src.core.math.summation import sum_kahan, sum_kbn, sum_naive, sum_pairwise

# =============================================================================
# ТЕСТЫ UNTIL
# =============================================================================


class TestUntil:
    """Тесты для until и until_pairwise"""

    def test_converged(self) -> None:
        """Первый элемент, удовлетворяющий условию"""
        result = until(itertools.count(), lambda n: n * n > 50)
        assert result is not None
        assert result.status == IterationStatus.CONVERGED
        assert result.value == 8
        assert result.iterations == 9
        assert result.converged

    def test_exceeded_max(self) -> None:
        """Лимит итераций останавливает бесконечную последовательность"""
        result = until(itertools.count(), lambda n: n > 1000, max_iter=100)
        assert result is not None
        assert result.status == IterationStatus.EXCEEDED_MAX
        assert result.value == 99
        assert result.iterations == 100
        assert not result.converged

    def test_exhausted_input(self) -> None:
        """Конечная последовательность без выполнения условия"""
        result = until(iter([1, 2, 3]), lambda n: n > 5)
        assert result is not None
        assert result.status == IterationStatus.EXHAUSTED_INPUT
        assert result.value == 3
        assert result.iterations == 3

    def test_empty(self) -> None:
        """Пустая последовательность даёт None"""
        assert until(iter([]), lambda n: True) is None
        assert until_pairwise(iter([]), lambda a, b: True) is None

    def test_min_iter(self) -> None:
        """min_iter откладывает проверку условия"""
        result = until(itertools.count(), lambda n: True, min_iter=3)
        assert result is not None
        assert result.value == 3

    def test_pairwise(self) -> None:
        """Парное условие проверяется на соседних элементах"""
        values = [1.0, 0.5, 0.25, 0.25, 0.1]
        result = until_pairwise(iter(values), lambda a, b: a == b)
        assert result is not None
        assert result.converged
        assert result.value == 0.25
        assert result.iterations == 4

    def test_max_iter_caps_draws(self) -> None:
        """Из последовательности берётся ровно max_iter элементов"""
        drawn = []

        def values():
            for n in itertools.count():
                drawn.append(n)
                yield n

        result = until(values(), lambda n: False, max_iter=5)
        assert result is not None
        assert result.status == IterationStatus.EXCEEDED_MAX
        assert drawn == [0, 1, 2, 3, 4]

        drawn.clear()
        result = until_pairwise(values(), lambda a, b: False, max_iter=5)
        assert result is not None
        assert result.iterations == 5
        assert drawn == [0, 1, 2, 3, 4]

    def test_invalid_max_iter(self) -> None:
        """max_iter < 1 — ошибка программирования"""
        with pytest.raises(ValueError, match="max_iter"):
            until(itertools.count(), lambda n: False, max_iter=0)


# =============================================================================
# ТЕСТЫ ЦЕПНЫХ ДРОБЕЙ
# =============================================================================


class TestContinuedFraction:
    """Тесты для continued_fraction"""

    def test_sqrt2(self) -> None:
        """√2 = 1 + 1/(2 + 1/(2 + ...))"""
        result = continued_fraction(1.0, lambda i: 1.0, lambda i: 2.0)
        assert result.converged
        assert log_relative_error(result.value, 1.4142135623730950488) >= 15

    def test_e(self) -> None:
        """e = 2 + 1/(1 + 1/(2 + 2/(3 + 3/(4 + ...))))"""
        result = continued_fraction(
            2.0,
            lambda i: 1.0 if i == 1 else float(i - 1),
            lambda i: float(i),
        )
        assert log_relative_error(result.value, 2.7182818284590452354) >= 14

    def test_pi_slow(self) -> None:
        """π = 3 + 1²/(6 + 3²/(6 + 5²/(6 + ...))) сходится медленно"""
        result = continued_fraction(
            3.0,
            lambda i: (2.0 * i - 1) ** 2,
            lambda i: 6.0,
            max_iter=35000,
        )
        assert log_relative_error(result.value, math.pi) >= 11

    def test_no_convergence_reported(self) -> None:
        """Малый лимит членов даёт EXCEEDED_MAX с последним приближением"""
        result = continued_fraction(3.0, lambda i: (2.0 * i - 1) ** 2, lambda i: 6.0, max_iter=5)
        assert result.status == IterationStatus.EXCEEDED_MAX
        assert result.value == pytest.approx(math.pi, rel=1e-2)
        assert result.iterations == 5

    def test_finite_coefficients(self) -> None:
        """Конечная дробь 1 + 1/(2 + 1/2) = 1.4 вычисляется точно"""
        result = continued_fraction_terms(1.0, [(1.0, 2.0), (1.0, 2.0)])
        assert result.status == IterationStatus.EXHAUSTED_INPUT
        assert result.iterations == 2
        assert result.value == pytest.approx(1.4, rel=1e-15)

    def test_empty_coefficients(self) -> None:
        """Без коэффициентов дробь равна b₀"""
        result = continued_fraction_terms(2.5, [])
        assert result.status == IterationStatus.EXHAUSTED_INPUT
        assert result.iterations == 0
        assert result.value == 2.5


# =============================================================================
# ТЕСТЫ РЯДОВ
# =============================================================================


class TestSeries:
    """Тесты для series, product, recursive_sum"""

    def test_exponential_series(self) -> None:
        """e = Σ 1/n!"""
        result = series(lambda i, t: (t / i, t / i), 1.0, initial=1.0)
        assert result.converged
        assert log_relative_error(result.value, math.e) >= 15

    def test_geometric_series(self) -> None:
        """Σ 2⁻ⁱ = 1"""
        result = series(lambda i, s: (0.5**i, s), None)
        assert result.value == pytest.approx(1.0, rel=1e-15)

    def test_recursive_sum_relative_stop(self) -> None:
        """recursive_sum останавливается по |член / сумма| < 1e-10"""
        result = recursive_sum(lambda i, s: (0.5**i, s), None)
        assert result.converged
        assert abs(result.value - 1.0) < 1e-9
        assert result.iterations < 40

    def test_relative_term_below(self) -> None:
        """Критерий относительного вклада"""
        assert relative_term_below(1e-12, 1.0)
        assert not relative_term_below(1e-8, 1.0)
        assert relative_term_below(-1e-12, -1.0)

    def test_product(self) -> None:
        """Π (1 + 2⁻ⁱ) сходится к ≈ 2.384231029"""
        result = product(lambda i, s: (1 + 0.5**i, s), None)
        assert result.converged
        assert result.value == pytest.approx(2.384231029031372, rel=1e-12)

    def test_finite_indices(self) -> None:
        """Конечная последовательность индексов, в том числе обратная"""
        result = recursive_sum(lambda i, s: (float(i), s), None, indices=range(4, 0, -1))
        assert result.status == IterationStatus.EXHAUSTED_INPUT
        assert result.value == 10.0

    def test_empty_indices(self) -> None:
        """Пустая последовательность: сумма равна начальному значению"""
        result = series(lambda i, s: (1.0, s), None, initial=2.5, indices=[])
        assert result.status == IterationStatus.EXHAUSTED_INPUT
        assert result.iterations == 0
        assert result.value == 2.5


# =============================================================================
# ТЕСТЫ СУММИРОВАНИЯ
# =============================================================================


class TestSummation:
    """Тесты для sum_naive, sum_kahan, sum_kbn, sum_pairwise"""

    def test_kbn_catastrophic(self) -> None:
        """KBN переживает сокращение больших членов"""
        values = [1.0, 1e100, 1.0, -1e100]
        assert sum_kbn(values) == 2.0
        assert sum_naive(values) == 0.0

    def test_compensated_sums_match_fsum(self) -> None:
        """Компенсированные суммы совпадают с math.fsum"""
        values = [0.1] * 1000
        exact = math.fsum(values)
        assert sum_kahan(values) == pytest.approx(exact, rel=1e-15)
        assert sum_kbn(values) == pytest.approx(exact, rel=1e-15)

    def test_pairwise(self) -> None:
        """Попарная сумма точнее наивной"""
        values = [0.1] * 10000
        exact = math.fsum(values)
        assert abs(sum_pairwise(values) - exact) <= abs(sum_naive(values) - exact)
        assert sum_pairwise(values) == pytest.approx(exact, rel=1e-14)

    def test_empty(self) -> None:
        """Сумма пустой последовательности — ноль"""
        assert sum_naive([]) == 0.0
        assert sum_kbn([]) == 0.0
        assert sum_pairwise([]) == 0.0


# =============================================================================
# ТЕСТЫ ПОЛИНОМОВ
# =============================================================================


class TestPolynomial:
    """Тесты для polynomial, polynomial_ratio, chebyshev"""

    def test_horner(self) -> None:
        """1 + 2z + 3z² при z = 2"""
        assert polynomial([1.0, 2.0, 3.0], 2.0) == 17.0

    def test_empty(self) -> None:
        """Пустой полином равен нулю"""
        assert polynomial([], 3.0) == 0.0
        assert chebyshev([], 0.5) == 0.0

    def test_ratio_small_z(self) -> None:
        """Отношение при z ≤ 1"""
        assert polynomial_ratio([1.0, 1.0], [1.0, 2.0], 0.5) == pytest.approx(1.5 / 2.0)

    def test_ratio_large_z(self) -> None:
        """Отношение при z > 1 вычисляется в 1/z без переполнения"""
        assert polynomial_ratio([1.0, 1.0], [1.0, 2.0], 3.0) == pytest.approx(4.0 / 7.0)
        assert polynomial_ratio([0.0, 0.0, 1.0], [1.0, 0.0, 1.0], 1e200) == pytest.approx(1.0)

    def test_chebyshev(self) -> None:
        """c₀/2 + T₂(x) с T₂(x) = 2x² - 1"""
        assert chebyshev([2.0, 0.0, 1.0], 0.5) == pytest.approx(0.5)

    def test_chebyshev_interval(self) -> None:
        """Отрезок [2, 4] отображается на [-1, 1]"""
        assert chebyshev([2.0, 0.0, 1.0], 3.0, interval=(2.0, 4.0)) == pytest.approx(0.0)
        assert chebyshev([2.0, 1.0], 4.0, interval=(2.0, 4.0)) == pytest.approx(2.0)

    def test_chebyshev_truncated(self) -> None:
        """m ограничивает число коэффициентов"""
        assert chebyshev([2.0, 0.0, 1.0], 0.5, m=1) == pytest.approx(1.0)

    def test_chebyshev_outside_interval(self) -> None:
        """Вне отрезка — NaN"""
        assert math.isnan(chebyshev([1.0, 1.0], 1.5))
