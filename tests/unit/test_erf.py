"""
Тесты для обратных функций ошибок

Проверяет:
1. Точность erf⁻¹ на эталонном значении
2. Концы домена и NaN вне домена
3. Симметрию erfc⁻¹(2 - p) = -erfc⁻¹(p)
4. Домен приближения qapprox
"""

import math

import pytest

from src.core.math.numerical_safeguards import log_relative_error
from src.special.erf import inv_erf, inv_erfc, qapprox

# erf(1.2345)
ERF_1_2345 = 0.9191623964135658


class TestInverseErf:
    """Тесты для inv_erf / inv_erfc"""

    def test_reference_value(self) -> None:
        """erf⁻¹(erf(1.2345)) = 1.2345"""
        assert log_relative_error(inv_erf(ERF_1_2345), 1.2345) >= 14

    def test_edges(self) -> None:
        """erfc⁻¹(0) = inf, erfc⁻¹(2) = -inf, erfc⁻¹(1) = 0"""
        assert inv_erfc(0.0) == math.inf
        assert inv_erfc(2.0) == -math.inf
        assert inv_erfc(1.0) == 0.0
        assert inv_erf(1.0) == math.inf
        assert inv_erf(-1.0) == -math.inf

    @pytest.mark.parametrize("p", [-0.1, 2.1, math.nan])
    def test_out_of_domain_is_nan(self, p: float) -> None:
        """Вне [0, 2] результат NaN"""
        assert math.isnan(inv_erfc(p))

    @pytest.mark.parametrize("p", [1e-100, 1e-20, 1e-5, 0.1, 0.5, 0.9])
    def test_round_trip(self, p: float) -> None:
        """erfc(erfc⁻¹(p)) = p"""
        assert math.erfc(inv_erfc(p)) == pytest.approx(p, rel=1e-12)

    @pytest.mark.parametrize("p", [0.01, 0.3, 0.75])
    def test_reflection(self, p: float) -> None:
        """erfc⁻¹(2 - p) = -erfc⁻¹(p)"""
        assert inv_erfc(2 - p) == pytest.approx(-inv_erfc(p), rel=1e-14)

    @pytest.mark.parametrize("x", [-2.0, -0.4, 0.25, 1.7])
    def test_inv_erf_round_trip(self, x: float) -> None:
        """erf⁻¹(erf(x)) = x"""
        assert inv_erf(math.erf(x)) == pytest.approx(x, rel=1e-13)

    @pytest.mark.parametrize("p", [-0.9, -0.2, 0.3, 0.99])
    def test_matches_scipy(self, p: float) -> None:
        """Совпадение с scipy.special.erfinv"""
        special = pytest.importorskip("scipy.special")
        assert inv_erf(p) == pytest.approx(special.erfinv(p), rel=1e-13)


class TestQApprox:
    """Тесты для приближения A&S 26.2.22"""

    def test_median(self) -> None:
        """Q⁻¹(½) ≈ 0"""
        assert qapprox(0.5) == pytest.approx(0.0, abs=3e-3)

    @pytest.mark.parametrize("p", [1e-10, 0.01, 0.2])
    def test_accuracy(self, p: float) -> None:
        """Точность около 1e-3 относительно erfc"""
        x = qapprox(p)
        assert 0.5 * math.erfc(x / math.sqrt(2)) == pytest.approx(p, rel=5e-2)

    @pytest.mark.parametrize("p", [0.0, 0.6, -0.1])
    def test_out_of_domain_is_nan(self, p: float) -> None:
        """Вне (0, ½] результат NaN"""
        assert math.isnan(qapprox(p))
