"""
Тесты для неполной гамма-функции

Проверяет:
1. Эталонные значения во всех областях вычисления
2. Домен: NaN-вероятность, P(a, 0) = 0
3. Дополнительность P + Q = 1 и монотонность по x
4. Обращение: замкнутые формы, концы, круговая проверка
5. Вспомогательные функции: Γ*, λ(η), 1/Γ(1 + x) - 1
6. Сверка со scipy.special
"""

import math

import pytest

from src.core.domain.probability import Probability
from src.core.math.numerical_safeguards import log_relative_error
from src.special.gamma import (
    gamma_reg,
    gammastar,
    inv_gamma_reg,
    inv_p_gamma,
    inv_q_gamma,
    inverse_gamma_p1m1,
    lambda_eta,
    p_gamma,
    p_gamma_deriv,
    q_gamma,
)

# Q(4, 0.7)
Q_4_07 = 0.9942465424077004166914


# =============================================================================
# ТЕСТЫ ЭТАЛОННЫХ ЗНАЧЕНИЙ
# =============================================================================


class TestGammaReference:
    """Тесты эталонных значений Q(a, x)"""

    def test_q_gamma_moderate(self) -> None:
        """Q(4, 0.7): ряд для P"""
        assert log_relative_error(q_gamma(4, 0.7), Q_4_07) >= 14

    def test_q_gamma_tiny_a(self) -> None:
        """Q(1e-249, 0.01): ряд Тейлора для Q"""
        assert log_relative_error(q_gamma(1e-249, 0.01), 4.0379295765381135e-249) >= 13

    @pytest.mark.parametrize(
        "x, expected, digits",
        [
            (6.310e-15, 3.212101109661167e-248, 4.0),
            (7.110e-7, 1.3580785912009393e-248, 3.5),
        ],
    )
    def test_q_gamma_tiny_a_tiny_x(self, x: float, expected: float, digits: float) -> None:
        """Q при крайне малых a и x"""
        assert log_relative_error(q_gamma(1e-249, x), expected) >= digits

    def test_q_gamma_small_a(self) -> None:
        """Q(1e-13, 0.01)"""
        assert log_relative_error(q_gamma(1e-13, 0.01), 4.0379295765380405e-13) >= 12.5

    @pytest.mark.parametrize("x", [0.1, 1.0, 5.0, 30.0])
    def test_exponential_closed_form(self, x: float) -> None:
        """Q(1, x) = e⁻ˣ"""
        assert q_gamma(1.0, x) == pytest.approx(math.exp(-x), rel=1e-13)

    @pytest.mark.parametrize("x", [0.01, 0.3, 2.0, 8.0])
    def test_half_integer_closed_form(self, x: float) -> None:
        """P(½, x) = erf(√x)"""
        assert p_gamma(0.5, x) == pytest.approx(math.erf(math.sqrt(x)), rel=1e-13)


# =============================================================================
# ТЕСТЫ ДОМЕНА И СВОЙСТВ
# =============================================================================


class TestGammaProperties:
    """Тесты домена и структурных свойств"""

    @pytest.mark.parametrize("a, x", [(0.0, 1.0), (-1.0, 1.0), (2.0, -0.5), (math.nan, 1.0), (2.0, math.nan)])
    def test_out_of_domain_is_nan(self, a: float, x: float) -> None:
        """Аргументы вне домена дают NaN-вероятность"""
        assert gamma_reg(a, x).is_nan

    def test_zero_argument(self) -> None:
        """P(a, 0) = 0, Q(a, 0) = 1"""
        result = gamma_reg(3.5, 0.0)
        assert result.p == 0.0
        assert result.q == 1.0

    @pytest.mark.parametrize("a, x", [(0.3, 0.1), (4.0, 0.7), (3.0, 10.0), (20.0, 18.0), (100.0, 150.0), (0.5, 40.0)])
    def test_complementarity(self, a: float, x: float) -> None:
        """P + Q = 1"""
        result = gamma_reg(a, x)
        assert result.p + result.q == pytest.approx(1.0, abs=1e-15)

    @pytest.mark.parametrize("a", [0.5, 3.0, 25.0])
    def test_monotone_in_x(self, a: float) -> None:
        """P(a, x) не убывает по x"""
        xs = [0.05 * a * k for k in range(1, 80)]
        values = [p_gamma(a, x) for x in xs]
        assert all(v0 <= v1 for v0, v1 in zip(values, values[1:]))

    def test_small_tail_keeps_precision(self) -> None:
        """Малый хвост хранится напрямую, а не как 1 - (1 - q)"""
        result = gamma_reg(2.0, 60.0)
        assert result.is_complement
        assert result.q == pytest.approx(61 * math.exp(-60.0), rel=1e-12)

    @pytest.mark.parametrize("x", [0.2, 1.0, 3.0])
    def test_derivative_closed_forms(self, x: float) -> None:
        """P'(a, x) = e⁻ˣxᵃ⁻¹/Γ(a)"""
        assert p_gamma_deriv(0.5, x) == pytest.approx(math.exp(-x) / math.sqrt(math.pi * x), rel=1e-14)
        assert p_gamma_deriv(1.0, x) == pytest.approx(math.exp(-x), rel=1e-15)
        assert p_gamma_deriv(3.0, x) == pytest.approx(x * x * math.exp(-x) / 2, rel=1e-13)


# =============================================================================
# ТЕСТЫ ОБРАЩЕНИЯ
# =============================================================================


class TestInverseGamma:
    """Тесты для inv_gamma_reg"""

    def test_inverse_reference(self) -> None:
        """P⁻¹(4, 1 - Q(4, 0.7)) = 0.7"""
        assert log_relative_error(inv_p_gamma(4, 1 - Q_4_07), 0.7) >= 13

    def test_inverse_small_a(self) -> None:
        """Q⁻¹(1e-13, Q(1e-13, 0.01)) = 0.01"""
        assert log_relative_error(inv_q_gamma(1e-13, 4.0379295765380405e-13), 0.01) >= 12

    def test_exponential_closed_form(self) -> None:
        """Q⁻¹(1, q) = -log q"""
        assert inv_q_gamma(1.0, 0.25) == pytest.approx(math.log(4.0), rel=1e-15)

    def test_edges(self) -> None:
        """p = 0 → 0, q = 0 → inf"""
        assert inv_p_gamma(2.0, 0.0) == 0.0
        assert inv_q_gamma(2.0, 0.0) == math.inf

    @pytest.mark.parametrize("a, p", [(0.0, 0.5), (-2.0, 0.5), (2.0, -0.1), (2.0, 1.5)])
    def test_out_of_domain_is_nan(self, a: float, p: float) -> None:
        """Аргументы вне домена дают NaN"""
        assert math.isnan(inv_p_gamma(a, p))

    @pytest.mark.parametrize("a", [0.5, 2.0, 7.5, 30.0, 150.0])
    @pytest.mark.parametrize("p", [1e-6, 0.01, 0.5, 0.9])
    def test_round_trip(self, a: float, p: float) -> None:
        """P(a, P⁻¹(a, p)) = p"""
        x = inv_p_gamma(a, p)
        assert p_gamma(a, x) == pytest.approx(p, rel=1e-9)

    @pytest.mark.parametrize("a", [0.5, 3.0, 40.0])
    def test_round_trip_upper_tail(self, a: float) -> None:
        """Q(a, Q⁻¹(a, q)) = q для малого q"""
        x = inv_gamma_reg(a, Probability.from_q(1e-12))
        assert q_gamma(a, x) == pytest.approx(1e-12, rel=1e-8)


# =============================================================================
# ТЕСТЫ ВСПОМОГАТЕЛЬНЫХ ФУНКЦИЙ
# =============================================================================


class TestGammaHelpers:
    """Тесты для Γ*, λ(η) и 1/Γ(1 + x) - 1"""

    @pytest.mark.parametrize("a", [0.5, 2.0, 10.0, 50.0])
    def test_gammastar_definition(self, a: float) -> None:
        """Γ*(a) = Γ(a)/(√(2π/a)(a/e)ᵃ)"""
        expected = math.exp(math.lgamma(a) - 0.5 * math.log(2 * math.pi / a) - a * (math.log(a) - 1))
        assert gammastar(a) == pytest.approx(expected, rel=1e-12)

    @pytest.mark.parametrize("eta", [-2.0, -0.5, 0.1, 0.7, 3.0, 10.0])
    def test_lambda_solves_defining_equation(self, eta: float) -> None:
        """½η² = λ - 1 - log λ, знак λ - 1 совпадает со знаком η"""
        lam = lambda_eta(eta)
        assert lam - 1 - math.log(lam) == pytest.approx(0.5 * eta * eta, rel=1e-12)
        assert (lam > 1) == (eta > 0)

    def test_lambda_at_zero(self) -> None:
        """λ(0) = 1"""
        assert lambda_eta(0.0) == 1.0

    @pytest.mark.parametrize("x", [0.0, 1e-8, 0.3, 1.2, 2.5])
    def test_inverse_gamma_p1m1(self, x: float) -> None:
        """1/Γ(1 + x) - 1 без потери точности около нуля"""
        expected = 1 / math.gamma(1 + x) - 1
        assert inverse_gamma_p1m1(x) == pytest.approx(expected, rel=1e-12, abs=1e-15)


# =============================================================================
# СВЕРКА СО SCIPY
# =============================================================================


class TestGammaAgainstScipy:
    """Сверка с scipy.special.gammainc / gammaincc"""

    @pytest.mark.parametrize(
        "a, x",
        [
            (0.3, 0.05),
            (0.3, 4.0),
            (2.5, 1.0),
            (5.0, 12.0),
            (15.0, 10.0),
            (15.0, 20.0),
            (50.0, 45.0),
            (200.0, 260.0),
            (8.0, 60.0),
        ],
    )
    def test_matches_scipy(self, a: float, x: float) -> None:
        """P и Q совпадают с scipy"""
        special = pytest.importorskip("scipy.special")
        result = gamma_reg(a, x)
        assert result.p == pytest.approx(special.gammainc(a, x), rel=1e-12, abs=1e-300)
        assert result.q == pytest.approx(special.gammaincc(a, x), rel=1e-12, abs=1e-300)

    @pytest.mark.parametrize("a, p", [(0.7, 0.2), (3.0, 0.95), (25.0, 0.001)])
    def test_inverse_matches_scipy(self, a: float, p: float) -> None:
        """P⁻¹ совпадает с scipy.special.gammaincinv"""
        special = pytest.importorskip("scipy.special")
        assert inv_p_gamma(a, p) == pytest.approx(special.gammaincinv(a, p), rel=1e-10)
