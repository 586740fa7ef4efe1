"""
Тесты для Probability

Проверяет:
1. Хранение p или q без потери точности
2. Дополнение
3. Разность и порядок без сокращения около 1
4. NaN-сигнал
"""

import math

import pytest

from src.core.domain.probability import Probability


class TestProbabilityStorage:
    """Тесты хранения и производных значений"""

    def test_from_p(self) -> None:
        """p хранится точно, q = 1 - p"""
        prob = Probability.from_p(0.25)
        assert prob.p == 0.25
        assert prob.q == 0.75
        assert not prob.is_complement

    def test_from_q_preserves_tiny_tail(self) -> None:
        """Малый верхний хвост хранится без потерь"""
        prob = Probability.from_q(1e-300)
        assert prob.q == 1e-300
        assert prob.p == 1.0

    def test_sum_is_one(self) -> None:
        """p + q == 1 по построению"""
        for prob in (Probability.from_p(0.3), Probability.from_q(0.3)):
            assert prob.p + prob.q == pytest.approx(1.0, abs=1e-16)

    def test_complement(self) -> None:
        """Дополнение меняет p и q местами"""
        prob = Probability.from_p(1e-20)
        assert prob.complement.q == 1e-20
        assert prob.complement.complement == prob

    def test_nan(self) -> None:
        """NaN — сигнал ошибки домена"""
        prob = Probability.nan()
        assert prob.is_nan
        assert math.isnan(prob.p)
        assert math.isnan(prob.q)

    def test_frozen(self) -> None:
        """Immutable"""
        prob = Probability.from_p(0.5)
        with pytest.raises(AttributeError):
            prob.value = 0.1  # type: ignore[misc]


class TestProbabilityArithmetic:
    """Тесты разности и порядка"""

    def test_difference_near_one(self) -> None:
        """Разность около 1 считается через q"""
        lhs = Probability.from_q(1e-20)
        rhs = Probability.from_q(3e-20)
        assert lhs - rhs == pytest.approx(2e-20, rel=1e-15)

    def test_difference_lower_tail(self) -> None:
        """Разность малых p"""
        assert Probability.from_p(0.3) - Probability.from_p(0.1) == pytest.approx(0.2)

    def test_difference_mixed(self) -> None:
        """Хвосты по разные стороны от ½"""
        assert Probability.from_q(0.25) - Probability.from_p(0.25) == pytest.approx(0.5)

    def test_ordering(self) -> None:
        """Порядок различает вероятности, неразличимые в p"""
        lhs = Probability.from_q(1e-20)
        rhs = Probability.from_q(3e-20)
        assert lhs > rhs
        assert rhs < lhs
        assert lhs >= lhs
        assert Probability.from_p(0.1) <= Probability.from_q(0.1)

    def test_str(self) -> None:
        """Строковое представление"""
        assert str(Probability.from_p(0.25)) == "p: 0.25, q: 0.75"
