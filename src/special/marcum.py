"""
Marcum Q — Generalized Marcum Q-Function and Inverse

    Q_µ(x, y) = x^(½ - ½µ) ∫ᵧ^∞ t^(½µ - ½) e^(-t - x) I_{µ-1}(2√(xt)) dt
    P_µ(x, y) = 1 - Q_µ(x, y)

С точностью до масштаба аргументов это нецентральное χ²-распределение:
Q_µ(x, y) = P(χ'²(2µ, 2x) > 2y).

Области вычисления (Gil, Segura, Temme 2013, §6), ξ = 2√(xy),
f₁,₂ = x + µ ∓ √(4x + 2µ):

    x < 30                       →  ряд для P (y ≤ x + µ) или Q
    ξ > max(30, µ²/2)            →  асимптотика при больших ξ
    µ < 135, f₁ ≤ y ≤ f₂         →  трёхчленная рекуррентность по µ от квадратуры
    µ ≥ 135, f₁ ≤ y ≤ f₂         →  асимптотика при больших µ
    иначе                        →  квадратура по θ ∈ [0, π]

Обращение (Gil, Segura, Temme 2014): начальное приближение через
асимптотическое обращение ζ ~ ζ₀ + ζ₁/µ, затем поиск корня по y.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. µ ≤ 0, x < 0, y < 0 или NaN → NaN-вероятность (не исключение)
2. y = 0 → P = 0; x = 0 → регуляризованная неполная гамма (µ, y)
3. Переполнение асимптотических ветвей → NaN с WARNING в логе
"""

import logging
import math
from typing import Final, Union

from src.core.domain.probability import Probability
from src.core.math.basic_functions import xmsin
from src.core.math.continued_fraction import continued_fraction
from src.core.math.convergence import DEFAULT_MAX_ITER
from src.core.math.numerical_safeguards import (
    LEAST_NORMAL,
    EqualityTolerance,
    safe_exp,
    safe_lgamma,
    safe_log,
    safe_pow,
    sign,
)
from src.core.math.polynomial import polynomial
from src.core.math.quadrature import trapezoidal
from src.core.math.series import recursive_sum
from src.roots.estimates import RootStatus
from src.roots.methods.newton import newton_root
from src.roots.root_finder import ROOT_TOLERANCE_DEFAULT, root
from src.special.erf import inv_erfc
from src.special.gamma import gamma_reg, inv_gamma_reg, p_gamma, q_gamma

logger = logging.getLogger(__name__)

# Граница x, ниже которой используются ряды
SERIES_MAX_X: Final[float] = 30.0

# Нижняя граница ξ для асимптотики больших ξ
BIG_XY_MIN_XI: Final[float] = 30.0

# Граница µ между рекуррентностью и асимптотикой больших µ
BIG_MU_MIN_MU: Final[float] = 135.0

# Относительная точность, задающая длину ряда для P (Eq. 26)
P_SERIES_EPSILON: Final[float] = 1e-15

# Лимит членов ряда для Q
Q_SERIES_MAX_ITER: Final[int] = 1000

# Граница |ζ|, ниже которой ζ ↔ y связаны разложением по степеням ζ
SMALL_ZETA: Final[float] = 0.5

# Нижняя граница y для метода Ньютона в y(ζ)
Y_NEWTON_MIN: Final[float] = 1e-100

# Множитель поиска отрезка при обращении: начальное приближение уже точное
INV_MARCUM_BRACKET_FACTOR: Final[float] = 1.001

# Абсолютная толерантность обращения относительно меньшего из p, q
INV_MARCUM_RELATIVE_TARGET: Final[float] = 1e-15


# =============================================================================
# КОЭФФИЦИЕНТЫ
# =============================================================================

# fⱼᵢ(u) = u^(j + 2i)·Σ cₖu²ᵏ для асимптотики больших µ (Eq. 88ff)
FJI: Final[dict[tuple[int, int], tuple[float, ...]]] = {
    (0, 0): (1.0,),
    (0, 1): tuple(c / 24 for c in (3, 0, -5)),
    (1, 0): tuple(c / 6 for c in (3, 1)),
    (0, 2): tuple(c / 1152 for c in (81, 0, -462, 0, 385)),
    (1, 1): tuple(c / 144 for c in (-9, 21, 75, -95)),
    (2, 0): tuple(c / 24 for c in (-3, 0, 5)),
    (0, 3): tuple(c / 414720 for c in (30375, 0, 369603, 0, 765765, 0, -425425)),
    (1, 2): tuple(c / 6912 for c in (-729, 1053, 9702, -11550, -12705, 14245)),
    (2, 1): tuple(c / 576 for c in (27, -144, -402, 1440, -925)),
    (3, 0): tuple(c / 2160 for c in (135, -117, -675, 625)),
}

# Коэффициенты разложения ζ(x, y) при y ≈ x + 1, cᵢ(x) задаются многочленами по x
ZETA_CI: Final[tuple[tuple[float, ...], ...]] = (
    (1.0,),
    tuple(-c / 3 for c in (1, 3)),
    tuple(c / 36 for c in (7, 42, 72)),
    tuple(-c / 540 for c in (73, 657, 2142, 2700)),
    tuple(c / 12960 for c in (1331, 15972, 76356, 177552, 181440)),
)


# =============================================================================
# MARCUM Q
# =============================================================================


def marcum(mu: float, x: float, y: float) -> Probability:
    """
    Обобщённая функция Маркума Q_µ(x, y) и её дополнение P_µ(x, y).

    Args:
        mu: Порядок, µ > 0
        x: Параметр нецентральности, x ≥ 0
        y: Аргумент, y ≥ 0

    Returns:
        Probability: p = P_µ(x, y), q = Q_µ(x, y); NaN вне домена

    Examples:
        >>> abs(marcum(25, 35, 49).p - 0.1258610027087132) < 1e-14
        True
    """
    if math.isnan(mu) or math.isnan(x) or math.isnan(y) or mu <= 0 or x < 0 or y < 0:
        return Probability.nan()
    if y == 0 or math.isinf(x):
        return Probability.from_p(0.0)
    if math.isinf(y):
        return Probability.from_q(0.0)
    if x == 0:
        return gamma_reg(mu, y)

    xi = 2 * math.sqrt(x * y)
    # Вне параболы f₁ ≤ y ≤ f₂ квадратура сходится быстро, Eq. 100
    f1 = x + mu - math.sqrt(4 * x + 2 * mu)
    f2 = x + mu + math.sqrt(4 * x + 2 * mu)

    if x < SERIES_MAX_X:
        if y <= x + mu:
            return Probability.from_p(_p_series(mu, x, y))
        return Probability.from_q(_q_series(mu, x, y))
    if xi > max(BIG_XY_MIN_XI, 0.5 * mu * mu):
        return _bigxy(mu, x, y)
    if mu < BIG_MU_MIN_MU:
        if f1 <= y <= x + mu:
            return Probability.from_p(_p_recursion(mu, x, y))
        if x + mu <= y <= f2:
            return Probability.from_q(_q_recursion(mu, x, y))
    elif f1 <= y <= f2:
        return _bigmu(mu, x, y)
    return _quadrature(mu, x, y)


def marcum_deriv(mu: float, x: float, y: float) -> float:
    """
    ∂Q_µ(x, y)/∂y = Q_{µ-1}(x, y) - Q_µ(x, y).

    Examples:
        >>> import math
        >>> abs(marcum_deriv(2.0, 0.0, 2.0) + 2 * math.exp(-2.0)) < 1e-15
        True
    """
    # TODO: брать Q_{µ-1} из трёхчленной рекуррентности вместо второго полного вычисления
    return marcum(mu - 1, x, y).q - marcum(mu, x, y).q


# =============================================================================
# ОБРАЩЕНИЕ
# =============================================================================


def inv_marcum(mu: float, x: float, p: Union[float, Probability]) -> float:
    """
    y такое, что Marcum(µ, x, y) = p.

    Начальное приближение по асимптотике больших µ (Eq. 5.11, 5.23),
    уточнение методом Риддерса.

    Args:
        mu: Порядок, µ > 0
        x: Параметр нецентральности, x ≥ 0
        p: Целевая вероятность (float трактуется как P)

    Returns:
        y ≥ 0; p = 0 → 0, q = 0 → +inf; NaN вне домена
    """
    pq = p if isinstance(p, Probability) else Probability.from_p(p)
    if math.isnan(mu) or math.isnan(x) or pq.is_nan or mu <= 0 or x < 0:
        return math.nan
    if pq.p < 0 or pq.p > 1:
        return math.nan
    if pq.p == 0:
        return 0.0
    if pq.q == 0:
        return math.inf
    if x == 0:
        return inv_gamma_reg(mu, pq)

    xn = x / mu
    # 1/2 erfc(ζ₀√(µ/2)) = q: работаем с меньшим из p, q
    s, prob = (-1.0, pq.p) if pq.p < 0.5 else (1.0, pq.q)
    zeta0 = s * inv_erfc(2 * prob) * math.sqrt(2 / mu)
    y0 = _y(zeta0, xn)
    zeta = zeta0 + _zeta1(zeta0, xn, y0) / mu
    guess = mu * _y(zeta, xn)

    tolerance = EqualityTolerance(
        relative=ROOT_TOLERANCE_DEFAULT.relative,
        absolute=INV_MARCUM_RELATIVE_TARGET * prob,
    )
    result = root(
        lambda y: marcum(mu, x, y) - pq,
        guess,
        xmin=0.0,
        tolerance=tolerance,
        bracket_factor=INV_MARCUM_BRACKET_FACTOR,
    )
    if result.status == RootStatus.NO_BRACKET:
        logger.warning("inv_marcum: no bracket for mu=%r, x=%r, %s from guess %r", mu, x, pq, guess)
    elif not result.converged:
        logger.debug("inv_marcum: %s for mu=%r, x=%r, %s", result.status.value, mu, x, pq)
    return result.value


def _y(zeta: float, x: float) -> float:
    """y(ζ) при нормированном x: обращение ζ(x, y), ветвь sign(ζ) = sign(y - x - 1)."""
    if abs(zeta) < SMALL_ZETA:
        # Eq. 7.5, 7.6
        x2p1 = 2 * x + 1
        b1 = math.sqrt(x2p1)
        b2 = (1 + 3 * x) / (3 * x2p1)
        b3 = (1 + 6 * x) / (36 * x2p1**2.5)
        return x + 1 + polynomial((0.0, b1, b2, b3), zeta)

    half_zeta2 = 0.5 * zeta * zeta

    def f(y: float) -> float:
        sq = math.sqrt(1 + 4 * x * y)
        return x + y - sq + safe_log((1 + sq) / (2 * y)) - half_zeta2

    def f1(y: float) -> float:
        # Eq. 7.12
        sq = math.sqrt(1 + 4 * x * y)
        return (y - 2 * x * y - 1 + (y - 1) * sq) / (y * (1 + sq))

    # Два корня: при ζ < 0 нужен корень левее x + 1
    guess = x + 2 if zeta > 0 else 0.5
    result = newton_root(f, f1, guess, xmin=Y_NEWTON_MIN)
    if not result.converged:
        logger.debug("inv_marcum: y(zeta) %s for zeta=%r, x=%r", result.status.value, zeta, x)
    return result.value


def _zeta1(zeta0: float, x: float, y: float) -> float:
    if abs(zeta0) < SMALL_ZETA:
        # Eq. 7.9
        xx = (2 * x + 1) ** 1.5
        d0 = -(3 * x + 1) / (3 * xx)
        d1 = (36 * x * x + x + 1) / (36 * xx * xx)
        d2 = -(2160 * x**3 - 594 * x * x - 9 * x - 1) / (1620 * xx**3)
        return polynomial((d0, d1, d2), zeta0)
    sq = math.sqrt(1 + 4 * x * y)
    return math.log(zeta0 / (y - x - 1) * (1 + 2 * x + sq) / (2 * math.sqrt(sq))) / zeta0


# =============================================================================
# РЯДЫ
# =============================================================================


def _q_series(mu: float, x: float, y: float) -> float:
    """
    Q_µ(x, y) = e⁻ˣ Σᵢ xⁱ/i! Q(µ + i, y), Eq. 7.

    Q(µ + i, y) получается из Q(µ + i - 1, y) добавлением
    dᵢ = y^(µ+i-1)e⁻ʸ/Γ(µ + i).
    """
    q_mu = q_gamma(mu, y)
    d0 = safe_exp((mu - 1) * math.log(y) - y - safe_lgamma(mu))

    def update(i: int, state: tuple[float, float, float]) -> tuple[float, tuple[float, float, float]]:
        q, d, p = state
        d = d * y / (mu + i - 1)
        p = p * x / i
        q = q + d
        return p * q, (q, d, p)

    result = recursive_sum(update, (q_mu, d0, 1.0), initial=q_mu, max_iter=Q_SERIES_MAX_ITER)
    return math.exp(-x) * result.value


def _p_series(mu: float, x: float, y: float) -> float:
    """
    P_µ(x, y) = e⁻ˣ Σᵢ xⁱ/i! P(µ + i, y), Eq. 8.

    Сумма обрывается на n₀, где член становится меньше ε относительно суммы
    (корень f(n) из Eq. 25), и считается обратной рекурсией от n₀ к 1.
    Если затравки рекурсии теряются в субнормальных числах (малые x и y),
    члены суммируются напрямую от i = 0.
    """
    c = math.lgamma(mu) - math.log(2 * math.pi * P_SERIES_EPSILON) + mu
    # log(xy) без промежуточного произведения: xy может уйти в ноль
    lxy = math.log(x) + math.log(y)

    def f(n: float) -> float:
        return (n + mu) * safe_log(n + mu) + n * safe_log(n) - 2 * n - n * lxy - c

    def f1(n: float) -> float:
        # Eq. 27
        return safe_log(n) + safe_log(n + mu) - lxy

    # Правее минимума f, Eq. 27ff
    guess = 1 + (-mu + math.sqrt(mu * mu + 4 * x * y)) / 2
    n_hat = newton_root(f, f1, guess).value
    if not math.isfinite(n_hat):
        logger.warning("marcum: series length not found for mu=%r, x=%r, y=%r", mu, x, y)
        return math.nan
    n0 = max(math.ceil(n_hat), 0)

    p_big0 = p_gamma(mu + n0, y)
    p0 = safe_exp(n0 * math.log(x) - math.lgamma(n0 + 1))
    d0 = safe_exp((mu + n0) * math.log(y) - y - math.lgamma(mu + n0 + 1))
    if p_big0 < LEAST_NORMAL or d0 < LEAST_NORMAL:
        return math.exp(-x) * _p_series_direct(mu, x, y, n0)

    def update(i: int, state: tuple[float, float, float]) -> tuple[float, tuple[float, float, float]]:
        big_p, d, p = state
        d = d * (mu + i) / y
        p = p * i / x
        big_p = big_p + d
        return p * big_p, (big_p, d, p)

    result = recursive_sum(
        update,
        (p_big0, d0, p0),
        initial=p0 * p_big0,
        max_iter=n0 + 1,
        indices=range(n0, 0, -1),
    )
    return math.exp(-x) * result.value


def _p_series_direct(mu: float, x: float, y: float, n0: int) -> float:
    """Σᵢ₌₀ⁿ⁰ xⁱ/i! P(µ + i, y) с P(µ + i, y) из неполной гамма-функции."""

    def update(i: int, p: float) -> tuple[float, float]:
        p = p * x / i
        return p * p_gamma(mu + i, y), p

    result = recursive_sum(update, 1.0, initial=p_gamma(mu, y), max_iter=n0 + 1, indices=range(1, n0 + 1))
    return result.value


# =============================================================================
# РЕКУРРЕНТНОСТЬ ПО µ
# =============================================================================


def _recursion_ratio(mu: float, x: float, y: float) -> float:
    """
    c_µ = √(y/x)·I_µ(ξ)/I_{µ-1}(ξ), Eq. 16, цепной дробью NIST 10.33.1:

        I_µ/I_{µ-1} = 1/(2µ/ξ + 1/(2(µ + 1)/ξ + ...))
    """
    xi = 2 * math.sqrt(x * y)
    # При ξ > µ дробь сходится за O(ξ) членов
    cf = continued_fraction(
        0.0,
        lambda i: 1.0,
        lambda i: 2 * (mu + i - 1) / xi,
        max_iter=DEFAULT_MAX_ITER + 2 * math.ceil(xi),
    )
    if not cf.converged:
        logger.debug("marcum: Bessel ratio did not converge for mu=%r, xi=%r", mu, xi)
    return math.sqrt(y / x) * cf.value


def _q_recursion(mu: float, x: float, y: float) -> float:
    """
    Q вверх по µ от ближайшего µ̃, где работает квадратура:

        Q_{µ+1} = (1 + c_µ)Q_µ - c_µ Q_{µ-1},  Eq. 14

    Коэффициенты c_µ̃ ... c_{µ-1} берутся обратной рекурсией
    c_{µ-1} = y/(µ - 1 + x·c_µ) от цепной дроби в c_{µ-1}.
    """
    mu_prime = y - x + 1 - math.sqrt(2 * (x + y) + 1)
    # Затравке Q_{µ̃-1} нужен порядок µ̃ - 1 > 0
    n = max(min(math.ceil(mu - mu_prime), math.ceil(mu - 1) - 1), 0)
    mu_t = mu - n
    if n == 0:
        return _quadrature(mu, x, y).q

    c = _recursion_ratio(mu - 1, x, y)
    ratios = [c]
    for k in range(n - 1, 0, -1):
        c = y / (mu_t + k - 1 + x * c)
        ratios.append(c)

    q_prev = _quadrature(mu_t - 1, x, y).q
    q = _quadrature(mu_t, x, y).q
    for c in reversed(ratios):
        q_prev, q = q, (1 + c) * q - c * q_prev
    return q


def _p_recursion(mu: float, x: float, y: float) -> float:
    """P вниз по µ от µ̃ > µ: P_{µ-1} = ((1 + c_µ)P_µ - P_{µ+1})/c_µ."""
    mu_prime = y - x + 1 + math.sqrt(2 * (x + y) + 1)
    n = math.ceil(mu_prime - mu)
    mu_t = mu + n

    p_next = _quadrature(mu_t + 1, x, y).p
    p = _quadrature(mu_t, x, y).p
    c = _recursion_ratio(mu_t, x, y)
    for i in range(n):
        c_prev = y / (mu_t - i - 1 + x * c)
        p_next, p = p, ((1 + c) * p - p_next) / c
        c = c_prev
    return p


# =============================================================================
# КВАДРАТУРА
# =============================================================================


def _quadrature(mu: float, mu_x: float, mu_y: float) -> Probability:
    """
    Интегральное представление Eq. 3.9 по θ ∈ [0, π], x и y нормированы на µ:

        Q или -P = e^(-½µζ²)/π ∫₀^π e^(µψ(θ)) f(θ) dθ

    Какой из хвостов получен, определяет r₀ = (1 + √(1 + ξ²))/(2y):
    r₀ < 1 даёт Q, r₀ > 1 даёт -P. При r₀ = 1 (ζ = 0) у f(θ) в нуле
    устранимая особенность, а интеграл отсчитывается от середины:
    Q = ½ + I/π.
    """
    if mu <= 0:
        logger.debug("marcum: quadrature seed at non-positive order mu=%r", mu)
        return Probability.nan()
    x = mu_x / mu
    y = mu_y / mu
    xi2 = 4 * x * y
    sq1pxi2 = math.sqrt(1 + xi2)
    r0 = (1 + sq1pxi2) / (2 * y)

    integral = trapezoidal(lambda theta: _integrand(theta, mu, y, xi2, sq1pxi2, r0), 0.0, math.pi)
    if not integral.converged:
        logger.debug("marcum: quadrature did not converge for mu=%r, x=%r, y=%r", mu, mu_x, mu_y)

    zeta = _zeta(x, y)
    pq = safe_exp(-0.5 * mu * zeta * zeta) * integral.value / math.pi
    if r0 == 1:
        return Probability.from_q(0.5 + pq)
    if r0 < 1:
        return Probability.from_q(pq)
    return Probability.from_p(-pq)


def _integrand(theta: float, mu: float, y: float, xi2: float, sq1pxi2: float, r0: float) -> float:
    if theta == 0:
        # ρ(0) = √(1 + ξ²), ψ(0) = 0, f(0) = r₀/(1 - r₀)
        if r0 == 1:
            # Предел 0/0 при r₀ = 1
            return 1 / (6 * sq1pxi2) - 0.5
        return r0 / (1 - r0)

    sin_t = math.sin(theta)
    sin2_t = sin_t * sin_t
    cos_t = math.cos(theta)
    t_sin = theta / sin_t
    tmsin = xmsin(theta)

    rho = math.sqrt(t_sin * t_sin + xi2)
    r = (t_sin + rho) / (2 * y)
    dr = (-tmsin + 2 * theta * math.sin(0.5 * theta) ** 2) / (2 * y * sin2_t) * (1 + t_sin / rho)
    f = (sin_t * dr + (cos_t - r) * r) / (r * (r - 2 * cos_t) + 1)

    # ψ₁ = cosθ·ρ - √(1 + ξ²) без сокращения, Eq. 3.25, 3.26
    psi1 = (tmsin * (theta + sin_t) / sin2_t - theta * theta - xi2 * sin2_t) / (cos_t * rho + sq1pxi2)
    # ψ₂ = -log((θ/sinθ + ρ)/(1 + √(1 + ξ²))), Eq. 3.29
    psi2 = -math.log1p((tmsin / sin_t) / (1 + sq1pxi2) * (1 + (t_sin + 1) / (rho + sq1pxi2)))
    return safe_exp(mu * (psi1 + psi2)) * f


def _zeta(x: float, y: float) -> float:
    """ζ(x, y) = -sign(y - x - 1)·√(2(x + y - √(1 + 4xy) + log((1 + √(1 + 4xy))/(2y))))."""
    ymxm1 = y - x - 1
    if abs(ymxm1) >= 0.5:
        sq = math.sqrt(1 + 4 * x * y)
        return -sign(ymxm1) * math.sqrt(2 * (x + y - sq + math.log((1 + sq) / (2 * y))))
    z = ymxm1 / (2 * x + 1) ** 2
    coef = [polynomial(c, x) for c in ZETA_CI]
    return -ymxm1 / math.sqrt(2 * x + 1) * polynomial(coef, z)


# =============================================================================
# АСИМПТОТИКИ
# =============================================================================


def _bigxy(mu: float, x: float, y: float) -> Probability:
    """
    Асимптотика при больших ξ = 2√(xy), Eq. 37-40.

    Из φᵢ вынесены e^(-σξ) и ξ^(-i+½), чтобы рекурсия (i - ½)φᵢ = -σξφᵢ₋₁ + 1
    не переполнялась. Получается P при y < x и Q иначе.
    """
    xi = 2 * math.sqrt(x * y)
    sqxi = math.sqrt(xi)
    sq_sigma_xi = abs(math.sqrt(y) - math.sqrt(x))
    sigma_xi = sq_sigma_xi * sq_sigma_xi
    rho = math.sqrt(y / x)
    rho_mu = safe_pow(rho, mu)
    if not rho_mu > 0:
        logger.warning("marcum: big xi expansion underflow for mu=%r, x=%r, y=%r", mu, x, y)
        return Probability.nan()
    if not math.isfinite(rho_mu):
        logger.warning("marcum: big xi expansion overflow for mu=%r, x=%r, y=%r", mu, x, y)
        return Probability.nan()

    four_mu2 = 4 * mu * mu
    c_num = (2 * mu - 1) * (rho - 1)
    c_denom = rho * (2 * mu - 1)
    prefix = rho_mu / (2 * math.sqrt(2 * math.pi)) * math.exp(-sigma_xi)
    a0 = 1.0
    # σξ·φ₀ = √(πσξ)·erfc(√σξ)·e^σξ конечно и при y = x, где σξ = 0
    sigma_phi0 = math.sqrt(math.pi * sigma_xi) * math.erfc(sq_sigma_xi) * safe_exp(sigma_xi)
    sgn0 = 1.0 if y >= x else -1.0
    if y >= x:
        # C₀φ₀ = √(π/y)·erfc(√σξ)·e^σξ
        psi0 = prefix * sqxi * math.sqrt(math.pi / y) * math.erfc(sq_sigma_xi) * safe_exp(sigma_xi)
    else:
        psi0 = 0.5 * rho_mu / math.sqrt(rho) * math.erfc(sq_sigma_xi)

    def update(i: int, state: tuple[float, float, float, float]) -> tuple[float, tuple[float, float, float, float]]:
        a, sigma_phi, xi_term, sgn = state
        # Aᵢ(µ) = Aᵢ₋₁(µ)·(4µ² - (2i - 1)²)/(8i)
        a = a / (8 * i) * (four_mu2 - (2 * i - 1) ** 2)
        # Cᵢ(µ) = Aᵢ(µ - 1) - Aᵢ(µ)/ρ
        c = a * (c_num - 2 * i * (rho + 1)) / (c_denom + 2 * i * rho)
        xi_term = xi_term / xi
        phi = (1 - sigma_phi) / (i - 0.5)
        sgn = -sgn
        return prefix * sgn * xi_term * c * phi, (a, sigma_xi * phi, xi_term, sgn)

    result = recursive_sum(update, (a0, sigma_phi0, sqxi, sgn0), initial=psi0)
    return Probability(result.value, is_complement=y >= x)


def _bigmu(mu_p1: float, mu_x: float, mu_y: float) -> Probability:
    """
    Асимптотика при больших µ, Eq. 71: три поправки Bᵢ к главному члену ψ₀.
    """
    mu = mu_p1 - 1
    x = mu_x / mu
    y = mu_y / mu
    zeta = _zeta(x, y)
    sgn = 1.0 if zeta < 0 else -1.0
    sgn_zeta = sgn * zeta

    # ψ₀(ζ) = √(π/2µ)·erfc(-ζ√(µ/2)), Eq. 67
    psi0 = math.sqrt(math.pi / (2 * mu)) * math.erfc(-sgn_zeta * math.sqrt(mu / 2))
    e = math.exp(-0.5 * mu * sgn_zeta * sgn_zeta)
    if not e > 0:
        logger.warning("marcum: big mu expansion underflow for mu=%r, x=%r, y=%r", mu_p1, mu_x, mu_y)
        return Probability.nan()

    # ψᵢ = ((i - 1)ψᵢ₋₂ + (-ζ)ⁱ⁻¹e^(-½µζ²))/µ, Eq. 68
    psi = [psi0]
    psi_prev2, psi_prev1, zeta_pow = 0.0, psi0, 1.0
    for i in range(1, 4):
        psi_i = ((i - 1) * psi_prev2 + zeta_pow * e) / mu
        psi.append(psi_i)
        psi_prev2, psi_prev1 = psi_prev1, psi_i
        zeta_pow *= -sgn_zeta
    mu_pow = [1.0, mu, mu * mu, mu**3]
    u = 1 / math.sqrt(2 * x + 1)

    def update(i: int, state: None) -> tuple[float, None]:
        b = sum(sgn**j * _fji(j, i - j, u) * psi[j] / mu_pow[i - j] for j in range(i + 1))
        return b, None

    result = recursive_sum(update, None, initial=psi0, indices=range(1, 4))
    pq = math.sqrt(mu / (2 * math.pi)) * result.value
    return Probability(pq, is_complement=zeta < 0)


def _fji(j: int, i: int, u: float) -> float:
    return u ** (j + 2 * i) * polynomial(FJI[(j, i)], u * u)
