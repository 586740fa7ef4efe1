"""
Incomplete Gamma — Regularized P(a, x), Q(a, x) and Inverse

Регуляризованные неполные гамма-функции:

    P(a, x) = γ(a, x)/Γ(a),   γ(a, x) = ∫₀ˣ e⁻ᵗ tᵃ⁻¹ dt
    Q(a, x) = Γ(a, x)/Γ(a),   Γ(a, x) = ∫ₓ^∞ e⁻ᵗ tᵃ⁻¹ dt,   a > 0

Результат — Probability: вычисляется тот хвост, который мал, второй
получается как дополнение без потери точности.

Области вычисления (Gil, Segura, Temme 2013, §2), α = x при x ≥ ½,
иначе log(½)/log(x/2):

    a ≥ 12, 0.3a ≤ x ≤ 2.35a  →  равномерная асимптотика Темме
    a ≥ α                     →  ряд для P
    x < 1.5                   →  ряд Тейлора для Q (Gautschi 1979)
    иначе                     →  цепная дробь для Q

Обращение: начальное приближение (семь областей по Gil-Segura-Temme
2013 и A&S 26.4.17), затем метод Галлея с Pʺ/Pʹ = (a - 1)/x - 1.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. a ≤ 0, x < 0 или NaN → NaN-вероятность (не исключение)
2. P(a, 0) = 0
3. P + Q = 1 по построению Probability
4. inv_gamma_reg: p = 0 → 0, q = 0 → +inf
"""

import logging
import math
from typing import Final

from src.core.domain.probability import Probability
from src.core.math.basic_functions import log1pmx
from src.core.math.continued_fraction import continued_fraction
from src.core.math.convergence import until_pairwise
from src.core.math.numerical_safeguards import (
    STRICT_TOLERANCE,
    is_approx,
    safe_divide,
    safe_exp,
    safe_gamma,
    safe_lgamma,
    safe_log,
    safe_pow,
    safe_sqrt,
)
from src.core.math.polynomial import polynomial
from src.core.math.series import series
from src.roots.methods.newton import halley_root
from src.special.erf import inv_erfc, qapprox

logger = logging.getLogger(__name__)

# Нижняя граница a для равномерной асимптотики
UNIFORM_ASYMPTOTIC_MIN_A: Final[float] = 12.0

# Окно x/a, в котором работает равномерная асимптотика
UNIFORM_ASYMPTOTIC_LOWER: Final[float] = 0.3
UNIFORM_ASYMPTOTIC_UPPER: Final[float] = 2.35

# Граница x между рядом Тейлора и цепной дробью для Q
Q_SERIES_MAX_X: Final[float] = 1.5

# Лимит итераций Галлея при обращении
INV_GAMMA_HALLEY_MAX_ITER: Final[int] = 11

# Граница a, ниже которой Γ*(a) считается через Γ(a) напрямую
GAMMASTAR_DIRECT_MAX_A: Final[float] = 3.0

# Граница x, ниже которой 1/Γ(1 + x) - 1 считается рядом Вренча
WRENCH_MAX_X: Final[float] = 1.5

# Окна η, в которых λ(η) уточняется итерацией
LAMBDA_REFINE_NEGATIVE: Final[tuple[float, float]] = (-3.5, -0.03)
LAMBDA_REFINE_POSITIVE: Final[tuple[float, float]] = (0.03, 40.0)


# =============================================================================
# КОЭФФИЦИЕНТЫ
# =============================================================================

# Ряд Стирлинга Γ(a) = √(2π/a)(a/e)ᵃ Σ cᵢ/aⁱ (Wrench 1967, Table 2).
# Ряд асимптотический: лишние члены при малом a ухудшают результат.
STIRLING: Final[tuple[float, ...]] = (
    1.0,
    0.08333_33333_33333_33333_33333_33333_33333_33333_33333_33333,
    0.00347_22222_22222_22222_22222_22222_22222_22222_22222_22222,
    -0.00268_13271_60493_88888_88888_88888_88888_88888_88888_88888,
    -0.00022_94720_93621_39917_69547_32510_28806_58444_44444_44444,
    0.00078_40392_21720_06662_74740_34881_44228_88496_96257_10366,
    0.00006_97281_37583_65857_77429_39882_85757_83308_29359_63594,
    -0.00059_21664_37353_69388_28648_36225_60440_11873_91585_19680,
    -0.00005_17179_09082_60592_19337_05784_30020_58822_81785_34534,
    0.00083_94987_20672_08727_99933_57516_76498_34451_98182_11159,
    0.00007_20489_54160_20010_55908_57193_02250_15052_06345_17380,
    -0.00191_44384_98565_47752_65008_98858_32852_25448_76893_57895,
    -0.00016_25162_62783_91581_68986_35123_98027_09981_05872_59193,
    0.00640_33628_33808_06979_48236_38090_26579_58304_01893_93280,
    0.00054_01647_67892_60451_51804_67508_57024_17355_47254_41598,
    -0.02952_78809_45699_12050_54406_51054_69382_44465_65482_82544,
    -0.00248_17436_00264_99773_09156_58368_74346_43239_75168_04723,
    0.17954_01170_61234_85610_76994_07722_22633_05309_12823_38692,
    0.01505_61130_40026_42441_23842_21877_13112_72602_59815_45541,
    -1.39180_10932_65337_48139_91477_63542_27314_93580_45617_72646,
    -0.11654_62765_99463_20085_07340_36907_14796_96789_37334_38371,
)

# Ряд Тейлора 1/Γ(1 + x) - 1 при x < 1.5 (Wrench 1967, Table 5): из ряда для
# 1/Γ(x) убран первый коэффициент, из свободного члена вычтена единица.
WRENCH: Final[tuple[float, ...]] = (
    0.0,
    0.57721_56649_01532_86060_65120_90082_4,
    -0.65587_80715_20253_88107_70195_15145_4,
    -0.04200_26350_34095_23552_90039_34875_4,
    0.16653_86113_82291_48950_17007_95102_1,
    -0.04219_77345_55544_33674_82083_01289_2,
    -0.00962_19715_27876_97356_21149_21672_3,
    0.00721_89432_46663_09954_23950_10340_5,
    -0.00116_51675_91859_06511_21139_71084_0,
    -0.00021_52416_74114_95097_28157_29963_1,
    0.00012_80502_82388_11618_61531_98626_3,
    -0.00002_01348_54780_78823_86556_89391_4,
    -0.00000_12504_93482_14267_06573_45359_5,
    0.00000_11330_27231_98169_58823_74128_9,
    -0.00000_02056_33841_69776_07103_45015_9,
    0.00000_00061_16095_10448_14158_17863_4,
    0.00000_00050_02007_64446_92229_30056_2,
    -0.00000_00011_81274_57048_70201_44588_3,
    0.00000_00001_04342_67116_91100_51048_8,
    0.00000_00000_07782_26343_99050_71253_7,
    -0.00000_00000_03696_80561_86422_05708_2,
    0.00000_00000_00510_03702_87454_47597_9,
    -0.00000_00000_00020_58326_05356_65067_9,
    -0.00000_00000_00005_34812_25394_23018_0,
    0.00000_00000_00001_22677_86282_38260_9,
    -0.00000_00000_00000_11812_59301_69745_6,
    0.00000_00000_00000_00118_66922_54751_7,
    0.00000_00000_00000_00141_23806_55318_0,
    -0.00000_00000_00000_00022_98745_68443_6,
    0.00000_00000_00000_00001_71440_63219_3,
    0.00000_00000_00000_00000_01337_35173_1,
    -0.00000_00000_00000_00000_02054_23355_1,
    0.00000_00000_00000_00000_00273_60300_6,
    -0.00000_00000_00000_00000_00017_32356_4,
    -0.00000_00000_00000_00000_00000_23606_0,
    0.00000_00000_00000_00000_00000_18650_0,
    -0.00000_00000_00000_00000_00000_02218_0,
    0.00000_00000_00000_00000_00000_00129_9,
    0.00000_00000_00000_00000_00000_00001_2,
    -0.00000_00000_00000_00000_00000_00001_1,
    0.00000_00000_00000_00000_00000_00000_1
)

# Коэффициенты dᵢ Темме: η/(λ - 1) = Σ dᵢηⁱ (Temme 1979, Eq. 3.8).
# Для a > 12 достаточно 25 членов.
TEMME_D: Final[tuple[float, ...]] = (
    1.0,
    -3.33333_33333_33333_33333_33333_33333e-1,
    8.33333_33333_33333_33333_33333_33333e-2,
    -1.48148_14814_81481_48148_14814_81481e-2,
    1.15740_74074_07407_40740_74074_07407e-3,
    3.52733_68606_70194_00352_73368_60670e-4,
    -1.78755_14403_29218_10699_58847_73663e-4,
    3.91926_31785_22437_78169_70409_56300e-5,
    -2.18544_85106_79992_16147_36429_55124e-6,
    -1.85406_22107_15159_96070_17988_36230e-6,
    8.29671_13409_53086_00501_62421_31664e-7,
    -1.76659_52736_82607_93043_60054_24574e-7,
    6.70785_35434_01498_58036_93971_00296e-9,
    1.02618_09784_24030_80425_73957_32273e-8,
    -4.38203_60184_53353_18655_29746_22447e-9,
    9.14769_95822_36790_23418_24881_76331e-10,
    -2.55141_93994_94624_97668_77953_79939e-11,
    -5.83077_21325_50425_06746_40894_50400e-11,
    2.43619_48020_66741_62436_94069_67078e-11,
    -5.02766_92801_14175_58909_05498_59257e-12,
    1.10043_92031_95613_47708_37417_44972e-13,
    3.37176_32624_00985_37882_76988_41692e-13,
    -1.39238_87224_18162_06591_93661_84895e-13,
    2.85348_93807_04744_32039_66909_90528e-14,
    -5.13911_18342_42572_61899_06458_03004e-16,
    -1.97522_88294_34944_28353_96240_15807e-15,
    8.09952_11567_04561_33407_11566_87025e-16,
)


# =============================================================================
# РЕГУЛЯРИЗОВАННАЯ НЕПОЛНАЯ ГАММА
# =============================================================================


def gamma_reg(a: float, x: float) -> Probability:
    """
    Регуляризованная неполная гамма-функция как пара (P, Q).

    Args:
        a: Параметр формы, a > 0
        x: Аргумент, x ≥ 0

    Returns:
        Probability с P(a, x) и Q(a, x); NaN вне домена

    Examples:
        >>> abs(gamma_reg(1.0, 2.0).q - math.exp(-2.0)) < 1e-15
        True
        >>> gamma_reg(3.0, 0.0).p
        0.0
    """
    if math.isnan(a) or math.isnan(x) or a <= 0 or x < 0:
        return Probability.nan()
    if x == 0:
        return Probability.from_p(0.0)

    alpha = x if x >= 0.5 else math.log(0.5) / math.log(0.5 * x)
    if a >= UNIFORM_ASYMPTOTIC_MIN_A and UNIFORM_ASYMPTOTIC_LOWER * a <= x <= UNIFORM_ASYMPTOTIC_UPPER * a:
        is_lower = a > alpha
        pq = _pq_gamma_uniform_asymptotic(a, x, is_lower)
        return Probability.from_p(pq) if is_lower else Probability.from_q(pq)
    if a >= alpha:
        return Probability.from_p(_p_gamma_series(a, x))
    if x < Q_SERIES_MAX_X:
        return Probability.from_q(_q_gamma_series(a, x))
    return Probability.from_q(_q_gamma_frac(a, x))


def p_gamma(a: float, x: float) -> float:
    """Нижняя регуляризованная неполная гамма P(a, x)."""
    return gamma_reg(a, x).p


def q_gamma(a: float, x: float) -> float:
    """Верхняя регуляризованная неполная гамма Q(a, x)."""
    return gamma_reg(a, x).q


def p_gamma_deriv(a: float, x: float) -> float:
    """
    Производная P(a, x) по x: e⁻ˣ xᵃ⁻¹/Γ(a).

    Для a = ½ и a = 1 используются замкнутые формы.
    """
    if a == 0.5:
        return safe_divide(math.exp(-x), math.sqrt(x) * math.sqrt(math.pi))
    if a == 1:
        return math.exp(-x)
    return safe_exp(-x + (a - 1) * safe_log(x) - safe_lgamma(a))


# =============================================================================
# ОБРАЩЕНИЕ
# =============================================================================


def inv_gamma_reg(a: float, pq: Probability) -> float:
    """
    x такое, что gamma_reg(a, x) = pq.

    Probability позволяет задать как очень малое p, так и очень малое q.

    Args:
        a: Параметр формы, a > 0
        pq: Целевая вероятность

    Returns:
        x ≥ 0; 0 при p = 0, +inf при q = 0, NaN вне домена

    Examples:
        >>> abs(inv_gamma_reg(1.0, Probability.from_q(0.5)) - math.log(2)) < 1e-15
        True
    """
    p, q = pq.p, pq.q
    if math.isnan(a) or pq.is_nan or a <= 0 or p < 0 or p > 1:
        return math.nan
    if p == 0:
        return 0.0
    if q == 0:
        return math.inf
    # Замкнутая форма Q(1, x) = e⁻ˣ, пока q не потеряло точность
    if a == 1 and p >= 1e-3:
        return -math.log(q)

    guess = _invert_guess(a, p, q)

    # Pʹ = e⁻ˣ xᵃ⁻¹/Γ(a),  Pʺ/Pʹ = (a - 1)/x - 1
    a1 = a - 1
    gln = safe_lgamma(a)
    if a <= 1:
        def f1(x: float) -> float:
            return safe_exp(-x + a1 * safe_log(x) - gln)
    else:
        lna1 = math.log(a1)
        afac = math.exp(a1 * (lna1 - 1) - gln)

        def f1(x: float) -> float:
            return afac * safe_exp(-(x - a1) + a1 * (safe_log(x) - lna1))

    result = halley_root(
        lambda x: gamma_reg(a, x) - pq,
        f1,
        guess,
        f2f1=lambda x: safe_divide(a1, x) - 1,
        xmin=0.0,
        max_iter=INV_GAMMA_HALLEY_MAX_ITER,
    )
    if not result.converged:
        logger.debug("inv_gamma_reg: %s for a=%r, %s", result.status.value, a, pq)
    return result.value


def inv_p_gamma(a: float, p: float) -> float:
    """x такое, что P(a, x) = p."""
    return inv_gamma_reg(a, Probability.from_p(p))


def inv_q_gamma(a: float, q: float) -> float:
    """x такое, что Q(a, x) = q."""
    return inv_gamma_reg(a, Probability.from_q(q))


# =============================================================================
# ОБЛАСТИ ВЫЧИСЛЕНИЯ
# =============================================================================


def _p_gamma_series(a: float, x: float) -> float:
    # γ(a, x) = e⁻ˣ xᵃ Σ Γ(a)/Γ(a + 1 + n) xⁿ, знаменатель рекурсивно
    prefix = math.exp(a * math.log(x) - x - math.lgamma(a))
    first = 1 / a

    def update(i: int, state: float) -> tuple[float, float]:
        term = state * x / (a + i)
        return term, term

    return prefix * series(update, first, initial=first).value


def _q_gamma_series(a: float, x: float) -> float:
    """
    Ряд Тейлора для Q(a, x) при малых x (Gautschi 1979, §4.1, Eq. 4.10).

    Q = u + v,
    u = 1 - 1/Γ(a + 1) + (1 - xᵃ)/Γ(a + 1),
    v = x^(a+1)/((a + 1)Γ(a)) Σ tᵢ,  tᵢ = -pᵢ tᵢ₋₁/qᵢ, t₀ = 1

    pᵢ = pᵢ₋₁ + x (p₀ = ax), qᵢ = qᵢ₋₁ + rᵢ₋₁ (q₀ = a + 1),
    rᵢ = rᵢ₋₁ + 2 (r₀ = a + 3).
    """
    u1 = -inverse_gamma_p1m1(a)
    inv_gamma_a1 = 1 - u1
    lnx = math.log(x)
    u2 = -math.expm1(a * lnx) * inv_gamma_a1

    def update(i: int, state: tuple[float, float, float, float]) -> tuple[float, tuple[float, float, float, float]]:
        p, q, r, t = state
        p += x
        q += r
        r += 2
        t = -p * t / q
        return t, (p, q, r, t)

    total = series(update, (a * x, a + 1, a + 3, 1.0), initial=1.0).value
    v = a * inv_gamma_a1 * math.exp((a + 1) * lnx) * total / (a + 1)
    return u1 + u2 + v


def _q_gamma_frac(a: float, x: float) -> float:
    # Чётная часть дроби e⁻ˣxᵃ/Γ(a) · 1/(x + (1 - a)/(1 + 1/(x + ...)))
    prefix = math.exp(a * math.log(x) - x - math.lgamma(a))
    frac = continued_fraction(
        0.0,
        lambda i: 1.0 if i == 1 else (i - 1) * (a - (i - 1)),
        lambda i: 1 + x - a + 2 * (i - 1),
    )
    return prefix * frac.value


def _pq_gamma_uniform_asymptotic(a: float, x: float, is_lower: bool) -> float:
    """
    Равномерная асимптотика Темме для больших a и x ≈ a.

    Q(a, x) = ½erfc(η√(a/2)) + Rₐ(η)
    P(a, x) = ½erfc(-η√(a/2)) - Rₐ(η)
    Rₐ(η) = e^(-½η²a)/√(2πa) · a/(a + β₁) Σ βᵢηⁱ
    βᵢ = dᵢ₊₁ + (i + 2)βᵢ₊₂/a

    Gil, Segura, Temme 2013, §2.5; Temme 1979, Eq. 1.3.
    """
    sgn = -1.0 if is_lower else 1.0
    mu = (x - a) / a
    half_eta2 = -log1pmx(mu)
    eta_ = math.copysign(math.sqrt(2 * half_eta2), mu) if mu != 0 else 0.0

    u = 0.5 * math.erfc(sgn * eta_ * math.sqrt(a / 2.0))
    prefix = math.exp(-half_eta2 * a) / math.sqrt(2 * math.pi * a)

    n = len(TEMME_D) - 1
    beta = [0.0] * (n + 2)
    for i in range(n - 1, -1, -1):
        beta[i] = TEMME_D[i + 1] + (i + 2) * beta[i + 2] / a
    beta = beta[:n]

    s = a / (a + beta[1]) * polynomial(beta, eta_)
    return u + sgn * prefix * s


# =============================================================================
# НАЧАЛЬНОЕ ПРИБЛИЖЕНИЕ ОБРАЩЕНИЯ
# =============================================================================


def _invert_guess(a: float, p: float, q: float) -> float:
    """
    Начальное приближение для x = P⁻¹(a, p) = Q⁻¹(a, q).

    Gil, Segura, Temme 2013, §3; в оставшейся области A&S 26.4.17.
    """
    r = safe_exp((math.log(p) + math.lgamma(1 + a)) / a)

    # Замкнутая форма, пока q хорошо определено
    if a == 1 and q < 0.999:
        return -math.log(q)

    # p = q = ½: разложение Темме 1992, Eq. 6.2
    if q == 0.5:
        return a - 1.0 / 3.0 + (8.0 / 405.0) / a + (184.0 / 25515.0) / a**2 + (2248.0 / 3444525.0) / a**3

    # Малое p: x = r + Σ cᵢrⁱ, r = (pΓ(a + 1))^(1/a), Eq. 3.2-3.3
    if r < 0.2 * (1.0 + a):
        c2 = 1.0 / (a + 1.0)
        c3 = (3.0 * a + 5.0) / (2.0 * (a + 1.0) ** 2 * (a + 2.0))
        c4 = (8.0 * a**2 + 33.0 * a + 31.0) / (3.0 * (a + 1.0) ** 3 * (a + 2.0) * (a + 3.0))
        c5 = (125.0 * a**4 + 1179.0 * a**3 + 3971.0 * a**2 + 5661.0 * a + 2888.0) / (
            24.0 * (a + 1.0) ** 4 * (a + 2.0) ** 2 * (a + 3.0) * (a + 4.0)
        )
        return polynomial([0.0, 1.0, c2, c3, c4, c5], r)

    # Малое q при небольшом a: x ~ x₀ - L + b Σ dᵢ/x₀ⁱ, Eq. 2.5, 3.5
    if a < 10 and q < safe_divide(math.exp(-a / 2), safe_gamma(a + 1)):
        lam = lambda_eta(eta(a, q))
        x0 = a * lam
        b = 1 - a
        L = math.log(x0)
        d1 = L - 1.0
        d2 = (1.0 / 2.0) * (2.0 + 3.0 * b - 2.0 * b * L - 2.0 * L + L**2)
        d3 = (1.0 / 6.0) * (
            24.0 * b * L - 11.0 * b**2 - 24.0 * b - 6.0 * L**2 + 12.0 * L - 12.0
            - 9.0 * b * L**2 + 6.0 * b**2 * L + 2.0 * L**3
        )
        d4 = (1.0 / 12.0) * (
            72.0 + 36.0 * L**2 + 3.0 * L**4 - 72.0 * L + 162.0 * b - 168.0 * b * L
            - 12.0 * L**3 + 25.0 * b**3 - 22.0 * b * L**3 + 36.0 * b**2 * L**2
            - 12.0 * b**3 * L + 84.0 * b * L**2 + 120.0 * b**2 - 114.0 * b**2 * L
        )
        return x0 - L + b * polynomial([0.0, d1, d2, d3, d4], 1 / x0)

    # a < 1: x₀ = (pΓ(a + 1))^(1/a), Eq. 3.8
    if a < 1:
        return safe_pow(p * safe_gamma(a + 1), 1 / a)

    # Большое a: η = η₀ + ε₁/a + ε₂/a² + ε₃/a³, Eq. 3.11-3.12
    if q < 0.999:
        eta0 = inv_erfc(2 * q) / math.sqrt(a / 2)
        e1, e2, e3 = _epsilon(eta0)
        return a * lambda_eta(polynomial([eta0, e1, e2, e3], 1 / a))

    # Очень малое p: A&S 26.4.17
    xp = qapprox(p) if p < 0.5 else -qapprox(q)
    return max(1e-3, a * (1.0 - 1.0 / (9.0 * a) - xp / (3.0 * math.sqrt(a))) ** 3)


def _epsilon(eta0: float) -> tuple[float, float, float]:
    # Temme 1992, §5
    if -0.3 <= eta0 <= 0.3:
        coef1 = [-1.0 / 3.0, 1.0 / 36.0, 1.0 / 1620.0, -7.0 / 6480.0, 5.0 / 18144.0, -11.0 / 382725.0, -101.0 / 16329600.0]
        coef2 = [-7.0 / 405.0, -7.0 / 2592.0, 533.0 / 204120.0, -1579.0 / 2099520.0, 109.0 / 1749600.0, 10217.0 / 251942400.0]
        coef3 = [449.0 / 102060.0, -63149.0 / 20995200.0, 29233.0 / 36741600.0, 346793.0 / 5290790400.0, -18442139.0 / 130947062400.0]
        return polynomial(coef1, eta0), polynomial(coef2, eta0), polynomial(coef3, eta0)

    # f = η₀/µ, Temme 1992 Eq. 3.6
    f = eta0 / (lambda_eta(eta0) - 1)
    e1 = math.log(f) / eta0
    if eta0 >= 1000:
        return e1, -1 / (12.0 * eta0), e1 / (12.0 * eta0**2)

    n = eta0
    e2 = (
        12.0 / n**2 - 12.0 * f**2 / n**2 - 12.0 * f / n - 12.0 * f**2 * e1 / n
        - 12.0 * f * e1 - 1.0 - 6.0 * e1**2
    ) / (12.0 * n)
    e3 = (
        -30.0 / n**4 + 12.0 * f**2 * e1 / n**3 + 12.0 * f * e1 / n**2
        + 24.0 * f**2 * e1 / n + 6.0 * e1**3 / n - 12.0 * f**2 / n**4
        + 60.0 * f**3 * e1 / n**2 + 31.0 * f**2 / n**2 + 72.0 * f**3 / n**3
        + 42.0 * f**4 / n**4 + 18.0 * f**3 * e1**2 / n + 6.0 * f**2 * e1**2
        + 36.0 * f**4 * e1 / n**3 + 12.0 * f * e1**2 / n + 12.0 * f**2 * e1**2 / n**2
        - 12.0 * e1 / n**3 + e1 / n + f / n - 12.0 * f / n**3
        + 12.0 * f**4 * e1**2 / n**2
    ) / (12.0 * n)
    return e1, e2, e3


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ
# =============================================================================


def gammastar(a: float) -> float:
    """
    Γ*(a) = Γ(a)/(√(2π/a)(a/e)ᵃ): поправочный множитель ряда Стирлинга.

    Gil, Segura, Temme 2013, Eq. 2.5, 2.7.
    """
    if a <= GAMMASTAR_DIRECT_MAX_A:
        return safe_gamma(a) / (math.sqrt(2 * math.pi) * math.exp((a - 0.5) * math.log(a) - a))
    return polynomial(STIRLING, 1 / a)


def eta(a: float, q: float) -> float:
    """η для малых a и q: q√(2π)Γ*(a) = e^(-½aη²), Gil-Segura-Temme 2013, Eq. 2.4."""
    return safe_sqrt(-2.0 * safe_log(q * math.sqrt(2.0 * math.pi) * gammastar(a)) / a)


def lambda_eta(eta_: float) -> float:
    """
    λ(η): решение ½η² = λ - 1 - log λ со знаком λ - 1 = знак η.

    Начальное значение из разложений функции Ламберта W, затем
    уточнение итерацией λ₁ = λ₀(½η² + log λ₀)/(λ₀ - 1) в окнах,
    рекомендованных Темме (Temme 2013, Eq. 2.6).
    """
    s = 0.5 * eta_ * eta_
    if eta_ == 0:
        return 1.0
    if eta_ < -1:
        # Главная ветвь W около нуля с аргументом e^(-1 - s)
        lam = polynomial([0.0, 1.0, -1.0, 3.0 / 2.0, -8.0 / 3.0, 125.0 / 24.0], math.exp(-1 - s))
    elif eta_ < 1:
        # Temme 1992, ниже Eq. 6.1
        lam = polynomial([1.0, 1.0, 1.0 / 3.0, 1.0 / 36.0, -1.0 / 270.0, 1.0 / 4320.0], eta_)
    else:
        # Асимптотика W при больших аргументах e^(1 + s)
        L1 = 1 + s
        L2 = math.log(L1)
        a1 = 1.0
        a2 = (2 - L2) / 2
        a3 = (6.0 - 9.0 * L2 + 2.0 * L2**2) / 6.0
        a4 = -(-12.0 + 36.0 * L2 - 22.0 * L2**2 + 3.0 * L2**3) / 12.0
        a5 = (60.0 - 300.0 * L2 + 350.0 * L2**2 - 125.0 * L2**3 + 12.0 * L2**4) / 60.0
        a6 = -(-120.0 + 900.0 * L2 - 1700.0 * L2**2 + 1125.0 * L2**3 - 274.0 * L2**4 + 20.0 * L2**5) / 120.0
        lam = L1 + L2 * polynomial([1.0, a1, a2, a3, a4, a5, a6], 1 / L1)

    lo_neg, hi_neg = LAMBDA_REFINE_NEGATIVE
    lo_pos, hi_pos = LAMBDA_REFINE_POSITIVE
    if not (lo_neg <= eta_ <= hi_neg or lo_pos <= eta_ <= hi_pos):
        return lam

    def iterates():
        current = lam
        while True:
            yield current
            current = current * (s + safe_log(current)) / (current - 1)

    refined = until_pairwise(
        iterates(),
        lambda l0, l1: is_approx(l1, l0, tolerance=STRICT_TOLERANCE),
        max_iter=100,
    )
    return lam if refined is None else refined.value


def inverse_gamma_p1m1(x: float) -> float:
    """
    1/Γ(1 + x) - 1; при x < 1.5 рядом Вренча без потери точности около 0.

    Examples:
        >>> inverse_gamma_p1m1(0.0)
        0.0
    """
    if x < WRENCH_MAX_X:
        return polynomial(WRENCH, x)
    return 1 / safe_gamma(x + 1) - 1
