"""Special — специальные функции с обращением.

- erf: erf⁻¹, erfc⁻¹ и приближение квантиля нормального распределения
- gamma: регуляризованная неполная гамма P, Q и обращение
- beta: регуляризованная неполная бета I и обращение
- marcum: обобщённая функция Маркума Q и обращение по y
"""

from .erf import inv_erf, inv_erfc, qapprox
from .gamma import (
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
from .beta import beta, beta_reg, beta_reg_deriv, inv_beta_reg, lbeta
from .marcum import inv_marcum, marcum, marcum_deriv

__all__ = [
    # Функции ошибок
    "inv_erf",
    "inv_erfc",
    "qapprox",
    # Неполная гамма
    "gamma_reg",
    "p_gamma",
    "q_gamma",
    "p_gamma_deriv",
    "inv_gamma_reg",
    "inv_p_gamma",
    "inv_q_gamma",
    "gammastar",
    "lambda_eta",
    "inverse_gamma_p1m1",
    # Неполная бета
    "beta",
    "lbeta",
    "beta_reg",
    "beta_reg_deriv",
    "inv_beta_reg",
    # Маркум Q
    "marcum",
    "marcum_deriv",
    "inv_marcum",
]
