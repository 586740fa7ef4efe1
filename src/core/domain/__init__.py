"""
Domain value types.

Probability хранит меньший из хвостов p, q = 1 - p без потери точности.
"""

from src.core.domain.probability import Probability

__all__ = [
    "Probability",
]
