"""Local integrators consuming projected quadrature data."""

from . import divergence
from .values import EvaluatedValues, jxw_from_rule

__all__ = [
    "EvaluatedValues",
    "divergence",
    "jxw_from_rule",
]
