"""Standard one-dimensional quadrature rules on the unit interval [0, 1].

Closed Newton-Cotes rules are pre-tabulated constants; Gauss-Legendre rules
of arbitrary order are computed with the Golub-Welsch algorithm (eigenvalues
of the symmetric Jacobi matrix of the Legendre recurrence).

Every non-empty rule returned here has weights summing to 1, the length of
the reference interval.

Coverage:
    - midpoint (1-point Gauss), exact for degree 1
    - trapezoid, exact for degree 1
    - simpson, exact for degree 3
    - milne (5-point closed Newton-Cotes), exact for degree 5
    - weddle (7-point closed Newton-Cotes), exact for degree 7
    - gauss(n), exact for degree 2n - 1
    - empty, the explicit zero-point rule
"""
# pylint: disable=invalid-name

from __future__ import annotations

import torch

from .errors import InvalidRule
from .quadrature import QuadratureRule


def _closed_newton_cotes(weights: list[float], denominator: float) -> QuadratureRule:
    """Equispaced closed rule with integer weights over a common denominator."""
    n = len(weights)
    points = torch.linspace(0.0, 1.0, n, dtype=torch.float64).unsqueeze(1)
    w = torch.tensor(weights, dtype=torch.float64) / denominator
    return QuadratureRule._wrap(points, w)


def empty() -> QuadratureRule:
    """Zero-point rule on the unit interval."""
    return QuadratureRule.empty(1)


def midpoint() -> QuadratureRule:
    """One-point Gauss rule: x = 1/2, w = 1."""
    return QuadratureRule([[0.5]], [1.0])


def trapezoid() -> QuadratureRule:
    """Two-point trapezoidal rule on the interval end points."""
    return _closed_newton_cotes([1.0, 1.0], 2.0)


def simpson() -> QuadratureRule:
    """Three-point Simpson rule, weights (1, 4, 1) / 6."""
    return _closed_newton_cotes([1.0, 4.0, 1.0], 6.0)


def milne() -> QuadratureRule:
    """Five-point Milne (Boole) rule, weights (7, 32, 12, 32, 7) / 90."""
    return _closed_newton_cotes([7.0, 32.0, 12.0, 32.0, 7.0], 90.0)


def weddle() -> QuadratureRule:
    """Seven-point Weddle rule, weights (41, 216, 27, 272, 27, 216, 41) / 840."""
    return _closed_newton_cotes(
        [41.0, 216.0, 27.0, 272.0, 27.0, 216.0, 41.0], 840.0
    )


def gauss(n: int) -> QuadratureRule:
    """n-point Gauss-Legendre rule on [0, 1].

    Golub-Welsch: the nodes on [-1, 1] are the eigenvalues of the Jacobi
    matrix with off-diagonal entries k / sqrt(4k^2 - 1); the weights are
    2 v_0^2 for the normalized eigenvectors v. Mapping to [0, 1] halves
    both, so the weights become v_0^2.

    Points are symmetrized about 1/2 so that the rule is exactly symmetric
    in floating point.

    Raises:
        InvalidRule: if n < 0.
    """
    if n < 0:
        raise InvalidRule(f"Gauss rule needs n >= 0 points, got n={n}")
    if n == 0:
        return empty()
    if n == 1:
        return midpoint()

    k = torch.arange(1, n, dtype=torch.float64)
    beta = k / torch.sqrt(4.0 * k * k - 1.0)
    J = torch.diag(beta, 1) + torch.diag(beta, -1)
    nodes, vectors = torch.linalg.eigh(J)

    x = 0.5 * (nodes - nodes.flip(0))
    w = vectors[0, :] ** 2
    w = 0.5 * (w + w.flip(0))

    points = (0.5 * (x + 1.0)).unsqueeze(1)
    return QuadratureRule._wrap(points, w / w.sum())


_NAMED_RULES = {
    "none": empty,
    "empty": empty,
    "midpoint": midpoint,
    "trapezoid": trapezoid,
    "simpson": simpson,
    "milne": milne,
    "weddle": weddle,
}


def standard_rule(name: str, n_points: int | None = None) -> QuadratureRule:
    """Look up a standard 1D rule by name.

    Args:
        name (str): one of "none"/"empty", "midpoint", "trapezoid",
            "simpson", "milne", "weddle" or "gauss".
        n_points (int, optional): number of points, only for "gauss".

    Raises:
        InvalidRule: for an unknown name or a missing Gauss order.
    """
    key = name.strip().lower()
    if key == "gauss":
        if n_points is None:
            raise InvalidRule("gauss rule requires n_points")
        return gauss(n_points)
    if key not in _NAMED_RULES:
        raise InvalidRule(
            f"unknown rule {name!r}; expected one of "
            f"{sorted(_NAMED_RULES) + ['gauss']}"
        )
    return _NAMED_RULES[key]()


__all__ = [
    "empty",
    "gauss",
    "midpoint",
    "milne",
    "simpson",
    "standard_rule",
    "trapezoid",
    "weddle",
]
