"""Quadrature rules on reference hypercubes.

A rule is an ordered sequence of (point, weight) pairs on a reference domain
of fixed dimension. Points are stored as a (Q, dim) tensor and weights as a
(Q,) tensor, both CPU float64 unless a caller casts them via `.to(...)`.

Ordering is part of the contract: the projection layer lays out blocks of
points by offset arithmetic (see `projection/descriptor.py`), so any reorder
must be mirrored by every consumer.

Conventions:
    - Reference interval is [0, 1]; reference square and cube are [0, 1]^d.
    - Weights of a non-empty rule sum to the measure of its domain.
    - A zero-point rule is a legal value meaning "no quadrature".
    - A 0-dimensional rule lives on a vertex; its points have shape (Q, 0).
"""
# pylint: disable=invalid-name

from __future__ import annotations

import logging

import torch
from torch import Tensor

from .errors import InvalidIndex, InvalidRule

logger = logging.getLogger(__name__)


class QuadratureRule:
    """Immutable quadrature rule of a given dimension.

    The constructor copies its inputs, so later changes to the caller's
    tensors never leak into the rule. Tensors returned by the accessors must
    be treated as read-only: a projected rule is shared by every consumer of
    a traversal.

    Args:
        points (Tensor | sequence): (Q, dim) coordinates.
        weights (Tensor | sequence): (Q,) weights.
        dim (int, optional): required when Q == 0 and points carry no shape;
            `QuadratureRule.empty(dim)` is the direct route to a zero-point
            rule.

    Raises:
        InvalidRule: if points are not 2D, weights not 1D, the lengths
            differ, or `dim` disagrees with the point shape.
    """

    __slots__ = ("_points", "_weights")

    def __init__(self, points, weights, dim: int | None = None):
        points = torch.as_tensor(points, dtype=torch.float64).clone()
        weights = torch.as_tensor(weights, dtype=torch.float64).clone()

        if points.ndim != 2 and points.numel() == 0 and dim is not None:
            # vertex rules carry no coordinates, one row per weight
            n_rows = weights.shape[0] if dim == 0 and weights.ndim == 1 else 0
            points = points.reshape(n_rows, dim)
        elif points.ndim != 2 and points.numel() == 0:
            raise InvalidRule(
                "dim is required for an empty rule, or use QuadratureRule.empty(dim)"
            )

        if points.ndim != 2:
            raise InvalidRule(f"points must be a 2D tensor, got {points.ndim}D")
        if weights.ndim != 1:
            raise InvalidRule(f"weights must be a 1D tensor, got {weights.ndim}D")
        if points.shape[0] != weights.shape[0]:
            raise InvalidRule(
                f"{points.shape[0]} points but {weights.shape[0]} weights"
            )
        if dim is not None and points.shape[1] != dim:
            raise InvalidRule(
                f"points have dimension {points.shape[1]}, expected {dim}"
            )

        self._points = points
        self._weights = weights

    @classmethod
    def _wrap(cls, points: Tensor, weights: Tensor) -> QuadratureRule:
        """Build a rule from freshly computed tensors without copying."""
        rule = cls.__new__(cls)
        rule._points = points
        rule._weights = weights
        return rule

    @classmethod
    def empty(cls, dim: int, dtype: torch.dtype = torch.float64) -> QuadratureRule:
        """Zero-point rule of dimension `dim`."""
        return cls._wrap(
            torch.zeros(0, dim, dtype=dtype),
            torch.zeros(0, dtype=dtype),
        )

    @property
    def dim(self) -> int:
        """Dimension of the reference domain."""
        return self._points.shape[1]

    @property
    def points(self) -> Tensor:
        """(Q, dim) quadrature points."""
        return self._points

    @property
    def weights(self) -> Tensor:
        """(Q,) quadrature weights."""
        return self._weights

    def size(self) -> int:
        """Number of quadrature points."""
        return self._points.shape[0]

    def __len__(self) -> int:
        return self.size()

    def point(self, k: int) -> Tensor:
        """Return the k-th point as a (dim,) tensor."""
        if not 0 <= k < self.size():
            raise InvalidIndex(f"point index {k} out of range [0, {self.size()})")
        return self._points[k]

    def weight(self, k: int) -> float:
        """Return the k-th weight."""
        if not 0 <= k < self.size():
            raise InvalidIndex(f"weight index {k} out of range [0, {self.size()})")
        return float(self._weights[k])

    def total_weight(self) -> float:
        """Sum of all weights; exactly 0.0 for the zero-point rule."""
        return float(self._weights.sum())

    def block(self, offset: int, n_points: int) -> QuadratureRule:
        """Contiguous sub-rule covering `[offset, offset + n_points)`.

        Used together with `DataSetDescriptor` to pull one face/orientation
        block out of a flat "all faces" rule.

        Raises:
            InvalidIndex: if the range does not fit inside the rule.
        """
        if offset < 0 or n_points < 0 or offset + n_points > self.size():
            raise InvalidIndex(
                f"block [{offset}, {offset + n_points}) outside [0, {self.size()})"
            )
        return QuadratureRule._wrap(
            self._points[offset:offset + n_points],
            self._weights[offset:offset + n_points],
        )

    def to(self, *args, **kwargs) -> QuadratureRule:
        """Return a copy moved to the specified device/dtype."""
        return QuadratureRule._wrap(
            self._points.to(*args, **kwargs),
            self._weights.to(*args, **kwargs),
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, QuadratureRule):
            return NotImplemented
        return (
            self._points.shape == other._points.shape
            and torch.equal(self._points, other._points)
            and torch.equal(self._weights, other._weights)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"QuadratureRule(dim={self.dim}, size={self.size()})"


def concatenate(rules: list[QuadratureRule], dim: int) -> QuadratureRule:
    """Stack rules end to end, preserving their order.

    Args:
        rules (list[QuadratureRule]): rules of dimension `dim`.
        dim (int): expected dimension (needed when `rules` is empty).

    Returns:
        QuadratureRule whose points are the rules' points back to back.
    """
    if not rules:
        return QuadratureRule.empty(dim)
    for rule in rules:
        if rule.dim != dim:
            raise InvalidRule(f"cannot concatenate a {rule.dim}D rule into {dim}D")
    return QuadratureRule._wrap(
        torch.cat([r.points for r in rules], dim=0),
        torch.cat([r.weights for r in rules], dim=0),
    )


def tensor_product(rule_1d: QuadratureRule, dim: int) -> QuadratureRule:
    """Lift a 1D rule to the reference hypercube of dimension `dim`.

    The first coordinate runs fastest: point k = i0 + n*i1 + n^2*i2 is
    (x_i0, x_i1, x_i2) with weight w_i0 * w_i1 * w_i2.

    For `dim == 0` the result is the single-point vertex rule with weight 1,
    whatever the 1D input: a vertex carries counting measure one.

    Raises:
        InvalidRule: if `rule_1d` is not one-dimensional.
        InvalidIndex: if `dim` is negative.
    """
    if rule_1d.dim != 1:
        raise InvalidRule(f"tensor_product expects a 1D rule, got {rule_1d.dim}D")
    if dim < 0:
        raise InvalidIndex(f"dim={dim} must be non-negative")

    dtype = rule_1d.points.dtype
    if dim == 0:
        return QuadratureRule._wrap(
            torch.zeros(1, 0, dtype=dtype),
            torch.ones(1, dtype=dtype),
        )

    x = rule_1d.points[:, 0]
    w = rule_1d.weights
    # meshgrid with 'ij' makes the last axis fastest; reverse to make x0 fastest
    grids = torch.meshgrid(*([x] * dim), indexing="ij")
    wgrids = torch.meshgrid(*([w] * dim), indexing="ij")
    points = torch.stack([g.reshape(-1) for g in reversed(grids)], dim=1)
    weights = torch.stack([g.reshape(-1) for g in wgrids], dim=1).prod(dim=1)

    logger.debug("tensor product of %d-point rule to %dD", len(rule_1d), dim)
    return QuadratureRule._wrap(points.contiguous(), weights)
