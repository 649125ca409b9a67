"""Per-quadrature-point data consumed by the local integrators.

The integrators never evaluate shape functions or mappings themselves; they
receive already evaluated values at the points of a (projected) quadrature
rule and only accumulate. `EvaluatedValues` is the container for that data:

    - JxW (Q,): Jacobian determinant times quadrature weight;
    - values (n_dofs, Q, n_comp): shape function values;
    - gradients (n_dofs, Q, n_comp, dim): shape function gradients;
    - normals (Q, dim), optional: outward unit normals on a face.
"""
# pylint: disable=invalid-name

from __future__ import annotations

from torch import Tensor

from ..errors import InvalidRule
from ..quadrature import QuadratureRule


class EvaluatedValues:
    """Shape function data at the quadrature points of one cell or face.

    Args:
        JxW (Tensor): (Q,) integration weights in physical space.
        values (Tensor): (n_dofs, Q, n_comp) shape function values.
        gradients (Tensor, optional): (n_dofs, Q, n_comp, dim) gradients.
        normals (Tensor, optional): (Q, dim) outward normals.

    Raises:
        InvalidRule: if the shapes are inconsistent.
    """

    def __init__(
        self,
        JxW: Tensor,
        values: Tensor,
        gradients: Tensor | None = None,
        normals: Tensor | None = None,
    ):
        if JxW.ndim != 1:
            raise InvalidRule(f"JxW must be 1D, got {JxW.ndim}D")
        if values.ndim != 3 or values.shape[1] != JxW.shape[0]:
            raise InvalidRule(
                f"values must be (n_dofs, {JxW.shape[0]}, n_comp), got {tuple(values.shape)}"
            )
        if gradients is not None and (
            gradients.ndim != 4 or gradients.shape[:3] != values.shape
        ):
            raise InvalidRule(
                f"gradients must be {tuple(values.shape)} + (dim,), "
                f"got {tuple(gradients.shape)}"
            )
        if normals is not None and (normals.ndim != 2 or normals.shape[0] != JxW.shape[0]):
            raise InvalidRule(
                f"normals must be ({JxW.shape[0]}, dim), got {tuple(normals.shape)}"
            )

        self.JxW = JxW
        self.values = values
        self.gradients = gradients
        self.normals = normals

    @property
    def n_dofs(self) -> int:
        return self.values.shape[0]

    @property
    def n_quadrature_points(self) -> int:
        return self.JxW.shape[0]

    @property
    def n_components(self) -> int:
        return self.values.shape[2]

    def require_components(self, n: int, name: str) -> None:
        """Raise `InvalidRule` unless the element has `n` components."""
        if self.n_components != n:
            raise InvalidRule(f"{name} needs {n} components, got {self.n_components}")

    def require_gradients(self, name: str) -> Tensor:
        if self.gradients is None:
            raise InvalidRule(f"{name} needs shape function gradients")
        return self.gradients

    def require_normals(self, name: str) -> Tensor:
        if self.normals is None:
            raise InvalidRule(f"{name} needs face normals")
        return self.normals


def jxw_from_rule(rule: QuadratureRule, measure: float | Tensor = 1.0) -> Tensor:
    """JxW for an affine map with constant Jacobian determinant `measure`.

    Args:
        rule (QuadratureRule): reference rule, e.g. one block of a flat
            projected rule.
        measure (float | Tensor): |det J| of the map, or the face measure
            scaling for a face map.

    Returns:
        (Q,) tensor of weights times `measure`.
    """
    return rule.weights * measure


__all__ = ["EvaluatedValues", "jxw_from_rule"]
