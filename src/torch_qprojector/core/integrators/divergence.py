"""Local integrators for divergence and gradient operators.

Each kernel accumulates over the quadrature points of one cell or face using
`EvaluatedValues`; matrices are (n_test_dofs, n_trial_dofs) and residuals
(n_test_dofs,). Vector-valued elements must have `dim` components, scalar
elements one.

Cell terms:
    cell_matrix          ∫ v ∇·u dx          (strong divergence)
    cell_residual        ∫ v ∇·u dx          from given ∇u
    cell_residual_weak  -∫ ∇v · u dx         from given u
    gradient_matrix      ∫ ∇u · v dx         (strong gradient)
    gradient_residual    ∫ v · ∇u dx         from given ∇u
    gradient_residual_weak -∫ (∇·v) u dx     from given u
    norm                 ∫ (∇·u)^2 dx

Face terms (need normals):
    u_dot_n_matrix       ∫ (u·n) v ds
    u_dot_n_residual     ∫ (u·n) v ds        from given u
    u_times_n_residual   ∫ u (v·n) ds        from given u
    u_dot_n_interface_matrix  jump of u·n times mean of v
    u_dot_n_jump_matrix       jump of u·n times jump of v·n
"""
# pylint: disable=invalid-name

from __future__ import annotations

import torch
from torch import Tensor

from ..errors import InvalidRule
from .values import EvaluatedValues


def _divergence(gradients: Tensor) -> Tensor:
    """Trace of (..., dim, dim) gradients over the last two axes."""
    return gradients.diagonal(dim1=-2, dim2=-1).sum(dim=-1)


def _check_input(data: Tensor, shape: tuple[int, ...], name: str) -> None:
    if tuple(data.shape) != shape:
        raise InvalidRule(f"{name} input must have shape {shape}, got {tuple(data.shape)}")


def _dim(fe: EvaluatedValues, name: str) -> int:
    return fe.require_gradients(name).shape[-1]


def cell_matrix(
    fe: EvaluatedValues,
    fetest: EvaluatedValues,
    factor: float = 1.0,
) -> Tensor:
    """Strong divergence: M[i, j] = ∫ v_i ∇·u_j dx."""
    dim = _dim(fe, "cell_matrix")
    fe.require_components(dim, "cell_matrix trial space")
    fetest.require_components(1, "cell_matrix test space")

    dx = factor * fe.JxW
    div_u = _divergence(fe.gradients)  # (n_dofs, Q)
    v = fetest.values[..., 0]  # (t_dofs, Q)
    return torch.einsum("k,ik,jk->ij", dx, v, div_u)


def cell_residual(
    fetest: EvaluatedValues,
    input_gradients: Tensor,
    factor: float = 1.0,
) -> Tensor:
    """Strong divergence residual from ∇u given as (Q, dim, dim)."""
    fetest.require_components(1, "cell_residual test space")
    Q = fetest.n_quadrature_points
    dim = input_gradients.shape[-1] if input_gradients.ndim else 0
    _check_input(input_gradients, (Q, dim, dim), "cell_residual")

    dx = factor * fetest.JxW
    return torch.einsum("k,k,ik->i", dx, _divergence(input_gradients), fetest.values[..., 0])


def cell_residual_weak(
    fetest: EvaluatedValues,
    input_values: Tensor,
    factor: float = 1.0,
) -> Tensor:
    """Weak divergence residual -∫ ∇v · u dx from u given as (Q, dim)."""
    fetest.require_components(1, "cell_residual_weak test space")
    grad_v = fetest.require_gradients("cell_residual_weak")[:, :, 0, :]  # (t, Q, dim)
    _check_input(input_values, (fetest.n_quadrature_points, grad_v.shape[-1]), "cell_residual_weak")

    dx = factor * fetest.JxW
    return -torch.einsum("k,kd,ikd->i", dx, input_values, grad_v)


def gradient_matrix(
    fe: EvaluatedValues,
    fetest: EvaluatedValues,
    factor: float = 1.0,
) -> Tensor:
    """Strong gradient: M[i, j] = ∫ ∇u_j · v_i dx."""
    dim = _dim(fe, "gradient_matrix")
    fe.require_components(1, "gradient_matrix trial space")
    fetest.require_components(dim, "gradient_matrix test space")

    dx = factor * fe.JxW
    grad_u = fe.gradients[:, :, 0, :]  # (n_dofs, Q, dim)
    return torch.einsum("k,ikd,jkd->ij", dx, fetest.values, grad_u)


def gradient_residual(
    fetest: EvaluatedValues,
    input_gradients: Tensor,
    factor: float = 1.0,
) -> Tensor:
    """Strong gradient residual ∫ v · ∇u dx from ∇u given as (Q, dim)."""
    dim = fetest.n_components
    _check_input(input_gradients, (fetest.n_quadrature_points, dim), "gradient_residual")

    dx = factor * fetest.JxW
    return torch.einsum("k,kd,ikd->i", dx, input_gradients, fetest.values)


def gradient_residual_weak(
    fetest: EvaluatedValues,
    input_values: Tensor,
    factor: float = 1.0,
) -> Tensor:
    """Weak gradient residual -∫ (∇·v) u dx from u given as (Q,)."""
    dim = _dim(fetest, "gradient_residual_weak")
    fetest.require_components(dim, "gradient_residual_weak test space")
    _check_input(input_values, (fetest.n_quadrature_points,), "gradient_residual_weak")

    dx = factor * fetest.JxW
    return -torch.einsum("k,k,ik->i", dx, input_values, _divergence(fetest.gradients))


def u_dot_n_matrix(
    fe: EvaluatedValues,
    fetest: EvaluatedValues,
    factor: float = 1.0,
) -> Tensor:
    """Trace of the divergence: M[i, j] = ∫ (u_j · n) v_i ds."""
    normals = fe.require_normals("u_dot_n_matrix")
    fe.require_components(normals.shape[1], "u_dot_n_matrix trial space")
    fetest.require_components(1, "u_dot_n_matrix test space")

    ndx = factor * fe.JxW.unsqueeze(1) * normals  # (Q, dim)
    return torch.einsum("kd,jkd,ik->ij", ndx, fe.values, fetest.values[..., 0])


def u_dot_n_residual(
    fe: EvaluatedValues,
    fetest: EvaluatedValues,
    data: Tensor,
    factor: float = 1.0,
) -> Tensor:
    """∫ (u · n) v ds with u given as (Q, dim) and normals taken from `fe`."""
    normals = fe.require_normals("u_dot_n_residual")
    fetest.require_components(1, "u_dot_n_residual test space")
    _check_input(data, tuple(normals.shape), "u_dot_n_residual")

    ndx = factor * fe.JxW.unsqueeze(1) * normals
    return torch.einsum("kd,kd,ik->i", ndx, data, fetest.values[..., 0])


def u_times_n_residual(
    fetest: EvaluatedValues,
    data: Tensor,
    factor: float = 1.0,
) -> Tensor:
    """Trace of the gradient: ∫ u (v · n) ds with u given as (Q,)."""
    normals = fetest.require_normals("u_times_n_residual")
    fetest.require_components(normals.shape[1], "u_times_n_residual test space")
    _check_input(data, (fetest.n_quadrature_points,), "u_times_n_residual")

    ndx = factor * fetest.JxW.unsqueeze(1) * normals
    return torch.einsum("kd,ikd,k->i", ndx, fetest.values, data)


def _normal_components(fe1: EvaluatedValues, fe2: EvaluatedValues, name: str):
    """u·n on both sides, using the normal of the first cell for both."""
    normals = fe1.require_normals(name)
    fe1.require_components(normals.shape[1], name)
    fe2.require_components(normals.shape[1], name)
    un1 = torch.einsum("jkd,kd->jk", fe1.values, normals)
    un2 = -torch.einsum("jkd,kd->jk", fe2.values, normals)
    return un1, un2


def u_dot_n_interface_matrix(
    fe1: EvaluatedValues,
    fe2: EvaluatedValues,
    fetest1: EvaluatedValues,
    fetest2: EvaluatedValues,
    factor: float = 1.0,
) -> tuple[Tensor, Tensor, Tensor, Tensor]:
    """∫ (u1·n1 + u2·n2) (v1 + v2)/2 ds on an interior face.

    Returns:
        (M11, M12, M21, M22), where Mab couples test side a with trial side b.
    """
    fetest1.require_components(1, "u_dot_n_interface_matrix test space")
    fetest2.require_components(1, "u_dot_n_interface_matrix test space")
    un1, un2 = _normal_components(fe1, fe2, "u_dot_n_interface_matrix")
    dx = 0.5 * factor * fe1.JxW
    v1 = fetest1.values[..., 0]
    v2 = fetest2.values[..., 0]

    M11 = torch.einsum("k,jk,ik->ij", dx, un1, v1)
    M12 = torch.einsum("k,jk,ik->ij", dx, un2, v1)
    M21 = torch.einsum("k,jk,ik->ij", dx, un1, v2)
    M22 = torch.einsum("k,jk,ik->ij", dx, un2, v2)
    return M11, M12, M21, M22


def u_dot_n_jump_matrix(
    fe1: EvaluatedValues,
    fe2: EvaluatedValues,
    factor: float = 1.0,
) -> tuple[Tensor, Tensor, Tensor, Tensor]:
    """∫ (u1·n1 + u2·n2)(v1·n1 + v2·n2) ds on an interior face."""
    un1, un2 = _normal_components(fe1, fe2, "u_dot_n_jump_matrix")
    dx = factor * fe1.JxW

    M11 = torch.einsum("k,jk,ik->ij", dx, un1, un1)
    M12 = torch.einsum("k,jk,ik->ij", dx, un2, un1)
    M21 = torch.einsum("k,jk,ik->ij", dx, un1, un2)
    M22 = torch.einsum("k,jk,ik->ij", dx, un2, un2)
    return M11, M12, M21, M22


def norm(fe: EvaluatedValues, Du: Tensor) -> Tensor:
    """Squared L2 norm of the divergence, ∫ (∇·u)^2 dx, from Du as (Q, dim, dim)."""
    dim = Du.shape[-1] if Du.ndim else 0
    fe.require_components(dim, "norm")
    _check_input(Du, (fe.n_quadrature_points, dim, dim), "norm")
    div = _divergence(Du)
    return (div * div * fe.JxW).sum()


__all__ = [
    "cell_matrix",
    "cell_residual",
    "cell_residual_weak",
    "gradient_matrix",
    "gradient_residual",
    "gradient_residual_weak",
    "norm",
    "u_dot_n_interface_matrix",
    "u_dot_n_jump_matrix",
    "u_dot_n_matrix",
    "u_dot_n_residual",
    "u_times_n_residual",
]
