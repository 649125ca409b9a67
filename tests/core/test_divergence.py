import pytest
import torch

from torch_qprojector.core import (
    DataSetDescriptor,
    InvalidRule,
    get_hypercube,
    project_to_all_faces,
    rules,
    tensor_product,
)
from torch_qprojector.core.integrators import EvaluatedValues, divergence, jxw_from_rule

f64 = torch.float64


def _scalar(JxW, values, gradients=None, normals=None):
    values = torch.as_tensor(values, dtype=f64).unsqueeze(-1)
    if gradients is not None:
        gradients = torch.as_tensor(gradients, dtype=f64).unsqueeze(2)
    return EvaluatedValues(torch.as_tensor(JxW, dtype=f64), values, gradients, normals)


def test_shape_validation():
    JxW = torch.ones(2, dtype=f64)
    with pytest.raises(InvalidRule):
        EvaluatedValues(JxW, torch.ones(1, 3, 1, dtype=f64))
    with pytest.raises(InvalidRule):
        EvaluatedValues(JxW, torch.ones(1, 2, 1, dtype=f64), torch.ones(1, 2, 2, dtype=f64))
    with pytest.raises(InvalidRule):
        EvaluatedValues(JxW, torch.ones(1, 2, 1, dtype=f64), normals=torch.ones(3, 2, dtype=f64))


def test_cell_matrix_single_point():
    trial = EvaluatedValues(
        torch.tensor([2.0], dtype=f64),
        torch.zeros(1, 1, 2, dtype=f64),
        torch.tensor([[[[1.0, 5.0], [7.0, 3.0]]]], dtype=f64),
    )
    test = _scalar([2.0], [[0.5]])
    M = divergence.cell_matrix(trial, test, factor=0.5)
    torch.testing.assert_close(M, torch.tensor([[0.5 * 2.0 * 0.5 * 4.0]], dtype=f64))


def test_cell_matrix_component_checks():
    scalar = _scalar([1.0], [[1.0]], [[[1.0, 0.0]]])
    with pytest.raises(InvalidRule):
        divergence.cell_matrix(scalar, scalar)


def test_cell_residual_matches_matrix():
    torch.manual_seed(0)
    Q, n, t, dim = 4, 3, 2, 2
    JxW = torch.rand(Q, dtype=f64)
    trial = EvaluatedValues(JxW, torch.rand(n, Q, dim, dtype=f64), torch.rand(n, Q, dim, dim, dtype=f64))
    test = EvaluatedValues(JxW, torch.rand(t, Q, 1, dtype=f64))
    coeffs = torch.rand(n, dtype=f64)

    M = divergence.cell_matrix(trial, test)
    Du = torch.einsum("j,jkcd->kcd", coeffs, trial.gradients)
    torch.testing.assert_close(divergence.cell_residual(test, Du), M @ coeffs)


def test_gradient_residual_matches_matrix():
    torch.manual_seed(1)
    Q, n, t, dim = 5, 3, 4, 3
    JxW = torch.rand(Q, dtype=f64)
    trial = EvaluatedValues(JxW, torch.rand(n, Q, 1, dtype=f64), torch.rand(n, Q, 1, dim, dtype=f64))
    test = EvaluatedValues(JxW, torch.rand(t, Q, dim, dtype=f64))
    coeffs = torch.rand(n, dtype=f64)

    M = divergence.gradient_matrix(trial, test)
    Du = torch.einsum("j,jkd->kd", coeffs, trial.gradients[:, :, 0, :])
    torch.testing.assert_close(divergence.gradient_residual(test, Du), M @ coeffs)


def test_weak_forms_are_integration_by_parts_duals():
    torch.manual_seed(2)
    Q, dim = 3, 2
    JxW = torch.rand(Q, dtype=f64)
    grads = torch.rand(2, Q, 1, dim, dtype=f64)
    scalar = EvaluatedValues(JxW, torch.rand(2, Q, 1, dtype=f64), grads)
    u = torch.rand(Q, dim, dtype=f64)
    expected = -torch.einsum("k,kd,ikd->i", JxW, u, grads[:, :, 0, :])
    torch.testing.assert_close(divergence.cell_residual_weak(scalar, u), expected)

    vec_grads = torch.rand(2, Q, dim, dim, dtype=f64)
    vector = EvaluatedValues(JxW, torch.rand(2, Q, dim, dtype=f64), vec_grads)
    p = torch.rand(Q, dtype=f64)
    div_v = vec_grads.diagonal(dim1=-2, dim2=-1).sum(-1)
    torch.testing.assert_close(
        divergence.gradient_residual_weak(vector, p), -(JxW * p * div_v).sum(1)
    )


def test_residual_input_shapes():
    test = _scalar([1.0, 1.0], [[1.0, 1.0]], [[[0.0, 1.0], [1.0, 0.0]]])
    with pytest.raises(InvalidRule):
        divergence.cell_residual(test, torch.zeros(3, 2, 2, dtype=f64))
    with pytest.raises(InvalidRule):
        divergence.cell_residual_weak(test, torch.zeros(2, 3, dtype=f64))


def test_u_dot_n_on_projected_face():
    # constant field u = (1, 2) against a constant test function on each
    # face of the unit square: ∫ u·n ds sums to zero over the boundary
    square = get_hypercube(2)
    face_rule = rules.gauss(2)
    m = face_rule.size()
    flat = project_to_all_faces(square, face_rule)
    u = torch.tensor([1.0, 2.0], dtype=f64)

    total = 0.0
    for face in range(square.n_faces):
        block = flat.block(DataSetDescriptor.face(square, face, n_points=m), m)
        normals = square.face_normal(face).expand(m, 2)
        JxW = jxw_from_rule(block, square.face_measure(face))
        test = EvaluatedValues(JxW, torch.ones(1, m, 1, dtype=f64), normals=normals)
        trial = EvaluatedValues(JxW, u.expand(1, m, 2).clone(), normals=normals)

        M = divergence.u_dot_n_matrix(trial, test)
        r = divergence.u_dot_n_residual(trial, test, u.expand(m, 2))
        torch.testing.assert_close(M[:, 0], r)
        assert r.item() == pytest.approx(float(u @ square.face_normal(face)))
        total += r.item()
    assert total == pytest.approx(0.0)


def test_u_times_n_residual():
    normals = torch.tensor([[0.0, 1.0]], dtype=f64)
    test = EvaluatedValues(
        torch.tensor([0.5], dtype=f64),
        torch.tensor([[[3.0, 4.0]]], dtype=f64),
        normals=normals,
    )
    r = divergence.u_times_n_residual(test, torch.tensor([2.0], dtype=f64), factor=2.0)
    torch.testing.assert_close(r, torch.tensor([2.0 * 0.5 * 4.0 * 2.0], dtype=f64))


def test_interface_matrices():
    normals = torch.tensor([[1.0, 0.0]], dtype=f64)
    JxW = torch.tensor([1.0], dtype=f64)
    fe1 = EvaluatedValues(JxW, torch.tensor([[[2.0, 0.0]]], dtype=f64), normals=normals)
    fe2 = EvaluatedValues(JxW, torch.tensor([[[3.0, 0.0]]], dtype=f64))
    t1 = EvaluatedValues(JxW, torch.tensor([[[1.0]]], dtype=f64))
    t2 = EvaluatedValues(JxW, torch.tensor([[[4.0]]], dtype=f64))

    M11, M12, M21, M22 = divergence.u_dot_n_interface_matrix(fe1, fe2, t1, t2)
    assert M11.item() == pytest.approx(0.5 * 2.0 * 1.0)
    assert M12.item() == pytest.approx(0.5 * -3.0 * 1.0)
    assert M21.item() == pytest.approx(0.5 * 2.0 * 4.0)
    assert M22.item() == pytest.approx(0.5 * -3.0 * 4.0)

    J11, J12, J21, J22 = divergence.u_dot_n_jump_matrix(fe1, fe2)
    assert J11.item() == pytest.approx(4.0)
    assert J12.item() == pytest.approx(-6.0)
    assert J21.item() == pytest.approx(-6.0)
    assert J22.item() == pytest.approx(9.0)


def test_face_terms_need_normals():
    fe = EvaluatedValues(torch.ones(1, dtype=f64), torch.ones(1, 1, 2, dtype=f64))
    test = EvaluatedValues(torch.ones(1, dtype=f64), torch.ones(1, 1, 1, dtype=f64))
    with pytest.raises(InvalidRule):
        divergence.u_dot_n_matrix(fe, test)


def test_norm_on_projected_cell_rule():
    # u = (x, y) has divergence 2 everywhere; ∫ 4 dx over the unit square
    q = tensor_product(rules.gauss(2), 2)
    fe = EvaluatedValues(jxw_from_rule(q), torch.zeros(1, q.size(), 2, dtype=f64))
    Du = torch.eye(2, dtype=f64).expand(q.size(), 2, 2)
    assert divergence.norm(fe, Du).item() == pytest.approx(4.0)
