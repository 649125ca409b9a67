import pytest
import torch

from torch_qprojector.core import InvalidRule, rules


@pytest.mark.parametrize("name", ["midpoint", "trapezoid", "simpson", "milne", "weddle"])
def test_weights_sum_to_one(name):
    q = rules.standard_rule(name)
    assert q.total_weight() == pytest.approx(1.0, abs=1e-15)


def test_tabulated_rules():
    assert rules.midpoint().points.tolist() == [[0.5]]
    assert rules.trapezoid().points[:, 0].tolist() == [0.0, 1.0]
    assert rules.simpson().points[:, 0].tolist() == [0.0, 0.5, 1.0]
    assert rules.milne().points[:, 0].tolist() == [0.0, 0.25, 0.5, 0.75, 1.0]
    torch.testing.assert_close(
        rules.milne().weights,
        torch.tensor([7.0, 32.0, 12.0, 32.0, 7.0], dtype=torch.float64) / 90.0,
    )


@pytest.mark.parametrize(
    "name, degree",
    [("midpoint", 1), ("trapezoid", 1), ("simpson", 3), ("milne", 5), ("weddle", 7)],
)
def test_degree_of_exactness(name, degree):
    q = rules.standard_rule(name)
    x = q.points[:, 0]
    for p in range(degree + 1):
        assert (q.weights * x ** p).sum().item() == pytest.approx(1.0 / (p + 1))


@pytest.mark.parametrize("n", [1, 2, 3, 5, 8])
def test_gauss_exactness(n):
    q = rules.gauss(n)
    assert q.size() == n
    x = q.points[:, 0]
    for p in range(2 * n):
        assert (q.weights * x ** p).sum().item() == pytest.approx(1.0 / (p + 1), rel=1e-12)


def test_gauss_is_symmetric():
    q = rules.gauss(4)
    x = q.points[:, 0]
    torch.testing.assert_close(x + x.flip(0), torch.ones(4, dtype=torch.float64))
    torch.testing.assert_close(q.weights, q.weights.flip(0))


def test_gauss_two_points():
    q = rules.gauss(2)
    a = 0.5 - (1.0 / 12.0) ** 0.5
    torch.testing.assert_close(
        q.points[:, 0], torch.tensor([a, 1.0 - a], dtype=torch.float64)
    )
    torch.testing.assert_close(q.weights, torch.tensor([0.5, 0.5], dtype=torch.float64))


def test_gauss_zero_points():
    assert rules.gauss(0).size() == 0
    with pytest.raises(InvalidRule):
        rules.gauss(-1)


def test_standard_rule_lookup():
    assert rules.standard_rule("none").size() == 0
    assert rules.standard_rule(" Simpson ").size() == 3
    assert rules.standard_rule("gauss", 3).size() == 3
    with pytest.raises(InvalidRule):
        rules.standard_rule("gauss")
    with pytest.raises(InvalidRule):
        rules.standard_rule("romberg")
