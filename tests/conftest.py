"""
Fixtures shared by the tests in this directory and its subdirectories.
"""

import pytest

from torch_qprojector.core import get_hypercube, rules, tensor_product

dim_list = [1, 2, 3]
ids = ["1D", "2D", "3D"]

rule_names = ["none", "midpoint", "trapezoid", "simpson", "milne"]


@pytest.fixture(params=dim_list, ids=ids)
def topology(request: pytest.FixtureRequest):
    return get_hypercube(request.param)


@pytest.fixture(params=rule_names)
def rule_1d(request: pytest.FixtureRequest):
    return rules.standard_rule(request.param)


@pytest.fixture
def face_rule(topology, rule_1d):
    """Tensor-product face rule matching the topology's face dimension."""
    return tensor_product(rule_1d, topology.face_dim)


@pytest.fixture
def gauss2_face_rule(topology):
    """Face rule without any point fixed by a face symmetry."""
    return tensor_product(rules.gauss(2), topology.face_dim)


def _as_point_set(points, digits: int = 12) -> list[tuple[float, ...]]:
    return sorted(tuple(round(c, digits) + 0.0 for c in p) for p in points.tolist())


@pytest.fixture
def as_point_set():
    """Sorted rounded point tuples, for order-insensitive comparison."""
    return _as_point_set
