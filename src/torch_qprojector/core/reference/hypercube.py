"""Combinatorial description of the reference hypercube in 1, 2 and 3 dims.

Reference cell [0, 1]^d with 2^d vertices. Vertex v sits at coordinate
bit i of v in direction i:

    d=2:  2 ---- 3        d=3: vertices 0..3 at z=0 as in d=2,
          |      |             vertices 4..7 the same at z=1.
          0 ---- 1

Faces are numbered by direction: face 2k lies at x_k = 0, face 2k+1 at
x_k = 1. Each face lists the cell vertices that correspond to its own
face-local vertices 0, 1, 2, 3 (lexicographic, first coordinate fastest) in
the standard orientation. A face-local point xi is embedded as

    x = X[f0] + sum_j xi_j (X[f_{2^j}] - X[f0])

which is exact since every face map of the hypercube is affine.

The tables are constants of the cell shape. A topology object is built once
per dimension and shared read-only.
"""
# pylint: disable=invalid-name

from __future__ import annotations

from functools import lru_cache

import torch
from torch import Tensor

from ..errors import InvalidIndex, check_index
from .orientation import n_orientations

FACE_VERTICES = {
    1: ((0,), (1,)),
    2: ((0, 2), (1, 3), (0, 1), (2, 3)),
    3: (
        (0, 2, 4, 6),
        (1, 3, 5, 7),
        (0, 4, 1, 5),
        (2, 6, 3, 7),
        (0, 1, 2, 3),
        (4, 5, 6, 7),
    ),
}


class HypercubeTopology:
    """Reference hypercube of dimension 1, 2 or 3.

    Args:
        dim (int): cell dimension.

    Raises:
        InvalidIndex: if `dim` is not in {1, 2, 3}.
    """

    def __init__(self, dim: int):
        if dim not in FACE_VERTICES:
            raise InvalidIndex(f"hypercube dimension {dim} not in {{1, 2, 3}}")
        self._dim = dim

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def face_dim(self) -> int:
        """Reference dimension of each face, `dim - 1`."""
        return self._dim - 1

    @property
    def n_vertices(self) -> int:
        return 2 ** self._dim

    @property
    def n_faces(self) -> int:
        return 2 * self._dim

    @property
    def n_children(self) -> int:
        """Children of the cell under isotropic refinement."""
        return 2 ** self._dim

    @property
    def n_children_per_face(self) -> int:
        """Subfaces of each face under isotropic refinement."""
        return 2 ** self.face_dim

    def n_face_orientations(self, face: int) -> int:
        """Orientation states of `face`: 1, 2 or 8 for vertex/line/quad."""
        check_index("face", face, self.n_faces)
        return n_orientations(self.face_dim)

    @property
    def n_orientations(self) -> int:
        """Orientation states shared by every face of the hypercube."""
        return n_orientations(self.face_dim)

    def vertices(self, dtype: torch.dtype = torch.float64) -> Tensor:
        """(2^dim, dim) reference coordinates of the cell vertices."""
        v = torch.arange(self.n_vertices).unsqueeze(1)
        bits = torch.arange(self._dim).unsqueeze(0)
        return ((v >> bits) & 1).to(dtype)

    def face_vertices(self, face: int) -> tuple[int, ...]:
        """Cell vertex indices of `face`, in face-local order."""
        check_index("face", face, self.n_faces)
        return FACE_VERTICES[self._dim][face]

    def face_frame(self, face: int, dtype: torch.dtype = torch.float64) -> tuple[Tensor, Tensor]:
        """Affine embedding of `face` into cell coordinates.

        Returns:
            origin (dim,): image of the face-local origin.
            axes (face_dim, dim): image of each face-local unit vector.
        """
        X = self.vertices(dtype)[list(self.face_vertices(face))]
        origin = X[0]
        if self.face_dim == 0:
            return origin, torch.zeros(0, self._dim, dtype=dtype)
        axes = torch.stack([X[2 ** j] - origin for j in range(self.face_dim)])
        return origin, axes

    def face_normal(self, face: int, dtype: torch.dtype = torch.float64) -> Tensor:
        """Outward unit normal of `face` in reference coordinates."""
        check_index("face", face, self.n_faces)
        n = torch.zeros(self._dim, dtype=dtype)
        n[face // 2] = 1.0 if face % 2 else -1.0
        return n

    def face_measure(self, face: int) -> float:
        """Measure of `face`; every face of the unit hypercube has measure 1."""
        check_index("face", face, self.n_faces)
        return 1.0

    def subface_measure(self, face: int, subface: int) -> float:
        """Measure of one isotropic subface of `face`."""
        check_index("subface", subface, self.n_children_per_face)
        return self.face_measure(face) / self.n_children_per_face

    def __eq__(self, other) -> bool:
        return isinstance(other, HypercubeTopology) and other._dim == self._dim

    def __hash__(self) -> int:
        return hash(("hypercube", self._dim))

    def __repr__(self) -> str:
        return f"HypercubeTopology(dim={self._dim})"


@lru_cache(maxsize=None)
def get_hypercube(dim: int) -> HypercubeTopology:
    """Shared topology instance for dimension `dim`."""
    return HypercubeTopology(dim)


__all__ = [
    "FACE_VERTICES",
    "HypercubeTopology",
    "get_hypercube",
]
