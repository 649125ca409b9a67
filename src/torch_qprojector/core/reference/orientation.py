"""Relative orientation of a face shared by two cells.

A face seen from two neighbouring cells may be traversed differently by each
of them. The mismatch is encoded by three flags whose combinations enumerate
the symmetry group of the face shape:

    - vertex faces: the trivial group, one state;
    - line faces: `orientation` only, two states (standard and reversed);
    - quadrilateral faces: `orientation`, `rotation` and `flip`, the eight
      elements of the dihedral group of the square.

The flags are folded into a single combined index

    combined = orientation + 2 * rotation + 4 * flip

and every combined index selects a fixed permutation of the face's own
vertices from the tables below. The default state (orientation=True, no
flip, no rotation) is the identity.
"""

from __future__ import annotations

from typing import NamedTuple

import torch
from torch import Tensor

from ..errors import InvalidIndex

# Face-local vertices are numbered lexicographically, first coordinate
# fastest: vertex v sits at coordinate bit j of v in direction j.
_LINE_PERMUTATIONS = (
    (1, 0),
    (0, 1),
)

_QUAD_PERMUTATIONS = (
    (0, 2, 1, 3),
    (0, 1, 2, 3),
    (2, 3, 0, 1),
    (2, 0, 3, 1),
    (3, 1, 2, 0),
    (3, 2, 1, 0),
    (1, 0, 3, 2),
    (1, 3, 0, 2),
)

VERTEX_PERMUTATIONS = {
    0: ((0,),),
    1: _LINE_PERMUTATIONS,
    2: _QUAD_PERMUTATIONS,
}


class FaceOrientation(NamedTuple):
    """Orientation flags of a face relative to its standard orientation."""

    orientation: bool = True
    flip: bool = False
    rotation: bool = False

    @property
    def combined(self) -> int:
        """Combined index `orientation + 2*rotation + 4*flip`."""
        return int(self.orientation) + 2 * int(self.rotation) + 4 * int(self.flip)

    @classmethod
    def from_combined(cls, combined: int) -> FaceOrientation:
        """Inverse of `combined`."""
        if not 0 <= combined < 8:
            raise InvalidIndex(f"combined orientation {combined} out of range [0, 8)")
        return cls(
            orientation=bool(combined & 1),
            flip=bool(combined & 4),
            rotation=bool(combined & 2),
        )

    def is_standard(self) -> bool:
        return self.orientation and not self.flip and not self.rotation


STANDARD = FaceOrientation()


def n_orientations(face_dim: int) -> int:
    """Number of orientation states of a face of dimension `face_dim`."""
    if face_dim not in VERTEX_PERMUTATIONS:
        raise InvalidIndex(f"face dimension {face_dim} out of range [0, 3)")
    return len(VERTEX_PERMUTATIONS[face_dim])


def orientation_index(state: FaceOrientation, face_dim: int) -> int:
    """Position of `state` within the orientation group of a face.

    The index is what the flat "all faces" layout uses as its inner stride.

    Raises:
        InvalidIndex: if the flags are not meaningful for the face shape,
            e.g. a flip on a line face or anything but the standard state
            on a vertex.
    """
    if face_dim == 0:
        if not state.is_standard():
            raise InvalidIndex(f"vertex faces only admit the standard state, got {state}")
        return 0
    if face_dim == 1:
        if state.flip or state.rotation:
            raise InvalidIndex(f"line faces admit no flip or rotation, got {state}")
        return int(state.orientation)
    if face_dim == 2:
        return state.combined
    raise InvalidIndex(f"face dimension {face_dim} out of range [0, 3)")


def orientation_states(face_dim: int) -> list[FaceOrientation]:
    """All states of a face shape, ordered by `orientation_index`."""
    if face_dim == 0:
        return [STANDARD]
    if face_dim == 1:
        return [FaceOrientation(orientation=False), STANDARD]
    return [FaceOrientation.from_combined(i) for i in range(n_orientations(face_dim))]


def _unit_vertices(face_dim: int, dtype: torch.dtype) -> Tensor:
    """(2^face_dim, face_dim) vertices of the unit face in lexicographic order."""
    v = torch.arange(2 ** face_dim).unsqueeze(1)
    bits = torch.arange(face_dim).unsqueeze(0)
    return ((v >> bits) & 1).to(dtype)


def orient_points(points: Tensor, index: int) -> Tensor:
    """Apply the symmetry with orientation index `index` to face-local points.

    The face's vertices are permuted by the table entry and each point is
    re-expressed through the permuted vertices. All symmetries of the unit
    square are affine, so this is p -> V'[0] + sum_j p_j (V'[2^j] - V'[0]).

    Args:
        points (Tensor): (Q, face_dim) face-local coordinates.
        index (int): orientation index as returned by `orientation_index`.

    Returns:
        (Q, face_dim) transformed coordinates, in the same point order.
    """
    face_dim = points.shape[1]
    table = VERTEX_PERMUTATIONS.get(face_dim)
    if table is None:
        raise InvalidIndex(f"face dimension {face_dim} out of range [0, 3)")
    if not 0 <= index < len(table):
        raise InvalidIndex(f"orientation index {index} out of range [0, {len(table)})")
    if face_dim == 0:
        return points

    vertices = _unit_vertices(face_dim, points.dtype)[list(table[index])]
    origin = vertices[0]
    axes = torch.stack([vertices[2 ** j] - origin for j in range(face_dim)])
    return origin + points @ axes


__all__ = [
    "FaceOrientation",
    "STANDARD",
    "VERTEX_PERMUTATIONS",
    "n_orientations",
    "orient_points",
    "orientation_index",
    "orientation_states",
]
