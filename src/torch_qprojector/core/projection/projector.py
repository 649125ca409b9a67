"""Projection of lower-dimensional quadrature rules into a reference cell.

Maps a rule defined on the unit interval/square into the coordinates of the
reference hypercube: onto a segment, onto one face or subface, onto every
face in every orientation, onto every subface, or onto the children of the
cell.

The "all faces" and "all subfaces" operations return a single flat rule
meant to be built once and cached by the caller for a whole mesh traversal.
Blocks are retrieved in O(1) through `DataSetDescriptor`, which mirrors the
layouts documented here:

    all faces:     (face, orientation, point)
    all subfaces:  (subface, face, orientation, point)
    all children:  (child, point)

Within a block the point order is the input order; the orientation acts on
coordinates, so block k of orientation o is the image of input point k.

All functions are pure. Inputs are validated before any output is built.
"""
# pylint: disable=invalid-name

from __future__ import annotations

import logging

import torch
from torch import Tensor

from ..errors import InvalidRule, check_index
from ..quadrature import QuadratureRule, concatenate
from ..reference.hypercube import HypercubeTopology
from ..reference.orientation import (
    STANDARD,
    FaceOrientation,
    orient_points,
    orientation_index,
)

logger = logging.getLogger(__name__)


def _check_rule_dim(rule: QuadratureRule, expected: int, operation: str) -> None:
    if rule.dim != expected:
        raise InvalidRule(
            f"{operation} expects a {expected}D rule, got a {rule.dim}D rule"
        )


def _as_point(p, dim: int, dtype: torch.dtype) -> Tensor:
    p = torch.as_tensor(p, dtype=dtype)
    if p.shape != (dim,):
        raise InvalidRule(f"end point must have shape ({dim},), got {tuple(p.shape)}")
    return p


def _bit_shift(index: int, dim: int, dtype: torch.dtype) -> Tensor:
    """(dim,) vector with entry j equal to 0.5 * bit j of `index`."""
    return torch.tensor([0.5 * ((index >> j) & 1) for j in range(dim)], dtype=dtype)


def _embed(topology: HypercubeTopology, face: int, local: Tensor) -> Tensor:
    """Map face-local points (Q, dim-1) to cell points (Q, dim)."""
    origin, axes = topology.face_frame(face, local.dtype)
    return origin + local @ axes


def _face_block(
    topology: HypercubeTopology,
    rule: QuadratureRule,
    face: int,
    index: int,
    subface: int | None = None,
) -> QuadratureRule:
    """One face (or subface) block for orientation index `index`.

    The orientation acts on face-local points first; the subface map is then
    applied in the face's standard frame, so subface numbering is the one
    seen from the cell and does not depend on the orientation. Weights are
    carried over unchanged for faces and subfaces alike; a caller integrating
    over a physical subface folds its measure into JxW.
    """
    local = orient_points(rule.points, index)
    if subface is not None:
        local = 0.5 * local + _bit_shift(subface, topology.face_dim, local.dtype)
    weights = rule.weights * topology.face_measure(face)
    return QuadratureRule._wrap(_embed(topology, face, local), weights)


def project_to_line(
    topology: HypercubeTopology,
    rule: QuadratureRule,
    p1,
    p2,
) -> QuadratureRule:
    """Project a 1D rule onto the segment from `p1` to `p2`.

    Points become p1 + x_k (p2 - p1) and weights w_k |p2 - p1|, so the
    weights sum to the segment length times the input weight sum. A
    degenerate segment (p1 == p2) gives zero weights and is not an error.

    Args:
        topology (HypercubeTopology): cell providing the ambient dimension.
        rule (QuadratureRule): 1D rule on [0, 1].
        p1, p2: end points with `topology.dim` coordinates.

    Returns:
        QuadratureRule of dimension `topology.dim`.

    Raises:
        InvalidRule: if `rule` is not 1D or an end point has the wrong size.
    """
    _check_rule_dim(rule, 1, "project_to_line")
    dtype = rule.points.dtype
    p1 = _as_point(p1, topology.dim, dtype)
    p2 = _as_point(p2, topology.dim, dtype)

    direction = p2 - p1
    length = torch.linalg.vector_norm(direction)
    points = p1 + rule.points * direction
    weights = rule.weights * length

    logger.debug("projected %d points onto a line of length %g", len(rule), float(length))
    return QuadratureRule._wrap(points, weights)


def project_to_oriented_face(
    topology: HypercubeTopology,
    rule: QuadratureRule,
    face: int,
    orientation: FaceOrientation = STANDARD,
) -> QuadratureRule:
    """Project a face rule onto `face` as seen under `orientation`.

    Raises:
        InvalidIndex: for an out-of-range face or an orientation state the
            face shape does not have.
        InvalidRule: if `rule` is not of dimension `topology.dim - 1`.
    """
    check_index("face", face, topology.n_faces)
    _check_rule_dim(rule, topology.face_dim, "project_to_face")
    index = orientation_index(orientation, topology.face_dim)
    return _face_block(topology, rule, face, index)


def project_to_face(
    topology: HypercubeTopology,
    rule: QuadratureRule,
    face: int,
) -> QuadratureRule:
    """Project a `(dim-1)`-dimensional rule onto `face`.

    Weights are scaled by the face measure, which is 1 on the unit
    hypercube, so they come out unchanged.
    """
    return project_to_oriented_face(topology, rule, face, STANDARD)


def project_to_oriented_subface(
    topology: HypercubeTopology,
    rule: QuadratureRule,
    face: int,
    subface: int,
    orientation: FaceOrientation = STANDARD,
) -> QuadratureRule:
    """Project a face rule onto child `subface` of `face` under `orientation`.

    Subface s of a face covers the half (line face) or quarter (quad face)
    whose face-local offset in direction j is bit j of s. Weights are
    unchanged, as for `project_to_oriented_face`.
    """
    check_index("face", face, topology.n_faces)
    check_index("subface", subface, topology.n_children_per_face)
    _check_rule_dim(rule, topology.face_dim, "project_to_subface")
    index = orientation_index(orientation, topology.face_dim)
    return _face_block(topology, rule, face, index, subface)


def project_to_subface(
    topology: HypercubeTopology,
    rule: QuadratureRule,
    face: int,
    subface: int,
) -> QuadratureRule:
    """Project a `(dim-1)`-dimensional rule onto child `subface` of `face`."""
    return project_to_oriented_subface(topology, rule, face, subface, STANDARD)


def project_to_all_faces(
    topology: HypercubeTopology,
    rule: QuadratureRule,
) -> QuadratureRule:
    """Project a face rule onto every face in every orientation state.

    The block of face f and orientation index o starts at
    (f * n_orientations + o) * len(rule).

    Returns:
        QuadratureRule with n_faces * n_orientations * len(rule) points.
    """
    _check_rule_dim(rule, topology.face_dim, "project_to_all_faces")
    blocks = [
        _face_block(topology, rule, face, o)
        for face in range(topology.n_faces)
        for o in range(topology.n_face_orientations(face))
    ]
    result = concatenate(blocks, topology.dim)
    logger.debug(
        "projected %d points onto all faces of %s: %d points",
        len(rule), topology, len(result),
    )
    return result


def project_to_all_subfaces(
    topology: HypercubeTopology,
    rule: QuadratureRule,
) -> QuadratureRule:
    """Project a face rule onto every subface of every face, all orientations.

    Subface is the outermost stride: the block of subface s, face f and
    orientation index o starts at
    ((s * n_faces + f) * n_orientations + o) * len(rule).
    """
    _check_rule_dim(rule, topology.face_dim, "project_to_all_subfaces")
    blocks = [
        _face_block(topology, rule, face, o, subface)
        for subface in range(topology.n_children_per_face)
        for face in range(topology.n_faces)
        for o in range(topology.n_face_orientations(face))
    ]
    result = concatenate(blocks, topology.dim)
    logger.debug(
        "projected %d points onto all subfaces of %s: %d points",
        len(rule), topology, len(result),
    )
    return result


def project_to_child(
    topology: HypercubeTopology,
    rule: QuadratureRule,
    child: int,
) -> QuadratureRule:
    """Project a cell rule onto child `child` of the isotropically refined cell.

    Points are scaled by 1/2 and shifted by 1/2 in every direction j where
    bit j of `child` is set; weights are scaled by 1 / 2^dim.
    """
    check_index("child", child, topology.n_children)
    _check_rule_dim(rule, topology.dim, "project_to_child")
    points = 0.5 * rule.points + _bit_shift(child, topology.dim, rule.points.dtype)
    return QuadratureRule._wrap(points, rule.weights / topology.n_children)


def project_to_all_children(
    topology: HypercubeTopology,
    rule: QuadratureRule,
) -> QuadratureRule:
    """Concatenate `project_to_child` over all children, child-major."""
    _check_rule_dim(rule, topology.dim, "project_to_all_children")
    return concatenate(
        [project_to_child(topology, rule, c) for c in range(topology.n_children)],
        topology.dim,
    )


__all__ = [
    "project_to_all_children",
    "project_to_all_faces",
    "project_to_all_subfaces",
    "project_to_child",
    "project_to_face",
    "project_to_line",
    "project_to_oriented_face",
    "project_to_oriented_subface",
    "project_to_subface",
]
