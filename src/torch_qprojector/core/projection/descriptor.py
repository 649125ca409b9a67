"""Closed-form offsets into flat projected quadrature rules.

`DataSetDescriptor` answers "where does the block for this face, orientation
(and subface, or child) start?" without touching the quadrature data. The
arithmetic mirrors the layouts produced in `projector.py`:

    face:     (f * n_orientations + o) * n_points
    subface:  ((s * n_faces + f) * n_orientations + o) * n_points
    child:    c * n_points

where o is the orientation index of the state within the face's symmetry
group (see `reference/orientation.py`). For every valid selector the range
[offset, offset + n_points) is disjoint from every other selector's range,
and together they tile the flat rule exactly.
"""

from __future__ import annotations

from ..errors import InvalidIndex, check_index
from ..reference.hypercube import HypercubeTopology
from ..reference.orientation import STANDARD, FaceOrientation, orientation_index


def _resolve_orientation(
    orientation: FaceOrientation | None,
    face_orientation: bool | None,
    face_flip: bool | None,
    face_rotation: bool | None,
) -> FaceOrientation:
    flags = (face_orientation, face_flip, face_rotation)
    if orientation is not None:
        if not isinstance(orientation, FaceOrientation):
            raise InvalidIndex(
                f"orientation must be a FaceOrientation, got {type(orientation).__name__}; "
                "pass bare flags as face_orientation=..."
            )
        if any(f is not None for f in flags):
            raise InvalidIndex("pass either an orientation or separate flags, not both")
        return orientation
    if all(f is None for f in flags):
        return STANDARD
    return FaceOrientation(
        orientation=True if face_orientation is None else bool(face_orientation),
        flip=bool(face_flip),
        rotation=bool(face_rotation),
    )


def _check_n_points(n_points: int | None) -> None:
    if n_points is None:
        raise InvalidIndex("n_points is required")
    if n_points < 0:
        raise InvalidIndex(f"n_points={n_points} must be non-negative")


class DataSetDescriptor:
    """Offsets of face, subface and child blocks in flat projected rules.

    All methods are static and allocation-free; the class only groups them
    under one name, the way callers refer to the addressing scheme.
    """

    @staticmethod
    def cell() -> int:
        """Offset of a plain cell rule: always 0."""
        return 0

    @staticmethod
    def offset(
        topology: HypercubeTopology,
        face: int,
        orientation: FaceOrientation,
        subface: int | None,
        n_points: int,
    ) -> int:
        """Generic offset for `(face, orientation[, subface])`.

        Args:
            topology (HypercubeTopology): reference cell.
            face (int): face index.
            orientation (FaceOrientation): orientation state of the face.
            subface (int | None): subface index, or None for a whole face.
            n_points (int): points per face block.

        Raises:
            InvalidIndex: for any index outside its range; never clamped.
        """
        check_index("face", face, topology.n_faces)
        _check_n_points(n_points)
        n_orient = topology.n_face_orientations(face)
        o = orientation_index(orientation, topology.face_dim)

        block = face * n_orient + o
        if subface is not None:
            check_index("subface", subface, topology.n_children_per_face)
            block += subface * topology.n_faces * n_orient
        return block * n_points

    @staticmethod
    def face(
        topology: HypercubeTopology,
        face: int,
        orientation: FaceOrientation | None = None,
        n_points: int | None = None,
        *,
        face_orientation: bool | None = None,
        face_flip: bool | None = None,
        face_rotation: bool | None = None,
    ) -> int:
        """Offset of the block for `face` in `project_to_all_faces` output.

        The orientation is given either as a `FaceOrientation` or through
        the `face_orientation`, `face_flip` and `face_rotation` keywords.
        """
        state = _resolve_orientation(orientation, face_orientation, face_flip, face_rotation)
        return DataSetDescriptor.offset(topology, face, state, None, n_points)

    @staticmethod
    def subface(
        topology: HypercubeTopology,
        face: int,
        subface: int,
        orientation: FaceOrientation | None = None,
        n_points: int | None = None,
        *,
        face_orientation: bool | None = None,
        face_flip: bool | None = None,
        face_rotation: bool | None = None,
    ) -> int:
        """Offset of the block for `subface` of `face` in
        `project_to_all_subfaces` output."""
        state = _resolve_orientation(orientation, face_orientation, face_flip, face_rotation)
        return DataSetDescriptor.offset(topology, face, state, subface, n_points)

    @staticmethod
    def child(topology: HypercubeTopology, child: int, n_points: int) -> int:
        """Offset of the block for `child` in `project_to_all_children` output."""
        check_index("child", child, topology.n_children)
        _check_n_points(n_points)
        return child * n_points


__all__ = ["DataSetDescriptor"]
