"""Reference cell topology and face orientation tables."""

from .hypercube import FACE_VERTICES, HypercubeTopology, get_hypercube
from .orientation import (
    STANDARD,
    FaceOrientation,
    n_orientations,
    orient_points,
    orientation_index,
    orientation_states,
)

__all__ = [
    "FACE_VERTICES",
    "FaceOrientation",
    "HypercubeTopology",
    "STANDARD",
    "get_hypercube",
    "n_orientations",
    "orient_points",
    "orientation_index",
    "orientation_states",
]
