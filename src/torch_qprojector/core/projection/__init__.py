"""Projection of quadrature rules onto lines, faces, subfaces and children."""

from .descriptor import DataSetDescriptor
from .projector import (
    project_to_all_children,
    project_to_all_faces,
    project_to_all_subfaces,
    project_to_child,
    project_to_face,
    project_to_line,
    project_to_oriented_face,
    project_to_oriented_subface,
    project_to_subface,
)

__all__ = [
    "DataSetDescriptor",
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
