""" Core modules """

from . import integrators
from .errors import InvalidIndex, InvalidRule, QProjectorError
from .projection import (
    DataSetDescriptor,
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
from .quadrature import QuadratureRule, concatenate, tensor_product
from .reference import FaceOrientation, HypercubeTopology, get_hypercube

__all__ = [
    "DataSetDescriptor",
    "FaceOrientation",
    "HypercubeTopology",
    "InvalidIndex",
    "InvalidRule",
    "QProjectorError",
    "QuadratureRule",
    "concatenate",
    "get_hypercube",
    "integrators",
    "project_to_all_children",
    "project_to_all_faces",
    "project_to_all_subfaces",
    "project_to_child",
    "project_to_face",
    "project_to_line",
    "project_to_oriented_face",
    "project_to_oriented_subface",
    "project_to_subface",
    "tensor_product",
]
