"""Reference trace of the projection layer.

For each configured 1D base rule the trace prints, per cell dimension:

    line   projection onto the segment (1, 3, 0) -> (7, -5, 10), truncated
           to the cell dimension, followed by the summed weight;
    face   projection onto every face, then the same face projection once
           per nominal subface of each face;
    all    the flat all-faces rule, sliced with `DataSetDescriptor` at
           orientation false and true for every face.

Two implementations agree when their traces are identical line by line.
"""

from __future__ import annotations

import logging
from typing import IO

from ..core.projection import (
    DataSetDescriptor,
    project_to_all_faces,
    project_to_face,
    project_to_line,
)
from ..core.quadrature import QuadratureRule, tensor_product
from ..core.reference import get_hypercube
from .config import TraceConfig, build_rule
from .trace import TraceLog

logger = logging.getLogger(__name__)

LINE_START = (1.0, 3.0, 0.0)
LINE_END = (7.0, -5.0, 10.0)


def check_line(log: TraceLog, rule: QuadratureRule, dim: int) -> None:
    topology = get_hypercube(dim)
    q = project_to_line(topology, rule, LINE_START[:dim], LINE_END[:dim])
    for k in range(q.size()):
        log.write(f"{k}\t{log.point(q.point(k))}")
    log.write(f"length: {log.number(q.total_weight())}")


def check_face(log: TraceLog, rule: QuadratureRule, dim: int) -> None:
    log.write(f"Checking dim {dim} 1d-points {rule.size()}")
    topology = get_hypercube(dim)
    subquadrature = tensor_product(rule, dim - 1)

    for face in range(topology.n_faces):
        log.write(f"Face {face}")
        q = project_to_face(topology, subquadrature, face)
        for k in range(q.size()):
            log.write(log.point(q.point(k)))

    for face in range(topology.n_faces):
        for subface in range(topology.n_children_per_face):
            log.write(f"Face {face} subface {subface}")
            q = project_to_face(topology, subquadrature, face)
            for k in range(q.size()):
                log.write(log.point(q.point(k)))


def check_faces(log: TraceLog, rule: QuadratureRule, dim: int) -> None:
    log.write(f"Checking dim {dim} 1d-points {rule.size()}")
    topology = get_hypercube(dim)
    subquadrature = tensor_product(rule, dim - 1)
    nqs = subquadrature.size()

    faces = project_to_all_faces(topology, subquadrature)

    for face in range(topology.n_faces):
        for face_orientation in (False, True):
            log.write(f"Face {face} orientation {str(face_orientation).lower()}")
            offset = DataSetDescriptor.face(
                topology, face, n_points=nqs, face_orientation=face_orientation
            )
            for k in range(nqs):
                log.write(log.point(faces.point(offset + k)))


def check(log: TraceLog, rule: QuadratureRule, config: TraceConfig) -> None:
    log.write()
    with log.push("line"):
        for dim in config.dimensions:
            check_line(log, rule, dim)
    with log.push("face"):
        for dim in config.dimensions:
            check_face(log, rule, dim)
    with log.push("all"):
        for dim in config.all_face_dimensions:
            check_faces(log, rule, dim)


def run_trace(config: TraceConfig, stream: IO[str] | None = None) -> None:
    """Write the full trace for every rule in `config.rules` to `stream`."""
    log = TraceLog(stream, precision=config.precision)
    for name in config.rules:
        rule = build_rule(name).to(config.torch_dtype)
        logger.info("tracing rule %s with %d points", name, rule.size())
        check(log, rule, config)


__all__ = [
    "check",
    "check_face",
    "check_faces",
    "check_line",
    "run_trace",
]
