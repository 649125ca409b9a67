"""Reference trace of the projection layer and its configuration."""

from .config import BaseConfig, TraceConfig, build_rule
from .harness import check, check_face, check_faces, check_line, run_trace
from .trace import TraceLog

__all__ = [
    "BaseConfig",
    "TraceConfig",
    "TraceLog",
    "build_rule",
    "check",
    "check_face",
    "check_faces",
    "check_line",
    "run_trace",
]
