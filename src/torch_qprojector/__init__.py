"""Quadrature projection onto faces, subfaces and children of reference cells."""

from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all
from .core import rules

__all__ = [*_core_all, "rules"]
__version__ = "0.1.0"
