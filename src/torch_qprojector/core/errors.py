"""Precondition failures raised by the projection layer.

Both error kinds flag a caller bug (malformed topology, wrong rule
dimension) rather than a recoverable runtime condition. They are raised
before any output rule is built, so no partial result ever escapes.
"""

from __future__ import annotations


class QProjectorError(ValueError):
    """Base class for all precondition violations in this package."""


class InvalidIndex(QProjectorError):
    """Face, orientation, subface, child or dimension index out of range."""


class InvalidRule(QProjectorError):
    """Malformed quadrature rule or rule of the wrong dimension."""


def check_index(name: str, value: int, bound: int) -> int:
    """Validate ``0 <= value < bound`` and return ``value``.

    Raises:
        InvalidIndex: if the index is outside the range.
    """
    if not 0 <= value < bound:
        raise InvalidIndex(f"{name}={value} out of range [0, {bound})")
    return value


__all__ = [
    "InvalidIndex",
    "InvalidRule",
    "QProjectorError",
    "check_index",
]
