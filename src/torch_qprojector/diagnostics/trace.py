"""Prefixed, fixed-precision text log for projection traces.

Every line reads `DEAL:<section>:<section>::<message>`; sections are pushed
and popped around blocks of checks. Numbers are printed with `%.<p>g`
formatting and points as space-separated coordinates, so two traces can be
compared line by line.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import IO, Iterator

from torch import Tensor


class TraceLog:
    """Line-oriented trace writer with a section stack.

    Args:
        stream (IO[str], optional): destination, stdout by default.
        precision (int): significant digits for numbers.
        prefix (str): leading tag of every line.
    """

    def __init__(self, stream: IO[str] | None = None, precision: int = 2, prefix: str = "DEAL"):
        self.stream = stream if stream is not None else sys.stdout
        self.precision = precision
        self.prefix = prefix
        self._sections: list[str] = []

    @contextmanager
    def push(self, section: str) -> Iterator[TraceLog]:
        """Append `section` to the prefix for the duration of the block."""
        self._sections.append(section)
        try:
            yield self
        finally:
            self._sections.pop()

    def number(self, x: float) -> str:
        return format(float(x), f".{self.precision}g")

    def point(self, p: Tensor) -> str:
        return " ".join(self.number(c) for c in p.tolist())

    def write(self, message: str = "") -> None:
        head = self.prefix + "".join(":" + s for s in self._sections)
        self.stream.write(f"{head}::{message}\n")


__all__ = ["TraceLog"]
