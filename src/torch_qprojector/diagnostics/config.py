"""Pydantic configuration for the projection trace.

All trace options are validated here once; the harness only ever receives a
`TraceConfig` instance and never falls back to values of its own.
"""

from __future__ import annotations

import re
from typing import Literal

import torch
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.rules import standard_rule

_GAUSS_NAME = re.compile(r"^gauss(\d+)$")
_SUPPORTED_DIMS = {1, 2, 3}


class BaseConfig(BaseModel):
    """Base model for configuration schemas.

    Enforces strict validation:
    - No extra fields allowed
    - Validates assignments after initialization
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
    )


class TraceConfig(BaseConfig):
    """Options of the projection trace (see `diagnostics.harness`)."""

    precision: int = Field(2, ge=1, le=17, description="Significant digits printed")
    dimensions: tuple[int, ...] = Field(
        (1, 2, 3), description="Cell dimensions for the line and face checks"
    )
    all_face_dimensions: tuple[int, ...] = Field(
        (2, 3), description="Cell dimensions for the all-faces check"
    )
    rules: tuple[str, ...] = Field(
        ("none", "midpoint", "trapezoid", "simpson", "milne"),
        description="1D base rules, in trace order; 'gaussN' for N-point Gauss",
    )
    dtype: Literal["float64", "float32"] = "float64"

    @field_validator("dimensions", "all_face_dimensions")
    @classmethod
    def check_dimensions(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        bad = [d for d in v if d not in _SUPPORTED_DIMS]
        if bad:
            raise ValueError(f"unsupported dimensions {bad}; expected values in {{1, 2, 3}}")
        return v

    @field_validator("rules")
    @classmethod
    def check_rules(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        names = tuple(name.strip().lower() for name in v)
        for name in names:
            if _GAUSS_NAME.match(name):
                continue
            # raises InvalidRule, a ValueError, for unknown names
            standard_rule(name)
        return names

    @property
    def torch_dtype(self) -> torch.dtype:
        return getattr(torch, self.dtype)


def build_rule(name: str):
    """Instantiate a rule named in `TraceConfig.rules`."""
    match = _GAUSS_NAME.match(name)
    if match:
        return standard_rule("gauss", int(match.group(1)))
    return standard_rule(name)


__all__ = ["BaseConfig", "TraceConfig", "build_rule"]
