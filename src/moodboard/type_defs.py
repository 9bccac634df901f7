"""
Defines shared value types for the moodboard compositor.

Centralizes the small geometric records passed between the geometry
engine, the pan controller and the export pipeline. All of them are
immutable; every operation returns a new value.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ResolutionKey = Literal["HD", "UHD", "6K"]


@dataclass(frozen=True, slots=True)
class Size:
    """Width and height in a single coordinate space."""

    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        """True when either dimension is not strictly positive."""
        return self.width <= 0 or self.height <= 0

    @property
    def aspect(self) -> float:
        """Width over height. Only meaningful for non-empty sizes."""
        return self.width / self.height


@dataclass(frozen=True, slots=True)
class Point:
    """Pointer position in page pixels."""

    x: float
    y: float


@dataclass(frozen=True, slots=True)
class Offset:
    """Shift from centered framing, in display pixels."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True, slots=True)
class PositionPercent:
    """Two-axis framing percentage where 50 means centered."""

    x: float = 50.0
    y: float = 50.0

    def css(self) -> str:
        """Render as an ``object-position`` style string, e.g. ``75% 50%``."""
        return f"{self.x:g}% {self.y:g}%"


@dataclass(frozen=True, slots=True)
class CoverCropResult:
    """Rectangle of the source image to sample, in natural pixels."""

    source_x: float
    source_y: float
    source_w: float
    source_h: float

    @property
    def is_empty(self) -> bool:
        """True when the rectangle has no area to sample."""
        return self.source_w <= 0 or self.source_h <= 0

    def box(self) -> tuple[float, float, float, float]:
        """Return a Pillow ``(left, upper, right, lower)`` box."""
        return (
            self.source_x,
            self.source_y,
            self.source_x + self.source_w,
            self.source_y + self.source_h,
        )


@dataclass(frozen=True, slots=True)
class DisplayRect:
    """Measured on-screen rectangle of a cell, relative to the grid."""

    x: float
    y: float
    width: float
    height: float

    @property
    def size(self) -> Size:
        """Return the rectangle extent as a Size."""
        return Size(self.width, self.height)

    def scaled(self, factor: float) -> DisplayRect:
        """Return a copy with every coordinate multiplied by factor."""
        return DisplayRect(
            self.x * factor,
            self.y * factor,
            self.width * factor,
            self.height * factor,
        )
