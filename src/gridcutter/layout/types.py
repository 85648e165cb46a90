"""
Value types shared by the layout engine.

Everything in this module is immutable. Rectangles and extents are expressed
in source-image pixels; conversion to display space happens at the edges
(hit testing and rendering) through the layout state's display scale.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, replace
from typing import NewType, Union

from ..errors import InvalidExtentError

CellIndex = NewType("CellIndex", int)


class GridMode(str, enum.Enum):
    """The two grid models a layout can use."""

    UNIFORM = "uniform"
    CENTERLINE = "centerline"


class LineAxis(str, enum.Enum):
    """Axis of a draggable center line. ``X`` lines are vertical."""

    X = "x"
    Y = "y"


@dataclass(frozen=True)
class LineRef:
    """Identifies one center line by axis and position in its sequence."""

    axis: LineAxis
    index: int


@dataclass(frozen=True)
class ImageExtent:
    """Size of the loaded source image in pixels."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if not (self.width > 0 and self.height > 0):
            raise InvalidExtentError(
                f"image extent must be positive, got {self.width}x{self.height}"
            )

    def dimension(self, axis: LineAxis) -> int:
        """Return the width for ``X`` and the height for ``Y``."""
        return self.width if axis is LineAxis.X else self.height


@dataclass(frozen=True)
class CropArea:
    """Axis-aligned rectangle in source-image pixels."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        """Return True when ``(x, y)`` lies inside or on the border."""
        return self.x <= x <= self.right and self.y <= y <= self.bottom

    def scaled(self, factor: float) -> CropArea:
        """Return the rectangle multiplied by *factor* (source to display)."""
        return CropArea(
            self.x * factor,
            self.y * factor,
            self.width * factor,
            self.height * factor,
        )

    def clamped(self, extent: ImageExtent) -> CropArea:
        """Shift, and only if unavoidable shrink, the rectangle into *extent*."""
        width = max(0.0, min(float(self.width), float(extent.width)))
        height = max(0.0, min(float(self.height), float(extent.height)))
        x = max(0.0, min(float(extent.width) - width, float(self.x)))
        y = max(0.0, min(float(extent.height) - height, float(self.y)))
        return CropArea(x, y, width, height)

    def crop_box(self) -> tuple[int, int, int, int]:
        """Return the integer ``(left, top, right, bottom)`` box used by Pillow."""
        left = int(math.floor(self.x + 1e-6))
        top = int(math.floor(self.y + 1e-6))
        right = max(left + 1, int(round(self.right)))
        bottom = max(top + 1, int(round(self.bottom)))
        return left, top, right, bottom

    def as_mapping(self) -> dict[str, float]:
        return {
            "x": float(self.x),
            "y": float(self.y),
            "width": float(self.width),
            "height": float(self.height),
        }


@dataclass(frozen=True)
class UniformGrid:
    """Equal-size row/column partition of the whole image."""

    rows: int
    cols: int

    @property
    def mode(self) -> GridMode:
        return GridMode.UNIFORM

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols


@dataclass(frozen=True)
class CenterLineGrid:
    """Fixed-size cells centred on independently draggable lines.

    ``lines_x`` has one entry per column and ``lines_y`` one per row. The
    order of each sequence defines the cell index, not the line positions,
    so a line dragged across its neighbour keeps its index.
    """

    rows: int
    cols: int
    cell_width: float
    cell_height: float
    lines_x: tuple[float, ...] = ()
    lines_y: tuple[float, ...] = ()

    @property
    def mode(self) -> GridMode:
        return GridMode.CENTERLINE

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols

    def lines(self, axis: LineAxis) -> tuple[float, ...]:
        return self.lines_x if axis is LineAxis.X else self.lines_y

    def with_line(self, axis: LineAxis, index: int, position: float) -> CenterLineGrid:
        """Return a copy with one line moved, keeping the sequence order."""
        lines = list(self.lines(axis))
        lines[index] = float(position)
        if axis is LineAxis.X:
            return replace(self, lines_x=tuple(lines))
        return replace(self, lines_y=tuple(lines))


GridSpec = Union[UniformGrid, CenterLineGrid]


__all__ = [
    "CellIndex",
    "CenterLineGrid",
    "CropArea",
    "GridMode",
    "GridSpec",
    "ImageExtent",
    "LineAxis",
    "LineRef",
    "UniformGrid",
]
