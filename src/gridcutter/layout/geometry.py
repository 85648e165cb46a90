"""
Cell geometry for the uniform and center-line grid models.

This module contains pure functions only. They take a grid description and
the image extent and return rectangles in source-image pixels, without any
knowledge of display scaling, hit testing or interaction state.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping, Sequence

from ..config import AUTO_SIZE_MARGIN, MIN_CELL_SIZE
from .types import (
    CellIndex,
    CenterLineGrid,
    CropArea,
    GridSpec,
    ImageExtent,
    UniformGrid,
)


def even_center_lines(count: int, dimension: float) -> tuple[float, ...]:
    """Return *count* line positions evenly spread over *dimension*.

    Each line sits in the middle of an equal slice, i.e. ``(i + 0.5) *
    dimension / count``.
    """
    if count <= 0:
        return ()
    step = float(dimension) / float(count)
    return tuple((i + 0.5) * step for i in range(count))


def _clamp_span(start: float, size: float, limit: float) -> tuple[float, float]:
    """Shift ``[start, start + size]`` into ``[0, limit]`` without shrinking.

    When *size* exceeds *limit* the clamp range is inverted; the span is then
    pinned to 0 and clipped to *limit*.
    """
    if size > limit:
        return 0.0, float(limit)
    return max(0.0, min(float(limit) - size, start)), float(size)


def _uniform_cells(grid: UniformGrid, extent: ImageExtent) -> Iterator[CropArea]:
    cell_w = extent.width / grid.cols
    cell_h = extent.height / grid.rows
    for row in range(grid.rows):
        for col in range(grid.cols):
            yield CropArea(col * cell_w, row * cell_h, cell_w, cell_h)


def centerline_area(
    cx: float, cy: float, cell_width: float, cell_height: float, extent: ImageExtent
) -> CropArea:
    """Return the cell centred on ``(cx, cy)``, shifted inside *extent*."""
    x, width = _clamp_span(cx - cell_width / 2.0, float(cell_width), extent.width)
    y, height = _clamp_span(cy - cell_height / 2.0, float(cell_height), extent.height)
    return CropArea(x, y, width, height)


def _centerline_cells(grid: CenterLineGrid, extent: ImageExtent) -> Iterator[CropArea]:
    # Y lines outer, X lines inner: row-major order.
    for cy in grid.lines_y:
        for cx in grid.lines_x:
            yield centerline_area(cx, cy, grid.cell_width, grid.cell_height, extent)


def compute_cells(grid: GridSpec, extent: ImageExtent) -> list[CropArea]:
    """Return the computed rectangle of every cell in canonical index order."""
    if isinstance(grid, CenterLineGrid):
        return list(_centerline_cells(grid, extent))
    return list(_uniform_cells(grid, extent))


def computed_area(grid: GridSpec, extent: ImageExtent, index: CellIndex) -> CropArea:
    """Return the computed rectangle of a single cell."""
    row, col = divmod(int(index), grid.cols)
    if isinstance(grid, CenterLineGrid):
        return centerline_area(
            grid.lines_x[col], grid.lines_y[row], grid.cell_width, grid.cell_height, extent
        )
    cell_w = extent.width / grid.cols
    cell_h = extent.height / grid.rows
    return CropArea(col * cell_w, row * cell_h, cell_w, cell_h)


def effective_areas(
    grid: GridSpec,
    extent: ImageExtent,
    custom_areas: Mapping[CellIndex, CropArea],
) -> list[CropArea]:
    """Return computed rectangles with per-cell overrides applied verbatim."""
    areas = compute_cells(grid, extent)
    for index, area in custom_areas.items():
        if 0 <= index < len(areas):
            areas[index] = area
    return areas


def _min_gap(lines: Sequence[float], dimension: float) -> float:
    # Sorted so that crossed lines never produce a negative gap.
    ordered = sorted(lines)
    gap = math.inf
    for previous, current in zip(ordered, ordered[1:]):
        gap = min(gap, current - previous)
    # A boundary cell only has one neighbour, hence the doubling.
    gap = min(gap, ordered[0] * 2.0)
    gap = min(gap, (dimension - ordered[-1]) * 2.0)
    return gap


def auto_calculate_cell_size(
    lines_x: Sequence[float],
    lines_y: Sequence[float],
    extent: ImageExtent,
    default: tuple[float, float],
) -> tuple[int, int]:
    """Suggest a center-line cell size from the spacing of the lines.

    Parameters
    ----------
    lines_x, lines_y:
        Center line positions in source pixels.
    extent:
        Size of the image the lines live in.
    default:
        ``(width, height)`` used for an axis that has fewer than two lines.

    Returns
    -------
    tuple[int, int]:
        ``floor(min_gap * 0.95)`` per axis, never below the minimum cell size.
    """

    def _axis(lines: Sequence[float], dimension: float, fallback: float) -> int:
        if len(lines) < 2:
            return int(fallback)
        size = math.floor(_min_gap(lines, dimension) * AUTO_SIZE_MARGIN)
        return max(MIN_CELL_SIZE, int(size))

    return (
        _axis(lines_x, extent.width, default[0]),
        _axis(lines_y, extent.height, default[1]),
    )


def fit_scale(extent: ImageExtent, max_width: float, max_height: float) -> float:
    """Return the scale that fits *extent* into the box, never enlarging."""
    if max_width <= 0 or max_height <= 0:
        return 1.0
    return min(max_width / extent.width, max_height / extent.height, 1.0)


__all__ = [
    "auto_calculate_cell_size",
    "centerline_area",
    "compute_cells",
    "computed_area",
    "effective_areas",
    "even_center_lines",
    "fit_scale",
]
