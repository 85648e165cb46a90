"""
Mutable layout session state.

``LayoutState`` owns the grid description, the disabled set, the per-cell
overrides, the image extent and the display scale. It is created once by the
top-level workspace and handed explicitly to the hit tester and to both
interaction controllers; none of them keep state of their own about the grid.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any

from ..config import DEFAULT_CELL_SIZE, LINE_EDGE_INSET, MIN_CELL_SIZE
from ..errors import CellIndexError
from . import geometry
from .types import (
    CellIndex,
    CenterLineGrid,
    CropArea,
    GridMode,
    GridSpec,
    ImageExtent,
    LineAxis,
    LineRef,
    UniformGrid,
)

_LOGGER = logging.getLogger(__name__)


def coerce_count(value: Any, default: int = 1) -> int:
    """Return *value* as a row/column count of at least 1.

    Non-numeric input falls back to *default*.
    """
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        return max(1, int(default))
    return max(1, count)


def coerce_cell_size(value: Any, default: int = DEFAULT_CELL_SIZE) -> int:
    """Return *value* as a cell edge of at least :data:`MIN_CELL_SIZE` pixels."""
    try:
        size = int(value)
    except (TypeError, ValueError, OverflowError):
        size = int(default)
    return max(MIN_CELL_SIZE, size)


def coerce_mode(value: Any, fallback: GridMode = GridMode.UNIFORM) -> GridMode:
    try:
        return GridMode(value)
    except ValueError:
        _LOGGER.warning("Unknown grid mode %r, keeping %s", value, fallback.value)
        return fallback


@dataclass(frozen=True)
class GridSummary:
    """Numbers shown next to the grid controls."""

    cell_width: int
    cell_height: int
    enabled: int
    total: int


class LayoutState:
    """Grid parameters, overrides and display scale for one editing session."""

    def __init__(
        self,
        *,
        mode: GridMode | str = GridMode.UNIFORM,
        rows: int = 6,
        cols: int = 4,
        cell_width: int = DEFAULT_CELL_SIZE,
        cell_height: int = DEFAULT_CELL_SIZE,
    ) -> None:
        self._extent: ImageExtent | None = None
        self._mode = coerce_mode(mode)
        self._rows = coerce_count(rows)
        self._cols = coerce_count(cols)
        # Seeds auto sizing and survives switches to uniform mode.
        self._cell_size: tuple[int, int] = (
            coerce_cell_size(cell_width),
            coerce_cell_size(cell_height),
        )
        self._disabled: set[CellIndex] = set()
        self._custom: dict[CellIndex, CropArea] = {}
        self._scale: float = 1.0
        self._grid: GridSpec = self._build_grid()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def extent(self) -> ImageExtent | None:
        return self._extent

    @property
    def has_image(self) -> bool:
        return self._extent is not None

    @property
    def grid(self) -> GridSpec:
        return self._grid

    @property
    def mode(self) -> GridMode:
        return self._mode

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def cell_count(self) -> int:
        return self._rows * self._cols

    @property
    def cell_size(self) -> tuple[int, int]:
        """Return the center-line cell size (kept while in uniform mode)."""
        return self._cell_size

    @property
    def display_scale(self) -> float:
        return self._scale

    def display_size(self) -> tuple[int, int]:
        """Return the canvas size the image occupies on screen."""
        if self._extent is None:
            return (0, 0)
        return (
            int(math.floor(self._extent.width * self._scale)),
            int(math.floor(self._extent.height * self._scale)),
        )

    def to_source(self, value: float) -> float:
        return float(value) / self._scale

    def to_display(self, value: float) -> float:
        return float(value) * self._scale

    # ------------------------------------------------------------------
    # Image and viewport
    # ------------------------------------------------------------------
    def load_image(self, extent: ImageExtent) -> None:
        """Adopt a new image; every index and override refers to the old one."""
        self._extent = extent
        self._disabled.clear()
        self._custom.clear()
        self._grid = self._build_grid()
        _LOGGER.debug("Loaded image %dx%d", extent.width, extent.height)

    def set_display_scale(self, scale: float) -> None:
        scale = float(scale)
        if not math.isfinite(scale) or scale <= 0.0:
            _LOGGER.warning("Ignoring invalid display scale %r", scale)
            return
        self._scale = scale

    def fit_to_viewport(self, max_width: float, max_height: float) -> float:
        """Recompute the display scale so the image fits the viewport."""
        if self._extent is None:
            return self._scale
        self.set_display_scale(geometry.fit_scale(self._extent, max_width, max_height))
        return self._scale

    # ------------------------------------------------------------------
    # Grid parameters
    # ------------------------------------------------------------------
    def set_grid_params(
        self,
        mode: GridMode | str | None = None,
        rows: Any = None,
        cols: Any = None,
    ) -> None:
        """Change the grid topology.

        Center lines are regenerated with even spacing and the cell size is
        re-derived from them. All disabled cells and overrides are dropped
        since their indices no longer mean anything.
        """
        if mode is not None:
            self._mode = coerce_mode(mode, self._mode)
        if rows is not None:
            self._rows = coerce_count(rows)
        if cols is not None:
            self._cols = coerce_count(cols)
        self._disabled.clear()
        self._custom.clear()
        self._grid = self._build_grid()
        _LOGGER.debug(
            "Grid set to %s %dx%d", self._mode.value, self._rows, self._cols
        )

    def set_cell_size(self, width: Any = None, height: Any = None) -> tuple[int, int]:
        """Set the center-line cell size; overrides and disabled cells survive."""
        current_w, current_h = self._cell_size
        new_w = coerce_cell_size(width) if width is not None else current_w
        new_h = coerce_cell_size(height) if height is not None else current_h
        self._apply_cell_size((new_w, new_h))
        return self._cell_size

    def auto_calculate_cell_size(self) -> tuple[int, int]:
        """Re-derive the cell size from the current line spacing."""
        if self._extent is None:
            return self._cell_size
        lines_x, lines_y = self._current_lines()
        size = geometry.auto_calculate_cell_size(lines_x, lines_y, self._extent, self._cell_size)
        self._apply_cell_size(size)
        return self._cell_size

    def reset_center_lines(self) -> None:
        """Put every line back at even spacing and re-enable all cells."""
        self._disabled.clear()
        self._grid = self._build_grid()

    def set_center_line(self, line: LineRef, source_position: float) -> float | None:
        """Move one center line, clamped away from the image edges.

        The line keeps its index even when it crosses a neighbour. On a side
        too short for the inset the line is pinned to the middle. Returns the
        stored position, or None when there is no line to move.
        """
        grid = self._grid
        if self._extent is None or not isinstance(grid, CenterLineGrid):
            return None
        limit = float(self._extent.dimension(line.axis))
        if limit < 2.0 * LINE_EDGE_INSET:
            position = limit / 2.0
        else:
            position = max(LINE_EDGE_INSET, min(limit - LINE_EDGE_INSET, float(source_position)))
        self._grid = grid.with_line(line.axis, line.index, position)
        return position

    def line_position(self, line: LineRef) -> float | None:
        grid = self._grid
        if not isinstance(grid, CenterLineGrid):
            return None
        return grid.lines(line.axis)[line.index]

    # ------------------------------------------------------------------
    # Disabled cells and overrides
    # ------------------------------------------------------------------
    def check_index(self, index: Any) -> CellIndex:
        """Validate *index* against the current grid and return it typed."""
        if isinstance(index, bool) or not isinstance(index, int):
            raise CellIndexError(f"cell index must be an integer, got {index!r}")
        if not 0 <= index < self.cell_count:
            raise CellIndexError(
                f"cell index {index} out of range for {self.cell_count} cells"
            )
        return CellIndex(index)

    def toggle_disabled(self, index: int) -> bool:
        """Flip the disabled flag of a cell and return the new value."""
        cell = self.check_index(index)
        if cell in self._disabled:
            self._disabled.discard(cell)
            return False
        self._disabled.add(cell)
        return True

    def set_disabled(self, index: int, disabled: bool) -> None:
        cell = self.check_index(index)
        if disabled:
            self._disabled.add(cell)
        else:
            self._disabled.discard(cell)

    def is_disabled(self, index: int) -> bool:
        return self.check_index(index) in self._disabled

    def disabled_indices(self) -> frozenset[CellIndex]:
        return frozenset(self._disabled)

    def set_custom_area(self, index: int, area: CropArea) -> CropArea:
        """Store an override for one cell, clamped into the image."""
        cell = self.check_index(index)
        if self._extent is not None:
            area = area.clamped(self._extent)
        self._custom[cell] = area
        return area

    def clear_custom_area(self, index: int) -> bool:
        cell = self.check_index(index)
        return self._custom.pop(cell, None) is not None

    def custom_area(self, index: int) -> CropArea | None:
        return self._custom.get(self.check_index(index))

    def custom_areas(self) -> dict[CellIndex, CropArea]:
        return dict(self._custom)

    # ------------------------------------------------------------------
    # Derived geometry
    # ------------------------------------------------------------------
    def computed_areas(self) -> list[CropArea]:
        """Return the grid's own rectangles, ignoring overrides."""
        if self._extent is None:
            return []
        return geometry.compute_cells(self._grid, self._extent)

    def computed_area(self, index: int) -> CropArea | None:
        cell = self.check_index(index)
        if self._extent is None:
            return None
        return geometry.computed_area(self._grid, self._extent, cell)

    def effective_areas(self) -> list[CropArea]:
        """Return one rectangle per cell, override if present, else computed.

        Disabled cells are included; filtering them is up to the caller.
        """
        if self._extent is None:
            return []
        return geometry.effective_areas(self._grid, self._extent, self._custom)

    def effective_area(self, index: int) -> CropArea | None:
        cell = self.check_index(index)
        if cell in self._custom:
            return self._custom[cell]
        if self._extent is None:
            return None
        return geometry.computed_area(self._grid, self._extent, cell)

    def ghost_areas(self) -> list[CropArea]:
        """Return the computed rectangles of overridden cells, in index order."""
        if self._extent is None:
            return []
        return [
            geometry.computed_area(self._grid, self._extent, index)
            for index in sorted(self._custom)
        ]

    def summary(self) -> GridSummary:
        total = self.cell_count
        enabled = total - len(self._disabled)
        if isinstance(self._grid, CenterLineGrid) or self._extent is None:
            width, height = self._cell_size
        else:
            width = self._extent.width // self._cols
            height = self._extent.height // self._rows
        return GridSummary(int(width), int(height), enabled, total)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _current_lines(self) -> tuple[tuple[float, ...], tuple[float, ...]]:
        grid = self._grid
        if isinstance(grid, CenterLineGrid) and grid.lines_x:
            return grid.lines_x, grid.lines_y
        if self._extent is None:
            return (), ()
        return (
            geometry.even_center_lines(self._cols, self._extent.width),
            geometry.even_center_lines(self._rows, self._extent.height),
        )

    def _apply_cell_size(self, size: tuple[int, int]) -> None:
        self._cell_size = (int(size[0]), int(size[1]))
        if isinstance(self._grid, CenterLineGrid):
            self._grid = replace(
                self._grid,
                cell_width=float(self._cell_size[0]),
                cell_height=float(self._cell_size[1]),
            )

    def _build_grid(self) -> GridSpec:
        if self._mode is GridMode.UNIFORM:
            return UniformGrid(self._rows, self._cols)
        if self._extent is None:
            width, height = self._cell_size
            return CenterLineGrid(self._rows, self._cols, float(width), float(height))
        lines_x = geometry.even_center_lines(self._cols, self._extent.width)
        lines_y = geometry.even_center_lines(self._rows, self._extent.height)
        width, height = geometry.auto_calculate_cell_size(
            lines_x, lines_y, self._extent, self._cell_size
        )
        self._cell_size = (width, height)
        return CenterLineGrid(
            self._rows, self._cols, float(width), float(height), lines_x, lines_y
        )


__all__ = [
    "GridSummary",
    "LayoutState",
    "coerce_cell_size",
    "coerce_count",
    "coerce_mode",
]
