"""
Hit testing for grid cells, center lines and crop editor handles.

This module contains pure geometric queries against a layout snapshot, with
no dependencies on Qt events or interaction state. Points are in display
space; the layout state's display scale converts them to source space.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from PySide6.QtCore import QPointF

from ..config import HANDLE_HIT_TOLERANCE, LINE_HIT_TOLERANCE
from .crop_editor.utils import HANDLE_ORDER, CropHandle, handle_positions
from .types import CellIndex, CenterLineGrid, LineAxis, LineRef, UniformGrid

if TYPE_CHECKING:
    from .crop_editor.model import CropEditorSession
    from .state import LayoutState


class HitTester:
    """Pure-function hit tester for the grid canvas and the crop editor."""

    def __init__(
        self,
        line_tolerance: float = LINE_HIT_TOLERANCE,
        handle_tolerance: float = HANDLE_HIT_TOLERANCE,
    ) -> None:
        """Initialize hit tester.

        Parameters
        ----------
        line_tolerance:
            Distance below which a point counts as on a center line, in
            display pixels.
        handle_tolerance:
            Half-size of the square window around each crop handle, in
            editor display pixels.
        """
        self._line_tolerance = float(line_tolerance)
        self._handle_tolerance = float(handle_tolerance)

    def hit_cell(self, state: LayoutState, point: QPointF) -> CellIndex | None:
        """Return the index of the cell under *point*, or None.

        Uniform grids resolve by direct division; center-line grids scan the
        computed rectangles in index order and the first match wins.
        """
        extent = state.extent
        if extent is None:
            return None
        x = state.to_source(point.x())
        y = state.to_source(point.y())
        grid = state.grid

        if isinstance(grid, UniformGrid):
            if x < 0 or y < 0:
                return None
            col = int(math.floor(x / (extent.width / grid.cols)))
            row = int(math.floor(y / (extent.height / grid.rows)))
            if col < grid.cols and row < grid.rows:
                return CellIndex(row * grid.cols + col)
            return None

        for index, area in enumerate(state.computed_areas()):
            if area.contains(x, y):
                return CellIndex(index)
        return None

    def hit_line(self, state: LayoutState, point: QPointF) -> LineRef | None:
        """Return the center line under *point*, or None.

        X lines are tested before Y lines, so a point close to both always
        resolves to the X line.
        """
        grid = state.grid
        if state.extent is None or not isinstance(grid, CenterLineGrid):
            return None
        for axis, coordinate in ((LineAxis.X, point.x()), (LineAxis.Y, point.y())):
            for index, position in enumerate(grid.lines(axis)):
                if abs(coordinate - state.to_display(position)) < self._line_tolerance:
                    return LineRef(axis, index)
        return None

    def hit_handle(self, session: CropEditorSession, point: QPointF) -> CropHandle | None:
        """Determine which crop handle (if any) is under the cursor.

        Corners are tested before edge midpoints. A point inside the working
        rectangle that matches no handle returns ``CropHandle.MOVE``.
        """
        rect = session.working_area.scaled(session.editor_scale)
        positions = handle_positions(rect)
        tolerance = self._handle_tolerance
        for handle in HANDLE_ORDER:
            hx, hy = positions[handle]
            if abs(point.x() - hx) < tolerance and abs(point.y() - hy) < tolerance:
                return handle
        if rect.contains(point.x(), point.y()):
            return CropHandle.MOVE
        return None


__all__ = ["HitTester"]
