"""
Crop editor session model.

This module manages the rectangle being edited for one cell, in source-image
pixels, without any direct UI interaction. Every operation clamps its input
instead of rejecting it.
"""

from __future__ import annotations

from dataclasses import replace

from ...config import MIN_CROP_SIZE
from ..types import CellIndex, CropArea, ImageExtent
from .utils import CropHandle


class CropEditorSession:
    """Editing state bound to exactly one cell."""

    def __init__(
        self,
        cell_index: CellIndex,
        original_area: CropArea,
        extent: ImageExtent,
        editor_scale: float,
        min_size: float = MIN_CROP_SIZE,
    ) -> None:
        self._cell_index = cell_index
        self._original_area = original_area
        self._working_area = original_area
        self._extent = extent
        self._editor_scale = float(editor_scale)
        self._min_size = float(min_size)
        self._active_handle: CropHandle | None = None

    @property
    def cell_index(self) -> CellIndex:
        return self._cell_index

    @property
    def original_area(self) -> CropArea:
        return self._original_area

    @property
    def working_area(self) -> CropArea:
        return self._working_area

    @property
    def extent(self) -> ImageExtent:
        return self._extent

    @property
    def editor_scale(self) -> float:
        return self._editor_scale

    @property
    def active_handle(self) -> CropHandle | None:
        return self._active_handle

    def editor_size(self) -> tuple[int, int]:
        """Return the preview canvas size for the whole image."""
        return (
            int(self._extent.width * self._editor_scale),
            int(self._extent.height * self._editor_scale),
        )

    def has_changed(self) -> bool:
        """Return True when the working rectangle differs from the original."""
        a, b = self._original_area, self._working_area
        return any(
            abs(p - q) > 1e-6
            for p, q in zip(
                (a.x, a.y, a.width, a.height), (b.x, b.y, b.width, b.height), strict=True
            )
        )

    # ------------------------------------------------------------------
    # Drag operations
    # ------------------------------------------------------------------
    def begin_drag(self, handle: CropHandle) -> None:
        self._active_handle = handle

    def end_drag(self) -> None:
        self._active_handle = None

    def translate(self, dx: float, dy: float) -> CropArea:
        """Move the rectangle, keeping it inside the image."""
        area = self._working_area
        max_x = self._extent.width - area.width
        max_y = self._extent.height - area.height
        self._working_area = replace(
            area,
            x=max(0.0, min(max_x, area.x + dx)),
            y=max(0.0, min(max_y, area.y + dy)),
        )
        return self._working_area

    def resize(self, handle: CropHandle, dx: float, dy: float) -> CropArea:
        """Resize by dragging an edge or corner.

        Each edge is updated against the current rectangle so the opposite
        edge stays fixed and the moving edge never leaves the image. A
        rectangle already narrower than the minimum may grow but not shrink.
        """
        area = self._working_area
        min_w = min(self._min_size, area.width)
        min_h = min(self._min_size, area.height)
        img_w = float(self._extent.width)
        img_h = float(self._extent.height)
        x, y, width, height = area.x, area.y, area.width, area.height

        if handle.moves_left:
            x = max(0.0, min(area.right - min_w, area.x + dx))
            width = area.right - x
        if handle.moves_right:
            width = min(img_w - area.x, max(min_w, area.width + dx))
        if handle.moves_top:
            y = max(0.0, min(area.bottom - min_h, area.y + dy))
            height = area.bottom - y
        if handle.moves_bottom:
            height = min(img_h - area.y, max(min_h, area.height + dy))

        self._working_area = CropArea(x, y, width, height)
        return self._working_area

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def reset(self) -> CropArea:
        """Restore the rectangle captured when the session opened."""
        self._working_area = self._original_area
        return self._working_area

    def center(self) -> CropArea:
        """Centre the rectangle in the full image, keeping its size."""
        area = self._working_area
        self._working_area = replace(
            area,
            x=(self._extent.width - area.width) / 2.0,
            y=(self._extent.height - area.height) / 2.0,
        )
        return self._working_area


__all__ = ["CropEditorSession"]
