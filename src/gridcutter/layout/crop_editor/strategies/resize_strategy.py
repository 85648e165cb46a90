"""
Resize strategy for crop rectangle edge/corner dragging.
"""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QPointF

from ..model import CropEditorSession
from ..utils import CropHandle
from .abstract import InteractionStrategy


class ResizeStrategy(InteractionStrategy):
    """Strategy for resizing the crop rectangle via edges and corners."""

    def __init__(
        self,
        *,
        handle: CropHandle,
        session: CropEditorSession,
        on_crop_changed: Callable[[], None],
    ) -> None:
        """Initialize resize strategy.

        Parameters
        ----------
        handle:
            The edge or corner being dragged.
        session:
            Crop editor session being edited.
        on_crop_changed:
            Callback when the working rectangle changes.
        """
        self._handle = handle
        self._session = session
        self._on_crop_changed = on_crop_changed
        self._session.begin_drag(handle)

    def on_drag(self, delta_view: QPointF) -> None:
        """Handle resize drag movement.

        Only the axes the handle controls take part; an edge handle drops the
        perpendicular component of the delta.
        """
        scale = self._session.editor_scale
        if scale <= 1e-6:
            return
        handle = self._handle
        dx = delta_view.x() / scale if handle.moves_left or handle.moves_right else 0.0
        dy = delta_view.y() / scale if handle.moves_top or handle.moves_bottom else 0.0
        if dx == 0.0 and dy == 0.0:
            return
        before = self._session.working_area
        after = self._session.resize(handle, dx, dy)
        if after != before:
            self._on_crop_changed()

    def on_end(self) -> None:
        """Handle end of resize interaction."""
        self._session.end_drag()
