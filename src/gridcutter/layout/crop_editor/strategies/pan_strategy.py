"""
Move strategy for the crop rectangle.
"""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QPointF

from ..model import CropEditorSession
from ..utils import CropHandle
from .abstract import InteractionStrategy


class PanStrategy(InteractionStrategy):
    """Strategy for moving the whole crop rectangle."""

    def __init__(
        self,
        *,
        session: CropEditorSession,
        on_crop_changed: Callable[[], None],
    ) -> None:
        """Initialize pan strategy.

        Parameters
        ----------
        session:
            Crop editor session being edited.
        on_crop_changed:
            Callback when the working rectangle moves.
        """
        self._session = session
        self._on_crop_changed = on_crop_changed
        self._session.begin_drag(CropHandle.MOVE)

    def on_drag(self, delta_view: QPointF) -> None:
        """Handle move drag."""
        scale = self._session.editor_scale
        if scale <= 1e-6:
            return
        before = self._session.working_area
        after = self._session.translate(delta_view.x() / scale, delta_view.y() / scale)
        if after != before:
            self._on_crop_changed()

    def on_end(self) -> None:
        """Handle end of move interaction."""
        self._session.end_drag()
