"""
Crop editor controller.

This module coordinates one crop editor session: it opens the session from
the layout state, routes pointer input through the hit tester to the move or
resize strategy and writes the result back as a per-cell override.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from PySide6.QtCore import QPointF, Qt

from ...config import CROP_EDITOR_MAX_HEIGHT, CROP_EDITOR_MAX_WIDTH
from .. import geometry
from ..types import CellIndex, CropArea
from .model import CropEditorSession
from .strategies import InteractionStrategy, PanStrategy, ResizeStrategy
from .utils import CropHandle, cursor_for_handle

if TYPE_CHECKING:
    from ..hit_tester import HitTester
    from ..state import LayoutState

_LOGGER = logging.getLogger(__name__)


class CropEditorController:
    """Manages the crop editor session of a single cell (as coordinator)."""

    def __init__(
        self,
        state: LayoutState,
        *,
        hit_tester: HitTester,
        on_request_update: Callable[[], None],
        on_saved: Callable[[CellIndex, CropArea], None] | None = None,
        on_cursor_change: Callable[[Qt.CursorShape | None], None] | None = None,
    ) -> None:
        """Initialize the crop editor controller.

        Parameters
        ----------
        state:
            Layout state that owns the overrides being edited.
        hit_tester:
            Hit tester used to resolve handles under the pointer.
        on_request_update:
            Callback to request a repaint of the editor preview.
        on_saved:
            Callback after an override was committed, signature:
            (cell_index, stored_area).
        on_cursor_change:
            Callback to change cursor, signature: (cursor_shape or None to unset).
        """
        self._state = state
        self._hit_tester = hit_tester
        self._on_request_update = on_request_update
        self._on_saved = on_saved
        self._on_cursor_change = on_cursor_change

        self._session: CropEditorSession | None = None
        self._current_strategy: InteractionStrategy | None = None
        self._last_pos = QPointF()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def is_open(self) -> bool:
        """Return True if a crop editor session is active."""
        return self._session is not None

    @property
    def session(self) -> CropEditorSession | None:
        return self._session

    def open(
        self,
        index: int,
        max_width: float = CROP_EDITOR_MAX_WIDTH,
        max_height: float = CROP_EDITOR_MAX_HEIGHT,
    ) -> CropEditorSession | None:
        """Start editing *index*.

        Returns None without opening anything when no image is loaded or the
        cell is disabled. An already open session is discarded first.
        """
        extent = self._state.extent
        if extent is None:
            return None
        cell = self._state.check_index(index)
        if self._state.is_disabled(cell):
            _LOGGER.debug("Refusing to edit disabled cell %d", cell)
            return None
        area = self._state.effective_area(cell)
        if area is None:
            return None

        if self._session is not None:
            self.close()
        scale = geometry.fit_scale(extent, max_width, max_height)
        self._session = CropEditorSession(cell, area, extent, scale)
        _LOGGER.debug("Opened crop editor for cell %d at scale %.3f", cell, scale)
        self._on_request_update()
        return self._session

    def reset(self) -> CropArea | None:
        """Restore the rectangle the session opened with."""
        if self._session is None:
            return None
        area = self._session.reset()
        self._on_request_update()
        return area

    def center(self) -> CropArea | None:
        """Centre the working rectangle in the image."""
        if self._session is None:
            return None
        area = self._session.center()
        self._on_request_update()
        return area

    def save(self) -> CropArea | None:
        """Commit the working rectangle as the cell's override and close."""
        session = self._session
        if session is None:
            return None
        stored = self._state.set_custom_area(session.cell_index, session.working_area)
        _LOGGER.debug("Saved override for cell %d: %s", session.cell_index, stored)
        self.close()
        if self._on_saved is not None:
            self._on_saved(session.cell_index, stored)
        return stored

    def cancel(self) -> None:
        """Discard the working rectangle."""
        self.close()

    def close(self) -> None:
        if self._session is None:
            return
        if self._current_strategy is not None:
            self._current_strategy.on_end()
            self._current_strategy = None
        self._session = None
        self._set_cursor(None)
        self._on_request_update()

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def handle_pointer_down(self, point: QPointF) -> CropHandle | None:
        """Handle pointer press in editor display coordinates."""
        session = self._session
        if session is None:
            return None

        handle = self._hit_tester.hit_handle(session, point)
        if handle is None:
            self._current_strategy = None
            self._set_cursor(Qt.CursorShape.ArrowCursor)
            return None

        self._last_pos = QPointF(point)
        if handle is CropHandle.MOVE:
            self._current_strategy = PanStrategy(
                session=session,
                on_crop_changed=self._on_request_update,
            )
        else:
            self._current_strategy = ResizeStrategy(
                handle=handle,
                session=session,
                on_crop_changed=self._on_request_update,
            )
        self._set_cursor(cursor_for_handle(handle))
        return handle

    def handle_pointer_move(self, point: QPointF) -> None:
        """Handle pointer movement in editor display coordinates."""
        session = self._session
        if session is None:
            return

        if self._current_strategy is None:
            self._set_cursor(cursor_for_handle(self._hit_tester.hit_handle(session, point)))
            return

        delta_view = point - self._last_pos
        self._last_pos = QPointF(point)
        self._current_strategy.on_drag(delta_view)

    def handle_pointer_up(self) -> None:
        """Handle pointer release; ends any move or resize."""
        if self._current_strategy is not None:
            self._current_strategy.on_end()
            self._current_strategy = None
        self._set_cursor(None)

    def handle_pointer_leave(self) -> None:
        self.handle_pointer_up()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _set_cursor(self, shape: Qt.CursorShape | None) -> None:
        if self._on_cursor_change is not None:
            self._on_cursor_change(shape)


__all__ = ["CropEditorController"]
