"""
Grid canvas interaction controller.

This module turns pointer input on the main canvas into layout mutations:
dragging center lines, hover feedback and toggling cells on click. It owns
only the transient interaction state; everything persistent lives in the
layout state it is given.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

from PySide6.QtCore import QPointF, Qt

from .hit_tester import HitTester
from .scheduler import PointerThrottle
from .state import LayoutState
from .types import CellIndex, GridMode, LineAxis, LineRef

_LOGGER = logging.getLogger(__name__)


class InteractionState(enum.Enum):
    """Where the canvas interaction currently is."""

    IDLE = "idle"
    DRAGGING_LINE = "dragging_line"
    HOVERING = "hovering"


class PointerKind(str, enum.Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"


@dataclass(frozen=True)
class PointerEvent:
    """A pointer event in canvas display coordinates."""

    kind: PointerKind
    position: QPointF

    @classmethod
    def at(cls, kind: PointerKind | str, x: float, y: float) -> PointerEvent:
        return cls(PointerKind(kind), QPointF(float(x), float(y)))


def cursor_for_line(line: LineRef | None) -> Qt.CursorShape | None:
    """Return the resize cursor for *line*, or None to unset the cursor."""
    if line is None:
        return None
    if line.axis is LineAxis.X:
        return Qt.CursorShape.SizeHorCursor
    return Qt.CursorShape.SizeVerCursor


class GridInteractionController:
    """Manages line dragging, hover and click-to-toggle on the grid canvas."""

    def __init__(
        self,
        state: LayoutState,
        *,
        hit_tester: HitTester,
        on_request_render: Callable[[], None],
        on_request_preview: Callable[[], None],
        on_flush_preview: Callable[[], None],
        on_cursor_change: Callable[[Qt.CursorShape | None], None] | None = None,
        on_cell_toggled: Callable[[CellIndex, bool], None] | None = None,
        throttle: PointerThrottle | None = None,
    ) -> None:
        """Initialize the grid interaction controller.

        Parameters
        ----------
        state:
            Layout state mutated by drags and clicks.
        hit_tester:
            Hit tester used to resolve lines and cells under the pointer.
        on_request_render:
            Callback to request a coalesced repaint.
        on_request_preview:
            Callback to request a debounced preview regeneration.
        on_flush_preview:
            Callback to regenerate previews immediately.
        on_cursor_change:
            Callback to change cursor, signature: (cursor_shape or None to unset).
        on_cell_toggled:
            Callback after a click toggled a cell, signature: (index, disabled).
        throttle:
            Pointer-move throttle; a 16 ms one is created when omitted.
        """
        self._state = state
        self._hit_tester = hit_tester
        self._on_request_render = on_request_render
        self._on_request_preview = on_request_preview
        self._on_flush_preview = on_flush_preview
        self._on_cursor_change = on_cursor_change
        self._on_cell_toggled = on_cell_toggled
        self._throttle = throttle if throttle is not None else PointerThrottle()

        self._hovered: LineRef | None = None
        self._dragged: LineRef | None = None
        self._pressed: bool = False
        self._press_on_line: bool = False
        self._line_moved: bool = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def interaction_state(self) -> InteractionState:
        if self._dragged is not None:
            return InteractionState.DRAGGING_LINE
        if self._hovered is not None:
            return InteractionState.HOVERING
        return InteractionState.IDLE

    def hovered_line(self) -> LineRef | None:
        return self._hovered

    def dragged_line(self) -> LineRef | None:
        return self._dragged

    def reset(self) -> None:
        """Forget any drag or hover, e.g. after the grid topology changed."""
        self._hovered = None
        self._dragged = None
        self._pressed = False
        self._press_on_line = False
        self._line_moved = False
        self._throttle.reset()
        self._set_cursor(None)

    def dispatch(self, event: PointerEvent) -> None:
        """Route *event* to the matching handler."""
        if event.kind is PointerKind.DOWN:
            self.handle_pointer_down(event.position)
        elif event.kind is PointerKind.MOVE:
            self.handle_pointer_move(event.position)
        elif event.kind is PointerKind.UP:
            self.handle_pointer_up(event.position)
        else:
            self.handle_pointer_leave()

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def handle_pointer_down(self, point: QPointF) -> None:
        """Start a line drag when the press lands on a center line."""
        if not self._state.has_image:
            return
        self._pressed = True
        self._press_on_line = False
        self._line_moved = False
        if self._state.mode is not GridMode.CENTERLINE:
            return

        line = self._hit_tester.hit_line(self._state, point)
        if line is None:
            return
        self._press_on_line = True
        self._dragged = line
        self._set_cursor(cursor_for_line(line))
        _LOGGER.debug("Started dragging %s line %d", line.axis.value, line.index)
        self._on_request_render()

    def handle_pointer_move(self, point: QPointF) -> None:
        """Move the dragged line, or update hover feedback while idle."""
        if not self._state.has_image or not self._throttle.accept():
            return

        line = self._dragged
        if line is not None:
            coordinate = point.x() if line.axis is LineAxis.X else point.y()
            stored = self._state.set_center_line(line, self._state.to_source(coordinate))
            if stored is not None:
                self._line_moved = True
                self._on_request_render()
            return

        if self._state.mode is not GridMode.CENTERLINE:
            return
        hovered = self._hit_tester.hit_line(self._state, point)
        if hovered == self._hovered:
            return
        self._hovered = hovered
        self._set_cursor(cursor_for_line(hovered))
        self._on_request_render()

    def handle_pointer_up(self, point: QPointF) -> None:
        """Finish a drag, or treat the press/release pair as a click."""
        if not self._pressed:
            return
        self._pressed = False

        if self._dragged is not None:
            _LOGGER.debug(
                "Finished dragging %s line %d", self._dragged.axis.value, self._dragged.index
            )
            self._dragged = None
            self._hovered = None
            self._set_cursor(None)
            self._on_request_render()
            self._on_flush_preview()
            return

        if self._press_on_line or self._line_moved:
            return
        if self._state.mode is GridMode.CENTERLINE:
            if self._hit_tester.hit_line(self._state, point) is not None:
                return
        self.handle_click(point)

    def handle_click(self, point: QPointF) -> CellIndex | None:
        """Toggle the disabled flag of the cell under *point*."""
        index = self._hit_tester.hit_cell(self._state, point)
        if index is None:
            return None
        disabled = self._state.toggle_disabled(index)
        _LOGGER.debug("Cell %d %s", index, "disabled" if disabled else "enabled")
        if self._on_cell_toggled is not None:
            self._on_cell_toggled(index, disabled)
        self._on_request_render()
        self._on_request_preview()
        return index

    def handle_pointer_leave(self) -> None:
        """Clear hover feedback unless a drag is in progress."""
        if self._dragged is not None:
            return
        self._pressed = False
        if self._hovered is None:
            return
        self._hovered = None
        self._set_cursor(None)
        self._on_request_render()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _set_cursor(self, shape: Qt.CursorShape | None) -> None:
        if self._on_cursor_change is not None:
            self._on_cursor_change(shape)


__all__ = [
    "GridInteractionController",
    "InteractionState",
    "PointerEvent",
    "PointerKind",
    "cursor_for_line",
]
