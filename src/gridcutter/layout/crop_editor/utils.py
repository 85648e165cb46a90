"""
Crop handle definitions and helpers for the crop editor.

This module contains pure functions and data structures that support the
crop editor without any dependency on Qt event handling.
"""

from __future__ import annotations

import enum

from PySide6.QtCore import Qt

from ..types import CropArea


class CropHandle(str, enum.Enum):
    """Enumeration of crop rectangle interaction handles."""

    MOVE = "move"
    N = "n"
    S = "s"
    E = "e"
    W = "w"
    NE = "ne"
    NW = "nw"
    SE = "se"
    SW = "sw"

    @property
    def moves_left(self) -> bool:
        return self in (CropHandle.W, CropHandle.NW, CropHandle.SW)

    @property
    def moves_right(self) -> bool:
        return self in (CropHandle.E, CropHandle.NE, CropHandle.SE)

    @property
    def moves_top(self) -> bool:
        return self in (CropHandle.N, CropHandle.NE, CropHandle.NW)

    @property
    def moves_bottom(self) -> bool:
        return self in (CropHandle.S, CropHandle.SE, CropHandle.SW)


# Hit-test priority: corners before edge midpoints.
HANDLE_ORDER: tuple[CropHandle, ...] = (
    CropHandle.NW,
    CropHandle.NE,
    CropHandle.SW,
    CropHandle.SE,
    CropHandle.N,
    CropHandle.S,
    CropHandle.W,
    CropHandle.E,
)


def handle_positions(rect: CropArea) -> dict[CropHandle, tuple[float, float]]:
    """Return the centre of every resize handle of *rect*."""
    left, top = rect.x, rect.y
    right, bottom = rect.right, rect.bottom
    mid_x = left + rect.width / 2.0
    mid_y = top + rect.height / 2.0
    return {
        CropHandle.NW: (left, top),
        CropHandle.NE: (right, top),
        CropHandle.SW: (left, bottom),
        CropHandle.SE: (right, bottom),
        CropHandle.N: (mid_x, top),
        CropHandle.S: (mid_x, bottom),
        CropHandle.W: (left, mid_y),
        CropHandle.E: (right, mid_y),
    }


def cursor_for_handle(handle: CropHandle | None) -> Qt.CursorShape:
    """Return the appropriate cursor shape for a given crop handle."""
    return {
        CropHandle.W: Qt.CursorShape.SizeHorCursor,
        CropHandle.E: Qt.CursorShape.SizeHorCursor,
        CropHandle.N: Qt.CursorShape.SizeVerCursor,
        CropHandle.S: Qt.CursorShape.SizeVerCursor,
        CropHandle.NW: Qt.CursorShape.SizeFDiagCursor,
        CropHandle.SE: Qt.CursorShape.SizeFDiagCursor,
        CropHandle.NE: Qt.CursorShape.SizeBDiagCursor,
        CropHandle.SW: Qt.CursorShape.SizeBDiagCursor,
        CropHandle.MOVE: Qt.CursorShape.SizeAllCursor,
    }.get(handle, Qt.CursorShape.ArrowCursor)
