"""
Render snapshot and the render adapter interface.

``build_snapshot`` turns the layout state into display-space shapes and
``paint`` replays them on any object implementing :class:`RenderAdapter`.
The adapter is the only part that knows about an actual graphics surface.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Protocol

from PySide6.QtCore import QLineF, QPointF, QRectF

from .crop_editor.model import CropEditorSession
from .crop_editor.utils import handle_positions
from .state import LayoutState
from .types import CellIndex, CenterLineGrid, CropArea, GridMode, LineAxis, LineRef

_LOGGER = logging.getLogger(__name__)

RGBA = tuple[float, float, float, float]

DISABLED_FILL: RGBA = (0.0, 0.0, 0.0, 0.5)
DISABLED_MARK: RGBA = (1.0, 0.3, 0.3, 1.0)
DISABLED_OUTLINE: RGBA = (1.0, 0.3, 0.3, 0.8)
GHOST_FILL_UNIFORM: RGBA = (0.5, 0.5, 0.5, 0.2)
GHOST_FILL_CENTERLINE: RGBA = (0.5, 0.5, 0.5, 0.15)
GHOST_OUTLINE: RGBA = (1.0, 1.0, 1.0, 0.3)
CUSTOM_FILL: RGBA = (0.3, 0.8, 0.4, 0.25)
CUSTOM_OUTLINE: RGBA = (0.3, 0.8, 0.4, 1.0)
CELL_FILL: RGBA = (0.4, 0.5, 0.9, 0.15)
CELL_OUTLINE: RGBA = (1.0, 1.0, 1.0, 0.8)
ACTIVE_LINE: RGBA = (1.0, 1.0, 0.0, 1.0)
HANDLE_FILL: RGBA = (1.0, 1.0, 1.0, 1.0)

EDITOR_DIM: RGBA = (0.0, 0.0, 0.0, 0.5)
EDITOR_ACCENT: RGBA = (0x4F / 255.0, 0x6E / 255.0, 0xF7 / 255.0, 1.0)
EDITOR_OUTLINE_WIDTH = 2.0
EDITOR_HANDLE_SIZE = 8.0

HANDLE_RADIUS = 8.0
ACTIVE_HANDLE_RADIUS = 10.0
DISABLED_MARK_INSET = 10.0


def hex_to_rgba(value: str, alpha: float = 1.0) -> RGBA:
    """Convert ``#rrggbb`` (or ``#rgb``) to a normalised RGBA tuple.

    Raises
    ------
    ValueError
        If *value* is not a hex colour.
    """
    text = value.strip().lstrip("#")
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    if len(text) != 6:
        raise ValueError(f"not a hex colour: {value!r}")
    red, green, blue = (int(text[i : i + 2], 16) / 255.0 for i in (0, 2, 4))
    return (red, green, blue, float(alpha))


class RenderAdapter(Protocol):
    """Drawing surface the layout is painted on, in display coordinates."""

    def draw_image(self, target: QRectF, *, clip: QRectF | None = None) -> None:
        ...

    def draw_rect(self, rect: QRectF, color: RGBA, *, filled: bool, width: float = 1.0) -> None:
        ...

    def draw_line(self, line: QLineF, color: RGBA, width: float = 1.0) -> None:
        ...

    def draw_circle(
        self, center: QPointF, radius: float, color: RGBA, *, filled: bool, width: float = 1.0
    ) -> None:
        ...


@dataclass(frozen=True)
class GridStyle:
    """User-selected grid appearance."""

    color: str = "#ff0000"
    line_width: float = 2.0

    def rgba(self) -> RGBA:
        try:
            return hex_to_rgba(self.color)
        except ValueError:
            _LOGGER.warning("Invalid grid colour %r, using red", self.color)
            return (1.0, 0.0, 0.0, 1.0)


class CellStatus(str, enum.Enum):
    NORMAL = "normal"
    DISABLED = "disabled"
    CUSTOM = "custom"


@dataclass(frozen=True)
class CellShape:
    """One cell in display space.

    ``rect`` is the computed position; ``override`` is only set for cells
    drawn as custom, in which case ``rect`` is the ghost outline.
    """

    index: CellIndex
    status: CellStatus
    rect: QRectF
    override: QRectF | None = None


@dataclass(frozen=True)
class CenterLineShape:
    line: LineRef
    segment: QLineF
    handle: QPointF
    active: bool

    @property
    def handle_radius(self) -> float:
        return ACTIVE_HANDLE_RADIUS if self.active else HANDLE_RADIUS


@dataclass(frozen=True)
class RenderSnapshot:
    """Everything needed to paint one frame of the grid canvas."""

    mode: GridMode
    size: tuple[float, float]
    style: GridStyle
    cells: tuple[CellShape, ...]
    grid_lines: tuple[QLineF, ...]
    center_lines: tuple[CenterLineShape, ...]
    border: QRectF | None

    def ghosts(self) -> list[QRectF]:
        return [cell.rect for cell in self.cells if cell.status is CellStatus.CUSTOM]


def _to_rect(state: LayoutState, area: CropArea) -> QRectF:
    scaled = area.scaled(state.display_scale)
    return QRectF(scaled.x, scaled.y, scaled.width, scaled.height)


def build_snapshot(
    state: LayoutState,
    style: GridStyle | None = None,
    hovered: LineRef | None = None,
    dragged: LineRef | None = None,
) -> RenderSnapshot | None:
    """Derive display-space shapes from *state*; None before an image loads."""
    if state.extent is None:
        return None
    style = style or GridStyle()
    scale = state.display_scale
    width = state.extent.width * scale
    height = state.extent.height * scale

    disabled = state.disabled_indices()
    custom = state.custom_areas()
    cells = []
    for index, area in enumerate(state.computed_areas()):
        cell = CellIndex(index)
        rect = _to_rect(state, area)
        if cell in disabled:
            cells.append(CellShape(cell, CellStatus.DISABLED, rect))
        elif cell in custom:
            cells.append(CellShape(cell, CellStatus.CUSTOM, rect, _to_rect(state, custom[cell])))
        else:
            cells.append(CellShape(cell, CellStatus.NORMAL, rect))

    grid = state.grid
    grid_lines: list[QLineF] = []
    center_lines: list[CenterLineShape] = []
    border: QRectF | None = None
    if isinstance(grid, CenterLineGrid):
        active = {ref for ref in (hovered, dragged) if ref is not None}
        for index, position in enumerate(grid.lines_x):
            ref = LineRef(LineAxis.X, index)
            x = position * scale
            center_lines.append(
                CenterLineShape(ref, QLineF(x, 0.0, x, height), QPointF(x, height / 2.0), ref in active)
            )
        for index, position in enumerate(grid.lines_y):
            ref = LineRef(LineAxis.Y, index)
            y = position * scale
            center_lines.append(
                CenterLineShape(ref, QLineF(0.0, y, width, y), QPointF(width / 2.0, y), ref in active)
            )
    else:
        cell_w = width / grid.cols
        cell_h = height / grid.rows
        grid_lines.extend(QLineF(i * cell_w, 0.0, i * cell_w, height) for i in range(1, grid.cols))
        grid_lines.extend(QLineF(0.0, i * cell_h, width, i * cell_h) for i in range(1, grid.rows))
        border = QRectF(0.0, 0.0, width, height)

    return RenderSnapshot(
        mode=state.mode,
        size=(width, height),
        style=style,
        cells=tuple(cells),
        grid_lines=tuple(grid_lines),
        center_lines=tuple(center_lines),
        border=border,
    )


def _paint_disabled(adapter: RenderAdapter, rect: QRectF, outline: bool) -> None:
    inset = DISABLED_MARK_INSET
    adapter.draw_rect(rect, DISABLED_FILL, filled=True)
    adapter.draw_line(
        QLineF(rect.left() + inset, rect.top() + inset, rect.right() - inset, rect.bottom() - inset),
        DISABLED_MARK,
    )
    adapter.draw_line(
        QLineF(rect.right() - inset, rect.top() + inset, rect.left() + inset, rect.bottom() - inset),
        DISABLED_MARK,
    )
    if outline:
        adapter.draw_rect(rect, DISABLED_OUTLINE, filled=False)


def paint(adapter: RenderAdapter, snapshot: RenderSnapshot) -> None:
    """Draw *snapshot* onto *adapter*: image, cells, lines, then handles."""
    width, height = snapshot.size
    adapter.draw_image(QRectF(0.0, 0.0, width, height))

    centerline = snapshot.mode is GridMode.CENTERLINE
    for cell in snapshot.cells:
        if cell.status is CellStatus.DISABLED:
            _paint_disabled(adapter, cell.rect, outline=centerline)
        elif cell.status is CellStatus.CUSTOM:
            adapter.draw_rect(
                cell.rect, GHOST_FILL_CENTERLINE if centerline else GHOST_FILL_UNIFORM, filled=True
            )
            if centerline:
                adapter.draw_rect(cell.rect, GHOST_OUTLINE, filled=False)
            if cell.override is not None:
                adapter.draw_rect(cell.override, CUSTOM_FILL, filled=True)
                adapter.draw_rect(cell.override, CUSTOM_OUTLINE, filled=False)
        elif centerline:
            adapter.draw_rect(cell.rect, CELL_FILL, filled=True)
            adapter.draw_rect(cell.rect, CELL_OUTLINE, filled=False)

    color = snapshot.style.rgba()
    line_width = float(snapshot.style.line_width)
    for line in snapshot.grid_lines:
        adapter.draw_line(line, color, line_width)
    if snapshot.border is not None:
        adapter.draw_rect(snapshot.border, color, filled=False, width=line_width)

    for shape in snapshot.center_lines:
        stroke = ACTIVE_LINE if shape.active else color
        adapter.draw_line(shape.segment, stroke, line_width)
        adapter.draw_circle(shape.handle, shape.handle_radius, HANDLE_FILL, filled=True)
        adapter.draw_circle(shape.handle, shape.handle_radius, stroke, filled=False)


def paint_crop_editor(adapter: RenderAdapter, session: CropEditorSession) -> None:
    """Draw the crop editor canvas: dimmed image, lit crop region, handles."""
    width, height = session.editor_size()
    full = QRectF(0.0, 0.0, float(width), float(height))
    adapter.draw_image(full)
    adapter.draw_rect(full, EDITOR_DIM, filled=True)

    area = session.working_area.scaled(session.editor_scale)
    crop = QRectF(area.x, area.y, area.width, area.height)
    adapter.draw_image(full, clip=crop)
    adapter.draw_rect(crop, EDITOR_ACCENT, filled=False, width=EDITOR_OUTLINE_WIDTH)

    half = EDITOR_HANDLE_SIZE / 2.0
    for hx, hy in handle_positions(area).values():
        adapter.draw_rect(
            QRectF(hx - half, hy - half, EDITOR_HANDLE_SIZE, EDITOR_HANDLE_SIZE),
            EDITOR_ACCENT,
            filled=True,
        )


__all__ = [
    "RGBA",
    "CellShape",
    "CellStatus",
    "CenterLineShape",
    "GridStyle",
    "RenderAdapter",
    "RenderSnapshot",
    "build_snapshot",
    "hex_to_rgba",
    "paint",
    "paint_crop_editor",
]
