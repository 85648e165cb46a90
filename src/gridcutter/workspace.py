"""
Top-level editing session.

``Workspace`` owns the single :class:`LayoutState` of a session and wires it
to the hit tester, both interaction controllers, the update scheduler, the
render adapter and the settings store. UI code talks to this object only.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from PIL import Image
from PySide6.QtCore import QObject, Qt

from .config import (
    CROP_EDITOR_MAX_HEIGHT,
    CROP_EDITOR_MAX_WIDTH,
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_EXPORT_PREFIX,
    MAX_GRID_DIMENSION,
    VIEWPORT_MAX_HEIGHT,
    VIEWPORT_PADDING,
)
from .layout.controller import GridInteractionController, PointerEvent, PointerKind
from .layout.crop_editor import CropEditorController, CropEditorSession
from .layout.hit_tester import HitTester
from .layout.preview import ExportItem, PreviewItem, build_previews, export_plan
from .layout.render import (
    GridStyle,
    RenderAdapter,
    build_snapshot,
    hex_to_rgba,
    paint,
    paint_crop_editor,
)
from .layout.scheduler import PointerThrottle, UpdateScheduler
from .layout.state import GridSummary, LayoutState, coerce_mode
from .layout.types import CellIndex, CropArea, GridMode, ImageExtent
from .settings import SettingsManager

_LOGGER = logging.getLogger(__name__)

MAX_LINE_WIDTH = 10


def clamp_dimension(value: Any) -> int:
    """Return a row/column count from user input, bounded to the UI range."""
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        count = 1
    return max(1, min(MAX_GRID_DIMENSION, count))


class Workspace:
    """Session owner that routes UI actions to the layout engine."""

    def __init__(
        self,
        *,
        settings: SettingsManager | None = None,
        render_adapter: RenderAdapter | None = None,
        editor_adapter: RenderAdapter | None = None,
        on_previews: Callable[[list[PreviewItem]], None] | None = None,
        on_cursor_change: Callable[[Qt.CursorShape | None], None] | None = None,
        on_editor_update: Callable[[], None] | None = None,
        throttle: PointerThrottle | None = None,
        timer_parent: QObject | None = None,
    ) -> None:
        """Initialize the workspace.

        Parameters
        ----------
        settings:
            Loaded settings store; grid parameters are read from it once and
            written back after every change. Optional.
        render_adapter:
            Surface the main grid canvas is painted on.
        editor_adapter:
            Surface the crop editor canvas is painted on.
        on_previews:
            Callback receiving the regenerated preview list.
        on_cursor_change:
            Callback to change cursor, signature: (cursor_shape or None to unset).
        on_editor_update:
            Callback after the crop editor changed, in addition to repainting
            ``editor_adapter``.
        throttle:
            Pointer-move throttle for the grid canvas (optional).
        timer_parent:
            Parent QObject for the scheduler timers (optional).
        """
        self._settings = settings
        self._render_adapter = render_adapter
        self._editor_adapter = editor_adapter
        self._on_previews = on_previews
        self._on_editor_update = on_editor_update

        self._state = LayoutState()
        self._style = GridStyle()
        self._image: Image.Image | None = None
        self._previews: list[PreviewItem] = []
        self._viewport: tuple[float, float] | None = None

        self._hit_tester = HitTester()
        self._scheduler = UpdateScheduler(
            on_render=self.render_now,
            on_preview=self.refresh_previews,
            timer_parent=timer_parent,
        )
        self._grid_controller = GridInteractionController(
            self._state,
            hit_tester=self._hit_tester,
            on_request_render=self._scheduler.request_render,
            on_request_preview=self._scheduler.request_preview,
            on_flush_preview=self._scheduler.flush_preview,
            on_cursor_change=on_cursor_change,
            throttle=throttle,
        )
        self._crop_editor = CropEditorController(
            self._state,
            hit_tester=self._hit_tester,
            on_request_update=self._handle_editor_update,
            on_saved=self._handle_override_saved,
            on_cursor_change=on_cursor_change,
        )

        if settings is not None:
            self.apply_settings()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def state(self) -> LayoutState:
        return self._state

    @property
    def style(self) -> GridStyle:
        return self._style

    @property
    def scheduler(self) -> UpdateScheduler:
        return self._scheduler

    @property
    def grid_controller(self) -> GridInteractionController:
        return self._grid_controller

    @property
    def crop_editor(self) -> CropEditorController:
        return self._crop_editor

    @property
    def previews(self) -> list[PreviewItem]:
        return list(self._previews)

    def summary(self) -> GridSummary:
        return self._state.summary()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    def apply_settings(self) -> None:
        """Copy the stored grid parameters into the session."""
        settings = self._settings
        if settings is None:
            return
        self._state.set_cell_size(settings.get("cell_width"), settings.get("cell_height"))
        self._state.set_grid_params(
            mode=coerce_mode(settings.get("mode"), self._state.mode),
            rows=clamp_dimension(settings.get("rows")),
            cols=clamp_dimension(settings.get("cols")),
        )
        self._style = GridStyle(
            color=str(settings.get("grid_color")),
            line_width=float(settings.get("line_width")),
        )
        _LOGGER.debug("Applied settings from %s", settings.path)

    # ------------------------------------------------------------------
    # Image and viewport
    # ------------------------------------------------------------------
    def load_image(
        self,
        image: Image.Image | None = None,
        *,
        extent: ImageExtent | None = None,
        viewport: tuple[float, float] | None = None,
    ) -> ImageExtent:
        """Adopt a new image, either decoded (*image*) or by size only (*extent*)."""
        if image is not None:
            extent = ImageExtent(image.width, image.height)
        if extent is None:
            raise ValueError("load_image needs an image or an extent")

        self._image = image
        self._crop_editor.close()
        self._grid_controller.reset()
        self._state.load_image(extent)
        if viewport is not None:
            self._viewport = viewport
        self._fit_viewport()
        self._persist_cell_size()
        _LOGGER.info("Loaded %dx%d image", extent.width, extent.height)
        self._schedule_all()
        return extent

    def resize_viewport(self, width: float, height: float = VIEWPORT_MAX_HEIGHT) -> float:
        """Refit the display scale to a new canvas container size."""
        self._viewport = (width, height)
        scale = self._fit_viewport()
        self._scheduler.request_render()
        return scale

    # ------------------------------------------------------------------
    # Grid parameters
    # ------------------------------------------------------------------
    def set_mode(self, mode: GridMode | str) -> None:
        self._state.set_grid_params(mode=coerce_mode(mode, self._state.mode))
        self._after_topology_change()

    def set_rows(self, value: Any) -> int:
        self._state.set_grid_params(rows=clamp_dimension(value))
        self._after_topology_change()
        return self._state.rows

    def set_cols(self, value: Any) -> int:
        self._state.set_grid_params(cols=clamp_dimension(value))
        self._after_topology_change()
        return self._state.cols

    def set_grid(self, rows: Any, cols: Any) -> tuple[int, int]:
        """Set both counts at once, each bounded to ``[1, 20]``."""
        self._state.set_grid_params(rows=clamp_dimension(rows), cols=clamp_dimension(cols))
        self._after_topology_change()
        return self._state.rows, self._state.cols

    def set_cell_width(self, value: Any) -> int:
        width, _ = self._state.set_cell_size(width=value)
        self._after_cell_size_change()
        return width

    def set_cell_height(self, value: Any) -> int:
        _, height = self._state.set_cell_size(height=value)
        self._after_cell_size_change()
        return height

    def auto_calculate_cell_size(self) -> tuple[int, int]:
        size = self._state.auto_calculate_cell_size()
        self._after_cell_size_change()
        return size

    def reset_center_lines(self) -> None:
        """Put the center lines back at even spacing and re-enable every cell."""
        self._grid_controller.reset()
        self._state.reset_center_lines()
        self._schedule_all()

    def set_grid_color(self, color: str) -> None:
        """Change the grid colour.

        Raises
        ------
        ValueError
            If *color* is not a ``#rrggbb`` string.
        """
        hex_to_rgba(color)
        self._style = replace(self._style, color=color)
        self._scheduler.request_render()
        self._persist(grid_color=color)

    def set_line_width(self, value: Any) -> int:
        try:
            width = int(value)
        except (TypeError, ValueError, OverflowError):
            width = int(self._style.line_width)
        width = max(1, min(MAX_LINE_WIDTH, width))
        self._style = replace(self._style, line_width=float(width))
        self._scheduler.request_render()
        self._persist(line_width=width)
        return width

    # ------------------------------------------------------------------
    # Cells
    # ------------------------------------------------------------------
    def toggle_cell(self, index: int) -> bool:
        disabled = self._state.toggle_disabled(index)
        self._schedule_all()
        return disabled

    def disable_cell(self, index: int) -> None:
        self._state.set_disabled(index, True)
        self._schedule_all()

    def restore_cell(self, index: int) -> None:
        self._state.set_disabled(index, False)
        self._schedule_all()

    def clear_override(self, index: int) -> bool:
        removed = self._state.clear_custom_area(index)
        if removed:
            self._schedule_all()
        return removed

    def open_crop_editor(
        self,
        index: int,
        max_width: float = CROP_EDITOR_MAX_WIDTH,
        max_height: float = CROP_EDITOR_MAX_HEIGHT,
    ) -> CropEditorSession | None:
        return self._crop_editor.open(index, max_width, max_height)

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------
    def dispatch_grid_event(self, event: PointerEvent) -> None:
        self._grid_controller.dispatch(event)

    def dispatch_editor_event(self, event: PointerEvent) -> None:
        """Route a pointer event on the crop editor canvas."""
        editor = self._crop_editor
        if event.kind is PointerKind.DOWN:
            editor.handle_pointer_down(event.position)
        elif event.kind is PointerKind.MOVE:
            editor.handle_pointer_move(event.position)
        elif event.kind is PointerKind.UP:
            editor.handle_pointer_up()
        else:
            editor.handle_pointer_leave()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def render_now(self) -> None:
        """Paint the grid canvas immediately."""
        if self._render_adapter is None:
            return
        snapshot = build_snapshot(
            self._state,
            self._style,
            hovered=self._grid_controller.hovered_line(),
            dragged=self._grid_controller.dragged_line(),
        )
        if snapshot is not None:
            paint(self._render_adapter, snapshot)

    def refresh_previews(self) -> list[PreviewItem]:
        """Regenerate previews now and hand them to the preview callback."""
        self._previews = build_previews(self._state, self._image)
        if self._on_previews is not None:
            self._on_previews(list(self._previews))
        return list(self._previews)

    def export_plan(
        self, prefix: str = DEFAULT_EXPORT_PREFIX, fmt: str = DEFAULT_EXPORT_FORMAT
    ) -> list[ExportItem]:
        return export_plan(self._state, prefix, fmt)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _fit_viewport(self) -> float:
        if self._viewport is None:
            return self._state.display_scale
        width, height = self._viewport
        return self._state.fit_to_viewport(
            max(1.0, float(width) - VIEWPORT_PADDING),
            min(float(height), float(VIEWPORT_MAX_HEIGHT)),
        )

    def _schedule_all(self) -> None:
        self._scheduler.request_render()
        self._scheduler.request_preview()

    def _after_topology_change(self) -> None:
        self._crop_editor.close()
        self._grid_controller.reset()
        self._schedule_all()
        self._persist(
            mode=self._state.mode.value,
            rows=self._state.rows,
            cols=self._state.cols,
        )
        self._persist_cell_size()

    def _after_cell_size_change(self) -> None:
        self._schedule_all()
        self._persist_cell_size()

    def _persist_cell_size(self) -> None:
        width, height = self._state.cell_size
        self._persist(cell_width=width, cell_height=height)

    def _persist(self, **values: Any) -> None:
        if self._settings is None:
            return
        for key, value in values.items():
            self._settings.set(key, value)

    def _handle_editor_update(self) -> None:
        session = self._crop_editor.session
        if self._editor_adapter is not None and session is not None:
            paint_crop_editor(self._editor_adapter, session)
        if self._on_editor_update is not None:
            self._on_editor_update()

    def _handle_override_saved(self, index: CellIndex, area: CropArea) -> None:
        _LOGGER.debug("Override stored for cell %d", index)
        self._schedule_all()


__all__ = ["Workspace", "clamp_dimension"]
