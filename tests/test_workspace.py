"""Tests for the Workspace session owner."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from PIL import Image
from PySide6.QtCore import QPointF

from gridcutter.layout.controller import PointerEvent
from gridcutter.layout.scheduler import PointerThrottle
from gridcutter.layout.types import CropArea, GridMode, ImageExtent, LineAxis, LineRef
from gridcutter.settings import SettingsManager
from gridcutter.workspace import Workspace, clamp_dimension


@pytest.fixture
def settings(tmp_path: Path):
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    return manager


@pytest.fixture
def workspace(qapp, settings):
    ws = Workspace(settings=settings, throttle=PointerThrottle(interval_ms=0))
    yield ws
    ws.scheduler.cancel()


def test_clamp_dimension_bounds_user_input():
    assert clamp_dimension(0) == 1
    assert clamp_dimension(25) == 20
    assert clamp_dimension("x") == 1
    assert clamp_dimension("7") == 7
    assert clamp_dimension(float("inf")) == 1


def test_settings_are_applied_on_start(qapp, settings):
    settings.set("rows", 3)
    settings.set("mode", "centerline")
    settings.set("grid_color", "#00ff00")
    ws = Workspace(settings=settings)
    assert ws.state.rows == 3
    assert ws.state.mode is GridMode.CENTERLINE
    assert ws.style.color == "#00ff00"
    ws.scheduler.cancel()


def test_load_image_fits_viewport(workspace):
    extent = workspace.load_image(extent=ImageExtent(2000, 1000), viewport=(1040, 900))
    assert extent == ImageExtent(2000, 1000)
    assert workspace.state.display_scale == pytest.approx(0.5)
    assert workspace.scheduler.render_pending()
    assert workspace.scheduler.preview_pending()


def test_load_image_needs_a_source(workspace):
    with pytest.raises(ValueError):
        workspace.load_image()


def test_grid_changes_are_bounded_and_persisted(workspace, settings):
    assert workspace.set_grid(0, 40) == (1, 20)
    assert settings.get("rows") == 1
    assert settings.get("cols") == 20
    workspace.set_mode("centerline")
    assert settings.get("mode") == "centerline"


def test_topology_change_clears_overrides(workspace):
    workspace.load_image(extent=ImageExtent(400, 400))
    workspace.state.set_custom_area(0, CropArea(0, 0, 10, 10))
    workspace.disable_cell(1)
    workspace.set_cols(3)
    assert workspace.state.custom_areas() == {}
    assert workspace.state.disabled_indices() == frozenset()


def test_cell_size_is_persisted(workspace, settings):
    workspace.set_mode(GridMode.CENTERLINE)
    workspace.load_image(extent=ImageExtent(400, 600))
    assert settings.get("cell_width") == 95
    assert workspace.set_cell_width(3) == 10
    assert settings.get("cell_width") == 10


def test_style_changes(workspace, settings):
    workspace.set_grid_color("#123456")
    assert settings.get("grid_color") == "#123456"
    with pytest.raises(ValueError):
        workspace.set_grid_color("blue")
    assert workspace.set_line_width(50) == 10
    assert settings.get("line_width") == 10


def test_reset_lines_keeps_overrides(workspace):
    workspace.set_mode("centerline")
    workspace.load_image(extent=ImageExtent(400, 600))
    workspace.state.set_center_line(LineRef(LineAxis.X, 0), 200)
    workspace.state.set_custom_area(2, CropArea(0, 0, 30, 30))
    workspace.disable_cell(3)
    workspace.reset_center_lines()
    assert workspace.state.grid.lines_x[0] == 50
    assert workspace.state.disabled_indices() == frozenset()
    assert 2 in workspace.state.custom_areas()


def test_grid_events_toggle_cells(workspace):
    workspace.load_image(extent=ImageExtent(400, 600))
    workspace.dispatch_grid_event(PointerEvent.at("down", 10, 10))
    workspace.dispatch_grid_event(PointerEvent.at("up", 10, 10))
    assert workspace.state.is_disabled(0)


def test_crop_editor_save_becomes_override(workspace):
    workspace.load_image(extent=ImageExtent(400, 600))
    session = workspace.open_crop_editor(0)
    assert session is not None
    workspace.dispatch_editor_event(PointerEvent.at("down", 50, 50))
    workspace.dispatch_editor_event(PointerEvent.at("move", 60, 70))
    workspace.dispatch_editor_event(PointerEvent.at("up", 60, 70))
    workspace.crop_editor.save()
    assert workspace.state.custom_area(0) == CropArea(10, 20, 100, 100)
    assert workspace.export_plan()[0].area == CropArea(10, 20, 100, 100)


def test_disabled_cell_cannot_be_edited(workspace):
    workspace.load_image(extent=ImageExtent(400, 600))
    workspace.disable_cell(0)
    assert workspace.open_crop_editor(0) is None
    workspace.restore_cell(0)
    assert workspace.open_crop_editor(0) is not None


def test_render_and_previews_reach_collaborators(qapp, settings):
    adapter = MagicMock()
    on_previews = MagicMock()
    ws = Workspace(settings=settings, render_adapter=adapter, on_previews=on_previews)
    image = Image.new("RGB", (200, 100), (10, 20, 30))
    ws.load_image(image)
    ws.render_now()
    adapter.draw_image.assert_called()
    previews = ws.refresh_previews()
    assert len(previews) == 24
    assert previews[0].thumbnail is not None
    on_previews.assert_called_once()
    ws.scheduler.cancel()


def test_editor_adapter_is_repainted(qapp):
    editor_adapter = MagicMock()
    ws = Workspace(editor_adapter=editor_adapter)
    ws.load_image(extent=ImageExtent(400, 400))
    ws.open_crop_editor(0)
    editor_adapter.draw_image.assert_called()
    ws.crop_editor.handle_pointer_move(QPointF(1, 1))
    ws.scheduler.cancel()


def test_summary_tracks_disabled_cells(workspace):
    workspace.load_image(extent=ImageExtent(400, 600))
    workspace.toggle_cell(5)
    summary = workspace.summary()
    assert (summary.enabled, summary.total) == (23, 24)
    assert (summary.cell_width, summary.cell_height) == (100, 100)


def test_clear_override_restores_computed_area(workspace):
    workspace.load_image(extent=ImageExtent(400, 600))
    workspace.state.set_custom_area(1, CropArea(5, 5, 40, 40))
    assert workspace.clear_override(1) is True
    assert workspace.state.effective_area(1) == CropArea(100, 0, 100, 100)
    assert workspace.clear_override(1) is False
