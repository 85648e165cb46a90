"""Tests for the crop editor controller."""

from unittest.mock import MagicMock

import pytest
from PySide6.QtCore import QPointF, Qt

from gridcutter.layout.crop_editor.controller import CropEditorController
from gridcutter.layout.crop_editor.model import CropEditorSession
from gridcutter.layout.crop_editor.strategies import PanStrategy, ResizeStrategy
from gridcutter.layout.crop_editor.utils import CropHandle
from gridcutter.layout.hit_tester import HitTester
from gridcutter.layout.state import LayoutState
from gridcutter.layout.types import CellIndex, CropArea, ImageExtent


@pytest.fixture
def state():
    state = LayoutState(rows=2, cols=2)
    state.load_image(ImageExtent(400, 400))
    return state


def create_controller(state):
    callbacks = MagicMock()
    controller = CropEditorController(
        state,
        hit_tester=HitTester(),
        on_request_update=callbacks.update,
        on_saved=callbacks.saved,
        on_cursor_change=callbacks.cursor,
    )
    return controller, callbacks


def test_open_captures_effective_area(state):
    controller, callbacks = create_controller(state)
    session = controller.open(3)
    assert controller.is_open()
    assert session.original_area == CropArea(200, 200, 200, 200)
    assert session.editor_scale == 1.0
    callbacks.update.assert_called()


def test_open_uses_override_when_present(state):
    state.set_custom_area(1, CropArea(210, 10, 50, 60))
    controller, _ = create_controller(state)
    assert controller.open(1).original_area == CropArea(210, 10, 50, 60)


def test_open_scales_large_images():
    state = LayoutState(rows=1, cols=1)
    state.load_image(ImageExtent(1600, 600))
    controller, _ = create_controller(state)
    assert controller.open(0).editor_scale == pytest.approx(0.5)


def test_open_refuses_disabled_cell(state):
    state.set_disabled(2, True)
    controller, _ = create_controller(state)
    assert controller.open(2) is None
    assert not controller.is_open()


def test_open_refuses_without_image():
    controller, _ = create_controller(LayoutState())
    assert controller.open(0) is None


def test_drag_resize_and_save(state):
    controller, callbacks = create_controller(state)
    controller.open(0)
    assert controller.handle_pointer_down(QPointF(200, 200)) is CropHandle.SE
    callbacks.cursor.assert_called_with(Qt.CursorShape.SizeFDiagCursor)
    controller.handle_pointer_move(QPointF(150, 180))
    controller.handle_pointer_up()
    assert controller.session.working_area == CropArea(0, 0, 150, 180)

    stored = controller.save()
    assert stored == CropArea(0, 0, 150, 180)
    assert state.custom_area(0) == stored
    assert not controller.is_open()
    callbacks.saved.assert_called_once_with(0, stored)


def test_drag_move_converts_display_delta():
    state = LayoutState(rows=1, cols=2)
    state.load_image(ImageExtent(1600, 1200))
    controller, _ = create_controller(state)
    session = controller.open(0)
    assert session.editor_scale == pytest.approx(0.5)
    assert controller.handle_pointer_down(QPointF(200, 300)) is CropHandle.MOVE
    controller.handle_pointer_move(QPointF(250, 300))
    assert session.working_area.x == pytest.approx(100)


def test_hover_updates_cursor_without_dragging(state):
    controller, callbacks = create_controller(state)
    controller.open(0)
    controller.handle_pointer_move(QPointF(100, 100))
    callbacks.cursor.assert_called_with(Qt.CursorShape.SizeAllCursor)
    assert controller.session.working_area == CropArea(0, 0, 200, 200)


def test_press_outside_box_starts_nothing(state):
    controller, _ = create_controller(state)
    controller.open(0)
    assert controller.handle_pointer_down(QPointF(350, 350)) is None
    controller.handle_pointer_move(QPointF(300, 300))
    assert not controller.session.has_changed()


def test_cancel_discards_changes(state):
    controller, callbacks = create_controller(state)
    controller.open(0)
    controller.handle_pointer_down(QPointF(100, 100))
    controller.handle_pointer_move(QPointF(150, 150))
    controller.cancel()
    assert state.custom_areas() == {}
    callbacks.saved.assert_not_called()


def test_reset_and_center_actions(state):
    controller, _ = create_controller(state)
    controller.open(0)
    controller.handle_pointer_down(QPointF(100, 100))
    controller.handle_pointer_move(QPointF(130, 140))
    controller.handle_pointer_up()
    assert controller.reset() == CropArea(0, 0, 200, 200)
    assert controller.center() == CropArea(100, 100, 200, 200)


def test_actions_without_session_return_none(state):
    controller, _ = create_controller(state)
    assert controller.save() is None
    assert controller.reset() is None
    assert controller.center() is None
    assert controller.handle_pointer_down(QPointF(0, 0)) is None


def test_resize_strategy_drops_perpendicular_delta():
    session = CropEditorSession(CellIndex(0), CropArea(0, 0, 50, 50), ImageExtent(200, 200), 0.5)
    changed = MagicMock()
    strategy = ResizeStrategy(handle=CropHandle.E, session=session, on_crop_changed=changed)
    assert session.active_handle is CropHandle.E

    strategy.on_drag(QPointF(0, 40))
    changed.assert_not_called()

    strategy.on_drag(QPointF(10, 40))
    assert session.working_area == CropArea(0, 0, 70, 50)
    changed.assert_called_once()

    strategy.on_end()
    assert session.active_handle is None


def test_pan_strategy_moves_in_source_pixels():
    session = CropEditorSession(CellIndex(0), CropArea(0, 0, 50, 50), ImageExtent(200, 200), 0.5)
    changed = MagicMock()
    strategy = PanStrategy(session=session, on_crop_changed=changed)
    assert session.active_handle is CropHandle.MOVE

    strategy.on_drag(QPointF(10, 20))
    assert session.working_area == CropArea(20, 40, 50, 50)
    changed.assert_called_once()
