"""Tests for the HitTester module."""

import pytest
from PySide6.QtCore import QPointF

from gridcutter.layout.crop_editor.model import CropEditorSession
from gridcutter.layout.crop_editor.utils import CropHandle
from gridcutter.layout.hit_tester import HitTester
from gridcutter.layout.state import LayoutState
from gridcutter.layout.types import CellIndex, CropArea, GridMode, ImageExtent, LineAxis, LineRef


@pytest.fixture
def hit_tester():
    return HitTester()


@pytest.fixture
def centerline_state():
    state = LayoutState(mode=GridMode.CENTERLINE, rows=2, cols=2)
    state.load_image(ImageExtent(200, 200))
    return state


@pytest.fixture
def session():
    """Crop box {50, 50, 100, 100} in a 400x400 image at editor scale 1."""
    return CropEditorSession(CellIndex(0), CropArea(50, 50, 100, 100), ImageExtent(400, 400), 1.0)


def test_unloaded_state_never_hits(hit_tester):
    state = LayoutState(mode=GridMode.CENTERLINE)
    assert hit_tester.hit_cell(state, QPointF(10, 10)) is None
    assert hit_tester.hit_line(state, QPointF(10, 10)) is None


def test_uniform_cell_by_division(hit_tester):
    state = LayoutState(rows=2, cols=2)
    state.load_image(ImageExtent(100, 100))
    assert hit_tester.hit_cell(state, QPointF(10, 10)) == 0
    assert hit_tester.hit_cell(state, QPointF(60, 10)) == 1
    assert hit_tester.hit_cell(state, QPointF(10, 60)) == 2
    assert hit_tester.hit_cell(state, QPointF(99, 99)) == 3
    assert hit_tester.hit_cell(state, QPointF(100, 50)) is None
    assert hit_tester.hit_cell(state, QPointF(-1, 50)) is None


def test_uniform_cell_respects_display_scale(hit_tester):
    state = LayoutState(rows=2, cols=2)
    state.load_image(ImageExtent(200, 200))
    state.set_display_scale(0.5)
    assert hit_tester.hit_cell(state, QPointF(60, 10)) == 1


def test_centerline_cell_scan(hit_tester, centerline_state):
    # Cells are 95x95 centred on 50 and 150.
    assert hit_tester.hit_cell(centerline_state, QPointF(50, 50)) == 0
    assert hit_tester.hit_cell(centerline_state, QPointF(150, 150)) == 3
    assert hit_tester.hit_cell(centerline_state, QPointF(100, 100)) is None


def test_centerline_overlap_resolves_to_lowest_index(hit_tester, centerline_state):
    centerline_state.set_center_line(LineRef(LineAxis.X, 1), 60)
    assert hit_tester.hit_cell(centerline_state, QPointF(55, 50)) == 0


def test_line_hit_tolerance(hit_tester, centerline_state):
    assert hit_tester.hit_line(centerline_state, QPointF(64, 100)) == LineRef(LineAxis.X, 0)
    assert hit_tester.hit_line(centerline_state, QPointF(65, 100)) is None


def test_x_line_wins_over_y_line(hit_tester, centerline_state):
    assert hit_tester.hit_line(centerline_state, QPointF(55, 55)) == LineRef(LineAxis.X, 0)


def test_y_line_hit(hit_tester, centerline_state):
    assert hit_tester.hit_line(centerline_state, QPointF(100, 148)) == LineRef(LineAxis.Y, 1)


def test_no_line_hits_in_uniform_mode(hit_tester):
    state = LayoutState(rows=2, cols=2)
    state.load_image(ImageExtent(200, 200))
    assert hit_tester.hit_line(state, QPointF(50, 50)) is None


def test_line_tolerance_is_in_display_space(hit_tester):
    state = LayoutState(mode=GridMode.CENTERLINE, rows=1, cols=2)
    state.load_image(ImageExtent(400, 400))
    state.set_display_scale(0.5)
    # Line x0 sits at source 100, display 50.
    assert hit_tester.hit_line(state, QPointF(60, 10)) == LineRef(LineAxis.X, 0)
    assert hit_tester.hit_line(state, QPointF(66, 10)) is None


@pytest.mark.parametrize(
    "point, expected",
    [
        (QPointF(52, 52), CropHandle.NW),
        (QPointF(148, 52), CropHandle.NE),
        (QPointF(52, 148), CropHandle.SW),
        (QPointF(148, 148), CropHandle.SE),
        (QPointF(100, 52), CropHandle.N),
        (QPointF(100, 148), CropHandle.S),
        (QPointF(52, 100), CropHandle.W),
        (QPointF(148, 100), CropHandle.E),
        (QPointF(100, 100), CropHandle.MOVE),
        (QPointF(300, 300), None),
    ],
)
def test_handle_hits(hit_tester, session, point, expected):
    assert hit_tester.hit_handle(session, point) == expected


def test_handle_window_is_exclusive(hit_tester, session):
    assert hit_tester.hit_handle(session, QPointF(62, 80)) is CropHandle.MOVE
    assert hit_tester.hit_handle(session, QPointF(38, 50)) is None


def test_corner_beats_edge_on_small_box(hit_tester):
    tiny = CropEditorSession(CellIndex(0), CropArea(0, 0, 20, 20), ImageExtent(100, 100), 1.0)
    assert hit_tester.hit_handle(tiny, QPointF(5, 5)) is CropHandle.NW


def test_handle_hit_uses_editor_scale(hit_tester):
    scaled = CropEditorSession(CellIndex(0), CropArea(100, 100, 200, 200), ImageExtent(800, 800), 0.5)
    assert hit_tester.hit_handle(scaled, QPointF(150, 150)) is CropHandle.SE
