"""Tests for preview derivation and the export plan."""

import io

import pytest
from PIL import Image

from gridcutter.layout.preview import (
    build_previews,
    export_plan,
    normalise_format,
    preview_columns,
    preview_size,
)
from gridcutter.layout.state import LayoutState
from gridcutter.layout.types import CropArea, ImageExtent


@pytest.fixture
def state():
    state = LayoutState(rows=2, cols=2)
    state.load_image(ImageExtent(400, 200))
    return state


def test_preview_size_shrinks_only():
    assert preview_size(CropArea(0, 0, 400, 200)) == (100, 50)
    assert preview_size(CropArea(0, 0, 60, 30)) == (60, 30)
    assert preview_size(CropArea(0, 0, 50, 200)) == (25, 100)


def test_preview_columns_are_capped():
    assert preview_columns(2) == 2
    assert preview_columns(12) == 4


def test_previews_without_image_have_no_thumbnails(state):
    state.set_disabled(1, True)
    items = build_previews(state)
    assert [item.disabled for item in items] == [False, True, False, False]
    assert all(item.thumbnail is None for item in items)
    assert items[0].size == (100, 50)
    assert items[3].label == "4"


def test_previews_crop_enabled_cells_from_image(state):
    image = Image.new("RGB", (400, 200), (255, 0, 0))
    image.paste((0, 0, 255), (200, 0, 400, 100))
    state.set_disabled(2, True)
    items = build_previews(state, image)

    assert items[2].thumbnail is None
    with Image.open(io.BytesIO(items[1].thumbnail)) as thumb:
        assert thumb.format == "JPEG"
        assert thumb.size == (100, 50)
        red, green, blue = thumb.getpixel((50, 25))
        assert blue > 200 and red < 60


def test_previews_use_overrides(state):
    state.set_custom_area(0, CropArea(10, 10, 40, 20))
    items = build_previews(state)
    assert items[0].area == CropArea(10, 10, 40, 20)
    assert items[0].size == (40, 20)


def test_export_plan_names_follow_cell_index(state):
    state.set_disabled(1, True)
    plan = export_plan(state, prefix="sticker", fmt="JPG")
    assert [item.filename for item in plan] == [
        "sticker_1.jpeg",
        "sticker_3.jpeg",
        "sticker_4.jpeg",
    ]
    assert plan[1].box == (0, 100, 200, 200)


def test_export_plan_defaults(state):
    plan = export_plan(state, prefix="  ")
    assert plan[0].filename == "emoji_1.png"
    assert len(plan) == 4


def test_export_plan_rounds_fractional_boxes():
    state = LayoutState(rows=1, cols=3)
    state.load_image(ImageExtent(100, 10))
    boxes = [item.box for item in export_plan(state)]
    assert boxes == [(0, 0, 33, 10), (33, 0, 67, 10), (66, 0, 100, 10)]


def test_unknown_export_format_is_rejected():
    with pytest.raises(ValueError):
        normalise_format("gif")
