"""Tests for the pure cell geometry functions."""

import pytest

from gridcutter.layout import geometry
from gridcutter.layout.types import CellIndex, CenterLineGrid, CropArea, ImageExtent, UniformGrid


def test_uniform_two_by_two_cells():
    cells = geometry.compute_cells(UniformGrid(2, 2), ImageExtent(100, 100))
    assert cells == [
        CropArea(0, 0, 50, 50),
        CropArea(50, 0, 50, 50),
        CropArea(0, 50, 50, 50),
        CropArea(50, 50, 50, 50),
    ]


def test_uniform_cells_use_fractional_sizes():
    cells = geometry.compute_cells(UniformGrid(1, 3), ImageExtent(100, 30))
    assert cells[1].x == pytest.approx(100 / 3)
    assert cells[2].width == pytest.approx(100 / 3)
    assert cells[2].right == pytest.approx(100)


def test_even_center_lines_sit_in_slice_middles():
    assert geometry.even_center_lines(4, 400) == (50.0, 150.0, 250.0, 350.0)
    assert geometry.even_center_lines(0, 400) == ()


def test_centerline_cell_is_shifted_not_shrunk_at_left_edge():
    area = geometry.centerline_area(10, 50, 60, 60, ImageExtent(200, 200))
    assert area == CropArea(0, 20, 60, 60)


def test_centerline_cell_is_shifted_at_right_edge():
    area = geometry.centerline_area(195, 100, 60, 60, ImageExtent(200, 200))
    assert area.x == 140
    assert area.width == 60


def test_centerline_cell_larger_than_image_is_pinned_and_clipped():
    area = geometry.centerline_area(50, 50, 300, 40, ImageExtent(100, 100))
    assert area.x == 0
    assert area.width == 100
    assert area.height == 40


def test_centerline_cells_are_row_major():
    grid = CenterLineGrid(2, 2, 20, 20, (25.0, 75.0), (25.0, 75.0))
    cells = geometry.compute_cells(grid, ImageExtent(100, 100))
    assert [(c.x, c.y) for c in cells] == [(15, 15), (65, 15), (15, 65), (65, 65)]


@pytest.mark.parametrize(
    "grid",
    [
        UniformGrid(3, 7),
        CenterLineGrid(2, 3, 90, 90, (5.0, 100.0, 295.0), (10.0, 190.0)),
    ],
)
def test_computed_areas_stay_inside_extent(grid):
    extent = ImageExtent(300, 200)
    for area in geometry.compute_cells(grid, extent):
        assert area.x >= 0 and area.y >= 0
        assert area.right <= extent.width + 1e-9
        assert area.bottom <= extent.height + 1e-9


def test_computed_area_matches_full_list():
    grid = CenterLineGrid(2, 3, 40, 30, (20.0, 60.0, 100.0), (30.0, 90.0))
    extent = ImageExtent(120, 120)
    cells = geometry.compute_cells(grid, extent)
    for index, expected in enumerate(cells):
        assert geometry.computed_area(grid, extent, CellIndex(index)) == expected


def test_effective_areas_apply_overrides_verbatim():
    custom = {CellIndex(1): CropArea(5, 5, 10, 10)}
    areas = geometry.effective_areas(UniformGrid(1, 2), ImageExtent(100, 50), custom)
    assert len(areas) == 2
    assert areas[0] == CropArea(0, 0, 50, 50)
    assert areas[1] == CropArea(5, 5, 10, 10)


def test_auto_cell_size_uses_smallest_gap():
    size = geometry.auto_calculate_cell_size(
        (50.0, 150.0, 250.0, 350.0), (100.0, 300.0), ImageExtent(400, 400), (100, 100)
    )
    assert size == (95, 190)


def test_auto_cell_size_counts_edge_distance_twice():
    size = geometry.auto_calculate_cell_size(
        (20.0, 200.0), (100.0, 300.0), ImageExtent(400, 400), (100, 100)
    )
    assert size[0] == 38


def test_auto_cell_size_is_order_independent():
    crossed = geometry.auto_calculate_cell_size(
        (250.0, 150.0), (100.0, 300.0), ImageExtent(400, 400), (100, 100)
    )
    ordered = geometry.auto_calculate_cell_size(
        (150.0, 250.0), (100.0, 300.0), ImageExtent(400, 400), (100, 100)
    )
    assert crossed == ordered
    assert crossed[0] > 0


def test_auto_cell_size_never_below_minimum():
    size = geometry.auto_calculate_cell_size(
        (100.0, 101.0), (100.0, 300.0), ImageExtent(400, 400), (100, 100)
    )
    assert size[0] == 10


def test_auto_cell_size_falls_back_for_single_line():
    size = geometry.auto_calculate_cell_size((200.0,), (100.0, 300.0), ImageExtent(400, 400), (77, 88))
    assert size[0] == 77


def test_fit_scale_never_enlarges():
    assert geometry.fit_scale(ImageExtent(100, 100), 800, 600) == 1.0
    assert geometry.fit_scale(ImageExtent(1600, 600), 800, 600) == pytest.approx(0.5)
    assert geometry.fit_scale(ImageExtent(100, 100), 0, 600) == 1.0
