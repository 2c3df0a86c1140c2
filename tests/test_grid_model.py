import pytest

from gridpoint.domain.geometry.grid_model import (
    cell_at, cell_for_index, cell_rect, check_grid_fits, grid_lines, is_entry_complete,
    iter_cells, max_entry_digits, parse_cell_number
)
from gridpoint.domain.models.click_config import GridConfig
from gridpoint.domain.models.geometry import Display, Rect

DEFAULT_GRID = GridConfig(rows=6, cols=10)


def test_cell_23_on_full_hd(full_hd):
    result = cell_rect(full_hd, DEFAULT_GRID, 23)
    assert result.is_success
    rect = result.value
    assert (rect.x, rect.right) == (576, 768)
    assert (rect.y, rect.bottom) == (360, 540)


def test_cell_rect_is_offset_by_display_origin():
    display = Display(id=1, x=1920, y=-200, width=1280, height=1024)
    rect = cell_rect(display, GridConfig(rows=4, cols=4), 5).value
    assert rect == Rect(1920 + 320, -200 + 256, 320, 256)


def test_last_column_and_row_absorb_the_remainder():
    display = Display(id=0, x=0, y=0, width=1000, height=700)
    grid = GridConfig(rows=3, cols=3)
    last = cell_rect(display, grid, 8).value
    assert last == Rect(666, 466, 334, 234)
    assert cell_rect(display, grid, 0).value == Rect(0, 0, 333, 233)


@pytest.mark.parametrize("index", [-1, 60, 1000])
def test_cell_rect_rejects_out_of_range_index(full_hd, index):
    result = cell_rect(full_hd, DEFAULT_GRID, index)
    assert result.is_failure
    assert result.error.code == "InvalidIndex"


def test_cell_rect_rejects_bool_index(full_hd):
    assert cell_rect(full_hd, DEFAULT_GRID, True).is_failure


@pytest.mark.parametrize("rows,cols,width,height", [
    (6, 10, 1920, 1080),
    (7, 13, 1366, 768),
    (1, 1, 800, 600),
    (100, 100, 2561, 1441),
    (3, 9, 10, 10),
])
def test_cells_tile_the_display_without_overlap(rows, cols, width, height):
    display = Display(id=0, x=-50, y=30, width=width, height=height)
    grid = GridConfig(rows=rows, cols=cols)
    cells = list(iter_cells(display, grid))

    assert len(cells) == rows * cols
    assert sum(cell.rect.area for cell in cells) == display.area
    for cell in cells:
        assert display.rect.contains_rect(cell.rect)
        assert cell.rect.width >= 1 and cell.rect.height >= 1

    # adjacent cells share an edge instead of overlapping
    for cell in cells:
        if cell.col + 1 < cols:
            assert cells[cell.index + 1].rect.x == cell.rect.right
        if cell.row + 1 < rows:
            assert cells[cell.index + cols].rect.y == cell.rect.bottom


@pytest.mark.parametrize("rows,cols,width,height", [
    (6, 10, 1920, 1080),
    (7, 13, 1366, 768),
    (12, 5, 3840, 2160),
])
def test_centroid_maps_back_to_its_cell(rows, cols, width, height):
    display = Display(id=0, x=100, y=50, width=width, height=height)
    grid = GridConfig(rows=rows, cols=cols)
    for cell in iter_cells(display, grid):
        x, y = cell.rect.centroid()
        assert cell_at(display, grid, x, y) == cell.index


def test_cell_at_edges(full_hd):
    assert cell_at(full_hd, DEFAULT_GRID, 0, 0) == 0
    assert cell_at(full_hd, DEFAULT_GRID, 1919, 1079) == 59
    assert cell_at(full_hd, DEFAULT_GRID, 191.9, 0) == 0
    assert cell_at(full_hd, DEFAULT_GRID, 192, 0) == 1


def test_cell_at_outside_display_is_none(full_hd):
    assert cell_at(full_hd, DEFAULT_GRID, 1920, 10) is None
    assert cell_at(full_hd, DEFAULT_GRID, -1, 10) is None


def test_grid_that_does_not_fit_is_rejected():
    tiny = Display(id=0, x=0, y=0, width=5, height=5)
    result = check_grid_fits(tiny, DEFAULT_GRID)
    assert result.is_failure
    assert result.error.code == "GridTooDense"
    assert cell_rect(tiny, DEFAULT_GRID, 0).is_failure
    assert list(iter_cells(tiny, DEFAULT_GRID)) == []


def test_empty_grid_is_rejected(full_hd):
    assert check_grid_fits(full_hd, GridConfig(rows=0, cols=10)).error.code == "EmptyGrid"


def test_cell_for_index_has_row_col_and_label(full_hd):
    cell = cell_for_index(full_hd, DEFAULT_GRID, 23).value
    assert (cell.row, cell.col) == (2, 3)
    assert cell.label == "24"


def test_grid_lines_are_absolute(full_hd):
    xs, ys = grid_lines(full_hd, DEFAULT_GRID)
    assert xs[0] == 0 and xs[-1] == 1920 and len(xs) == 11
    assert ys[1] == 180 and len(ys) == 7


class TestNumericEntry:

    def test_numbers_are_one_based(self):
        assert parse_cell_number("1", DEFAULT_GRID).value == 0
        assert parse_cell_number("24", DEFAULT_GRID).value == 23
        assert parse_cell_number("60", DEFAULT_GRID).value == 59

    @pytest.mark.parametrize("text", ["0", "61", "", "abc", "-3", "2.5"])
    def test_invalid_numbers(self, text):
        result = parse_cell_number(text, DEFAULT_GRID)
        assert result.is_failure
        assert result.error.code == "InvalidCellNumber"

    def test_entry_completion(self):
        assert not is_entry_complete("5", DEFAULT_GRID)
        assert is_entry_complete("7", DEFAULT_GRID)
        assert is_entry_complete("12", DEFAULT_GRID)
        assert not is_entry_complete("", DEFAULT_GRID)

    def test_max_entry_digits(self):
        assert max_entry_digits(DEFAULT_GRID) == 2
        assert max_entry_digits(GridConfig(rows=10, cols=10)) == 3
