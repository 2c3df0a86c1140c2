# gridpoint/domain/geometry/grid_model.py
"""
Partition of a display into a numbered ``rows x cols`` grid.

Cell sizing: every cell is ``floor(width / cols)`` wide and
``floor(height / rows)`` tall, except the last column and last row, which
absorb the remainder. Forward (index -> rect) and inverse (point -> index)
mappings both derive from ``_edges`` so they cannot disagree.

Numeric entry is 1-based: the number drawn on a cell, and typed to select it,
is ``index + 1``.
"""
from typing import Iterator, List, Optional, Tuple

from gridpoint.domain.common.errors import GeometryError
from gridpoint.domain.common.result import Result
from gridpoint.domain.models.click_config import GridConfig
from gridpoint.domain.models.geometry import Display, Rect
from gridpoint.domain.models.selection import Cell


def _edges(origin: int, length: int, parts: int) -> List[int]:
    """Boundaries of ``parts`` segments along one axis (parts + 1 values)."""
    step = length // parts
    edges = [origin + i * step for i in range(parts)]
    edges.append(origin + length)
    return edges


def check_grid_fits(display: Display, config: GridConfig) -> Result[bool]:
    """Fail when the display cannot give every cell at least one pixel."""
    if config.rows < 1 or config.cols < 1:
        return Result.fail(GeometryError(
            message=f"Grid must have at least one row and column, got {config.rows}x{config.cols}",
            code="EmptyGrid",
            details={"rows": config.rows, "cols": config.cols}
        ))
    if display.width < config.cols or display.height < config.rows:
        return Result.fail(GeometryError(
            message=f"A {config.rows}x{config.cols} grid does not fit a "
                    f"{display.width}x{display.height} display",
            code="GridTooDense",
            details={"rows": config.rows, "cols": config.cols,
                     "width": display.width, "height": display.height}
        ))
    return Result.ok(True)


def cell_rect(display: Display, config: GridConfig, index: int) -> Result[Rect]:
    """
    Absolute pixel rectangle of a cell.

    Args:
        display: Display the grid is laid on
        config: Grid dimensions
        index: 0-based cell index, row-major

    Returns:
        Result containing the cell rectangle
    """
    fits = check_grid_fits(display, config)
    if fits.is_failure:
        return Result.fail(fits.error)

    if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < config.cell_count:
        return Result.fail(GeometryError(
            message=f"Cell index {index} is outside [0, {config.cell_count})",
            code="InvalidIndex",
            details={"index": index, "cell_count": config.cell_count}
        ))

    row, col = divmod(index, config.cols)
    xs = _edges(display.x, display.width, config.cols)
    ys = _edges(display.y, display.height, config.rows)
    return Result.ok(Rect(xs[col], ys[row], xs[col + 1] - xs[col], ys[row + 1] - ys[row]))


def cell_for_index(display: Display, config: GridConfig, index: int) -> Result[Cell]:
    """Cell value (index, row, col, rect) for a 0-based index."""
    return cell_rect(display, config, index).map(
        lambda rect: Cell(index=index, row=index // config.cols, col=index % config.cols, rect=rect)
    )


def _segment(edges: List[int], coordinate: float) -> int:
    # edges are sorted and the caller already checked containment
    step = edges[1] - edges[0]
    position = int((coordinate - edges[0]) // step)
    return min(position, len(edges) - 2)


def cell_at(display: Display, config: GridConfig, x: float, y: float) -> Optional[int]:
    """
    Index of the cell covering an absolute point.

    Returns:
        The 0-based index, or None when the point is outside the display
        (or the grid does not fit it)
    """
    if check_grid_fits(display, config).is_failure:
        return None
    if not display.rect.contains(x, y):
        return None

    col = _segment(_edges(display.x, display.width, config.cols), x)
    row = _segment(_edges(display.y, display.height, config.rows), y)
    return row * config.cols + col


def iter_cells(display: Display, config: GridConfig) -> Iterator[Cell]:
    """All cells in index order, for rendering the overlay."""
    if check_grid_fits(display, config).is_failure:
        return
    xs = _edges(display.x, display.width, config.cols)
    ys = _edges(display.y, display.height, config.rows)
    for row in range(config.rows):
        for col in range(config.cols):
            yield Cell(
                index=row * config.cols + col,
                row=row,
                col=col,
                rect=Rect(xs[col], ys[row], xs[col + 1] - xs[col], ys[row + 1] - ys[row])
            )


def parse_cell_number(text: str, config: GridConfig) -> Result[int]:
    """
    Resolve typed digits to a 0-based cell index.

    Args:
        text: Digits typed by the operator; cell numbers are 1-based
        config: Grid dimensions

    Returns:
        Result containing the 0-based cell index
    """
    digits = (text or "").strip()
    if not digits or not digits.isdigit():
        return Result.fail(GeometryError(
            message=f"'{text}' is not a cell number",
            code="InvalidCellNumber",
            details={"text": text}
        ))

    number = int(digits)
    if not 1 <= number <= config.cell_count:
        return Result.fail(GeometryError(
            message=f"Cell number {number} is outside 1..{config.cell_count}",
            code="InvalidCellNumber",
            details={"number": number, "cell_count": config.cell_count}
        ))
    return Result.ok(number - 1)


def is_entry_complete(digits: str, config: GridConfig) -> bool:
    """
    Whether typing another digit could not yield a valid cell number.

    With 60 cells "7" is complete (70+ is out of range), "5" is not ("55" is valid).
    """
    if not digits or not digits.isdigit():
        return False
    return int(digits) * 10 > config.cell_count


def max_entry_digits(config: GridConfig) -> int:
    return len(str(config.cell_count))


def grid_lines(display: Display, config: GridConfig) -> Tuple[List[int], List[int]]:
    """Absolute x and y boundaries of the grid, for drawing."""
    return (_edges(display.x, display.width, config.cols),
            _edges(display.y, display.height, config.rows))
