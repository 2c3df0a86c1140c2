# gridpoint/domain/geometry/zoom_transform.py
"""
Zoom region computation and the viewport <-> absolute screen mapping.

The region is a padded rectangle around the selected cell, clamped to the
display so no pixel outside the captured screenshot is ever magnified. The
viewport stretches the region independently along X and Y; the inverse
mapping uses the same per-axis scale factors, so a click at the centre of
the viewport always lands on the centre of the region.
"""
import math
from typing import Tuple

from gridpoint.domain.common.errors import ConfigurationError, GeometryError
from gridpoint.domain.common.result import Result
from gridpoint.domain.models.geometry import AbsolutePoint, Display, Rect, Size
from gridpoint.domain.models.selection import ZoomRegion, ZoomView


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +infinity (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def compute_zoom_region(display: Display, cell: Rect, padding_fraction: float,
                        cell_index: int = -1) -> Result[ZoomRegion]:
    """
    Padded source rectangle around a cell.

    Each side grows by ``padding_fraction`` of the cell's width (left/right)
    or height (top/bottom). The padded edges are rounded outward, then the
    rectangle is intersected with the display: at a display edge the padding
    on that side shrinks, the region is never shifted.

    Args:
        display: Display owning the cell
        cell: Absolute cell rectangle
        padding_fraction: Padding as a fraction of the cell size, >= 0
        cell_index: Index of the cell, carried along for reporting

    Returns:
        Result containing the ZoomRegion
    """
    if padding_fraction < 0 or math.isnan(padding_fraction):
        return Result.fail(ConfigurationError(
            message=f"Padding fraction must be >= 0, got {padding_fraction}",
            code="InvalidPadding",
            details={"padding_fraction": padding_fraction}
        ))
    if not display.rect.contains_rect(cell) or cell.width <= 0 or cell.height <= 0:
        return Result.fail(GeometryError(
            message=f"Cell {cell.as_tuple()} is not inside {display.describe()}",
            code="CellOutsideDisplay",
            details={"cell": cell.as_tuple(), "display": display.rect.as_tuple()}
        ))

    pad_x = padding_fraction * cell.width
    pad_y = padding_fraction * cell.height
    left = math.floor(cell.x - pad_x)
    top = math.floor(cell.y - pad_y)
    right = math.ceil(cell.right + pad_x)
    bottom = math.ceil(cell.bottom + pad_y)

    padded = Rect(left, top, right - left, bottom - top)
    # the cell is inside the display, so the intersection is never empty
    source = padded.intersection(display.rect)
    return Result.ok(ZoomRegion(source_rect=source, padding_fraction=padding_fraction,
                                cell_index=cell_index))


def viewport_size_for(region: ZoomRegion, zoom_factor: float, max_size: Size) -> Size:
    """
    Size of the magnified viewport.

    The region is scaled by ``zoom_factor`` and then, if it would not fit in
    ``max_size``, scaled down uniformly until it does.
    """
    width = region.source_rect.width * zoom_factor
    height = region.source_rect.height * zoom_factor
    shrink = min(1.0, max_size.width / width, max_size.height / height)
    return Size(max(1, int(width * shrink)), max(1, int(height * shrink)))


def build_zoom_view(region: ZoomRegion, viewport: Size) -> Result[ZoomView]:
    if viewport.width <= 0 or viewport.height <= 0:
        return Result.fail(GeometryError(
            message=f"Viewport {viewport.width}x{viewport.height} is empty",
            code="EmptyViewport",
            details={"width": viewport.width, "height": viewport.height}
        ))
    return Result.ok(ZoomView(region=region, viewport=viewport))


def _scales(view: ZoomView) -> Tuple[float, float]:
    source = view.region.source_rect
    return source.width / view.viewport.width, source.height / view.viewport.height


def viewport_to_absolute(view: ZoomView, viewport_x: float, viewport_y: float) -> Result[AbsolutePoint]:
    """
    Map a click inside the magnified viewport to an absolute screen pixel.

    ``absolute = source.origin + viewport_point * (source.size / viewport.size)``,
    rounded half-up to whole pixels because pointer injection only accepts
    integers. The result is kept inside the source rectangle.

    Returns:
        Result containing the AbsolutePoint
    """
    if not (0 <= viewport_x <= view.viewport.width and 0 <= viewport_y <= view.viewport.height):
        return Result.fail(GeometryError(
            message=f"Point ({viewport_x}, {viewport_y}) is outside the "
                    f"{view.viewport.width}x{view.viewport.height} viewport",
            code="PointOutsideViewport",
            details={"x": viewport_x, "y": viewport_y}
        ))

    source = view.region.source_rect
    scale_x, scale_y = _scales(view)
    absolute_x = round_half_up(source.x + viewport_x * scale_x)
    absolute_y = round_half_up(source.y + viewport_y * scale_y)

    # the far viewport edge maps onto the exclusive region edge
    absolute_x = min(max(absolute_x, source.x), source.right - 1)
    absolute_y = min(max(absolute_y, source.y), source.bottom - 1)
    return Result.ok(AbsolutePoint(absolute_x, absolute_y))


def absolute_to_viewport(view: ZoomView, x: float, y: float) -> Tuple[float, float]:
    """Forward mapping: where an absolute point appears inside the viewport."""
    source = view.region.source_rect
    scale_x, scale_y = _scales(view)
    return (x - source.x) / scale_x, (y - source.y) / scale_y


def cell_outline(view: ZoomView, cell: Rect) -> Tuple[float, float, float, float]:
    """Viewport rectangle (x, y, width, height) the cell occupies inside the zoom view."""
    left, top = absolute_to_viewport(view, cell.x, cell.y)
    right, bottom = absolute_to_viewport(view, cell.right, cell.bottom)
    return left, top, right - left, bottom - top


def to_device_pixels(display: Display, point: AbsolutePoint) -> AbsolutePoint:
    """
    Map a logical point on ``display`` to the device pixel xdotool expects.

    Qt keeps a screen's top-left corner identical in logical and device
    coordinates and scales only the offset from it.
    """
    ratio = display.device_pixel_ratio
    if ratio == 1:
        return point
    return AbsolutePoint(
        display.x + round_half_up((point.x - display.x) * ratio),
        display.y + round_half_up((point.y - display.y) * ratio)
    )
