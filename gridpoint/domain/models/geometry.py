# gridpoint/domain/models/geometry.py
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Size:
    """Width and height in pixels."""
    width: int
    height: int


@dataclass(frozen=True)
class AbsolutePoint:
    """A point in absolute (virtual desktop) screen pixels."""
    x: int
    y: int


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned pixel rectangle in absolute screen coordinates.

    Rectangles are half-open: a pixel (px, py) is inside when
    x <= px < x + width and y <= py < y + height.
    """
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Exclusive right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge."""
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    def centroid(self) -> Tuple[float, float]:
        return self.x + self.width / 2.0, self.y + self.height / 2.0

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom

    def contains_rect(self, other: 'Rect') -> bool:
        return (self.x <= other.x and self.y <= other.y
                and other.right <= self.right and other.bottom <= self.bottom)

    def intersection(self, other: 'Rect') -> Optional['Rect']:
        """Overlapping rectangle, or None when the two do not share any pixel."""
        left = max(self.x, other.x)
        top = max(self.y, other.y)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        if right <= left or bottom <= top:
            return None
        return Rect(left, top, right - left, bottom - top)

    def translated(self, dx: int, dy: int) -> 'Rect':
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        """(x, y, width, height), the tuple layout used by the screenshot service."""
        return self.x, self.y, self.width, self.height

    def as_box(self) -> Tuple[int, int, int, int]:
        """(left, top, right, bottom), the box layout PIL expects for cropping."""
        return self.x, self.y, self.right, self.bottom


@dataclass(frozen=True)
class Display:
    """
    Snapshot of one attached monitor.

    Bounds are in Qt logical pixels on the virtual desktop, the unit the
    overlay windows are placed in. ``device_pixel_ratio`` converts them to the
    X11 device pixels the pointer is driven in. The snapshot goes stale when
    the OS reconfigures displays, so it is re-taken on every activation.
    """
    id: int
    x: int
    y: int
    width: int
    height: int
    name: str = ""
    work_area: Optional[Rect] = None  # usable area, excluding panels/docks
    device_pixel_ratio: float = 1.0

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def usable_rect(self) -> Rect:
        return self.work_area if self.work_area is not None else self.rect

    def describe(self) -> str:
        label = f" {self.name}" if self.name else ""
        return f"Display {self.id + 1}{label}: {self.width}x{self.height} at ({self.x}, {self.y})"
