# gridpoint/domain/models/selection.py
from dataclasses import dataclass
from typing import Any, Optional

from gridpoint.domain.models.geometry import AbsolutePoint, Display, Rect, Size
from gridpoint.domain.models.click_config import ClickConfig


@dataclass(frozen=True)
class Cell:
    """One grid cell. Derived from display + grid config, never stored."""
    index: int
    row: int
    col: int
    rect: Rect

    @property
    def label(self) -> str:
        """Number drawn on the cell and typed for numeric entry (1-based)."""
        return str(self.index + 1)


@dataclass(frozen=True)
class ZoomRegion:
    """Padded absolute rectangle around a selected cell that gets magnified."""
    source_rect: Rect
    padding_fraction: float
    cell_index: int


@dataclass(frozen=True)
class ZoomView:
    """
    A zoom region bound to the viewport it is magnified into.

    Both the magnified crop and the inverse click mapping read from this one
    object, so rendering and coordinate resolution cannot drift apart.
    """
    region: ZoomRegion
    viewport: Size


@dataclass(frozen=True)
class Screenshot:
    """Captured raster plus the absolute rectangle it covers."""
    image: Any  # PIL.Image.Image
    rect: Rect


@dataclass(frozen=True)
class ActivationSnapshot:
    """Everything one activation cycle reads; rebuilt from scratch every cycle."""
    display: Display
    config: ClickConfig
    screenshot: Optional[Screenshot] = None


@dataclass(frozen=True)
class ClickOutcome:
    """Final outcome of one activation, handed to result listeners."""
    status: str  # "clicked", "failed" or "cancelled"
    point: Optional[AbsolutePoint] = None
    cell_index: Optional[int] = None
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status == "clicked"
