# gridpoint/domain/services/i_screenshot_service.py

"""
Capturing and slicing display screenshots.

One screenshot is taken per activation and reused for the grid overlay and
for the zoom crop, so the operator never sees two different frames.
"""
from abc import ABC, abstractmethod
from typing import Any

from gridpoint.domain.common.result import Result
from gridpoint.domain.models.geometry import Display, Rect
from gridpoint.domain.models.selection import Screenshot


class IScreenshotService(ABC):

    @abstractmethod
    def capture_display(self, display: Display) -> Result[Screenshot]:
        """
        Whole-display capture with one image pixel per logical pixel, so an
        absolute point maps onto the image by subtracting the display origin.
        """
        pass

    @abstractmethod
    def crop(self, screenshot: Screenshot, region: Rect) -> Result[Any]:
        """Image of ``region`` (absolute, inside ``screenshot.rect``)."""
        pass

    @abstractmethod
    def to_pyside_pixmap(self, image: Any) -> Result[Any]:
        pass
