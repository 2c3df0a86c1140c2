# gridpoint/infrastructure/platform/screenshot_service.py
"""
Display capture through QScreen, with Pillow holding the frame.
"""
from typing import Optional
from PIL import Image
import io

from PySide6.QtGui import QGuiApplication, QImage, QPixmap, QScreen

from gridpoint.domain.services.i_screenshot_service import IScreenshotService
from gridpoint.domain.services.i_logger_service import ILoggerService
from gridpoint.domain.common.result import Result
from gridpoint.domain.common.errors import ResourceError, GeometryError
from gridpoint.domain.models.geometry import Display, Rect
from gridpoint.domain.models.selection import Screenshot


class QtScreenshotService(IScreenshotService):
    """
    Grabs a display with ``QScreen.grabWindow`` and keeps it as a PIL image.

    A HiDPI grab has more device pixels than the display has logical pixels;
    it is resized to the logical size so it lines up with the overlay windows
    and the grid. Points are converted back to device pixels only when the
    click is dispatched.
    """

    def __init__(self, logger: ILoggerService):
        self.logger = logger

    def capture_display(self, display: Display) -> Result[Screenshot]:
        details = {"display": display.rect.as_tuple()}

        screen = self._find_screen(display)
        if screen is None:
            return Result.fail(ResourceError(
                message=f"No screen matches {display.describe()}",
                code="ScreenNotFound",
                details=details
            ))

        self.logger.debug(f"Capturing {display.describe()}")
        try:
            pixmap = screen.grabWindow(0)
            if pixmap.isNull():
                return Result.fail(ResourceError(
                    message="Screen grab returned an empty pixmap",
                    code="CaptureFailed",
                    details=details
                ))
            image = self._to_pil(pixmap.toImage())
        except Exception as e:
            return Result.fail(ResourceError(
                message=f"Failed to capture {display.describe()}: {e}",
                code="CaptureFailed",
                details=details,
                inner_error=e
            ))

        logical_size = (display.width, display.height)
        if image.size != logical_size:
            self.logger.debug(f"Resizing {image.width}x{image.height} grab to {display.width}x{display.height}")
            image = image.resize(logical_size, Image.LANCZOS)

        return Result.ok(Screenshot(image=image, rect=display.rect))

    def crop(self, screenshot: Screenshot, region: Rect) -> Result[Image.Image]:
        if not screenshot.rect.contains_rect(region):
            return Result.fail(GeometryError(
                message=f"Region {region.as_tuple()} is outside the screenshot {screenshot.rect.as_tuple()}",
                code="RegionOutsideScreenshot",
                details={"region": region.as_tuple()}
            ))
        box = region.translated(-screenshot.rect.x, -screenshot.rect.y).as_box()
        return Result.ok(screenshot.image.crop(box))

    def to_pyside_pixmap(self, image: Image.Image) -> Result[QPixmap]:
        """Hand a PIL image to Qt through an in-memory PNG."""
        buffer = io.BytesIO()
        try:
            image.save(buffer, format="PNG")
        except (OSError, ValueError) as e:
            return Result.fail(ResourceError(
                message=f"Failed to encode image: {e}",
                details={"size": f"{image.width}x{image.height}"},
                inner_error=e
            ))

        pixmap = QPixmap()
        if not pixmap.loadFromData(buffer.getvalue(), "PNG"):
            return Result.fail(ResourceError(
                message="Qt could not load the encoded image",
                details={"size": f"{image.width}x{image.height}"}
            ))
        return Result.ok(pixmap)

    def _find_screen(self, display: Display) -> Optional[QScreen]:
        for screen in QGuiApplication.screens():
            g = screen.geometry()
            if (g.x(), g.y(), g.width(), g.height()) == display.rect.as_tuple():
                return screen
        return None

    @staticmethod
    def _to_pil(qimage: QImage) -> Image.Image:
        # rows of a QImage are padded to 32 bits, so pass the stride along
        rgb = qimage.convertToFormat(QImage.Format_RGB888)
        data = bytes(rgb.constBits())
        return Image.frombuffer("RGB", (rgb.width(), rgb.height()), data,
                                "raw", "RGB", rgb.bytesPerLine(), 1)
