# gridpoint/infrastructure/platform/qt_display_service.py
"""
Qt-native display enumeration using QGuiApplication.screens().
"""
from typing import List

from PySide6.QtGui import QGuiApplication

from gridpoint.domain.common.errors import ResourceError
from gridpoint.domain.common.result import Result
from gridpoint.domain.models.geometry import Display, Rect
from gridpoint.domain.services.i_display_service import IDisplayService
from gridpoint.domain.services.i_logger_service import ILoggerService


class QtDisplayService(IDisplayService):
    """
    Enumerates displays in logical (device independent) pixels.

    Each display carries its device pixel ratio; xdotool works in device
    pixels, so a ratio other than 1 changes where a click lands.
    """

    def __init__(self, logger: ILoggerService):
        self.logger = logger

    def get_displays(self) -> Result[List[Display]]:
        try:
            if QGuiApplication.instance() is None:
                return Result.fail(ResourceError(message="No QGuiApplication instance found"))

            displays = []
            for position, screen in enumerate(QGuiApplication.screens()):
                geometry = screen.geometry()
                available = screen.availableGeometry()
                displays.append(Display(
                    id=position,
                    x=geometry.x(),
                    y=geometry.y(),
                    width=geometry.width(),
                    height=geometry.height(),
                    name=screen.name(),
                    work_area=Rect(available.x(), available.y(), available.width(), available.height()),
                    device_pixel_ratio=screen.devicePixelRatio()
                ))

            self.logger.debug(f"Enumerated {len(displays)} display(s)")
            return Result.ok(displays)
        except Exception as e:
            return Result.fail(ResourceError(
                message=f"Failed to enumerate displays: {e}",
                inner_error=e
            ))
