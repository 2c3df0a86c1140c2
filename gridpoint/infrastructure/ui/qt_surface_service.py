# gridpoint/infrastructure/ui/qt_surface_service.py
"""
Qt implementation of the surface service.

Owns the grid overlay and the zoom window, converts screenshots to pixmaps
for them and forwards their input signals to the bound click session.
"""
from typing import Optional

from PySide6.QtGui import QPixmap

from gridpoint.domain.common.errors import UIError
from gridpoint.domain.common.result import Result
from gridpoint.domain.geometry.grid_model import cell_rect
from gridpoint.domain.geometry.zoom_transform import cell_outline
from gridpoint.domain.models.selection import ActivationSnapshot, ZoomView
from gridpoint.domain.services.i_click_session_service import IClickSessionService
from gridpoint.domain.services.i_logger_service import ILoggerService
from gridpoint.domain.services.i_screenshot_service import IScreenshotService
from gridpoint.domain.services.i_surface_service import ISurfaceService
from gridpoint.domain.session.state_machine import Surface
from gridpoint.presentation.components.grid_overlay_window import GridOverlayWindow
from gridpoint.presentation.components.zoom_window import ZoomWindow


class QtSurfaceService(ISurfaceService):
    """
    Surfaces backed by two long-lived windows.

    The windows are created on first use and reused across activations;
    show and hide only toggle visibility, so repeating either is harmless.
    """

    def __init__(self, screenshot_service: IScreenshotService, logger: ILoggerService):
        self.screenshot_service = screenshot_service
        self.logger = logger
        self.session: Optional[IClickSessionService] = None
        self.grid_window: Optional[GridOverlayWindow] = None
        self.zoom_window: Optional[ZoomWindow] = None

        # the grid pixmap is converted once per activation snapshot
        self._background_for: Optional[ActivationSnapshot] = None
        self._background: Optional[QPixmap] = None

    def bind(self, session: IClickSessionService) -> None:
        self.session = session

    def show_grid(self, snapshot: ActivationSnapshot, digits: str = "") -> Result[bool]:
        try:
            window = self._grid()
            if window.isVisible() and window.snapshot is snapshot:
                window.set_entry(digits)
                return Result.ok(True)

            window.load(snapshot, self._background_pixmap(snapshot))
            window.set_entry(digits)
            window.show()
            window.raise_()
            window.activateWindow()
            self.logger.debug("Grid overlay shown", display=snapshot.display.id)
            return Result.ok(True)
        except Exception as e:
            return Result.fail(UIError(message=f"Failed to show grid overlay: {e}", inner_error=e))

    def hide_grid(self) -> Result[bool]:
        if self.grid_window is not None and self.grid_window.isVisible():
            self.grid_window.hide()
            self.logger.debug("Grid overlay hidden")
        return Result.ok(True)

    def show_zoom(self, view: ZoomView, snapshot: ActivationSnapshot) -> Result[bool]:
        try:
            window = self._zoom()
            if window.isVisible() and window.view == view:
                return Result.ok(True)

            pixmap = None
            if snapshot.screenshot is not None:
                pixmap_result = (self.screenshot_service.crop(snapshot.screenshot, view.region.source_rect)
                                 .and_then(self.screenshot_service.to_pyside_pixmap))
                if pixmap_result.is_failure:
                    self.logger.warning(f"Zoom shown without image: {pixmap_result.error}")
                else:
                    pixmap = pixmap_result.value

            outline = cell_rect(snapshot.display, snapshot.config.grid, view.region.cell_index).map(
                lambda cell: cell_outline(view, cell)
            )
            window.load(view, pixmap, snapshot.display.usable_rect,
                        outline.value if outline.is_success else None)
            window.show()
            window.raise_()
            window.activateWindow()
            self.logger.debug("Zoom window shown", cell=view.region.cell_index,
                              viewport=f"{view.viewport.width}x{view.viewport.height}")
            return Result.ok(True)
        except Exception as e:
            return Result.fail(UIError(message=f"Failed to show zoom window: {e}", inner_error=e))

    def hide_zoom(self) -> Result[bool]:
        if self.zoom_window is not None and self.zoom_window.isVisible():
            self.zoom_window.hide()
            self.logger.debug("Zoom window hidden")
        return Result.ok(True)

    def update_entry(self, digits: str) -> None:
        if self.grid_window is not None:
            self.grid_window.set_entry(digits)

    def _background_pixmap(self, snapshot: ActivationSnapshot) -> Optional[QPixmap]:
        if self._background_for is snapshot:
            return self._background
        self._background_for = snapshot
        self._background = None
        if snapshot.screenshot is None:
            return None

        pixmap_result = self.screenshot_service.to_pyside_pixmap(snapshot.screenshot.image)
        if pixmap_result.is_failure:
            self.logger.warning(f"Grid shown without screenshot: {pixmap_result.error}")
        else:
            self._background = pixmap_result.value
        return self._background

    def _grid(self) -> GridOverlayWindow:
        if self.grid_window is None:
            window = GridOverlayWindow()
            window.point_picked.connect(lambda x, y: self._forward("pick_grid_point", x, y))
            window.digit_typed.connect(lambda digit: self._forward("type_digit", digit))
            window.digit_erased.connect(lambda: self._forward("erase_digit"))
            window.digits_committed.connect(lambda: self._forward("commit_digits"))
            window.cancelled.connect(lambda: self._forward("cancel"))
            window.closed.connect(lambda: self._forward("surface_closed", Surface.GRID))
            self.grid_window = window
        return self.grid_window

    def _zoom(self) -> ZoomWindow:
        if self.zoom_window is None:
            window = ZoomWindow()
            window.point_picked.connect(lambda x, y: self._forward("pick_zoom_point", x, y))
            window.back_requested.connect(lambda: self._forward("back_to_grid"))
            window.cancelled.connect(lambda: self._forward("cancel"))
            window.closed.connect(lambda: self._forward("surface_closed", Surface.ZOOM))
            self.zoom_window = window
        return self.zoom_window

    def _forward(self, method: str, *args) -> None:
        if self.session is None:
            self.logger.warning(f"Surface input '{method}' ignored, no session bound")
            return
        getattr(self.session, method)(*args)
