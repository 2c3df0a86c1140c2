# gridpoint/infrastructure/threading/qt_scheduler_service.py
from typing import Callable, Dict

from PySide6.QtCore import QTimer

from gridpoint.domain.services.i_logger_service import ILoggerService
from gridpoint.domain.services.i_scheduler_service import ISchedulerService


class QtSchedulerService(ISchedulerService):
    """Single-shot QTimers; callbacks fire on the thread running the event loop."""

    def __init__(self, logger: ILoggerService):
        self.logger = logger
        self._timers: Dict[int, QTimer] = {}
        self._next_handle = 1

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> int:
        handle = self._next_handle
        self._next_handle += 1

        timer = QTimer()
        timer.setSingleShot(True)
        timer.timeout.connect(lambda: self._fire(handle, callback))
        self._timers[handle] = timer
        timer.start(max(0, int(delay_ms)))

        self.logger.debug(f"Timer {handle} scheduled", delay_ms=delay_ms)
        return handle

    def cancel(self, handle: int) -> None:
        timer = self._timers.pop(handle, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()
            self.logger.debug(f"Timer {handle} cancelled")

    def _fire(self, handle: int, callback: Callable[[], None]) -> None:
        timer = self._timers.pop(handle, None)
        if timer is None:
            return
        timer.deleteLater()
        try:
            callback()
        except Exception as e:
            self.logger.error(f"Error in timer {handle} callback: {e}")
