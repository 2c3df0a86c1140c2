# gridpoint/domain/services/i_scheduler_service.py
from abc import ABC, abstractmethod
from typing import Any, Callable


class ISchedulerService(ABC):
    """Single-shot timers delivered on the event loop thread."""

    @abstractmethod
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        """
        Run ``callback`` once after ``delay_ms`` milliseconds.

        Returns:
            Handle accepted by ``cancel``
        """
        pass

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        """Cancel a pending callback; unknown or fired handles are ignored."""
        pass
