#gridpoint/domain/services/i_background_task_service.py
"""
Running blocking work off the event loop thread.

The only blocking work in a session is the pointer injection process. A task
service runs a Worker in a thread and hands its return value to a callback on
the event loop thread, where the click session resumes.
"""
from abc import ABC, abstractmethod
from typing import Callable, Generic, TypeVar
import threading

from gridpoint.domain.common.result import Result

T = TypeVar('T')


class Worker(Generic[T]):
    """
    One unit of background work.

    ``execute`` runs in the worker thread. Cancellation is cooperative: the
    flag is set from the event loop thread and ``execute`` may check it
    between steps.
    """

    def __init__(self):
        self._cancelled = threading.Event()

    @property
    def cancel_requested(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def execute(self) -> T:
        raise NotImplementedError


class IBackgroundTaskService(ABC):

    @abstractmethod
    def execute_ui_task(self, task_id: str, worker: Worker[T],
                        ui_callback: Callable[[T], None]) -> Result[bool]:
        """
        Start ``worker`` and call ``ui_callback`` on the event loop thread
        with what ``execute`` returned.

        A worker that raises is reported to ``ui_callback`` as a failed
        Result. Only one task per ``task_id`` runs at a time; a second start
        fails without touching the running one.

        Returns:
            Result telling whether the worker was started
        """
        pass

    @abstractmethod
    def is_task_running(self, task_id: str) -> bool:
        pass

    @abstractmethod
    def cancel_all_tasks(self) -> None:
        """Cancel every running worker and wait for its thread to finish."""
        pass
