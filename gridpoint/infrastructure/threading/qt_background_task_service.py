# gridpoint/infrastructure/threading/qt_background_task_service.py
"""
QThread-backed task service.

A worker runs inside a QThread; what it returns travels back over a queued
signal, so the UI callback runs on the event loop thread that owns the
service.
"""
import traceback
from typing import Any, Callable, Dict, TypeVar

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QObject, QThread, Signal, Slot, Qt, QMutex, QMutexLocker

from gridpoint.domain.services.i_background_task_service import IBackgroundTaskService, Worker
from gridpoint.domain.services.i_logger_service import ILoggerService
from gridpoint.domain.common.result import Result
from gridpoint.domain.common.errors import ResourceError

T = TypeVar('T')

STOP_WAIT_MS = 250
STOP_ATTEMPTS = 5


class WorkerSignals(QObject):
    finished = Signal(object)
    crashed = Signal(str)


class WorkerRunner(QObject):
    """Lives in the worker thread and runs one Worker when the thread starts."""

    def __init__(self, task_id: str, worker: Worker[T], logger: ILoggerService):
        super().__init__()
        self.task_id = task_id
        self.worker = worker
        self.logger = logger
        self.signals = WorkerSignals()

    @Slot()
    def run(self):
        self.logger.debug("Worker running", task=self.task_id)
        try:
            outcome = self.worker.execute()
        except Exception as e:
            self.logger.error(f"Unhandled error in worker: {e}", task=self.task_id)
            self.logger.debug(traceback.format_exc())
            self.signals.crashed.emit(str(e))
            return
        # a Result holds a DomainError object; ship it as a plain dict
        if isinstance(outcome, Result):
            outcome = {"result": outcome.to_thread_safe_dict()}
        self.signals.finished.emit(outcome)


class RunningTask:

    def __init__(self, thread: QThread, runner: WorkerRunner):
        self.thread = thread
        self.runner = runner

    def disconnect(self):
        for signal in (self.runner.signals.finished, self.runner.signals.crashed):
            try:
                signal.disconnect()
            except (TypeError, RuntimeError):
                pass  # never connected


class QtBackgroundTaskService(IBackgroundTaskService):
    """
    Runs each worker in its own QThread.

    Task identifiers are unique while the task runs; the session relies on
    that to keep a single injection in flight.
    """

    def __init__(self, logger: ILoggerService):
        self.logger = logger
        self.tasks: Dict[str, RunningTask] = {}
        self.mutex = QMutex()

    def execute_ui_task(self, task_id: str, worker: Worker[T],
                        ui_callback: Callable[[T], None]) -> Result[bool]:
        def on_finished(outcome: Any):
            self._release(task_id, cancel=False)
            if isinstance(outcome, dict) and "result" in outcome:
                outcome = Result.from_thread_safe_dict(outcome["result"])
            ui_callback(outcome)

        def on_crashed(message: str):
            self._release(task_id, cancel=False)
            ui_callback(Result.fail(ResourceError(
                message=f"Worker failed: {message}",
                code="WorkerCrashed",
                details={"task_id": task_id}
            )))

        locker = QMutexLocker(self.mutex)
        if task_id in self.tasks:
            self.logger.warning(f"Task '{task_id}' is already running")
            return Result.fail(ResourceError(
                message=f"Task '{task_id}' is already running",
                code="TaskAlreadyRunning",
                details={"task_id": task_id}
            ))

        try:
            thread = QThread()
            runner = WorkerRunner(task_id, worker, self.logger)
            runner.moveToThread(thread)

            thread.started.connect(runner.run)
            thread.finished.connect(runner.deleteLater)
            thread.finished.connect(thread.deleteLater)
            # queued: the callbacks run on the thread that created the service
            runner.signals.finished.connect(on_finished, Qt.QueuedConnection)
            runner.signals.crashed.connect(on_crashed, Qt.QueuedConnection)

            self.tasks[task_id] = RunningTask(thread, runner)
            thread.start()
        except Exception as e:
            self.tasks.pop(task_id, None)
            self.logger.error(f"Error starting task '{task_id}': {e}")
            self.logger.debug(traceback.format_exc())
            return Result.fail(ResourceError(
                message=f"Error starting task '{task_id}': {e}",
                code="TaskStartFailed",
                inner_error=e
            ))

        self.logger.debug(f"Task '{task_id}' started")
        return Result.ok(True)

    def is_task_running(self, task_id: str) -> bool:
        locker = QMutexLocker(self.mutex)
        return task_id in self.tasks

    def cancel_all_tasks(self) -> None:
        locker = QMutexLocker(self.mutex)
        task_ids = list(self.tasks)
        locker.unlock()

        for task_id in task_ids:
            self.logger.debug(f"Cancelling task '{task_id}'")
            self._release(task_id, cancel=True)

    def _release(self, task_id: str, cancel: bool) -> None:
        locker = QMutexLocker(self.mutex)
        task = self.tasks.pop(task_id, None)
        locker.unlock()
        if task is None:
            return

        if cancel:
            task.runner.worker.cancel()
        task.disconnect()
        task.thread.quit()

        for _ in range(STOP_ATTEMPTS):
            if task.thread.wait(STOP_WAIT_MS):
                break
            app = QApplication.instance()
            if app is not None:
                app.processEvents()

        if not task.thread.isFinished():
            self.logger.warning(f"Forcing termination of task '{task_id}'")
            task.thread.terminate()
            task.thread.wait(500)

        self.logger.debug(f"Task '{task_id}' released")
