# gridpoint/infrastructure/session/click_session_service.py
"""
Click session coordinator.

Owns the session state, feeds inbound events through the pure state machine
one at a time and executes the resulting effects against the collaborators
(surfaces, pointer, scheduler, background task service).
"""
import traceback
from collections import deque
from typing import Any, Callable, Deque, List, Optional

from gridpoint.domain.common.errors import DomainError, ErrorSeverity, InjectionError, UIError
from gridpoint.domain.common.result import Result
from gridpoint.domain.geometry.display_resolver import resolve_target_display
from gridpoint.domain.geometry.grid_model import check_grid_fits
from gridpoint.domain.models.click_config import DisplayPolicy
from gridpoint.domain.models.geometry import AbsolutePoint
from gridpoint.domain.models.selection import ActivationSnapshot, ClickOutcome
from gridpoint.domain.services.i_background_task_service import IBackgroundTaskService, Worker
from gridpoint.domain.services.i_click_session_service import IClickSessionService
from gridpoint.domain.services.i_click_settings_service import IClickSettingsService
from gridpoint.domain.services.i_display_service import IDisplayService
from gridpoint.domain.services.i_logger_service import ILoggerService
from gridpoint.domain.services.i_pointer_service import IPointerService
from gridpoint.domain.services.i_scheduler_service import ISchedulerService
from gridpoint.domain.services.i_screenshot_service import IScreenshotService
from gridpoint.domain.services.i_surface_service import ISurfaceService
from gridpoint.domain.session.state_machine import (
    Activated, BackToGrid, Cancel, CellPicked, CooldownElapsed, DigitErased, DigitsCommitted,
    DigitTyped, DispatchClick, DispatchFinished, DispatchState, Effect, Event, GridPointPicked,
    HideGrid, HideZoom, Report, SessionEnded, SessionState, ShowGrid, ShowZoom, StartCooldown,
    Surface, SurfaceClosed, UpdateEntry, ZoomPointPicked, transition
)

DISPATCH_TASK_ID = "pointer_dispatch"


class PointerDispatchWorker(Worker[Result[AbsolutePoint]]):
    """
    Moves the pointer and clicks, in that order, off the event loop thread.

    The click is only issued once the move has completed successfully. A
    cancel (shutdown) is honoured before the move and again before the click.
    When injection is disabled the equivalent commands are logged instead.
    """

    def __init__(self, pointer: IPointerService, logger: ILoggerService, dispatch: DispatchClick):
        super().__init__()
        self.pointer = pointer
        self.logger = logger
        self.dispatch = dispatch

    def execute(self) -> Result[AbsolutePoint]:
        point = self.dispatch.point
        button = self.dispatch.button

        if not self.dispatch.inject:
            self.logger.info("Print-only mode, pointer not touched:\n" +
                             self.pointer.describe_commands(point.x, point.y, button))
            return Result.ok(point)

        if self.cancel_requested:
            return self._cancelled_result("before the pointer moved")
        move_result = self.pointer.move(point.x, point.y)
        if move_result.is_failure:
            return Result.fail(move_result.error)

        if self.dispatch.verify:
            self._verify_location(point)

        if self.cancel_requested:
            return self._cancelled_result("after the move, before the click")
        click_result = self.pointer.click(button)
        if click_result.is_failure:
            return Result.fail(click_result.error)

        self.logger.info(f"Clicked at ({point.x}, {point.y})", button=button, cell=self.dispatch.cell_index)
        return Result.ok(point)

    def _cancelled_result(self, stage: str) -> Result[AbsolutePoint]:
        self.logger.warning(f"Click dispatch cancelled {stage}", cell=self.dispatch.cell_index)
        return Result.fail(InjectionError(
            message=f"Click dispatch cancelled {stage}",
            code="Cancelled",
            details={"x": self.dispatch.point.x, "y": self.dispatch.point.y}
        ))

    def _verify_location(self, point: AbsolutePoint) -> None:
        location = self.pointer.get_location()
        if location.is_failure:
            self.logger.warning(f"Could not verify pointer position: {location.error}")
        elif location.value != point:
            self.logger.warning(
                f"Pointer is at ({location.value.x}, {location.value.y}) "
                f"instead of ({point.x}, {point.y})"
            )


class ClickSessionService(IClickSessionService):
    """
    Coordinator for one grid/zoom/click cycle at a time.

    Every public method must be called on the event loop thread. Events raised
    while effects are executing (a surface reporting its own close, a worker
    completing synchronously) are queued and handled after the current
    transition finishes.
    """

    def __init__(self,
                 display_service: IDisplayService,
                 screenshot_service: IScreenshotService,
                 pointer_service: IPointerService,
                 surface_service: ISurfaceService,
                 scheduler: ISchedulerService,
                 task_service: IBackgroundTaskService,
                 settings: IClickSettingsService,
                 logger: ILoggerService):
        self.display_service = display_service
        self.screenshot_service = screenshot_service
        self.pointer_service = pointer_service
        self.surface_service = surface_service
        self.scheduler = scheduler
        self.task_service = task_service
        self.settings = settings
        self.logger = logger

        self._state = SessionState()
        self._queue: Deque[Event] = deque()
        self._draining = False
        self._cooldown_handle: Optional[Any] = None
        self._state_listeners: List[Callable[[DispatchState], None]] = []
        self._result_listeners: List[Callable[[ClickOutcome], None]] = []

        self.surface_service.bind(self)

    @property
    def phase(self) -> DispatchState:
        return self._state.phase

    @property
    def state(self) -> SessionState:
        return self._state

    def activate(self) -> Result[bool]:
        """
        Build a fresh activation snapshot and show the grid overlay.

        Returns:
            Result containing True when the overlay is up, False when the
            activation was dropped
        """
        if self.phase != DispatchState.IDLE:
            self.logger.info("Activation dropped", phase=self.phase.value)
            return Result.ok(False)

        snapshot_result = self._build_snapshot()
        if snapshot_result.is_failure:
            self._report(snapshot_result.error)
            return Result.fail(snapshot_result.error)

        self._post(Activated(snapshot_result.value))
        return Result.ok(self.phase == DispatchState.AWAITING_CELL_SELECTION)

    def pick_cell(self, index: int) -> None:
        self._post(CellPicked(index))

    def pick_grid_point(self, x: float, y: float) -> None:
        self._post(GridPointPicked(x, y))

    def type_digit(self, digit: str) -> None:
        self._post(DigitTyped(digit))

    def erase_digit(self) -> None:
        self._post(DigitErased())

    def commit_digits(self) -> None:
        self._post(DigitsCommitted())

    def pick_zoom_point(self, x: float, y: float) -> None:
        self._post(ZoomPointPicked(x, y))

    def back_to_grid(self) -> None:
        self._post(BackToGrid())

    def cancel(self) -> None:
        self._post(Cancel())

    def surface_closed(self, surface: Surface) -> None:
        self._post(SurfaceClosed(surface))

    def register_state_listener(self, listener: Callable[[DispatchState], None]) -> None:
        if listener not in self._state_listeners:
            self._state_listeners.append(listener)

    def register_result_listener(self, listener: Callable[[ClickOutcome], None]) -> None:
        if listener not in self._result_listeners:
            self._result_listeners.append(listener)

    def shutdown(self) -> None:
        if self._cooldown_handle is not None:
            self.scheduler.cancel(self._cooldown_handle)
            self._cooldown_handle = None
        self.surface_service.hide_zoom()
        self.surface_service.hide_grid()
        self.logger.debug("Click session shut down", phase=self.phase.value)

    # ------------------------------------------------------------ activation

    def _build_snapshot(self) -> Result[ActivationSnapshot]:
        config = self.settings.get_snapshot()

        displays_result = self.display_service.get_displays()
        if displays_result.is_failure:
            return Result.fail(displays_result.error)

        index = config.display_index if config.display_policy == DisplayPolicy.INDEX else None
        display_result = resolve_target_display(displays_result.value, config.display_policy, index)
        if display_result.is_failure:
            return Result.fail(display_result.error)
        display = display_result.value
        self.logger.info(f"Target display: {display.describe()}", policy=config.display_policy.value,
                         device_pixel_ratio=display.device_pixel_ratio)

        fits = check_grid_fits(display, config.grid)
        if fits.is_failure:
            return Result.fail(fits.error)

        return self.screenshot_service.capture_display(display).map(
            lambda screenshot: ActivationSnapshot(display=display, config=config, screenshot=screenshot)
        )

    # ------------------------------------------------------------ event loop

    def _post(self, event: Event) -> None:
        self._queue.append(event)
        if self._draining:
            return

        self._draining = True
        try:
            while self._queue:
                self._handle(self._queue.popleft())
        finally:
            self._draining = False

    def _handle(self, event: Event) -> None:
        previous = self._state.phase
        result = transition(self._state, event)
        self._state = result.state

        if result.dropped:
            self.logger.info(f"{type(event).__name__} dropped: {result.dropped}")
        else:
            self.logger.debug(f"{type(event).__name__}: {previous.value} -> {self._state.phase.value}")

        for effect in result.effects:
            try:
                self._execute(effect)
            except Exception as e:
                self.logger.error(f"Error executing {type(effect).__name__}: {e}")
                self.logger.debug(traceback.format_exc())

        if self._state.phase != previous:
            self._notify_state(self._state.phase)

    def _execute(self, effect: Effect) -> None:
        if isinstance(effect, ShowGrid):
            self._check_shown(self.surface_service.show_grid(effect.snapshot, effect.digits))
        elif isinstance(effect, HideGrid):
            self.surface_service.hide_grid()
        elif isinstance(effect, ShowZoom):
            self._check_shown(self.surface_service.show_zoom(effect.view, effect.snapshot))
        elif isinstance(effect, HideZoom):
            self.surface_service.hide_zoom()
        elif isinstance(effect, UpdateEntry):
            self.surface_service.update_entry(effect.digits)
        elif isinstance(effect, DispatchClick):
            self._dispatch(effect)
        elif isinstance(effect, StartCooldown):
            self._cooldown_handle = self.scheduler.schedule(effect.delay_ms, self._on_cooldown_elapsed)
        elif isinstance(effect, Report):
            self._report(effect.error)
        elif isinstance(effect, SessionEnded):
            self._notify_result(effect.outcome)

    def _check_shown(self, result: Result[bool]) -> None:
        # a surface that cannot be shown leaves nothing to pick on
        if result.is_failure:
            self._report(UIError(message=f"Surface could not be shown: {result.error.message}"))
            self._queue.append(Cancel())

    def _dispatch(self, effect: DispatchClick) -> None:
        self.logger.debug(f"Dispatching click at ({effect.point.x}, {effect.point.y})",
                          button=effect.button, inject=effect.inject)
        worker = PointerDispatchWorker(self.pointer_service, self.logger, effect)
        started = self.task_service.execute_ui_task(DISPATCH_TASK_ID, worker, self._on_dispatch_result)
        if started.is_failure:
            self._queue.append(DispatchFinished(error=started.error))

    def _on_dispatch_result(self, result: Any) -> None:
        error = None
        if isinstance(result, Result) and result.is_failure:
            error = result.error
        self._post(DispatchFinished(error=error))

    def _on_cooldown_elapsed(self) -> None:
        self._cooldown_handle = None
        self._post(CooldownElapsed())

    # ------------------------------------------------------------ reporting

    def _report(self, error: DomainError) -> None:
        if error.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING):
            self.logger.warning(str(error))
        else:
            self.logger.error(str(error))

    def _notify_state(self, phase: DispatchState) -> None:
        for listener in list(self._state_listeners):
            try:
                listener(phase)
            except Exception as e:
                self.logger.error(f"Error in state listener: {e}")

    def _notify_result(self, outcome: ClickOutcome) -> None:
        self.logger.info(f"Session ended: {outcome.status}", cell=outcome.cell_index)
        for listener in list(self._result_listeners):
            try:
                listener(outcome)
            except Exception as e:
                self.logger.error(f"Error in result listener: {e}")
