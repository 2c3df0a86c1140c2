# gridpoint/domain/session/state_machine.py
"""
Click resolution state machine.

``transition(state, event)`` is a pure function returning the next state and
the ordered list of effects the coordinator must execute. Nothing in this
module touches windows, timers or processes, so every sequencing rule
(surfaces hidden before the dispatch, at most one dispatch in flight, no
overlay re-shown while cooling down) is decided here and only here.

Phases::

    IDLE --Activated--> AWAITING_CELL_SELECTION --cell--> AWAITING_ZOOM_CLICK
      ^                        ^                               |   |
      |                        +---------BackToGrid------------+   |
      |                                                            | zoom point
      +--CooldownElapsed-- COOLING_DOWN <--DispatchFinished-- DISPATCHING

Cancel (or the active surface being closed) returns both awaiting phases to
IDLE. Once the dispatch is issued nothing can interrupt it: every event other
than DispatchFinished / CooldownElapsed is dropped until the machine is IDLE.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Type

from gridpoint.domain.common.errors import DomainError, GeometryError
from gridpoint.domain.geometry.grid_model import (
    cell_at, cell_rect, is_entry_complete, max_entry_digits, parse_cell_number
)
from gridpoint.domain.geometry.zoom_transform import (
    build_zoom_view, compute_zoom_region, to_device_pixels, viewport_size_for, viewport_to_absolute
)
from gridpoint.domain.common.result import Result
from gridpoint.domain.models.geometry import AbsolutePoint, Display, Size
from gridpoint.domain.models.selection import ActivationSnapshot, ClickOutcome, ZoomView

# the zoom surface may use at most this share of the display's usable area
ZOOM_MAX_SCREEN_SHARE = 0.9


class DispatchState(Enum):
    IDLE = "idle"
    AWAITING_CELL_SELECTION = "awaiting_cell_selection"
    AWAITING_ZOOM_CLICK = "awaiting_zoom_click"
    DISPATCHING = "dispatching"
    COOLING_DOWN = "cooling_down"


IN_FLIGHT = (DispatchState.DISPATCHING, DispatchState.COOLING_DOWN)
AWAITING = (DispatchState.AWAITING_CELL_SELECTION, DispatchState.AWAITING_ZOOM_CLICK)


class Surface(Enum):
    GRID = "grid"
    ZOOM = "zoom"


@dataclass(frozen=True)
class SessionState:
    """The single mutable-by-replacement session value owned by the coordinator."""
    phase: DispatchState = DispatchState.IDLE
    snapshot: Optional[ActivationSnapshot] = None
    zoom: Optional[ZoomView] = None
    digits: str = ""
    target: Optional[AbsolutePoint] = None  # device pixels
    outcome: Optional[ClickOutcome] = None


# ---------------------------------------------------------------- events

class Event:
    """Base class for inbound events."""


@dataclass(frozen=True)
class Activated(Event):
    snapshot: ActivationSnapshot


@dataclass(frozen=True)
class CellPicked(Event):
    index: int


@dataclass(frozen=True)
class GridPointPicked(Event):
    x: float
    y: float


@dataclass(frozen=True)
class DigitTyped(Event):
    digit: str


@dataclass(frozen=True)
class DigitErased(Event):
    pass


@dataclass(frozen=True)
class DigitsCommitted(Event):
    pass


@dataclass(frozen=True)
class ZoomPointPicked(Event):
    x: float
    y: float


@dataclass(frozen=True)
class BackToGrid(Event):
    pass


@dataclass(frozen=True)
class Cancel(Event):
    pass


@dataclass(frozen=True)
class SurfaceClosed(Event):
    surface: Surface


@dataclass(frozen=True)
class DispatchFinished(Event):
    error: Optional[DomainError] = None


@dataclass(frozen=True)
class CooldownElapsed(Event):
    pass


# ---------------------------------------------------------------- effects

class Effect:
    """Base class for side effects executed by the coordinator."""


@dataclass(frozen=True)
class ShowGrid(Effect):
    snapshot: ActivationSnapshot
    digits: str = ""


@dataclass(frozen=True)
class HideGrid(Effect):
    pass


@dataclass(frozen=True)
class ShowZoom(Effect):
    view: ZoomView
    snapshot: ActivationSnapshot


@dataclass(frozen=True)
class HideZoom(Effect):
    pass


@dataclass(frozen=True)
class UpdateEntry(Effect):
    digits: str


@dataclass(frozen=True)
class DispatchClick(Effect):
    point: AbsolutePoint
    button: int
    cell_index: int
    inject: bool = True
    verify: bool = True


@dataclass(frozen=True)
class StartCooldown(Effect):
    delay_ms: int


@dataclass(frozen=True)
class Report(Effect):
    error: DomainError


@dataclass(frozen=True)
class SessionEnded(Effect):
    outcome: ClickOutcome


@dataclass(frozen=True)
class Transition:
    state: SessionState
    effects: Tuple[Effect, ...] = field(default_factory=tuple)
    dropped: Optional[str] = None  # why the event was dropped, for logging


def _stay(state: SessionState, *effects: Effect) -> Transition:
    return Transition(state=state, effects=tuple(effects))


def _drop(state: SessionState, reason: str) -> Transition:
    return Transition(state=state, dropped=reason)


def _ignore(state: SessionState, event: Event) -> Transition:
    return _drop(state, f"{type(event).__name__} has no meaning in {state.phase.value}")


def _max_viewport(display: Display) -> Size:
    usable = display.usable_rect
    return Size(max(1, int(usable.width * ZOOM_MAX_SCREEN_SHARE)),
                max(1, int(usable.height * ZOOM_MAX_SCREEN_SHARE)))


def _zoom_for_cell(snapshot: ActivationSnapshot, index: int) -> Result[ZoomView]:
    config = snapshot.config
    display = snapshot.display
    return (cell_rect(display, config.grid, index)
            .and_then(lambda rect: compute_zoom_region(display, rect, config.padding_fraction, index))
            .and_then(lambda region: build_zoom_view(
                region, viewport_size_for(region, config.zoom_factor, _max_viewport(display)))))


def _select_cell(state: SessionState, index: int) -> Transition:
    view = _zoom_for_cell(state.snapshot, index)
    if view.is_failure:
        return _stay(replace(state, digits=""), UpdateEntry(""), Report(view.error))

    next_state = replace(state, phase=DispatchState.AWAITING_ZOOM_CLICK, zoom=view.value, digits="")
    return _stay(next_state, HideGrid(), ShowZoom(view=view.value, snapshot=state.snapshot))


def _reset_to_idle(*effects: Effect) -> Transition:
    return Transition(state=SessionState(), effects=tuple(effects))


# ---------------------------------------------------------------- handlers

def _on_activated(state: SessionState, event: Activated) -> Transition:
    if state.phase in IN_FLIGHT:
        return _drop(state, "a dispatch is still in flight")
    if state.phase != DispatchState.IDLE:
        return _drop(state, "the overlay is already active")
    next_state = SessionState(phase=DispatchState.AWAITING_CELL_SELECTION, snapshot=event.snapshot)
    return _stay(next_state, ShowGrid(snapshot=event.snapshot))


def _on_cell_picked(state: SessionState, event: CellPicked) -> Transition:
    if state.phase != DispatchState.AWAITING_CELL_SELECTION:
        return _ignore(state, event)
    return _select_cell(state, event.index)


def _on_grid_point(state: SessionState, event: GridPointPicked) -> Transition:
    if state.phase != DispatchState.AWAITING_CELL_SELECTION:
        return _ignore(state, event)
    snapshot = state.snapshot
    index = cell_at(snapshot.display, snapshot.config.grid, event.x, event.y)
    if index is None:
        return _stay(state, Report(GeometryError(
            message=f"Point ({event.x}, {event.y}) is outside {snapshot.display.describe()}",
            code="PointOutsideDisplay",
            details={"x": event.x, "y": event.y}
        )))
    return _select_cell(state, index)


def _on_digit(state: SessionState, event: DigitTyped) -> Transition:
    if state.phase != DispatchState.AWAITING_CELL_SELECTION:
        return _ignore(state, event)
    if len(event.digit) != 1 or not event.digit.isdigit():
        return _drop(state, f"'{event.digit}' is not a digit")

    grid = state.snapshot.config.grid
    digits = (state.digits + event.digit)[-max_entry_digits(grid):]
    if is_entry_complete(digits, grid):
        return _commit(replace(state, digits=digits))
    return _stay(replace(state, digits=digits), UpdateEntry(digits))


def _on_digit_erased(state: SessionState, event: DigitErased) -> Transition:
    if state.phase != DispatchState.AWAITING_CELL_SELECTION or not state.digits:
        return _ignore(state, event)
    digits = state.digits[:-1]
    return _stay(replace(state, digits=digits), UpdateEntry(digits))


def _commit(state: SessionState) -> Transition:
    index = parse_cell_number(state.digits, state.snapshot.config.grid)
    if index.is_failure:
        # rejected numbers keep the selection pending with an empty entry
        return _stay(replace(state, digits=""), UpdateEntry(""), Report(index.error))
    return _select_cell(state, index.value)


def _on_digits_committed(state: SessionState, event: DigitsCommitted) -> Transition:
    if state.phase != DispatchState.AWAITING_CELL_SELECTION:
        return _ignore(state, event)
    return _commit(state)


def _on_zoom_point(state: SessionState, event: ZoomPointPicked) -> Transition:
    if state.phase in IN_FLIGHT:
        return _drop(state, "a dispatch is already in flight")
    if state.phase != DispatchState.AWAITING_ZOOM_CLICK:
        return _ignore(state, event)

    point = viewport_to_absolute(state.zoom, event.x, event.y)
    if point.is_failure:
        return _stay(state, Report(point.error))

    config = state.snapshot.config
    target = to_device_pixels(state.snapshot.display, point.value)
    next_state = replace(state, phase=DispatchState.DISPATCHING, target=target)
    # both surfaces are hidden before the click so their pixels are never the target
    return _stay(
        next_state,
        HideZoom(),
        HideGrid(),
        DispatchClick(point=target, button=config.click_button,
                      cell_index=state.zoom.region.cell_index,
                      inject=config.inject_clicks, verify=config.verify_pointer)
    )


def _on_back_to_grid(state: SessionState, event: BackToGrid) -> Transition:
    if state.phase != DispatchState.AWAITING_ZOOM_CLICK:
        return _ignore(state, event)
    next_state = replace(state, phase=DispatchState.AWAITING_CELL_SELECTION, zoom=None, digits="")
    return _stay(next_state, HideZoom(), ShowGrid(snapshot=state.snapshot))


def _cancelled(state: SessionState, message: str) -> Transition:
    cell_index = state.zoom.region.cell_index if state.zoom else None
    return _reset_to_idle(
        HideZoom(),
        HideGrid(),
        SessionEnded(ClickOutcome(status="cancelled", cell_index=cell_index, message=message))
    )


def _on_cancel(state: SessionState, event: Cancel) -> Transition:
    if state.phase in AWAITING:
        return _cancelled(state, "Selection cancelled")
    if state.phase in IN_FLIGHT:
        # an issued dispatch is never interrupted; surfaces are already hidden
        return Transition(state=state, effects=(HideZoom(), HideGrid()),
                          dropped="the dispatch was already issued")
    return Transition(state=state, effects=(HideZoom(), HideGrid()))


def _on_surface_closed(state: SessionState, event: SurfaceClosed) -> Transition:
    active = {
        DispatchState.AWAITING_CELL_SELECTION: Surface.GRID,
        DispatchState.AWAITING_ZOOM_CLICK: Surface.ZOOM,
    }.get(state.phase)
    if active is None or active != event.surface:
        # teardown of an inactive surface never re-triggers anything
        return _drop(state, f"{event.surface.value} surface closed while {state.phase.value}")
    return _cancelled(state, f"The {event.surface.value} surface was closed")


def _on_dispatch_finished(state: SessionState, event: DispatchFinished) -> Transition:
    if state.phase != DispatchState.DISPATCHING:
        return _ignore(state, event)

    cell_index = state.zoom.region.cell_index if state.zoom else None
    effects: List[Effect] = []
    if event.error is not None:
        outcome = ClickOutcome(status="failed", point=state.target, cell_index=cell_index,
                               message=event.error.message)
        effects.append(Report(event.error))
    else:
        outcome = ClickOutcome(status="clicked", point=state.target, cell_index=cell_index)

    effects.append(StartCooldown(delay_ms=state.snapshot.config.cooldown_ms))
    next_state = replace(state, phase=DispatchState.COOLING_DOWN, outcome=outcome)
    return _stay(next_state, *effects)


def _on_cooldown_elapsed(state: SessionState, event: CooldownElapsed) -> Transition:
    if state.phase != DispatchState.COOLING_DOWN:
        return _ignore(state, event)
    return _reset_to_idle(SessionEnded(state.outcome))


_HANDLERS: Dict[Type[Event], Callable[[SessionState, Event], Transition]] = {
    Activated: _on_activated,
    CellPicked: _on_cell_picked,
    GridPointPicked: _on_grid_point,
    DigitTyped: _on_digit,
    DigitErased: _on_digit_erased,
    DigitsCommitted: _on_digits_committed,
    ZoomPointPicked: _on_zoom_point,
    BackToGrid: _on_back_to_grid,
    Cancel: _on_cancel,
    SurfaceClosed: _on_surface_closed,
    DispatchFinished: _on_dispatch_finished,
    CooldownElapsed: _on_cooldown_elapsed,
}


def transition(state: SessionState, event: Event) -> Transition:
    """
    Compute the next session state and the effects to execute, in order.

    Args:
        state: Current session state
        event: Inbound event

    Returns:
        Transition with the next state, its effects and, for dropped
        events, the reason they were dropped
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        return _drop(state, f"unknown event {type(event).__name__}")
    return handler(state, event)
