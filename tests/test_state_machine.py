from dataclasses import replace

import pytest

from gridpoint.domain.common.errors import InjectionError
from gridpoint.domain.geometry.grid_model import cell_rect
from gridpoint.domain.geometry.zoom_transform import build_zoom_view, compute_zoom_region
from gridpoint.domain.models.geometry import AbsolutePoint, Size
from gridpoint.domain.session.state_machine import (
    Activated, BackToGrid, Cancel, CellPicked, CooldownElapsed, DigitErased, DigitsCommitted,
    DigitTyped, DispatchClick, DispatchFinished, DispatchState, GridPointPicked, HideGrid,
    HideZoom, Report, SessionEnded, SessionState, ShowGrid, ShowZoom, StartCooldown, Surface,
    SurfaceClosed, UpdateEntry, ZoomPointPicked, transition
)


def run(state, *events):
    """Feed events in order; return the final state and every effect emitted."""
    effects = []
    for event in events:
        result = transition(state, event)
        state = result.state
        effects.extend(result.effects)
    return state, effects


def effect_types(effects):
    return [type(effect) for effect in effects]


@pytest.fixture
def awaiting_cell(snapshot):
    state, _ = run(SessionState(), Activated(snapshot))
    return state


@pytest.fixture
def awaiting_zoom(awaiting_cell, snapshot):
    """Cell 23 selected, with a 1200x900 viewport."""
    cell = cell_rect(snapshot.display, snapshot.config.grid, 23).value
    region = compute_zoom_region(snapshot.display, cell, 0.5, 23).value
    view = build_zoom_view(region, Size(1200, 900)).value
    return replace(awaiting_cell, phase=DispatchState.AWAITING_ZOOM_CLICK, zoom=view)


@pytest.fixture
def dispatching(awaiting_zoom):
    state, _ = run(awaiting_zoom, ZoomPointPicked(600, 450))
    return state


def test_activation_shows_grid(snapshot):
    result = transition(SessionState(), Activated(snapshot))
    assert result.state.phase == DispatchState.AWAITING_CELL_SELECTION
    assert result.state.snapshot is snapshot
    assert result.effects == (ShowGrid(snapshot=snapshot),)


@pytest.mark.parametrize("fixture_name", ["awaiting_cell", "awaiting_zoom", "dispatching"])
def test_activation_is_dropped_unless_idle(request, snapshot, fixture_name):
    state = request.getfixturevalue(fixture_name)
    result = transition(state, Activated(snapshot))
    assert result.state == state
    assert result.effects == ()
    assert result.dropped


def test_cell_pick_opens_zoom(awaiting_cell):
    result = transition(awaiting_cell, CellPicked(23))
    assert result.state.phase == DispatchState.AWAITING_ZOOM_CLICK
    assert effect_types(result.effects) == [HideGrid, ShowZoom]
    view = result.state.zoom
    assert view.region.cell_index == 23
    # 3x zoom of 384x360 shrunk to 90% of the display
    assert view.viewport == Size(1036, 972)


def test_invalid_cell_keeps_waiting(awaiting_cell):
    result = transition(awaiting_cell, CellPicked(60))
    assert result.state.phase == DispatchState.AWAITING_CELL_SELECTION
    reports = [effect for effect in result.effects if isinstance(effect, Report)]
    assert reports[0].error.code == "InvalidIndex"


def test_grid_point_selects_covering_cell(awaiting_cell):
    state, _ = run(awaiting_cell, GridPointPicked(700, 400))
    assert state.phase == DispatchState.AWAITING_ZOOM_CLICK
    assert state.zoom.region.cell_index == 23


def test_grid_point_outside_display_is_reported(awaiting_cell):
    result = transition(awaiting_cell, GridPointPicked(5000, 400))
    assert result.state == awaiting_cell
    assert result.effects[0].error.code == "PointOutsideDisplay"


class TestNumericEntry:

    def test_two_digits_select_cell(self, awaiting_cell):
        state, effects = run(awaiting_cell, DigitTyped("2"))
        assert state.digits == "2"
        assert effects == [UpdateEntry("2")]

        state, effects = run(state, DigitTyped("4"))
        assert state.phase == DispatchState.AWAITING_ZOOM_CLICK
        assert state.zoom.region.cell_index == 23
        assert state.digits == ""

    def test_unambiguous_digit_commits_immediately(self, awaiting_cell):
        state, _ = run(awaiting_cell, DigitTyped("7"))
        assert state.phase == DispatchState.AWAITING_ZOOM_CLICK
        assert state.zoom.region.cell_index == 6

    def test_enter_commits_short_number(self, awaiting_cell):
        state, _ = run(awaiting_cell, DigitTyped("3"), DigitsCommitted())
        assert state.zoom.region.cell_index == 2

    def test_zero_is_rejected_on_commit(self, awaiting_cell):
        state, effects = run(awaiting_cell, DigitTyped("0"), DigitsCommitted())
        assert state.phase == DispatchState.AWAITING_CELL_SELECTION
        assert state.digits == ""
        assert any(isinstance(effect, Report) for effect in effects)

    def test_erase(self, awaiting_cell):
        state, effects = run(awaiting_cell, DigitTyped("3"), DigitErased())
        assert state.digits == ""
        assert effects[-1] == UpdateEntry("")

    def test_non_digit_is_dropped(self, awaiting_cell):
        result = transition(awaiting_cell, DigitTyped("x"))
        assert result.state == awaiting_cell
        assert result.dropped


def test_zoom_click_dispatches_after_hiding_surfaces(awaiting_zoom):
    result = transition(awaiting_zoom, ZoomPointPicked(600, 450))
    assert result.state.phase == DispatchState.DISPATCHING
    assert effect_types(result.effects) == [HideZoom, HideGrid, DispatchClick]
    dispatch = result.effects[-1]
    assert dispatch.point == AbsolutePoint(672, 450)
    assert dispatch.button == 1
    assert dispatch.cell_index == 23


def test_zoom_click_outside_viewport_keeps_waiting(awaiting_zoom):
    result = transition(awaiting_zoom, ZoomPointPicked(1300, 450))
    assert result.state == awaiting_zoom
    assert effect_types(result.effects) == [Report]


def test_back_to_grid(awaiting_zoom, snapshot):
    result = transition(awaiting_zoom, BackToGrid())
    assert result.state.phase == DispatchState.AWAITING_CELL_SELECTION
    assert result.state.zoom is None
    assert result.effects == (HideZoom(), ShowGrid(snapshot=snapshot))


def test_cancel_while_zoomed_returns_to_idle_without_dispatch(awaiting_zoom):
    state, effects = run(awaiting_zoom, Cancel())
    assert state == SessionState()
    assert DispatchClick not in effect_types(effects)
    assert effect_types(effects) == [HideZoom, HideGrid, SessionEnded]
    assert effects[-1].outcome.status == "cancelled"


def test_cancel_while_selecting_cell(awaiting_cell):
    state, effects = run(awaiting_cell, Cancel())
    assert state.phase == DispatchState.IDLE
    assert effects[-1].outcome.status == "cancelled"


class TestSingleFlight:

    @pytest.mark.parametrize("event", [
        ZoomPointPicked(10, 10), CellPicked(3), GridPointPicked(5, 5), DigitTyped("5"), BackToGrid()
    ])
    def test_events_during_dispatch_are_dropped(self, dispatching, event):
        result = transition(dispatching, event)
        assert result.state == dispatching
        assert DispatchClick not in effect_types(result.effects)

    def test_cancel_does_not_interrupt_dispatch(self, dispatching):
        result = transition(dispatching, Cancel())
        assert result.state.phase == DispatchState.DISPATCHING
        assert result.dropped
        assert SessionEnded not in effect_types(result.effects)

    def test_surface_close_during_dispatch_is_dropped(self, dispatching):
        result = transition(dispatching, SurfaceClosed(Surface.ZOOM))
        assert result.state == dispatching
        assert result.effects == ()

    def test_cooling_down_drops_second_selection(self, dispatching, snapshot):
        cooling, _ = run(dispatching, DispatchFinished())
        for event in (Activated(snapshot), ZoomPointPicked(600, 450), CellPicked(1)):
            result = transition(cooling, event)
            assert result.state == cooling
            assert result.effects == ()


def test_successful_dispatch_cools_down_then_ends(dispatching):
    state, effects = run(dispatching, DispatchFinished())
    assert state.phase == DispatchState.COOLING_DOWN
    assert effects == [StartCooldown(delay_ms=500)]

    state, effects = run(state, CooldownElapsed())
    assert state == SessionState()
    outcome = effects[0].outcome
    assert outcome.status == "clicked"
    assert outcome.point == AbsolutePoint(672, 450)
    assert outcome.cell_index == 23


def test_failed_injection_still_reaches_idle(dispatching):
    error = InjectionError(message="xdotool exited with 1", code="CommandFailed")
    state, effects = run(dispatching, DispatchFinished(error=error), CooldownElapsed())
    assert state.phase == DispatchState.IDLE
    assert effect_types(effects) == [Report, StartCooldown, SessionEnded]
    assert effects[0].error is error
    assert effects[-1].outcome.status == "failed"


class TestSurfaceClosed:

    def test_closing_active_grid_cancels(self, awaiting_cell):
        state, effects = run(awaiting_cell, SurfaceClosed(Surface.GRID))
        assert state.phase == DispatchState.IDLE
        assert effects[-1].outcome.status == "cancelled"

    def test_closing_active_zoom_cancels(self, awaiting_zoom):
        state, _ = run(awaiting_zoom, SurfaceClosed(Surface.ZOOM))
        assert state.phase == DispatchState.IDLE

    def test_closing_inactive_surface_is_dropped(self, awaiting_zoom):
        result = transition(awaiting_zoom, SurfaceClosed(Surface.GRID))
        assert result.state == awaiting_zoom
        assert result.effects == ()
        assert result.dropped


@pytest.mark.parametrize("event", [
    CellPicked(1), ZoomPointPicked(1, 1), BackToGrid(), DispatchFinished(), CooldownElapsed(), DigitErased()
])
def test_idle_ignores_stray_events(event):
    result = transition(SessionState(), event)
    assert result.state == SessionState()
    assert result.effects == ()
