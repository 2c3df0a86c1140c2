# gridpoint/domain/services/i_click_session_service.py

"""
Click session interface.

The session owns the dispatch state. Every method is an inbound event and
must be called on the event loop thread; events raised while another event
is being handled are queued and processed afterwards, one at a time.
"""
from abc import ABC, abstractmethod
from typing import Callable

from gridpoint.domain.common.result import Result
from gridpoint.domain.models.selection import ClickOutcome
from gridpoint.domain.session.state_machine import DispatchState, Surface


class IClickSessionService(ABC):
    """Interface for the click resolution coordinator."""

    @property
    @abstractmethod
    def phase(self) -> DispatchState:
        """Current dispatch state."""
        pass

    @abstractmethod
    def activate(self) -> Result[bool]:
        """
        Start an activation: enumerate displays, capture, show the grid.

        Returns:
            Result containing True if the overlay was activated, False if the
            activation was dropped because a session is running or cooling down
        """
        pass

    @abstractmethod
    def pick_cell(self, index: int) -> None:
        """A cell was chosen by its 0-based index."""
        pass

    @abstractmethod
    def pick_grid_point(self, x: float, y: float) -> None:
        """The grid overlay was clicked at an absolute point."""
        pass

    @abstractmethod
    def type_digit(self, digit: str) -> None:
        """A digit was typed on the grid overlay."""
        pass

    @abstractmethod
    def erase_digit(self) -> None:
        """The last typed digit was erased."""
        pass

    @abstractmethod
    def commit_digits(self) -> None:
        """The typed cell number was confirmed."""
        pass

    @abstractmethod
    def pick_zoom_point(self, x: float, y: float) -> None:
        """The zoom viewport was clicked at viewport coordinates."""
        pass

    @abstractmethod
    def back_to_grid(self) -> None:
        """Leave the zoom surface and return to the grid."""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Abandon the current selection."""
        pass

    @abstractmethod
    def surface_closed(self, surface: Surface) -> None:
        """A surface was closed by the window manager or the operator."""
        pass

    @abstractmethod
    def register_state_listener(self, listener: Callable[[DispatchState], None]) -> None:
        """Be told about every phase change."""
        pass

    @abstractmethod
    def register_result_listener(self, listener: Callable[[ClickOutcome], None]) -> None:
        """Be told how each activation ended."""
        pass

    @abstractmethod
    def shutdown(self) -> None:
        """Hide surfaces and cancel the pending cooldown timer."""
        pass
