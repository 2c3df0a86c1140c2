# gridpoint/domain/services/i_surface_service.py

"""
Surface (window) service interface.

Two surfaces exist: the full-screen grid overlay and the zoom viewport.
Show and hide are idempotent: hiding a hidden surface or showing a shown one
is a no-op, never an error. Operator input on the surfaces is forwarded to
the bound click session.
"""
from abc import ABC, abstractmethod

from gridpoint.domain.common.result import Result
from gridpoint.domain.models.selection import ActivationSnapshot, ZoomView
from gridpoint.domain.services.i_click_session_service import IClickSessionService


class ISurfaceService(ABC):
    """Interface for the grid overlay and zoom surfaces."""

    @abstractmethod
    def bind(self, session: IClickSessionService) -> None:
        """Route surface input (picks, digits, back, cancel, close) to a session."""
        pass

    @abstractmethod
    def show_grid(self, snapshot: ActivationSnapshot, digits: str = "") -> Result[bool]:
        """
        Activate the grid overlay.

        Args:
            snapshot: Display, grid dimensions and screenshot to render
            digits: Numeric entry typed so far
        """
        pass

    @abstractmethod
    def hide_grid(self) -> Result[bool]:
        """Deactivate the grid overlay."""
        pass

    @abstractmethod
    def show_zoom(self, view: ZoomView, snapshot: ActivationSnapshot) -> Result[bool]:
        """
        Activate the zoom surface.

        Args:
            view: Region to magnify and the viewport size to magnify it into
            snapshot: Activation snapshot holding the screenshot to crop
        """
        pass

    @abstractmethod
    def hide_zoom(self) -> Result[bool]:
        """Deactivate the zoom surface."""
        pass

    @abstractmethod
    def update_entry(self, digits: str) -> None:
        """Show the numeric entry typed so far on the grid overlay."""
        pass


