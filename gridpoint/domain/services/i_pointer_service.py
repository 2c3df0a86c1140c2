# gridpoint/domain/services/i_pointer_service.py

"""
Pointer injection interface.

Implementations drive an external process. Every call blocks until that
process finishes and reports failures as an InjectionError; nothing is
retried, since a repeated click would repeat its side effects.
"""
from abc import ABC, abstractmethod

from gridpoint.domain.common.result import Result
from gridpoint.domain.models.geometry import AbsolutePoint


class IPointerService(ABC):
    """Interface for synthetic pointer moves and clicks."""

    @abstractmethod
    def move(self, x: int, y: int) -> Result[bool]:
        """
        Move the pointer to an absolute pixel.

        Args:
            x: Absolute x coordinate
            y: Absolute y coordinate

        Returns:
            Result indicating success, or an InjectionError
        """
        pass

    @abstractmethod
    def click(self, button: int = 1) -> Result[bool]:
        """
        Click at the current pointer position.

        Args:
            button: 1 = left, 2 = middle, 3 = right

        Returns:
            Result indicating success, or an InjectionError
        """
        pass

    @abstractmethod
    def get_location(self) -> Result[AbsolutePoint]:
        """Current pointer position."""
        pass

    @abstractmethod
    def describe_commands(self, x: int, y: int, button: int = 1) -> str:
        """Human-readable commands equivalent to a move + click, for print-only mode."""
        pass
