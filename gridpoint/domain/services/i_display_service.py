# gridpoint/domain/services/i_display_service.py
from abc import ABC, abstractmethod
from typing import List

from gridpoint.domain.common.result import Result
from gridpoint.domain.models.geometry import Display


class IDisplayService(ABC):
    """Enumeration of the attached displays."""

    @abstractmethod
    def get_displays(self) -> Result[List[Display]]:
        """
        Query the attached displays, fresh on every call.

        Returns:
            Result containing displays in enumeration order
        """
        pass
