# gridpoint/domain/services/i_config_repository_service.py
"""
Storage for the flat settings record.

The repository stores and returns raw values only; the click settings
service validates them.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict

from gridpoint.domain.common.result import Result


class IConfigRepository(ABC):

    @abstractmethod
    def load_config(self, force_reload: bool = False) -> Result[Dict[str, Any]]:
        """
        The whole record, read from storage when it changed or when forced.

        A missing store is created from the defaults.
        """
        pass

    @abstractmethod
    def save_config(self, config: Dict[str, Any]) -> Result[bool]:
        """Replace the stored record and notify observers."""
        pass

    @abstractmethod
    def register_observer(self, callback: Callable[[], None]) -> None:
        """``callback`` runs after every successful save."""
        pass
