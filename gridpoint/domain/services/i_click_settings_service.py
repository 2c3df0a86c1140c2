# gridpoint/domain/services/i_click_settings_service.py
from abc import ABC, abstractmethod

from gridpoint.domain.common.result import Result
from gridpoint.domain.models.click_config import ClickConfig


class IClickSettingsService(ABC):
    """Validated access to the click engine configuration."""

    @abstractmethod
    def get_snapshot(self) -> ClickConfig:
        """Immutable configuration snapshot for the next activation."""
        pass

    @abstractmethod
    def reload(self) -> Result[ClickConfig]:
        """Re-read the persisted record, keeping last-known-good values for invalid keys."""
        pass

    @abstractmethod
    def set_overrides(self, **overrides) -> None:
        """Process-local overrides applied on top of the persisted record."""
        pass
