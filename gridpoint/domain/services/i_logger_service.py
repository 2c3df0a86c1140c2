#gridpoint/domain/services/i_logger_service.py
"""
Logging interface.

Keyword arguments are context: implementations append them to the line as
``[key=value ...]``, for example ``logger.info("Clicked", button=1, cell=23)``.
"""
from abc import ABC, abstractmethod


class ILoggerService(ABC):

    @abstractmethod
    def debug(self, message: str, **kwargs) -> None:
        pass

    @abstractmethod
    def info(self, message: str, **kwargs) -> None:
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs) -> None:
        pass

    @abstractmethod
    def error(self, message: str, **kwargs) -> None:
        pass

    @abstractmethod
    def set_level(self, level: int) -> None:
        """Minimum level to emit, as a ``logging`` level constant."""
        pass
