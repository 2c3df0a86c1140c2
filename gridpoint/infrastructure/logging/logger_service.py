#gridpoint/infrastructure/logging/logger_service.py
"""
Logger services on top of the standard ``logging`` module.
"""
import logging
import sys
import os
from datetime import datetime
from typing import Any, Dict

from gridpoint.domain.services.i_logger_service import ILoggerService

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ConsoleLoggerService(ILoggerService):
    """
    Logs to stderr.

    Stdout carries only the resolved ``x y`` coordinate, which scripts and
    agents read, so nothing else may be written there.
    """

    def __init__(self, level: int = logging.INFO, name: str = "GridPoint"):
        self.logger = logging.getLogger(name)
        self.logger.propagate = False
        if not self.logger.handlers:
            self._add_handler(logging.StreamHandler(sys.stderr))
        self.set_level(level)

    def debug(self, message: str, **kwargs) -> None:
        self._emit(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._emit(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._emit(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._emit(logging.ERROR, message, kwargs)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            handler.setLevel(level)

    def _add_handler(self, handler: logging.Handler) -> None:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.setLevel(self.logger.level)
        self.logger.addHandler(handler)

    def _emit(self, level: int, message: str, context: Dict[str, Any]) -> None:
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            message = f"{message} [{pairs}]"
        self.logger.log(level, message)


class FileLoggerService(ConsoleLoggerService):
    """Console logging plus a dated file in ``log_dir`` (``--log-dir``)."""

    def __init__(self, level: int = logging.INFO, name: str = "GridPoint",
                 log_dir: str = "logs"):
        super().__init__(level, name)

        os.makedirs(log_dir, exist_ok=True)
        current_date = datetime.now().strftime("%Y-%m-%d")
        self.log_file = os.path.join(log_dir, f"{name.lower()}_{current_date}.log")
        self._add_handler(logging.FileHandler(self.log_file))
