"""Pytest configuration and shared fixtures."""

import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from gridpoint.domain.models.click_config import ClickConfig
from gridpoint.domain.models.geometry import Display
from gridpoint.domain.models.selection import ActivationSnapshot


class RecordingLogger:
    """ILoggerService stand-in that keeps every line for assertions."""

    def __init__(self):
        self.records = []

    def _log(self, level, message, **kwargs):
        self.records.append((level, message, kwargs))

    def debug(self, message, **kwargs):
        self._log("debug", message, **kwargs)

    def info(self, message, **kwargs):
        self._log("info", message, **kwargs)

    def warning(self, message, **kwargs):
        self._log("warning", message, **kwargs)

    def error(self, message, **kwargs):
        self._log("error", message, **kwargs)

    def set_level(self, level):
        pass

    def messages(self, level):
        return [message for lvl, message, _ in self.records if lvl == level]


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def full_hd():
    return Display(id=0, x=0, y=0, width=1920, height=1080, name="HDMI-1")


@pytest.fixture
def snapshot(full_hd):
    """Activation snapshot on a 1920x1080 display with the default 6x10 grid."""
    return ActivationSnapshot(display=full_hd, config=ClickConfig(cooldown_ms=500))
