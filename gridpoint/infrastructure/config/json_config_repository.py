#gridpoint/infrastructure/config/json_config_repository.py

"""
Settings record kept in a JSON file.
"""
import os
import json
import threading
from typing import Any, Callable, Dict, List, Optional

from gridpoint.domain.services.i_config_repository_service import IConfigRepository
from gridpoint.domain.services.i_logger_service import ILoggerService
from gridpoint.domain.common.result import Result
from gridpoint.domain.common.errors import ConfigurationError
from gridpoint.domain.models.click_config import ClickConfig


class JsonConfigRepository(IConfigRepository):
    """
    One JSON object per file, cached until the file's mtime changes.

    Writes go to ``<file>.tmp`` first and are moved into place, so a crash
    mid-save never leaves a truncated record behind.
    """

    def __init__(self, config_file: str, logger: ILoggerService,
                 defaults: Optional[Dict[str, Any]] = None):
        self.config_file = config_file
        self.logger = logger
        self.defaults = dict(defaults) if defaults is not None else ClickConfig().to_dict()
        self._cache: Optional[Dict[str, Any]] = None
        self._cache_mtime = 0.0
        self._lock = threading.RLock()
        self._observers: List[Callable[[], None]] = []

    def load_config(self, force_reload: bool = False) -> Result[Dict[str, Any]]:
        with self._lock:
            if self._cache is not None and not force_reload and not self._file_changed():
                return Result.ok(self._cache)

            if not os.path.exists(self.config_file):
                self.logger.warning("Config file not found, writing defaults", path=self.config_file)
                config = dict(self.defaults)
                if self.save_config(config).is_failure:
                    self._cache = config
                return Result.ok(config)

            read_result = self._read_file()
            if read_result.is_failure:
                self.logger.error(str(read_result.error))
                return read_result

            config = read_result.value
            self.logger.info(f"Config loaded from {self.config_file}")
            if self._merge_defaults(config):
                save_result = self.save_config(config)
                if save_result.is_failure:
                    self.logger.warning(f"Merged defaults were not written back: {save_result.error}")

            self._cache = config
            return Result.ok(config)

    def save_config(self, config: Dict[str, Any]) -> Result[bool]:
        with self._lock:
            write_result = self._write_file(config)
            if write_result.is_failure:
                self.logger.error(str(write_result.error))
                return write_result
            self._cache = config
            self._cache_mtime = os.path.getmtime(self.config_file)
            self.logger.info(f"Config saved to {self.config_file}")

        self._notify_observers()
        return Result.ok(True)

    def register_observer(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback not in self._observers:
                self._observers.append(callback)

    def _file_changed(self) -> bool:
        try:
            return os.path.getmtime(self.config_file) > self._cache_mtime
        except OSError:
            return False

    def _read_file(self) -> Result[Dict[str, Any]]:
        try:
            with open(self.config_file, "r") as f:
                config = json.load(f)
            self._cache_mtime = os.path.getmtime(self.config_file)
        except (OSError, ValueError) as e:
            return Result.fail(ConfigurationError(
                message=f"Error loading config from {self.config_file}: {e}",
                code="Unreadable",
                details={"path": self.config_file},
                inner_error=e
            ))

        if not isinstance(config, dict):
            return Result.fail(ConfigurationError(
                message=f"Error loading config from {self.config_file}: expected a JSON object",
                code="NotAnObject",
                details={"path": self.config_file, "type": type(config).__name__}
            ))
        return Result.ok(config)

    def _write_file(self, config: Dict[str, Any]) -> Result[bool]:
        temp_path = f"{self.config_file}.tmp"
        try:
            config_dir = os.path.dirname(self.config_file)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            with open(temp_path, "w") as f:
                json.dump(config, f, indent=4)
            os.replace(temp_path, self.config_file)
        except (OSError, TypeError, ValueError) as e:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            return Result.fail(ConfigurationError(
                message=f"Failed to save config: {e}",
                code="Unwritable",
                details={"path": self.config_file},
                inner_error=e
            ))
        return Result.ok(True)

    def _merge_defaults(self, config: Dict[str, Any]) -> bool:
        """Fill in missing keys in place; True when anything was added."""
        missing = [key for key in self.defaults if key not in config]
        for key in missing:
            config[key] = self.defaults[key]
        if missing:
            self.logger.debug("Merged default settings", keys=",".join(missing))
        return bool(missing)

    def _notify_observers(self) -> None:
        with self._lock:
            observers = list(self._observers)
        for callback in observers:
            try:
                callback()
            except Exception as e:
                self.logger.error(f"Error in config observer {callback.__qualname__}: {e}")
