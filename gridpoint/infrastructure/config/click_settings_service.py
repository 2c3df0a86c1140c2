from typing import Any, Dict, Optional

from gridpoint.domain.common.result import Result
from gridpoint.domain.models.click_config import ClickConfig, SETTING_KEYS
from gridpoint.domain.services.i_click_settings_service import IClickSettingsService
from gridpoint.domain.services.i_config_repository_service import IConfigRepository
from gridpoint.domain.services.i_logger_service import ILoggerService


class ClickSettingsService(IClickSettingsService):
    """
    Validated click engine settings backed by the configuration repository.

    The record is loaded once at construction and again whenever the
    repository reports a save. A key with an invalid value keeps its
    last-known-good value; a missing key takes its default.
    """

    def __init__(self, config_repository: IConfigRepository, logger: ILoggerService):
        self.config_repository = config_repository
        self.logger = logger
        self._last_known_good = ClickConfig()
        self._overrides: Dict[str, Any] = {}

        self.reload()
        self.config_repository.register_observer(self._on_config_saved)

    def get_snapshot(self) -> ClickConfig:
        """Immutable snapshot for the next activation, overrides applied."""
        if not self._overrides:
            return self._last_known_good
        return self._last_known_good.with_overrides(**self._overrides)

    def reload(self) -> Result[ClickConfig]:
        """Re-read the persisted record."""
        config_result = self.config_repository.load_config()
        if config_result.is_failure:
            self.logger.error(f"Keeping last-known-good settings: {config_result.error}")
            return Result.fail(config_result.error)

        config, errors = ClickConfig.from_mapping(config_result.value, fallback=self._last_known_good)
        for error in errors:
            self.logger.error(str(error), fallback=error.details.get("fallback"))

        self._last_known_good = config
        self.logger.debug("Click settings loaded", **config.to_dict())
        return Result.ok(config)

    def set_overrides(self, **overrides: Optional[Any]) -> None:
        """
        Process-local overrides, for example from command line flags.

        Overrides go through the same validation as the persisted record;
        rejected values are reported and ignored.
        """
        candidate = {}
        for key, value in overrides.items():
            if key not in SETTING_KEYS:
                self.logger.warning(f"Ignoring unknown setting override '{key}'")
            elif value is not None:
                candidate[key] = value

        merged = dict(self._last_known_good.to_dict(), **candidate)
        validated, errors = ClickConfig.from_mapping(merged, fallback=self._last_known_good)
        rejected = set()
        for error in errors:
            rejected.add(error.details.get("key"))
            self.logger.error(f"Ignoring override: {error}")
        if "display_index" in rejected and "display_policy" in candidate:
            # an index policy without its index would target the fallback display
            rejected.add("display_policy")
            self.logger.error("Ignoring display_policy override, its display_index was rejected")

        self._overrides = {
            key: getattr(validated, key) for key in candidate if key not in rejected
        }

    def _on_config_saved(self) -> None:
        self.reload()
