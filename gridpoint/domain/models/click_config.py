# gridpoint/domain/models/click_config.py
"""
Configuration snapshot consumed by one overlay activation.

The persisted record is a flat key/value mapping. ``ClickConfig.from_mapping``
turns it into an immutable snapshot: missing keys take the defaults, invalid
values are reported and replaced by the value from the last-known-good
snapshot, so a bad edit can never produce a degenerate grid.
"""
from dataclasses import dataclass, asdict, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from gridpoint.domain.common.errors import ConfigurationError


class DisplayPolicy(Enum):
    """How the target display is picked from the enumerated displays."""
    LARGEST = "largest"
    INDEX = "index"


@dataclass(frozen=True)
class GridConfig:
    """Grid partition parameters."""
    rows: int = 6
    cols: int = 10

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols


@dataclass(frozen=True)
class ClickConfig:
    """Immutable configuration snapshot for one activation cycle."""
    rows: int = 6
    cols: int = 10
    zoom_factor: float = 3.0
    padding_fraction: float = 0.5
    display_policy: DisplayPolicy = DisplayPolicy.LARGEST
    display_index: int = 0
    cooldown_ms: int = 1000
    click_button: int = 1
    inject_clicks: bool = True
    verify_pointer: bool = True

    @property
    def grid(self) -> GridConfig:
        return GridConfig(rows=self.rows, cols=self.cols)

    def with_overrides(self, **overrides: Any) -> 'ClickConfig':
        """Copy with the non-None overrides applied (used for CLI flags)."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["display_policy"] = self.display_policy.value
        return data

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any],
                     fallback: Optional['ClickConfig'] = None) -> Tuple['ClickConfig', List[ConfigurationError]]:
        """
        Build a snapshot from a persisted record.

        Args:
            raw: Flat key/value record (may be partial)
            fallback: Last-known-good snapshot; defaults when None

        Returns:
            The snapshot and the list of errors for rejected keys
        """
        defaults = cls()
        fallback = fallback or defaults
        values: Dict[str, Any] = {}
        errors: List[ConfigurationError] = []

        for key, parser in _PARSERS.items():
            if key not in raw or raw[key] is None:
                values[key] = getattr(defaults, key)
                continue
            try:
                values[key] = parser(raw[key])
            except (TypeError, ValueError) as e:
                errors.append(ConfigurationError(
                    message=f"Invalid value for '{key}': {e}",
                    code="InvalidSetting",
                    details={"key": key, "value": raw[key],
                             "fallback": getattr(fallback, key)},
                    inner_error=e
                ))
                values[key] = getattr(fallback, key)

        return cls(**values), errors


def _bounded_int(low: int, high: Optional[int] = None) -> Callable[[Any], int]:
    def parse(value: Any) -> int:
        if isinstance(value, bool):
            raise TypeError("expected an integer, got a boolean")
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"expected an integer, got {value}")
        number = int(value)
        if number < low or (high is not None and number > high):
            bounds = f"[{low}, {high}]" if high is not None else f">= {low}"
            raise ValueError(f"{number} is outside {bounds}")
        return number
    return parse


def _bounded_float(low: float, high: float) -> Callable[[Any], float]:
    def parse(value: Any) -> float:
        if isinstance(value, bool):
            raise TypeError("expected a number, got a boolean")
        number = float(value)
        if not low <= number <= high:  # also rejects NaN
            raise ValueError(f"{number} is outside [{low}, {high}]")
        return number
    return parse


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "yes", "1", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "no", "0", "off"):
        return False
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValueError(f"expected a boolean, got {value!r}")


def _policy(value: Any) -> DisplayPolicy:
    if isinstance(value, DisplayPolicy):
        return value
    return DisplayPolicy(str(value).strip().lower())


_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "rows": _bounded_int(1, 100),
    "cols": _bounded_int(1, 100),
    "zoom_factor": _bounded_float(1.0, 20.0),
    "padding_fraction": _bounded_float(0.0, 5.0),
    "display_policy": _policy,
    "display_index": _bounded_int(0),  # range is checked against the enumerated displays
    "cooldown_ms": _bounded_int(0, 10000),
    "click_button": _bounded_int(1, 3),
    "inject_clicks": _flag,
    "verify_pointer": _flag,
}

SETTING_KEYS = tuple(_PARSERS)
