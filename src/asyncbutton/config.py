"""Configuration loading and validation for async buttons."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path

from asyncbutton.exceptions import ConfigError

_DURATION_KEYS = ("success_duration", "error_duration")
_FLAG_KEYS = ("show_success", "show_error", "notifications", "disabled")


@dataclass(frozen=True)
class ButtonConfig:
    """Behavior settings for one async button.

    Durations are in seconds. ``disabled`` withdraws the interaction handle
    regardless of state; ``notifications`` controls whether transition
    events are emitted at all.
    """

    success_duration: float = 1.0
    error_duration: float = 1.0
    show_success: bool = True
    show_error: bool = True
    notifications: bool = True
    disabled: bool = False

    def __post_init__(self) -> None:
        """Reject negative durations and non-bool flags."""
        for key in _DURATION_KEYS:
            value = getattr(self, key)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(key, f"expected a number of seconds, got {value!r}")
            if value < 0:
                raise ConfigError(key, f"must not be negative, got {value!r}")
        for key in _FLAG_KEYS:
            value = getattr(self, key)
            if not isinstance(value, bool):
                raise ConfigError(key, f"expected true or false, got {value!r}")

    def replace(self, **changes: object) -> ButtonConfig:
        """Return a copy with *changes* applied (validated again)."""
        return replace(self, **changes)


def config_from_mapping(data: dict[str, object]) -> ButtonConfig:
    """Build a ButtonConfig from a plain mapping, merging over defaults.

    Raises:
        ConfigError: On unknown keys or invalid values.
    """
    known = {f.name for f in fields(ButtonConfig)}
    for key in data:
        if key not in known:
            raise ConfigError(key, "unknown configuration key")
    return ButtonConfig(**data)  # type: ignore[arg-type]


def load_config(config_path: Path) -> ButtonConfig:
    """Load button configuration from JSON, merging with defaults.

    Args:
        config_path: Path to a JSON object with any of the ButtonConfig keys.

    Returns:
        ButtonConfig with values from file merged over defaults.
    """
    with open(config_path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                str(config_path), f"invalid JSON at line {e.lineno}: {e.msg}"
            ) from e

    if not isinstance(data, dict):
        raise ConfigError(str(config_path), "expected a JSON object")

    return config_from_mapping(data)
