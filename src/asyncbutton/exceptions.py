"""Exception hierarchy for asyncbutton.

Failures of the wrapped action are never raised from here: they become the
``Error`` button state. These exceptions cover misuse of the library itself.
"""

from __future__ import annotations


class AsyncButtonError(Exception):
    """Base class for all asyncbutton errors."""


class ConfigError(AsyncButtonError):
    """Raised when a button configuration value is invalid."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(f"{key}: {message}")
