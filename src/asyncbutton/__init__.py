"""Press-triggered async actions with an observable lifecycle."""

__version__ = "0.1.0"

from asyncbutton.config import ButtonConfig, load_config
from asyncbutton.exceptions import AsyncButtonError, ConfigError
from asyncbutton.notifications import NotificationChannel, TransitionEvent
from asyncbutton.orchestrator import AsyncButtonController
from asyncbutton.state import ButtonState, Error, Idle, Loading, Success, maybe_when, when
from asyncbutton.timer import RevertTimer

__all__ = [
    "AsyncButtonController",
    "AsyncButtonError",
    "ButtonConfig",
    "ButtonState",
    "ConfigError",
    "Error",
    "Idle",
    "Loading",
    "NotificationChannel",
    "RevertTimer",
    "Success",
    "TransitionEvent",
    "__version__",
    "load_config",
    "maybe_when",
    "when",
]
