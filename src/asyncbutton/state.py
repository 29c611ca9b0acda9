"""Button state model: a closed set of four lifecycle variants.

``ButtonState`` is a union of four frozen dataclasses. Each variant is
``@final`` so the union stays closed and every dispatch over it can be
checked exhaustively (``when`` ends in ``assert_never``).
"""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Callable, ClassVar, TypeVar, Union, assert_never, final

T = TypeVar("T")


@final
@dataclass(frozen=True)
class Idle:
    """No action in flight; interaction enabled."""

    kind: ClassVar[str] = "idle"


@final
@dataclass(frozen=True)
class Loading:
    """Action in flight; interaction disabled."""

    kind: ClassVar[str] = "loading"


@final
@dataclass(frozen=True)
class Success:
    """Action completed without error; interaction disabled."""

    kind: ClassVar[str] = "success"


@final
@dataclass(frozen=True)
class Error:
    """Action completed with a failure; interaction disabled.

    ``error`` is the exception (or any value) the action failed with and
    ``trace`` the traceback captured at the failure, both kept unmodified.
    """

    error: object
    trace: TracebackType | None = None

    kind: ClassVar[str] = "error"


ButtonState = Union[Idle, Loading, Success, Error]

KINDS: tuple[str, ...] = (Idle.kind, Loading.kind, Success.kind, Error.kind)


def when(
    state: ButtonState,
    *,
    idle: Callable[[], T],
    loading: Callable[[], T],
    success: Callable[[], T],
    error: Callable[[object, TracebackType | None], T],
) -> T:
    """Dispatch on *state*, calling exactly one handler.

    Every variant needs a handler. ``error`` receives the error value and
    the trace.
    """
    if isinstance(state, Idle):
        return idle()
    if isinstance(state, Loading):
        return loading()
    if isinstance(state, Success):
        return success()
    if isinstance(state, Error):
        return error(state.error, state.trace)
    assert_never(state)


def maybe_when(
    state: ButtonState,
    *,
    orelse: Callable[[], T],
    idle: Callable[[], T] | None = None,
    loading: Callable[[], T] | None = None,
    success: Callable[[], T] | None = None,
    error: Callable[[object, TracebackType | None], T] | None = None,
) -> T:
    """Like :func:`when`, falling back to *orelse* for unhandled variants."""
    return when(
        state,
        idle=idle or orelse,
        loading=loading or orelse,
        success=success or orelse,
        error=error or (lambda _error, _trace: orelse()),
    )


def is_interactive(state: ButtonState) -> bool:
    """Return True if an interaction may originate from *state*."""
    return isinstance(state, Idle)
