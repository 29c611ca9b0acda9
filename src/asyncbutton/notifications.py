"""Upward transition notifications for async buttons.

Every applied state change is published as a :class:`TransitionEvent`.
Delivery is synchronous and fire-and-forget: listeners cannot block,
veto or alter it, and a failing listener is logged without affecting the
others. Events are not buffered or replayed to late subscribers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal

from reactivex import Observable
from reactivex.subject import Subject

from asyncbutton.state import ButtonState

logger = logging.getLogger(__name__)

TransitionSource = Literal["press", "completion", "revert", "override"]

Listener = Callable[["TransitionEvent"], None]


@dataclass(frozen=True)
class TransitionEvent:
    """One state change of a button.

    ``source`` tells what drove the change: a press, the action's
    completion, the revert timer, or an external override.
    """

    state: ButtonState
    previous: ButtonState
    source: TransitionSource


class NotificationChannel:
    """Fan-out of TransitionEvents to callbacks and an Rx observable.

    Usage::

        channel = NotificationChannel()
        unsubscribe = channel.subscribe(lambda e: print(e.state))
        channel.events.pipe(ops.filter(lambda e: e.source == "revert")).subscribe(...)
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._subject: Subject[TransitionEvent] = Subject()
        self._closed = False

    @property
    def events(self) -> Observable[TransitionEvent]:
        """Hot observable of events emitted after subscription."""
        return self._subject

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* and return a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: TransitionEvent) -> None:
        """Deliver *event* to every listener, then to Rx subscribers."""
        if self._closed:
            logger.debug("Dropped %s event on closed channel", event.state.kind)
            return

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Transition listener %r failed on %s event",
                    listener,
                    event.state.kind,
                )

        try:
            self._subject.on_next(event)
        except Exception:
            logger.exception("Rx subscriber failed on %s event", event.state.kind)

    def close(self) -> None:
        """Complete the observable and drop all listeners. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._listeners.clear()
        self._subject.on_completed()
