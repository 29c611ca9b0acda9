"""Tests for NotificationChannel fan-out semantics."""

from __future__ import annotations

import logging

from reactivex import operators as ops

from asyncbutton.notifications import NotificationChannel, TransitionEvent
from asyncbutton.state import Error, Idle, Loading, Success


def _event(state, previous=None, source="press") -> TransitionEvent:
    return TransitionEvent(state=state, previous=previous or Idle(), source=source)


class TestListeners:
    """Callback registration and delivery."""

    def test_emit_reaches_all_listeners(self):
        channel = NotificationChannel()
        first: list[TransitionEvent] = []
        second: list[TransitionEvent] = []
        channel.subscribe(first.append)
        channel.subscribe(second.append)

        event = _event(Loading())
        channel.emit(event)

        assert first == [event]
        assert second == [event]

    def test_unsubscribe_stops_delivery(self):
        channel = NotificationChannel()
        seen: list[TransitionEvent] = []
        unsubscribe = channel.subscribe(seen.append)

        unsubscribe()
        unsubscribe()  # idempotent
        channel.emit(_event(Loading()))

        assert seen == []

    def test_emit_without_listeners_is_noop(self):
        NotificationChannel().emit(_event(Success(), Loading(), "completion"))

    def test_failing_listener_does_not_block_others(self, caplog):
        channel = NotificationChannel()
        seen: list[TransitionEvent] = []

        def broken(event):
            raise RuntimeError("listener bug")

        channel.subscribe(broken)
        channel.subscribe(seen.append)

        with caplog.at_level(logging.ERROR, logger="asyncbutton.notifications"):
            channel.emit(_event(Loading()))

        assert len(seen) == 1
        assert "Transition listener" in caplog.text

    def test_late_subscriber_gets_no_replay(self):
        channel = NotificationChannel()
        channel.emit(_event(Loading()))

        seen: list[TransitionEvent] = []
        channel.subscribe(seen.append)
        channel.emit(_event(Success(), Loading(), "completion"))

        assert [e.state for e in seen] == [Success()]


class TestObservable:
    """Rx observable surface."""

    def test_events_observable_receives_emits(self):
        channel = NotificationChannel()
        errors: list[TransitionEvent] = []
        channel.events.pipe(
            ops.filter(lambda e: isinstance(e.state, Error)),
        ).subscribe(on_next=errors.append)

        channel.emit(_event(Loading()))
        channel.emit(_event(Error("boom"), Loading(), "completion"))

        assert [e.state for e in errors] == [Error("boom")]

    def test_close_completes_and_drops(self):
        channel = NotificationChannel()
        completed: list[bool] = []
        seen: list[TransitionEvent] = []
        channel.events.subscribe(on_completed=lambda: completed.append(True))
        channel.subscribe(seen.append)

        channel.close()
        channel.close()
        channel.emit(_event(Loading()))

        assert completed == [True]
        assert seen == []
        assert channel.closed is True
