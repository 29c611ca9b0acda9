"""Shared pytest fixtures for asyncbutton tests.

Provides a controllable action (``GatedAction``), an event recorder, and a
controller factory wired to both.
"""

from __future__ import annotations

import asyncio

import pytest

from asyncbutton.config import ButtonConfig
from asyncbutton.notifications import TransitionEvent
from asyncbutton.orchestrator import AsyncButtonController


class GatedAction:
    """Async action that blocks until the test resolves or rejects it."""

    def __init__(self) -> None:
        self.calls = 0
        self._future: asyncio.Future[None] | None = None

    async def __call__(self) -> None:
        self.calls += 1
        self._future = asyncio.get_running_loop().create_future()
        await self._future

    def resolve(self) -> None:
        assert self._future is not None, "action was never started"
        self._future.set_result(None)

    def reject(self, exc: BaseException) -> None:
        assert self._future is not None, "action was never started"
        self._future.set_exception(exc)


class EventRecorder:
    """Collects TransitionEvents delivered to a listener."""

    def __init__(self) -> None:
        self.events: list[TransitionEvent] = []

    def __call__(self, event: TransitionEvent) -> None:
        self.events.append(event)

    @property
    def kinds(self) -> list[str]:
        return [e.state.kind for e in self.events]


async def _drain() -> None:
    for _ in range(3):
        await asyncio.sleep(0)


@pytest.fixture
def settle():
    """Coroutine function that lets pending callbacks and new tasks run."""
    return _drain


@pytest.fixture
def gated_action() -> GatedAction:
    return GatedAction()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def make_controller(recorder: EventRecorder):
    """Factory for controllers whose events go to ``recorder``."""
    created: list[AsyncButtonController] = []

    def factory(action, config: ButtonConfig | None = None, **kwargs) -> AsyncButtonController:
        controller = AsyncButtonController(action, config=config, **kwargs)
        controller.channel.subscribe(recorder)
        created.append(controller)
        return controller

    yield factory

    for controller in created:
        controller.dispose()
