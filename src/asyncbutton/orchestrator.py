"""Action-state controller for press-triggered async operations.

Wraps a zero-argument async action so its lifecycle is exposed as a
:class:`~asyncbutton.state.ButtonState`:

    Idle --press--> Loading --success--> Success --timer--> Idle
                            --failure--> Error   --timer--> Idle

Re-entrancy is prevented structurally: ``interaction_handle()`` only hands
out ``press`` while the state is Idle. ``press`` also no-ops defensively
when called out of band.

Everything runs on one asyncio event loop. The only suspension point is
awaiting the action; the revert timer fires on the same loop, so a timer
callback never interleaves with a press, an override or a disposal.

Each press is stamped with an epoch. An external override or ``dispose()``
advances the epoch, which turns the in-flight action's eventual outcome
into a no-op: it is observed and discarded, never applied.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from types import TracebackType
from typing import Awaitable, Callable

from statemachine.exceptions import TransitionNotAllowed

from asyncbutton.config import ButtonConfig
from asyncbutton.lifecycle import ButtonLifecycleSM, create_lifecycle
from asyncbutton.notifications import NotificationChannel, TransitionEvent, TransitionSource
from asyncbutton.state import ButtonState, Error, Idle, Loading, Success, is_interactive
from asyncbutton.telemetry import Telemetry
from asyncbutton.timer import RevertTimer

logger = logging.getLogger(__name__)

Action = Callable[[], Awaitable[object]]
Hook = Callable[[], None]
PressHandle = Callable[[], "asyncio.Task[None] | None"]


class AsyncButtonController:
    """Owns one button's state, revert timer and wrapped action.

    Usage::

        controller = AsyncButtonController(save, on_change=redraw)
        handle = controller.interaction_handle()
        if handle is not None:
            handle()  # -> Loading, then Success/Error, then Idle

    Args:
        action: Zero-argument callable returning an awaitable. ``None``
            leaves the button without an interaction handle.
        config: Durations and flags; defaults to ``ButtonConfig()``.
        button_state: Externally driven initial state (default Idle).
        on_success: Runs right before the revert out of Success.
        on_error: Runs right before the revert out of Error.
        on_change: Re-render request, called with the new state after
            every applied transition and on disabled changes.
        channel: Notification channel; one is created (and owned) if omitted.
        telemetry: OTel facade; no-op if omitted.
        loop: Event loop for the action task and the revert timer;
            defaults to the running loop at call time.
        name: Label used in logs and span attributes.
    """

    def __init__(
        self,
        action: Action | None,
        *,
        config: ButtonConfig | None = None,
        button_state: ButtonState | None = None,
        on_success: Hook | None = None,
        on_error: Hook | None = None,
        on_change: Callable[[ButtonState], None] | None = None,
        channel: NotificationChannel | None = None,
        telemetry: Telemetry | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
        name: str = "button",
    ) -> None:
        self._action = action
        self._config = config if config is not None else ButtonConfig()
        self._on_success = on_success
        self._on_error = on_error
        self._on_change = on_change
        self._owns_channel = channel is None
        self._channel = channel if channel is not None else NotificationChannel()
        self._telemetry = telemetry if telemetry is not None else Telemetry.noop()
        self._loop = loop
        self.name = name

        self._state: ButtonState = button_state if button_state is not None else Idle()
        self._external: ButtonState | None = button_state
        self._lifecycle: ButtonLifecycleSM = create_lifecycle(self._state.kind)
        self._timer = RevertTimer(loop)
        self._disabled = self._config.disabled
        self._epoch = 0
        self._disposed = False

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> ButtonState:
        """Current state."""
        return self._state

    def current_state(self) -> ButtonState:
        return self._state

    @property
    def config(self) -> ButtonConfig:
        return self._config

    @property
    def channel(self) -> NotificationChannel:
        return self._channel

    @property
    def external_state(self) -> ButtonState | None:
        """Last externally driven state supplied, if any."""
        return self._external

    @property
    def disabled(self) -> bool:
        return self._disabled

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def revert_pending(self) -> bool:
        """True while a revert-to-Idle timer is scheduled."""
        return self._timer.active

    @property
    def can_press(self) -> bool:
        """Whether an interaction is currently allowed."""
        return (
            not self._disposed
            and not self._disabled
            and self._action is not None
            and is_interactive(self._state)
        )

    def interaction_handle(self) -> PressHandle | None:
        """Return ``press`` when an interaction is allowed, else None."""
        return self.press if self.can_press else None

    # ------------------------------------------------------------------
    # Self-driven path
    # ------------------------------------------------------------------

    def press(self) -> asyncio.Task[None] | None:
        """Start the wrapped action.

        Transitions to Loading synchronously, then runs the action as a
        task on the loop. The task resolves to None whatever the outcome;
        a failure is reported through the Error state, not the task.

        Returns:
            The action task, or None if the press was dropped because the
            button is disposed, disabled, has no action or is not Idle.
        """
        if not self.can_press:
            logger.debug(
                "Dropped press on %s (state=%s, disabled=%s, disposed=%s)",
                self.name,
                self._state.kind,
                self._disabled,
                self._disposed,
            )
            return None

        loop = self._loop or asyncio.get_running_loop()
        self._timer.cancel()
        self._epoch += 1
        epoch = self._epoch
        if not self._advance("press", Loading(), "press"):
            return None
        task = loop.create_task(self._run_action(epoch))
        task.add_done_callback(partial(self._on_action_done, epoch))
        return task

    async def _run_action(self, epoch: int) -> None:
        assert self._action is not None
        with self._telemetry.action_span(self.name) as span:
            try:
                await self._action()
            except asyncio.CancelledError:
                span.settle("cancelled")
                self._settle_cancelled(epoch)
                raise
            except Exception as exc:
                if not self._is_current(epoch):
                    span.settle("discarded", exc)
                    logger.debug("Discarded stale failure on %s: %r", self.name, exc)
                    return
                span.settle("error", exc)
                self._complete_failure(exc, exc.__traceback__)
                return

            if not self._is_current(epoch):
                span.settle("discarded")
                logger.debug("Discarded stale success on %s", self.name)
                return
            span.settle("success")
            self._complete_success()

    def _on_action_done(self, epoch: int, task: asyncio.Task[None]) -> None:
        # A task cancelled before its first step never enters _run_action.
        if task.cancelled():
            self._settle_cancelled(epoch)

    def _settle_cancelled(self, epoch: int) -> None:
        if self._is_current(epoch) and isinstance(self._state, Loading):
            logger.debug("Action on %s cancelled, settling to idle", self.name)
            self._advance("settle", Idle(), "completion")

    def _complete_success(self) -> None:
        if not self._config.show_success:
            self._advance("settle", Idle(), "completion")
            return
        if self._advance("succeed", Success(), "completion"):
            self._timer.schedule(
                self._config.success_duration, partial(self._revert, self._on_success)
            )

    def _complete_failure(self, error: BaseException, trace: TracebackType | None) -> None:
        if not self._config.show_error:
            self._advance("settle", Idle(), "completion")
            return
        if self._advance("fail", Error(error, trace), "completion"):
            self._timer.schedule(
                self._config.error_duration, partial(self._revert, self._on_error)
            )

    def _revert(self, hook: Hook | None) -> None:
        if self._disposed:
            return
        if hook is not None:
            try:
                hook()
            except Exception:
                logger.exception("%s hook failed before revert", self.name)
        self._advance("revert", Idle(), "revert")

    def _is_current(self, epoch: int) -> bool:
        return not self._disposed and epoch == self._epoch

    # ------------------------------------------------------------------
    # Host-driven changes
    # ------------------------------------------------------------------

    def override(self, state: ButtonState) -> None:
        """Adopt an externally driven state.

        A value equal to the current state is ignored. Otherwise the state
        is applied immediately: any pending revert is cancelled, an
        in-flight action's outcome will be discarded, one event is emitted
        and no timer is scheduled.
        """
        if self._disposed:
            logger.debug("Dropped override on disposed %s", self.name)
            return
        self._external = state
        if state == self._state:
            return
        self._timer.cancel()
        self._epoch += 1
        self._lifecycle = create_lifecycle(state.kind)
        self._apply(state, "override")

    def set_disabled(self, disabled: bool) -> None:
        """Force the interaction handle off (or back on)."""
        if disabled == self._disabled or self._disposed:
            return
        self._disabled = disabled
        logger.debug("%s disabled=%s", self.name, disabled)
        self._request_render()

    def dispose(self) -> None:
        """Cancel the revert timer and make the controller inert. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        self._timer.cancel()
        self._epoch += 1
        if self._owns_channel:
            self._channel.close()
        logger.debug("Disposed %s in state %s", self.name, self._state.kind)

    # ------------------------------------------------------------------
    # Transition plumbing
    # ------------------------------------------------------------------

    def _advance(self, event: str, state: ButtonState, source: TransitionSource) -> bool:
        """Validate a self-driven transition, then apply it."""
        if self._disposed:
            logger.debug("Dropped %s on disposed %s", event, self.name)
            return False
        try:
            self._lifecycle.send(event)
        except TransitionNotAllowed:
            logger.warning(
                "Dropped illegal %s transition on %s from %s",
                event,
                self.name,
                self._state.kind,
            )
            return False
        self._apply(state, source)
        return True

    def _apply(self, state: ButtonState, source: TransitionSource) -> None:
        previous = self._state
        self._state = state
        self._telemetry.log_transition(self.name, previous.kind, state.kind, source)
        self._request_render()
        if self._config.notifications:
            self._channel.emit(TransitionEvent(state=state, previous=previous, source=source))

    def _request_render(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(self._state)
        except Exception:
            logger.exception(
                "Render callback failed on %s in state %s", self.name, self._state.kind
            )
