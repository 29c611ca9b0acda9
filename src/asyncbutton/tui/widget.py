"""Textual widget hosting an AsyncButtonController.

Wraps a Textual Button: the button's label comes from a renderer called
with the current state, the button is disabled whenever the controller
withdraws its interaction handle, and every transition is re-posted as a
bubbling :class:`ButtonStateChanged` message. The controller is disposed
when the widget unmounts.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from textual.app import ComposeResult
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Button

from asyncbutton.config import ButtonConfig
from asyncbutton.notifications import TransitionEvent
from asyncbutton.orchestrator import Action, AsyncButtonController, Hook
from asyncbutton.state import ButtonState, when
from asyncbutton.telemetry import Telemetry
from asyncbutton.tui.messages import ButtonStateChanged

Renderer = Callable[[ButtonState], str]


def default_renderer(label: str) -> Renderer:
    """Build a renderer showing *label* while idle and a glyph otherwise."""

    def render(state: ButtonState) -> str:
        return when(
            state,
            idle=lambda: label,
            loading=lambda: "…",
            success=lambda: "✓",
            error=lambda _error, _trace: "✗",
        )

    return render


class AsyncButton(Widget):
    """A button whose press runs an async action with visible lifecycle.

    Set ``button_state`` to drive the state manually and ``host_disabled``
    to withdraw interaction regardless of state.
    """

    DEFAULT_CSS = """
    AsyncButton {
        width: auto;
        height: auto;
    }

    AsyncButton.-loading Button {
        text-style: italic;
    }

    AsyncButton.-success Button {
        background: $success;
    }

    AsyncButton.-error Button {
        background: $error;
    }
    """

    button_state: reactive[ButtonState | None] = reactive(None, init=False)
    host_disabled: reactive[bool] = reactive(False, init=False)

    def __init__(
        self,
        label: str,
        action: Action | None,
        *,
        config: ButtonConfig | None = None,
        button_state: ButtonState | None = None,
        on_success: Hook | None = None,
        on_error: Hook | None = None,
        renderer: Renderer | None = None,
        telemetry: Telemetry | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(id=id, classes=classes)
        self._renderer = renderer or default_renderer(label)
        self.controller = AsyncButtonController(
            action,
            config=config,
            button_state=button_state,
            on_success=on_success,
            on_error=on_error,
            on_change=self._sync_view,
            telemetry=telemetry,
            name=id or label,
        )
        self.controller.channel.subscribe(self._forward)
        self._button = Button(self._renderer(self.controller.state))
        self.set_reactive(AsyncButton.button_state, button_state)
        self.set_reactive(AsyncButton.host_disabled, self.controller.disabled)
        self._sync_view(self.controller.state)

    @property
    def state(self) -> ButtonState:
        return self.controller.state

    def compose(self) -> ComposeResult:
        yield self._button

    def press(self) -> asyncio.Task[None] | None:
        """Press programmatically, honoring the same rules as a click."""
        handle = self.controller.interaction_handle()
        return handle() if handle is not None else None

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.press()

    def watch_button_state(self, state: ButtonState | None) -> None:
        if state is not None:
            self.controller.override(state)

    def watch_host_disabled(self, disabled: bool) -> None:
        self.controller.set_disabled(disabled)

    def on_unmount(self) -> None:
        self.controller.dispose()

    def _sync_view(self, state: ButtonState) -> None:
        self._button.label = self._renderer(state)
        self._button.disabled = self.controller.interaction_handle() is None
        for kind in ("idle", "loading", "success", "error"):
            self.set_class(kind == state.kind, f"-{kind}")

    def _forward(self, event: TransitionEvent) -> None:
        if not self.is_attached:
            return  # Nothing left to bubble to
        self.post_message(
            ButtonStateChanged(self, event.state, event.previous, event.source)
        )
