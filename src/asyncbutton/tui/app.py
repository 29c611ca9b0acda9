"""Async button demo application.

One AsyncButton wired to a slow action that succeeds or fails, a status
line counting the transitions that bubble up from it, and key bindings for
manual overrides and host-side disabling.
"""

from __future__ import annotations

import asyncio
import logging

from reactivex import operators as ops
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Footer, Header, Static

from asyncbutton.config import ButtonConfig
from asyncbutton.orchestrator import Action
from asyncbutton.state import ButtonState, Error, Idle, Loading, Success
from asyncbutton.telemetry import Telemetry
from asyncbutton.tui.messages import ButtonStateChanged
from asyncbutton.tui.state import TransitionCounts
from asyncbutton.tui.widget import AsyncButton

logger = logging.getLogger(__name__)

OVERRIDE_CYCLE: tuple[ButtonState, ...] = (
    Loading(),
    Success(),
    Error(RuntimeError("manual override")),
    Idle(),
)


class ButtonDemoApp(App):
    """Interactive playground for a single async button."""

    TITLE = "Async Button"
    SUB_TITLE = "Press to run a slow action"

    CSS = """
    #body {
        align: center middle;
        height: 1fr;
    }

    #status-bar {
        dock: bottom;
        height: 1;
        background: $primary-background;
        color: $text;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("p", "press", "Press"),
        ("o", "cycle_override", "Override"),
        ("d", "toggle_disabled", "Disable"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: ButtonConfig | None = None,
        delay: float = 1.0,
        fail: bool = False,
        action: Action | None = None,
        telemetry: Telemetry | None = None,
    ) -> None:
        """Initialize the demo.

        Args:
            config: Button configuration (defaults to ButtonConfig()).
            delay: Seconds the default action sleeps before finishing.
            fail: Whether the default action raises instead of succeeding.
            action: Replaces the default sleep action (used by tests).
            telemetry: OTel tracing facade. Defaults to no-op.
        """
        super().__init__()
        self.button_config = config if config is not None else ButtonConfig()
        self.delay = delay
        self.fail = fail
        self._action = action if action is not None else self._sleep_action
        self.telemetry = telemetry if telemetry is not None else Telemetry.noop()
        self.counts = TransitionCounts()
        self._override_index = 0
        self._rx_error_subscription = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="body"):
            yield AsyncButton(
                "Run action",
                self._action,
                config=self.button_config,
                on_success=lambda: self.notify("Action succeeded"),
                telemetry=self.telemetry,
                id="run-button",
            )
        yield Static(self.counts.summary(), id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        button = self.query_one(AsyncButton)
        self._rx_error_subscription = button.controller.channel.events.pipe(
            ops.filter(lambda event: isinstance(event.state, Error)),
        ).subscribe(on_next=self._on_error_event)
        logger.info("Demo mounted with %s", self.button_config)

    def on_unmount(self) -> None:
        if self._rx_error_subscription is not None:
            self._rx_error_subscription.dispose()
            self._rx_error_subscription = None

    async def _sleep_action(self) -> None:
        await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("action failed")

    def _on_error_event(self, event) -> None:
        self.notify(f"Action failed: {event.state.error}", severity="error")

    # ------------------------------------------------------------------
    # Message handlers
    # ------------------------------------------------------------------

    def on_button_state_changed(self, event: ButtonStateChanged) -> None:
        """Count every transition bubbling up from the button."""
        self.counts.record(event.state)
        self.query_one("#status-bar", Static).update(
            f"{event.state.kind} ({event.source}) | {self.counts.summary()}"
        )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_press(self) -> None:
        self.query_one(AsyncButton).press()

    def action_cycle_override(self) -> None:
        """Drive the button manually through the next override state."""
        state = OVERRIDE_CYCLE[self._override_index % len(OVERRIDE_CYCLE)]
        self._override_index += 1
        with self.telemetry.span("tui.override") as span:
            span.set_attribute("override.state", state.kind)
            self.query_one(AsyncButton).button_state = state

    def action_toggle_disabled(self) -> None:
        button = self.query_one(AsyncButton)
        button.host_disabled = not button.host_disabled
