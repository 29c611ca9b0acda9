"""Textual host for async buttons.

Provides the AsyncButton widget, the ButtonStateChanged message it bubbles
on every transition, and a demo app exercising both.
"""

from __future__ import annotations

from asyncbutton.config import ButtonConfig


def run_demo(
    config: ButtonConfig | None = None,
    delay: float = 1.0,
    fail: bool = False,
    log_dir: str | None = "logs",
) -> None:
    """Launch the demo app.

    Imports are deferred so ``asyncbutton.tui`` stays cheap to import.

    Args:
        config: Button configuration.
        delay: Seconds the demo action takes.
        fail: Make the demo action raise instead of succeeding.
        log_dir: Directory for JSON-lines logs; None disables file logging.
    """
    from asyncbutton.telemetry import configure_file_logging
    from asyncbutton.tui.app import ButtonDemoApp

    if log_dir is not None:
        configure_file_logging(log_dir)

    app = ButtonDemoApp(config=config, delay=delay, fail=fail)
    app.run()
